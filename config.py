"""Configuration constants for the MVC scaffold."""

from pathlib import Path

HOST: str = "127.0.0.1"
PORT: int = 8080
BUFFER_SIZE: int = 1024
READ_CHUNK_SIZE: int = 8192
SOCKET_TIMEOUT_SECS: int = 5
MAX_REQUEST_BYTES: int = 1_048_576
MAX_HEADER_BYTES: int = 16_384
MAX_BODY_BYTES: int = 524_288
MAX_TARGET_LENGTH: int = 8192
SERVER_NAME: str = "mvc-scaffold/1.0"
LOG_FORMAT: str = "plain"
DEBUG: bool = False

# Installation layout
ROOT_DIR: Path = Path(__file__).resolve().parent
PUBLIC_DIR: str = "public"
PUBLIC_ROOT: Path = ROOT_DIR / PUBLIC_DIR
VIEWS_ROOT: Path = ROOT_DIR / "views"
FRONT_CONTROLLER: str = "index.php"

# Vital asset directories under PUBLIC_DIR
STYLESHEETS: str = "stylesheets"
JAVASCRIPTS: str = "javascripts"
IMAGES: str = "images"

# Integrity manifest
HASHES_FILE: str = "hashes.json"
HASH_ALGORITHM: str = "sha512"

# Emitted asset URLs use https:// when True
SECURED_COOKIES: bool = False

# Detailed error pages with tracebacks; `server.py --show-errors` turns them on
SHOW_ERRORS: bool = DEBUG

# Files compared against the manifest by `server.py --verify-integrity`
INTEGRITY_CHECKED_FILES: tuple[str, ...] = (
    "views/Home/index.html",
    "views/Contact/form.html",
    "views/Contact/thanks.html",
    "views/Errors/error.html",
    "public/stylesheets/main.css",
    "public/javascripts/app.js",
)
