"""Asset category resolution, vital directory checks and link emission."""

from __future__ import annotations

import html
import re
from collections.abc import Iterable
from enum import Enum
from pathlib import Path

from config import (
    FRONT_CONTROLLER,
    IMAGES,
    JAVASCRIPTS,
    PUBLIC_DIR,
    PUBLIC_ROOT,
    SECURED_COOKIES,
    STYLESHEETS,
)
from errors import FileNotFound, MissingDirectory, UnsupportedCategory, UnsupportedExtension
from request import HTTPRequest
from utils import resolve_within


class AssetCategory(Enum):
    """Role of a static file; the value is its directory under the public root."""

    STYLESHEET = STYLESHEETS
    SCRIPT = JAVASCRIPTS
    IMAGE = IMAGES


# Checked in order, first match wins.
EXTENSION_PATTERNS: list[tuple[re.Pattern[str], AssetCategory]] = [
    (re.compile(r"^.*\.(css)$", re.IGNORECASE), AssetCategory.STYLESHEET),
    (re.compile(r"^.*\.(js)$", re.IGNORECASE), AssetCategory.SCRIPT),
    (re.compile(r"^.*\.(jpg|jpeg|png|gif|ico)$", re.IGNORECASE), AssetCategory.IMAGE),
]

TAG_TEMPLATES: dict[AssetCategory, str] = {
    AssetCategory.STYLESHEET: '<link href="{url}" rel="stylesheet" type="text/css">',
    AssetCategory.SCRIPT: '<script src="{url}" type="text/javascript"></script>',
    AssetCategory.IMAGE: "{url}",
}


def resolve_category(file_name: str) -> AssetCategory:
    """Return the asset category a file belongs to, judged by its extension."""
    for pattern, category in EXTENSION_PATTERNS:
        if pattern.match(file_name):
            return category
    raise UnsupportedExtension(f"The extension of {file_name} is not accepted.")


def check_vital_directories(
    extra: Iterable[str] | None = None,
    *,
    public_root: Path = PUBLIC_ROOT,
) -> bool:
    """Ensure each extra name and every built-in asset directory exists.

    Extras are checked before the built-in directories.

    Stops at the first missing directory and raises ``MissingDirectory``
    naming it; later directories are not inspected.
    """
    root = Path(public_root)
    directories = {name: (root / name).is_dir() for name in extra or ()}
    for category in AssetCategory:
        directories.setdefault(category.value, (root / category.value).is_dir())

    for name, exists in directories.items():
        if not exists:
            raise MissingDirectory(f"{PUBLIC_DIR}/{name}")
    return True


def _coerce_category(category: AssetCategory | str) -> AssetCategory | None:
    if isinstance(category, AssetCategory):
        return category
    try:
        return AssetCategory(category)
    except ValueError:
        return None


class LinkEmitter:
    """Build absolute URLs and HTML tags for files under the public root."""

    def __init__(
        self,
        host: str,
        base_path: str = "/",
        *,
        secure: bool = SECURED_COOKIES,
        public_root: Path = PUBLIC_ROOT,
    ) -> None:
        self.host = host
        self.base_path = base_path if base_path.endswith("/") else f"{base_path}/"
        self.secure = secure
        self.public_root = Path(public_root)

    @classmethod
    def from_request(
        cls,
        request: HTTPRequest,
        *,
        secure: bool = SECURED_COOKIES,
        public_root: Path = PUBLIC_ROOT,
    ) -> "LinkEmitter":
        base_path = "/"
        if FRONT_CONTROLLER in request.path:
            base_path = request.path.split(FRONT_CONTROLLER, 1)[0] or "/"
        return cls(request.host, base_path, secure=secure, public_root=public_root)

    @property
    def site_url(self) -> str:
        scheme = "https://" if self.secure else "http://"
        return f"{scheme}{self.host}{self.base_path}"

    def emit(
        self,
        file_path: str,
        category: AssetCategory | str,
        as_asset: bool = False,
    ) -> str:
        """Return the URL of ``file_path``, or the HTML tag for it when ``as_asset``."""
        relative_path = file_path.lstrip("/")
        resolved = resolve_within(relative_path, self.public_root)
        if resolved is None or not resolved.is_file():
            raise FileNotFound(f"{PUBLIC_DIR}/{relative_path}")

        url = self.site_url + relative_path
        if not as_asset:
            return url

        known = _coerce_category(category)
        if known is None:
            raise UnsupportedCategory(
                f"Impossible to create an HTML object for '{PUBLIC_DIR}/{relative_path}'"
            )
        return TAG_TEMPLATES[known].format(url=html.escape(url, quote=True))

    def emit_for(self, file_path: str, as_asset: bool = True) -> str:
        return self.emit(file_path, resolve_category(file_path), as_asset)
