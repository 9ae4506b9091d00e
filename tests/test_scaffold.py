"""Sanity checks for the shipped scaffold layout."""

from pathlib import Path

from assets import check_vital_directories
from config import DEBUG, HOST, INTEGRITY_CHECKED_FILES, PORT, PUBLIC_ROOT, ROOT_DIR, SHOW_ERRORS, VIEWS_ROOT
from integrity import modified_files

ROOT = Path(__file__).resolve().parent.parent


def test_core_files_exist() -> None:
    expected = [
        "server.py",
        "router.py",
        "assets.py",
        "integrity.py",
        "sanitize.py",
        "view.py",
        "controllers/home.py",
        "controllers/contact.py",
        "controllers/errors.py",
        "views/Home/index.html",
        "views/Errors/error.html",
    ]
    for rel_path in expected:
        assert (ROOT / rel_path).exists()


def test_basic_config_values() -> None:
    assert HOST == "127.0.0.1"
    assert PORT == 8080
    assert DEBUG is False
    assert SHOW_ERRORS is False
    assert ROOT_DIR == ROOT
    assert PUBLIC_ROOT == ROOT / "public"
    assert VIEWS_ROOT == ROOT / "views"


def test_shipped_public_root_has_vital_directories() -> None:
    assert check_vital_directories() is True


def test_shipped_files_match_manifest() -> None:
    assert modified_files(INTEGRITY_CHECKED_FILES) == []
