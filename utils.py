"""Utility helpers shared across scaffold modules."""

import mimetypes
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from urllib.parse import unquote

from config import PUBLIC_ROOT


def get_content_type(file_path: Path) -> str:
    content_type, _encoding = mimetypes.guess_type(file_path.name)
    return content_type or "application/octet-stream"


def resolve_within(relative_path: str, root: Path = PUBLIC_ROOT) -> Path | None:
    """Resolve a path under ``root`` (the public root by default); None if it escapes."""
    decoded_relative_path = unquote(relative_path).lstrip("/")

    base = Path(root).resolve()
    candidate = (base / decoded_relative_path).resolve()

    try:
        candidate.relative_to(base)
    except ValueError:
        return None

    return candidate


def flatten_keys(data: Mapping[str, Any], separator: str = ".") -> dict[str, Any]:
    """Flatten nested mappings into a single level keyed by joined paths.

    ``{"Core": {"Files.php": {"sha512": "ab"}}}`` becomes
    ``{"Core.Files.php.sha512": "ab"}``.
    """
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, Mapping):
            for sub_key, sub_value in flatten_keys(value, separator).items():
                flat[f"{key}{separator}{sub_key}"] = sub_value
        else:
            flat[str(key)] = value
    return flat
