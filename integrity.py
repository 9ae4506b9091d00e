"""File digests and comparison against the recorded integrity manifest."""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path

from config import HASH_ALGORITHM, HASHES_FILE, ROOT_DIR
from errors import ManifestKeyNotFound
from utils import flatten_keys

logger = logging.getLogger(__name__)

_READ_CHUNK_SIZE = 65_536


def digest(file_path: str | Path, algorithm: str = HASH_ALGORITHM) -> str:
    """Hex digest of the file's full contents."""
    hasher = hashlib.new(algorithm)
    with Path(file_path).open("rb") as handle:
        for chunk in iter(lambda: handle.read(_READ_CHUNK_SIZE), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


def load_manifest(manifest_path: str | Path) -> dict[str, str]:
    """Read the nested JSON manifest and flatten it into dotted keys."""
    data = json.loads(Path(manifest_path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Manifest must be a JSON object")
    return {key: str(value) for key, value in flatten_keys(data).items()}


class IntegrityChecker:
    """Detects local modification of installed files."""

    def __init__(
        self,
        root: str | Path = ROOT_DIR,
        manifest_path: str | Path | None = None,
        algorithm: str = HASH_ALGORITHM,
    ) -> None:
        self.root = Path(root).resolve()
        self.manifest_path = Path(manifest_path) if manifest_path is not None else self.root / HASHES_FILE
        self.algorithm = algorithm
        self._manifest: dict[str, str] | None = None

    @property
    def manifest(self) -> dict[str, str]:
        if self._manifest is None:
            self._manifest = load_manifest(self.manifest_path)
        return self._manifest

    def manifest_key(self, file_path: str | Path, algorithm: str | None = None) -> str:
        path = Path(file_path)
        if path.is_absolute():
            try:
                path = path.resolve().relative_to(self.root)
            except ValueError:
                raise ManifestKeyNotFound(str(file_path)) from None
        return ".".join(path.parts) + "." + (algorithm or self.algorithm)

    def expected_digests(self, to_get: Mapping[str, str]) -> list[str]:
        """Recorded digests for ``{relative path: algorithm}`` pairs, in order."""
        result = []
        for file_path, algorithm in to_get.items():
            key = self.manifest_key(file_path, algorithm)
            try:
                result.append(self.manifest[key])
            except KeyError:
                raise ManifestKeyNotFound(key) from None
        return result

    def digest(self, file_path: str | Path) -> str:
        return digest(file_path, self.algorithm)

    def is_unmodified(self, file_path: str | Path) -> bool:
        """True when the file's digest equals the one recorded in the manifest."""
        path = Path(file_path)
        if not path.is_absolute():
            path = self.root / path
        current = self.digest(path)
        key = self.manifest_key(path)
        expected = self.manifest.get(key)
        if expected is None:
            raise ManifestKeyNotFound(key)

        unmodified = hmac.compare_digest(current, expected.lower())
        if not unmodified:
            logger.warning("integrity mismatch file=%s algorithm=%s", key, self.algorithm)
        return unmodified


def modified_files(paths: Iterable[str | Path], checker: IntegrityChecker | None = None) -> list[str]:
    """Paths among ``paths`` whose contents no longer match the manifest."""
    checker = checker or IntegrityChecker()
    return [str(path) for path in paths if not checker.is_unmodified(path)]
