"""On-disk cache of single vcvars variables, one text file per variable.

Follow-up build script runs read the files instead of spawning vcvars again.
Two names that sanitize to the same filename would share a file.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from .errors import CacheError

LOGGER = logging.getLogger("vcvars.cache")

CACHE_DIR_NAME = "vcvars-cache"
REPLACEMENT = "!"
MAX_FILENAME_LENGTH = 255

_ILLEGAL = re.compile(r'[<>:"/\\|?*\x00-\x1f\x7f]')
_RESERVED = re.compile(r"^(con|prn|aux|nul|com\d|lpt\d)(\..*)?$", re.IGNORECASE)


def sanitize_filename(name: str) -> str:
    """Make ``name`` a legal filename on Windows, macOS and Linux."""
    cleaned = _ILLEGAL.sub(REPLACEMENT, name)
    cleaned = cleaned.rstrip(". ")
    if cleaned in {"", ".", ".."}:
        return REPLACEMENT
    if _RESERVED.match(cleaned):
        cleaned = REPLACEMENT + cleaned
    return cleaned[:MAX_FILENAME_LENGTH]


class VarCache:
    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    @property
    def directory(self) -> Path:
        return self.root / CACHE_DIR_NAME

    def path_for(self, var_name: str) -> Path:
        return self.directory / sanitize_filename(f"{var_name.upper()}.txt")

    def ensure_directory(self) -> Path:
        if not self.root.is_dir():
            raise CacheError(str(self.root), "cache root is not an existing directory")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise CacheError(str(self.directory), exc) from exc
        return self.directory

    def read(self, var_name: str) -> str | None:
        path = self.path_for(var_name)
        if not path.exists():
            return None
        try:
            with open(path, encoding="utf-8", newline="") as f:
                value = f.read()
        except OSError as exc:
            raise CacheError(str(path), exc) from exc
        LOGGER.debug("cache hit for %s at %s", var_name, path)
        return value

    def write(self, var_name: str, value: str) -> Path:
        path = self.path_for(var_name)
        try:
            # newline="" keeps the value byte-exact on Windows.
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(value)
        except OSError as exc:
            raise CacheError(str(path), exc) from exc
        return path

    def clear(self) -> None:
        if not self.directory.is_dir():
            return
        for entry in self.directory.iterdir():
            try:
                entry.unlink()
            except OSError as exc:
                raise CacheError(str(entry), exc) from exc
