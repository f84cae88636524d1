"""Exceptions raised while indexing font files.

Every per-file failure is an ``IndexingError`` carrying the offending path,
so scan drivers can log and skip one file without aborting the scan.
"""

from __future__ import annotations

from pathlib import Path


class IndexingError(Exception):
    """Base class for failures tied to a single path."""

    def __init__(self, path: str | Path, message: str, cause: BaseException | None = None):
        self.path = str(path)
        self.cause = cause
        super().__init__(f"{self.path}: {message}")


class UnsupportedFormatError(IndexingError):
    """The file has a font extension but is not a container fontTools can open."""


class ParseError(IndexingError):
    """The font opened but its tables could not be read."""


class FileAccessError(IndexingError):
    """The file could not be read (removed, permission denied, I/O failure)."""


class DirectoryAccessError(IndexingError):
    """A directory could not be listed during enumeration."""


class StoreError(IndexingError):
    """The record for a path could not be persisted or queried."""
