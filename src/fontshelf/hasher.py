"""Content hashing for change detection."""

from __future__ import annotations

import hashlib
from pathlib import Path

from fontshelf.config import HASH_CHUNK_SIZE
from fontshelf.errors import FileAccessError


def hash_file(path: str | Path, chunk_size: int = HASH_CHUNK_SIZE) -> str:
    """Return the SHA-256 hex digest of a file, read in fixed-size chunks.

    Raises:
        FileAccessError: If the file cannot be opened or read to the end.
    """
    digest = hashlib.sha256()
    try:
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(chunk_size), b""):
                digest.update(chunk)
    except OSError as e:
        raise FileAccessError(path, f"cannot read file ({e})", e) from e
    return digest.hexdigest()
