"""Recursive discovery of font files under root directories."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Awaitable, Callable, Iterable
from pathlib import Path

from fontshelf.config import FONT_EXTENSIONS
from fontshelf.errors import DirectoryAccessError

logger = logging.getLogger(__name__)


def is_font_file(path: str | Path) -> bool:
    """True when ``path`` has one of the indexed font extensions."""
    return Path(path).suffix.lower() in FONT_EXTENSIONS


def list_directory(directory: Path) -> tuple[list[Path], list[Path]]:
    """List one directory, returning (subdirectories, font files), both sorted.

    Symlinked directories are not followed.

    Raises:
        DirectoryAccessError: If the directory cannot be listed.
    """
    subdirs: list[Path] = []
    fonts: list[Path] = []
    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                if entry.is_dir(follow_symlinks=False):
                    subdirs.append(Path(entry.path))
                elif entry.is_file() and is_font_file(entry.name):
                    fonts.append(Path(entry.path))
    except OSError as e:
        raise DirectoryAccessError(directory, f"cannot list directory ({e})", e) from e
    subdirs.sort()
    fonts.sort()
    return subdirs, fonts


def root_exists(root: Path) -> bool:
    """True when ``root`` is a directory that can be walked.

    A missing root is logged at debug level. A root that cannot even be
    checked (permissions, name too long, I/O error) is logged as a
    ``DirectoryAccessError`` and treated as absent.
    """
    try:
        if root.is_dir():
            return True
    except OSError as e:
        error = DirectoryAccessError(root, f"cannot stat directory ({e})", e)
        logger.warning("Skipping unreadable directory: %s", error)
        return False
    logger.debug("Skipping missing font directory: %s", root)
    return False


async def walk_root(root: str | Path, emit: Callable[[Path], Awaitable[None]]) -> int:
    """Walk one root depth-first, awaiting ``emit`` for each font file found.

    Directory listings run in a worker thread so several roots can be walked
    concurrently from one event loop. Unreadable subtrees are logged and
    skipped. Returns the number of files emitted.
    """
    root = Path(root)
    if not await asyncio.to_thread(root_exists, root):
        return 0

    found = 0
    stack = [root]
    while stack:
        directory = stack.pop()
        try:
            subdirs, fonts = await asyncio.to_thread(list_directory, directory)
        except DirectoryAccessError as e:
            logger.warning("Skipping unreadable directory: %s", e)
            continue
        for font_path in fonts:
            await emit(font_path)
            found += 1
        stack.extend(reversed(subdirs))

    logger.debug("Found %d font file(s) under %s", found, root)
    return found


def unique_roots(roots: Iterable[str | Path]) -> list[Path]:
    """Deduplicate roots while keeping their order."""
    seen: set[Path] = set()
    result: list[Path] = []
    for root in roots:
        path = Path(root).expanduser()
        if path not in seen:
            seen.add(path)
            result.append(path)
    return result


async def discover(roots: Iterable[str | Path], emit: Callable[[Path], Awaitable[None]]) -> int:
    """Walk all roots concurrently, one task per root. Returns the files emitted."""
    counts = await asyncio.gather(*(walk_root(root, emit) for root in unique_roots(roots)))
    return sum(counts)
