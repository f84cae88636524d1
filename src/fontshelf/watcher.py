"""Live re-indexing of font directories with watchdog."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from fontshelf.config import DEFAULT_WATCH_DEPTH
from fontshelf.enumerator import is_font_file, root_exists, unique_roots
from fontshelf.errors import StoreError
from fontshelf.indexer import FontIndexer, log_failure

logger = logging.getLogger(__name__)


def _as_str(path: str | bytes) -> str:
    return path.decode() if isinstance(path, bytes) else path


class FontEventHandler(FileSystemEventHandler):
    """Feeds file events below the watched roots into the indexer.

    Created and modified files are re-indexed, deleted files lose their row,
    moves do both. Hidden files, non-font files and paths nested more than
    ``max_depth`` directories below their root are ignored.
    """

    def __init__(self, indexer: FontIndexer, roots: Iterable[str | Path], max_depth: int = DEFAULT_WATCH_DEPTH):
        super().__init__()
        self.indexer = indexer
        self.roots = unique_roots(roots)
        self.max_depth = max_depth

    def accepts(self, path: str | Path) -> bool:
        """True when ``path`` is a visible font file within depth of a root."""
        path = Path(path)
        if not is_font_file(path):
            return False
        for root in self.roots:
            if not path.is_relative_to(root):
                continue
            parts = path.relative_to(root).parts
            if any(part.startswith(".") for part in parts):
                return False
            # parts[-1] is the file itself
            return len(parts) - 1 <= self.max_depth
        return False

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._index(_as_str(event.src_path))

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._index(_as_str(event.src_path))

    def on_deleted(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._remove(_as_str(event.src_path))

    def on_moved(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._remove(_as_str(event.src_path))
        self._index(_as_str(event.dest_path))

    def _index(self, path: str) -> None:
        if not self.accepts(path):
            return
        logger.info("Watcher: indexing %s", path)
        result = self.indexer.index_file(path)
        if not result.ok:
            log_failure(result)

    def _remove(self, path: str) -> None:
        if not self.accepts(path):
            return
        try:
            if self.indexer.store.delete(path):
                logger.info("Watcher: removed %s", path)
        except StoreError as e:
            logger.error("Watcher: cannot remove %s", e)


class FontWatcher:
    """Watchdog observer over the font roots, dispatching to ``FontEventHandler``."""

    def __init__(self, indexer: FontIndexer, roots: Iterable[str | Path], max_depth: int = DEFAULT_WATCH_DEPTH):
        self.handler = FontEventHandler(indexer, roots, max_depth)
        self.observer = Observer()
        self.watched: list[Path] = []

    def start(self) -> list[Path]:
        """Schedule every existing root and start the observer thread."""
        for root in self.handler.roots:
            if not root_exists(root):
                continue
            self.observer.schedule(self.handler, str(root), recursive=True)
            self.watched.append(root)
        self.observer.start()
        logger.info("Watching %d font director%s", len(self.watched), "y" if len(self.watched) == 1 else "ies")
        return self.watched

    def stop(self) -> None:
        self.observer.stop()
        self.observer.join()

    def __enter__(self) -> FontWatcher:
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
