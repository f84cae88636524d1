"""Indexing pipeline: hash -> extract -> categorize -> store.

``FontIndexer.index_file`` handles one path and is shared by full scans and
the watcher. ``FontIndexer.scan`` drives a full scan over root directories
with a fixed pool of asyncio workers.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from fontshelf.categorizer import categorize
from fontshelf.config import DEFAULT_WORKERS, QUEUE_SIZE_PER_WORKER
from fontshelf.enumerator import discover, unique_roots
from fontshelf.errors import (
    FileAccessError,
    IndexingError,
    ParseError,
    UnsupportedFormatError,
)
from fontshelf.extractor import extract
from fontshelf.hasher import hash_file
from fontshelf.naming import FamilyPolicy
from fontshelf.schema import FontRecord
from fontshelf.store import FontStore

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


@dataclass
class IndexResult:
    """Outcome of indexing one file: a stored record or the error that skipped it."""

    path: str
    record: FontRecord | None = None
    error: IndexingError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.record is not None


@dataclass
class ScanReport:
    """Summary of a full scan."""

    roots: list[str]
    indexed: list[FontRecord] = field(default_factory=list)
    failures: list[IndexResult] = field(default_factory=list)
    pruned: list[str] = field(default_factory=list)

    @property
    def indexed_count(self) -> int:
        return len(self.indexed)

    @property
    def failed_count(self) -> int:
        return len(self.failures)


def build_record(path: str | Path, family_policy: FamilyPolicy = FamilyPolicy.LICENSE) -> FontRecord:
    """Hash, extract and categorize one file into an unsaved FontRecord."""
    file_hash = hash_file(path)
    font = extract(path, family_policy)
    category, subcategory = categorize(font.family, font.subfamily, font.monospace)
    return FontRecord(
        path=str(path),
        file_hash=file_hash,
        family=font.family,
        subfamily=font.subfamily,
        full_name=font.full_name,
        postscript_name=font.postscript_name,
        weight=font.weight,
        width=font.width,
        italic=font.italic,
        monospace=font.monospace,
        category=category,
        subcategory=subcategory,
        version=font.version,
        copyright=font.copyright,
        metrics=font.metrics,
    )


def log_failure(result: IndexResult) -> None:
    """Log a skipped file once, at a level matching the error kind."""
    error = result.error
    if isinstance(error, (UnsupportedFormatError, FileAccessError)):
        logger.warning("Skipping %s", error)
    else:
        logger.error("Failed to index %s", error, exc_info=error)


class FontIndexer:
    """Runs the per-file pipeline against one explicit store."""

    def __init__(
        self,
        store: FontStore,
        *,
        family_policy: FamilyPolicy = FamilyPolicy.LICENSE,
        workers: int = DEFAULT_WORKERS,
    ):
        if workers < 1:
            msg = f"Worker count must be >= 1, got {workers}"
            raise ValueError(msg)
        self.store = store
        self.family_policy = family_policy
        self.workers = workers

    def index_file(self, path: str | Path) -> IndexResult:
        """Index one file. Never raises for per-file failures; see ``IndexResult.error``."""
        path = str(path)
        try:
            record = build_record(path, self.family_policy)
            stored = self.store.upsert(record)
        except IndexingError as e:
            return IndexResult(path=path, error=e)
        except ValidationError as e:
            return IndexResult(path=path, error=ParseError(path, f"invalid font record ({e})", e))
        return IndexResult(path=path, record=stored)

    async def scan(
        self,
        roots: Iterable[str | Path],
        on_progress: ProgressCallback | None = None,
        *,
        prune: bool = True,
    ) -> ScanReport:
        """Index every font file under ``roots``.

        Roots are walked concurrently and feed a bounded queue drained by
        ``self.workers`` tasks, each indexing one file at a time in a thread.
        ``on_progress`` receives the cumulative count after every successfully
        indexed file. With ``prune``, rows under the roots whose files are gone
        are deleted afterwards.
        """
        root_paths = unique_roots(roots)
        report = ScanReport(roots=[str(root) for root in root_paths])
        queue: asyncio.Queue[Path | None] = asyncio.Queue(maxsize=self.workers * QUEUE_SIZE_PER_WORKER)

        async def worker() -> None:
            while True:
                path = await queue.get()
                try:
                    if path is None:
                        return
                    result = await asyncio.to_thread(self.index_file, path)
                    if result.ok:
                        report.indexed.append(result.record)
                        if on_progress is not None:
                            on_progress(len(report.indexed))
                    else:
                        log_failure(result)
                        report.failures.append(result)
                finally:
                    queue.task_done()

        workers = [asyncio.create_task(worker()) for _ in range(self.workers)]
        try:
            await discover(root_paths, queue.put)
        finally:
            for _ in workers:
                await queue.put(None)
            await asyncio.gather(*workers)

        if prune:
            report.pruned = await asyncio.to_thread(self.store.prune_missing, root_paths)

        logger.info(
            "Scan complete: %d indexed, %d skipped, %d pruned",
            report.indexed_count,
            report.failed_count,
            len(report.pruned),
        )
        return report

    def scan_sync(
        self,
        roots: Iterable[str | Path],
        on_progress: ProgressCallback | None = None,
        *,
        prune: bool = True,
    ) -> ScanReport:
        """Run ``scan`` on a fresh event loop."""
        return asyncio.run(self.scan(roots, on_progress, prune=prune))
