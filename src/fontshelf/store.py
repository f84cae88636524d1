"""SQLite persistence for font records.

One row per font file, keyed uniquely by path. Families are derived at
query time by grouping rows on their exact family string.
"""

from __future__ import annotations

import json
import logging
import os
import sqlite3
import threading
import time
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path

from fontshelf.config import VARIANT_ORDER
from fontshelf.errors import StoreError
from fontshelf.schema import FontFamily, FontMetrics, FontRecord

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS fonts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    file_path TEXT NOT NULL UNIQUE,
    file_hash TEXT,
    family TEXT,
    subfamily TEXT,
    full_name TEXT,
    postscript_name TEXT,
    weight INTEGER,
    width INTEGER,
    italic INTEGER,
    monospace INTEGER,
    category TEXT,
    subcategory TEXT,
    version TEXT,
    copyright TEXT,
    metadata_json TEXT,
    last_seen INTEGER,
    is_favorite INTEGER DEFAULT 0
);
"""

INDEXES = """
CREATE INDEX IF NOT EXISTS idx_family ON fonts(family);
CREATE INDEX IF NOT EXISTS idx_hash ON fonts(file_hash);
CREATE INDEX IF NOT EXISTS idx_favorite ON fonts(is_favorite);
"""

# Backfilled onto tables created by older schemas: name -> declaration
ADDED_COLUMNS = {
    "file_hash": "TEXT",
    "family": "TEXT",
    "subfamily": "TEXT",
    "full_name": "TEXT",
    "postscript_name": "TEXT",
    "weight": "INTEGER",
    "width": "INTEGER",
    "italic": "INTEGER",
    "monospace": "INTEGER",
    "category": "TEXT",
    "subcategory": "TEXT",
    "version": "TEXT",
    "copyright": "TEXT",
    "metadata_json": "TEXT",
    "last_seen": "INTEGER",
    "is_favorite": "INTEGER DEFAULT 0",
}


# The favorite flag is user state and survives re-indexing.
_UPSERT = """
INSERT INTO fonts (
    file_path, file_hash, family, subfamily, full_name, postscript_name,
    weight, width, italic, monospace, category, subcategory, version, copyright,
    metadata_json, last_seen
) VALUES (
    :file_path, :file_hash, :family, :subfamily, :full_name, :postscript_name,
    :weight, :width, :italic, :monospace, :category, :subcategory, :version, :copyright,
    :metadata_json, :last_seen
)
ON CONFLICT(file_path) DO UPDATE SET
    file_hash = excluded.file_hash,
    family = excluded.family,
    subfamily = excluded.subfamily,
    full_name = excluded.full_name,
    postscript_name = excluded.postscript_name,
    weight = excluded.weight,
    width = excluded.width,
    italic = excluded.italic,
    monospace = excluded.monospace,
    category = excluded.category,
    subcategory = excluded.subcategory,
    version = excluded.version,
    copyright = excluded.copyright,
    metadata_json = excluded.metadata_json,
    last_seen = excluded.last_seen
"""

# Category and subcategory are read together from the family's lowest-id row
_FAMILY_QUERY = """
SELECT g.*, rep.category AS category, rep.subcategory AS subcategory
FROM (
    SELECT
        MIN(id) AS id,
        family,
        GROUP_CONCAT(subfamily, ', ') AS subfamily,
        MIN(file_path) AS file_path,
        json_group_array(DISTINCT file_path) AS all_file_paths,
        MAX(is_favorite) AS is_favorite,
        COUNT(*) AS variant_count
    FROM fonts
    GROUP BY family
    {having}
) AS g
JOIN fonts AS rep ON rep.id = g.id
ORDER BY g.family ASC
"""

_VARIANT_RANK = "CASE\n{}\n        ELSE {}\n    END".format(
    "\n".join(
        f"        WHEN subfamily LIKE '%{word}%' THEN {rank}"
        for rank, word in enumerate(VARIANT_ORDER, start=1)
    ),
    len(VARIANT_ORDER) + 1,
)


def _record_params(record: FontRecord) -> dict:
    return {
        "file_path": record.path,
        "file_hash": record.file_hash,
        "family": record.family,
        "subfamily": record.subfamily,
        "full_name": record.full_name,
        "postscript_name": record.postscript_name,
        "weight": record.weight,
        "width": record.width,
        "italic": int(record.italic),
        "monospace": int(record.monospace),
        "category": record.category,
        "subcategory": record.subcategory,
        "version": record.version,
        "copyright": record.copyright,
        "metadata_json": record.metrics.model_dump_json(),
        "last_seen": record.last_seen,
    }


def _row_to_record(row: sqlite3.Row) -> FontRecord:
    metadata_json = row["metadata_json"]
    metrics = FontMetrics.model_validate_json(metadata_json) if metadata_json else FontMetrics()
    return FontRecord(
        id=row["id"],
        path=row["file_path"],
        file_hash=row["file_hash"] or "",
        family=row["family"] or "",
        subfamily=row["subfamily"] or "",
        full_name=row["full_name"] or "",
        postscript_name=row["postscript_name"] or "",
        weight=row["weight"],
        width=row["width"],
        italic=bool(row["italic"]),
        monospace=bool(row["monospace"]),
        category=row["category"],
        subcategory=row["subcategory"],
        version=row["version"] or "",
        copyright=row["copyright"] or "",
        metrics=metrics,
        last_seen=row["last_seen"] or 0,
        is_favorite=bool(row["is_favorite"]),
    )


def _row_to_family(row: sqlite3.Row) -> FontFamily:
    return FontFamily(
        id=row["id"],
        family=row["family"] or "",
        subfamily=row["subfamily"] or "",
        file_path=row["file_path"],
        all_file_paths=sorted(json.loads(row["all_file_paths"])),
        category=row["category"],
        subcategory=row["subcategory"],
        is_favorite=bool(row["is_favorite"]),
        variant_count=row["variant_count"],
    )


class FontStore:
    """Font record store backed by one SQLite database.

    The connection is shared between the event loop, executor threads and the
    watcher thread; every operation holds the store lock and runs in its own
    transaction, so readers never observe a half-written row.
    """

    def __init__(self, db_path: str | Path = ":memory:"):
        self.db_path = str(db_path)
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()
        try:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        except sqlite3.Error as e:
            raise StoreError(self.db_path, f"cannot open database ({e})", e) from e
        self._conn.row_factory = sqlite3.Row
        self._init_schema()
        logger.debug("FontStore opened at %s", self.db_path)

    def _init_schema(self) -> None:
        with self._transaction(self.db_path) as conn:
            conn.executescript(SCHEMA)
            columns = {row["name"] for row in conn.execute("PRAGMA table_info(fonts)")}
            for name, declaration in ADDED_COLUMNS.items():
                if name not in columns:
                    conn.execute(f"ALTER TABLE fonts ADD COLUMN {name} {declaration}")
            conn.executescript(INDEXES)

    @contextmanager
    def _transaction(self, subject: str) -> Iterator[sqlite3.Connection]:
        with self._lock:
            try:
                with self._conn:
                    yield self._conn
            except sqlite3.Error as e:
                raise StoreError(subject, f"database error ({e})", e) from e

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def __enter__(self) -> FontStore:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -- Writes ------------------------------------------------------------------------

    def upsert(self, record: FontRecord) -> FontRecord:
        """Insert a record, or replace the row with the same path in place.

        Refreshes last-seen and keeps the existing favorite flag. Returns the
        stored row.
        """
        record = record.model_copy(update={"last_seen": int(time.time())})
        with self._transaction(record.path) as conn:
            conn.execute(_UPSERT, _record_params(record))
            row = conn.execute("SELECT * FROM fonts WHERE file_path = ?", (record.path,)).fetchone()
        return _row_to_record(row)

    def set_favorite(self, family: str, is_favorite: bool) -> int:
        """Set the favorite flag on every row of ``family``. Returns rows changed."""
        with self._transaction(family) as conn:
            cursor = conn.execute(
                "UPDATE fonts SET is_favorite = ? WHERE family = ?",
                (int(is_favorite), family),
            )
        return cursor.rowcount

    def set_category(self, path: str, category: str, subcategory: str) -> None:
        with self._transaction(path) as conn:
            conn.execute(
                "UPDATE fonts SET category = ?, subcategory = ? WHERE file_path = ?",
                (category, subcategory, path),
            )

    def delete(self, path: str | Path) -> bool:
        """Remove the row for ``path``. Returns True if a row existed."""
        with self._transaction(str(path)) as conn:
            cursor = conn.execute("DELETE FROM fonts WHERE file_path = ?", (str(path),))
        return cursor.rowcount > 0

    def prune_missing(self, roots: Iterable[str | Path]) -> list[str]:
        """Delete rows under ``roots`` whose file no longer exists.

        Rows outside the given roots are left alone. Returns the removed paths.
        """
        root_paths = [Path(root) for root in roots]
        with self._transaction(self.db_path) as conn:
            paths = [row["file_path"] for row in conn.execute("SELECT file_path FROM fonts")]
            stale = [
                path
                for path in paths
                if any(Path(path).is_relative_to(root) for root in root_paths)
                and not os.path.exists(path)
            ]
            conn.executemany("DELETE FROM fonts WHERE file_path = ?", [(p,) for p in stale])
        if stale:
            logger.info("Pruned %d stale font record(s)", len(stale))
        return stale

    # -- Reads -------------------------------------------------------------------------

    def get(self, path: str | Path) -> FontRecord | None:
        with self._transaction(str(path)) as conn:
            row = conn.execute("SELECT * FROM fonts WHERE file_path = ?", (str(path),)).fetchone()
        return _row_to_record(row) if row else None

    def count(self) -> int:
        with self._transaction(self.db_path) as conn:
            return conn.execute("SELECT COUNT(*) FROM fonts").fetchone()[0]

    def list_families(self) -> list[FontFamily]:
        """One aggregate row per distinct family, ordered by family name."""
        with self._transaction(self.db_path) as conn:
            rows = conn.execute(_FAMILY_QUERY.format(having="")).fetchall()
        return [_row_to_family(row) for row in rows]

    def list_favorites(self) -> list[FontFamily]:
        """Families with at least one favorite row, ordered by family name."""
        with self._transaction(self.db_path) as conn:
            rows = conn.execute(_FAMILY_QUERY.format(having="HAVING MAX(is_favorite) = 1")).fetchall()
        return [_row_to_family(row) for row in rows]

    def list_variants(self, family: str) -> list[FontRecord]:
        """Rows of one family: Regular, Normal, Medium, Bold, Italic, then the rest."""
        with self._transaction(family) as conn:
            rows = conn.execute(
                f"SELECT * FROM fonts WHERE family = ? ORDER BY {_VARIANT_RANK}, subfamily ASC",
                (family,),
            ).fetchall()
        return [_row_to_record(row) for row in rows]

    def list_recent(self, since: int) -> list[FontRecord]:
        """Rows seen at or after ``since`` (Unix seconds), newest first."""
        with self._transaction(self.db_path) as conn:
            rows = conn.execute(
                "SELECT * FROM fonts WHERE last_seen >= ? ORDER BY last_seen DESC, file_path ASC",
                (since,),
            ).fetchall()
        return [_row_to_record(row) for row in rows]

    def uncategorized(self) -> list[FontRecord]:
        """Rows with no category, for the migration backfill."""
        with self._transaction(self.db_path) as conn:
            rows = conn.execute(
                "SELECT * FROM fonts WHERE category IS NULL OR category = '' ORDER BY id"
            ).fetchall()
        return [_row_to_record(row) for row in rows]
