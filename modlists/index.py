"""Local package index backed by SQLite.

The database holds one row per indexed module, built from a CPAN
``02packages.details.txt`` file (plain or gzipped)::

    File:         02packages.details.txt
    Line-Count:   2
    <blank line>
    Foo::Bar      1.02  A/AU/AUTHOR/Foo-Bar-1.02.tar.gz
    Foo::Baz      undef A/AU/AUTHOR/Foo-Bar-1.02.tar.gz
"""

import gzip
import sqlite3
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Protocol

from modlists.errors import IndexQueryError
from modlists.utils.logging import logger

# SQLite's default limit on host parameters is 999 on older builds
QUERY_BATCH_SIZE = 500

SCHEMA = """
CREATE TABLE IF NOT EXISTS modules (
    name TEXT PRIMARY KEY,
    version TEXT,
    dist TEXT
)
"""


class IndexLookup(Protocol):
    """Answers which of the given names are present in a package index."""

    def lookup(self, names: list[str]) -> set[str]: ...


class LocalIndex:
    """Index lookup against a local SQLite module table."""

    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path).expanduser()

    def lookup(self, names: list[str]) -> set[str]:
        """Return the subset of names present in the index.

        Raises:
            IndexQueryError: database missing or unreadable
        """
        if not self.db_path.exists():
            raise IndexQueryError(
                f"Can't list modules in local index: {self.db_path} not found "
                "(run 'modlists index load' first)",
                code=404,
            )

        found: set[str] = set()
        unique = list(dict.fromkeys(names))
        try:
            conn = sqlite3.connect(f"file:{self.db_path}?mode=ro", uri=True)
            try:
                cursor = conn.cursor()
                for start in range(0, len(unique), QUERY_BATCH_SIZE):
                    batch = unique[start : start + QUERY_BATCH_SIZE]
                    placeholders = ",".join("?" * len(batch))
                    cursor.execute(
                        f"SELECT name FROM modules WHERE name IN ({placeholders})",
                        batch,
                    )
                    found.update(row[0] for row in cursor.fetchall())
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise IndexQueryError(f"Can't list modules in local index: {e}") from e

        return found


def parse_packages_file(path: Path) -> Iterator[tuple[str, str | None, str]]:
    """Yield (name, version, dist path) rows from a 02packages file."""
    opener = gzip.open if path.suffix == ".gz" else open
    with opener(path, "rt", encoding="utf-8", errors="replace") as f:
        in_header = True
        for line in f:
            line = line.strip()
            if in_header:
                if not line:
                    in_header = False
                continue
            if not line:
                continue
            parts = line.split()
            if len(parts) != 3:
                logger.debug("Skipping malformed index line: {line}", line=line)
                continue
            name, version, dist = parts
            yield name, (None if version == "undef" else version), dist


def load_packages_file(db_path: str | Path, packages_path: str | Path) -> int:
    """Rebuild the index database from a 02packages file. Returns row count."""
    db_path = Path(db_path).expanduser()
    packages_path = Path(packages_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    try:
        cursor = conn.cursor()
        cursor.execute(SCHEMA)
        cursor.execute("DELETE FROM modules")
        count = _insert_rows(cursor, parse_packages_file(packages_path))
        conn.commit()
    finally:
        conn.close()

    logger.info("Loaded {count} modules into {db}", count=count, db=str(db_path))
    return count


def _insert_rows(cursor: sqlite3.Cursor, rows: Iterable[tuple[str, str | None, str]]) -> int:
    count = 0
    batch = []
    for row in rows:
        batch.append(row)
        if len(batch) >= QUERY_BATCH_SIZE:
            cursor.executemany("INSERT OR REPLACE INTO modules VALUES (?, ?, ?)", batch)
            count += len(batch)
            batch = []
    if batch:
        cursor.executemany("INSERT OR REPLACE INTO modules VALUES (?, ?, ?)", batch)
        count += len(batch)
    return count
