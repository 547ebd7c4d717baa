"""
SQLite-backed audio and pitch-accent datasets.

Schemas:
- entries(expression, reading, source, file, display)
- pitch_accents(id, expression, reading, pitch, count)

sqlite3 is blocking, so every query runs in a worker thread via
asyncio.to_thread. A connection is opened per operation.
"""

import asyncio
import logging
import sqlite3
from typing import Any, Iterable, List, Sequence, Tuple

from .base import AudioDataset, DatasetError, PitchDataset
from .types import AudioEntry, PitchEntry

logger = logging.getLogger(__name__)


class _SQLiteDataset:
    """Connection handling shared by both datasets."""

    SCHEMA: Tuple[str, ...] = ()

    def __init__(self, db_path: str):
        """
        Args:
            db_path: Path to SQLite database file. A connection is opened
                per operation, so ":memory:" would always look empty.
        """
        self.db_path = db_path
        self._initialize_db()

    def _initialize_db(self) -> None:
        """Create tables and indexes if they don't exist."""
        try:
            conn = sqlite3.connect(self.db_path)
            try:
                for statement in self.SCHEMA:
                    conn.execute(statement)
                conn.commit()
            finally:
                conn.close()
            logger.debug(f"SQLite dataset initialized: {self.db_path}")
        except sqlite3.Error as e:
            # Surface on first query instead of at startup
            logger.error(f"Failed to initialize SQLite dataset {self.db_path}: {str(e)}")

    def _fetch_all(self, query: str, params: Sequence[Any]) -> List[sqlite3.Row]:
        conn = sqlite3.connect(self.db_path)
        try:
            conn.row_factory = sqlite3.Row
            return conn.execute(query, tuple(params)).fetchall()
        finally:
            conn.close()

    async def _query(self, query: str, params: Sequence[Any]) -> List[sqlite3.Row]:
        try:
            return await asyncio.to_thread(self._fetch_all, query, params)
        except sqlite3.Error as e:
            logger.error(f"Dataset query failed on {self.db_path}: {str(e)} (params={list(params)})")
            raise DatasetError("Database query failed") from e

    def _insert_many(self, statement: str, rows: Iterable[Sequence[Any]]) -> int:
        conn = sqlite3.connect(self.db_path)
        try:
            cursor = conn.executemany(statement, [tuple(r) for r in rows])
            conn.commit()
            return cursor.rowcount
        finally:
            conn.close()


class SQLiteAudioDataset(_SQLiteDataset, AudioDataset):
    """Audio records stored in the `entries` table."""

    SCHEMA = (
        """
        CREATE TABLE IF NOT EXISTS entries (
            expression TEXT NOT NULL,
            reading TEXT,
            source TEXT NOT NULL,
            file TEXT NOT NULL,
            display TEXT
        )
        """,
        "CREATE INDEX IF NOT EXISTS idx_entries_expression ON entries(expression)",
        "CREATE INDEX IF NOT EXISTS idx_entries_reading ON entries(reading)",
    )

    async def query(self, term: str, reading: str, sources: Sequence[str]) -> List[AudioEntry]:
        condition = "WHERE expression = ?"
        params: List[Any] = [term]

        if reading and reading.strip() != "":
            condition = "WHERE (expression = ? OR reading = ?)"
            params.append(reading)

        if len(sources) > 0 and "all" not in sources:
            placeholders = ", ".join("?" for _ in sources)
            condition += f" AND source IN ({placeholders})"
            params.extend(sources)

        # rowid keeps dataset (curation) order
        rows = await self._query(
            f"SELECT expression, reading, source, file, display FROM entries {condition} ORDER BY rowid",
            params,
        )
        return [
            AudioEntry(
                expression=row["expression"],
                reading=row["reading"] or "",
                source=row["source"],
                file=row["file"],
                display=row["display"] or None,
            )
            for row in rows
        ]

    def add_entries(self, entries: Iterable[AudioEntry]) -> int:
        """Insert audio records (used by the import script and tests)."""
        return self._insert_many(
            "INSERT INTO entries (expression, reading, source, file, display) VALUES (?, ?, ?, ?, ?)",
            ((e.expression, e.reading, e.source, e.file, e.display) for e in entries),
        )


class SQLitePitchDataset(_SQLiteDataset, PitchDataset):
    """Pitch-accent rows stored in the `pitch_accents` table."""

    SCHEMA = (
        """
        CREATE TABLE IF NOT EXISTS pitch_accents (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            expression TEXT NOT NULL,
            reading TEXT,
            pitch TEXT NOT NULL,
            count INTEGER DEFAULT 0
        )
        """,
        "CREATE INDEX IF NOT EXISTS idx_pitch_expression ON pitch_accents(expression, reading)",
    )

    async def query(self, term: str, reading: str) -> List[PitchEntry]:
        condition = "WHERE expression = ?"
        params: List[Any] = [term]

        if reading and reading.strip() != "":
            condition = "WHERE (expression = ? AND reading = ?)"
            params.append(reading)

        rows = await self._query(
            f"SELECT id, expression, reading, pitch, count FROM pitch_accents {condition} ORDER BY id",
            params,
        )
        return [
            PitchEntry(
                id=str(row["id"]),
                expression=row["expression"],
                reading=row["reading"] or "",
                pitch=row["pitch"],
                count=int(row["count"] or 0),
                origin="dataset",
            )
            for row in rows
        ]

    def add_entries(self, entries: Iterable[PitchEntry]) -> int:
        """Insert pitch rows; ids are assigned by the table."""
        return self._insert_many(
            "INSERT INTO pitch_accents (expression, reading, pitch, count) VALUES (?, ?, ?, ?)",
            ((e.expression, e.reading, e.pitch, e.count) for e in entries),
        )
