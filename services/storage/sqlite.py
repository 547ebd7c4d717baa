"""
SQLite-backed object store.

Objects live in one table, objects(key PRIMARY KEY, data BLOB, updated_at).
Each put is a single INSERT OR REPLACE, so a concurrent reader sees either
the previous object or the new one, and the last writer wins.

Enables WAL mode so readers are not blocked by a writer.
"""

import asyncio
import logging
import sqlite3
from typing import Optional

from .base import ObjectStore, StorageError

logger = logging.getLogger(__name__)


class SQLiteObjectStore(ObjectStore):
    """Object store persisted in a SQLite database file."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._initialize_db()

    def _initialize_db(self) -> None:
        """Create the objects table if it doesn't exist."""
        try:
            conn = sqlite3.connect(self.db_path)
            try:
                cursor = conn.cursor()
                cursor.execute("PRAGMA journal_mode=WAL")
                cursor.execute("""
                    CREATE TABLE IF NOT EXISTS objects (
                        key TEXT PRIMARY KEY,
                        data BLOB NOT NULL,
                        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                    )
                """)
                conn.commit()
            finally:
                conn.close()
            logger.debug(f"SQLite object store initialized: {self.db_path}")
        except sqlite3.Error as e:
            logger.error(f"Failed to initialize SQLite object store: {str(e)}")

    def _read(self, key: str) -> Optional[bytes]:
        conn = sqlite3.connect(self.db_path, timeout=30)
        try:
            row = conn.execute("SELECT data FROM objects WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
        return bytes(row[0]) if row is not None else None

    def _write(self, key: str, data: bytes) -> None:
        conn = sqlite3.connect(self.db_path, timeout=30)
        try:
            conn.execute(
                """
                INSERT OR REPLACE INTO objects (key, data, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                """,
                (key, sqlite3.Binary(data)),
            )
            conn.commit()
        finally:
            conn.close()

    async def get(self, key: str) -> Optional[bytes]:
        try:
            return await asyncio.to_thread(self._read, key)
        except sqlite3.Error as e:
            logger.error(f"Object store read failed for {key}: {str(e)}")
            raise StorageError("Object store read failed") from e

    async def put(self, key: str, data: bytes) -> bool:
        try:
            await asyncio.to_thread(self._write, key, data)
        except sqlite3.Error as e:
            logger.error(f"Object store write failed for {key}: {str(e)}")
            raise StorageError("Object store write failed") from e
        return True
