"""SQLite session store implementation."""

import time
from pathlib import Path
from typing import Callable

import aiosqlite

from ..config import resolve_db_path
from ..logging_config import get_logger

logger = get_logger(__name__)


class SqliteSessionStore:
    """Session store backed by a single SQLite table with an expiry column."""

    def __init__(
        self,
        db_path: str | Path | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self._db_path = resolve_db_path(db_path)
        self._clock = clock
        self._conn: aiosqlite.Connection | None = None

    async def init(self) -> None:
        """Open the database and create tables."""
        self._conn = await aiosqlite.connect(self._db_path)

        schema_path = Path(__file__).parent / "schema.sql"
        with open(schema_path, "r", encoding="utf-8") as f:
            schema_sql = f.read()
        await self._conn.executescript(schema_sql)
        await self._conn.commit()

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    async def get(self, key: str) -> bytes | None:
        """Get a value, None if missing or expired."""
        if not self._conn:
            raise RuntimeError("Session store not initialized")

        cursor = await self._conn.execute(
            "SELECT value, expires_at FROM sessions WHERE key = ?",
            (key,),
        )
        row = await cursor.fetchone()

        if not row:
            return None

        if row[1] <= self._clock():
            # Expired entries are removed lazily
            await self.delete(key)
            return None

        return bytes(row[0])

    async def set(self, key: str, value: bytes, ttl: int) -> None:
        """Set a value that expires after `ttl` seconds."""
        if not self._conn:
            raise RuntimeError("Session store not initialized")

        await self._conn.execute(
            """
            INSERT OR REPLACE INTO sessions (key, value, expires_at)
            VALUES (?, ?, ?)
            """,
            (key, value, self._clock() + ttl),
        )
        await self._conn.commit()

    async def delete(self, key: str) -> None:
        """Delete a value (no-op if missing)."""
        if not self._conn:
            raise RuntimeError("Session store not initialized")

        await self._conn.execute("DELETE FROM sessions WHERE key = ?", (key,))
        await self._conn.commit()

    async def purge_expired(self) -> int:
        """Delete every expired entry. Returns the number of rows removed."""
        if not self._conn:
            raise RuntimeError("Session store not initialized")

        cursor = await self._conn.execute(
            "DELETE FROM sessions WHERE expires_at <= ?", (self._clock(),)
        )
        await self._conn.commit()
        if cursor.rowcount:
            logger.info("Purged %s expired sessions", cursor.rowcount)
        return cursor.rowcount

    async def clear(self) -> None:
        """Remove all sessions."""
        if not self._conn:
            raise RuntimeError("Session store not initialized")

        await self._conn.execute("DELETE FROM sessions")
        await self._conn.commit()
