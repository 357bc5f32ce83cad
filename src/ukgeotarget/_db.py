"""Internal database connection management."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from ukgeotarget.exceptions import (
    DatabaseInvalid,
    DatabaseNotFound,
    DatasetUnavailable,
)
from ukgeotarget.logging import get_logger

logger = get_logger(__name__)


def _casefold(value: object) -> str | None:
    """SQL casefold(): Unicode-aware, unlike SQLite's ASCII-only UPPER()."""
    return str(value).casefold() if value is not None else None


class _DatabasePool:
    """
    A bounded pool of read-only aiosqlite connections.

    Connections are opened lazily and reused. At most *size* are checked
    out at once; further callers wait for a free slot rather than for
    each other's queries.
    """

    def __init__(
        self,
        path: Path,
        name: str,
        *,
        size: int = 5,
        acquire_timeout: float = 5.0,
        query_timeout: float = 5.0,
    ):
        self._path = path
        self._name = name
        self._acquire_timeout = acquire_timeout
        self._query_timeout = query_timeout
        self._slots = asyncio.Semaphore(size)
        self._idle: list[aiosqlite.Connection] = []
        self._closed = False

    @property
    def path(self) -> Path:
        return self._path

    @property
    def name(self) -> str:
        return self._name

    @property
    def idle_connections(self) -> int:
        return len(self._idle)

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """Check out a connection, opening one if none is idle."""
        try:
            await asyncio.wait_for(self._slots.acquire(), self._acquire_timeout)
        except TimeoutError:
            raise DatasetUnavailable(
                self._name, "timed out waiting for a free connection"
            ) from None

        conn: aiosqlite.Connection | None = None
        try:
            conn = self._idle.pop() if self._idle else await self._open()
            yield conn
        except Exception:
            # A connection that failed mid-query is not trusted again
            if conn is not None:
                broken, conn = conn, None
                await broken.close()
            raise
        finally:
            if conn is not None:
                if self._closed:
                    await conn.close()
                else:
                    self._idle.append(conn)
            self._slots.release()

    async def fetch_all(
        self, sql: str, params: Sequence[object] = ()
    ) -> list[aiosqlite.Row]:
        """
        Run a read query and return every row.

        SQLite errors are translated: a vanished file raises
        DatabaseNotFound, anything else DatasetUnavailable.
        """
        async with self.connection() as conn:
            try:
                async with conn.execute(sql, tuple(params)) as cur:
                    return list(await cur.fetchall())
            except aiosqlite.Error as exc:
                if not self._path.is_file():
                    raise DatabaseNotFound(str(self._path), self._name) from exc
                raise DatasetUnavailable(self._name, str(exc)) from exc

    async def _open(self) -> aiosqlite.Connection:
        """Open a fresh read-only connection."""
        if not self._path.is_file():
            raise DatabaseNotFound(str(self._path), self._name)
        try:
            conn = await aiosqlite.connect(
                f"file:{self._path}?mode=ro",
                uri=True,
                timeout=self._query_timeout,
            )
        except aiosqlite.Error as exc:
            raise DatasetUnavailable(self._name, str(exc)) from exc
        conn.row_factory = aiosqlite.Row
        try:
            await conn.execute("PRAGMA query_only = ON")
            await conn.create_function("casefold", 1, _casefold, deterministic=True)
        except aiosqlite.Error as exc:
            await conn.close()
            raise DatasetUnavailable(self._name, str(exc)) from exc
        self._closed = False
        logger.debug("db_connection_opened", db=self._name, path=str(self._path))
        return conn

    async def validate_tables(self, expected: Sequence[str]) -> None:
        """
        Check that the database contains the expected tables.

        Raises DatabaseInvalid if any are missing.
        """
        rows = await self.fetch_all(
            "SELECT name FROM sqlite_master WHERE type='table'"
        )
        actual = {row[0] for row in rows}
        missing = set(expected) - actual
        if missing:
            raise DatabaseInvalid(
                str(self._path),
                self._name,
                f"missing tables: {', '.join(sorted(missing))}",
            )

    async def ping(self) -> None:
        await self.fetch_all("SELECT 1")

    async def close(self) -> None:
        """Close every idle connection; busy ones close on release."""
        self._closed = True
        while self._idle:
            await self._idle.pop().close()
