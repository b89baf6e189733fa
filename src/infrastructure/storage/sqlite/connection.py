"""
Async SQLite connection pool with aiosqlite.

Write transactions start with ``BEGIN IMMEDIATE`` so the database write
lock is held from the first statement; a stock movement's conditional
update, re-read and ledger insert therefore see no interleaved writer.
"""

import asyncio
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from src.config import get_logger, get_settings
from src.core.exceptions import DatabaseError

logger = get_logger(__name__)

PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA foreign_keys=ON",
)


class ConnectionPool:
    """
    Fixed-size pool of autocommit connections.

    Callers wait up to ``acquire_timeout`` seconds for a free connection;
    SQLite itself waits ``busy_timeout`` ms for the write lock.
    """

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
        acquire_timeout: float = 30.0,
    ):
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout
        self.acquire_timeout = acquire_timeout

        self._idle: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=pool_size)
        self._connections: list[aiosqlite.Connection] = []
        self._initialized = False
        self._lock = asyncio.Lock()

    @property
    def idle(self) -> int:
        """Connections not currently handed out."""
        return self._idle.qsize()

    async def initialize(self) -> None:
        async with self._lock:
            if self._initialized:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            for _ in range(self.pool_size):
                conn = await self._connect()
                self._connections.append(conn)
                self._idle.put_nowait(conn)

            self._initialized = True
            logger.info(
                "connection_pool_initialized",
                db_path=str(self.db_path),
                pool_size=self.pool_size,
            )

    async def _connect(self) -> aiosqlite.Connection:
        # isolation_level=None: transactions are opened explicitly
        conn = await aiosqlite.connect(self.db_path, isolation_level=None)
        for pragma in PRAGMAS:
            await conn.execute(pragma)
        await conn.execute(f"PRAGMA busy_timeout={self.busy_timeout}")
        conn.row_factory = aiosqlite.Row
        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Borrow an autocommit connection.

        Raises:
            DatabaseError: no connection became free within acquire_timeout
        """
        if not self._initialized:
            await self.initialize()

        try:
            conn = await asyncio.wait_for(self._idle.get(), self.acquire_timeout)
        except asyncio.TimeoutError as e:
            logger.error("connection_pool_exhausted", pool_size=self.pool_size)
            raise DatabaseError("acquire_connection", "connection pool exhausted") from e
        try:
            yield conn
        finally:
            self._idle.put_nowait(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection inside an immediate write transaction."""
        async with self.acquire() as conn:
            await conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
                await conn.execute("COMMIT")
            except BaseException:
                await conn.execute("ROLLBACK")
                raise

    async def ping(self) -> float:
        """Round-trip a trivial query; returns latency in milliseconds."""
        start = time.perf_counter()
        async with self.acquire() as conn:
            await conn.execute("SELECT 1")
        return (time.perf_counter() - start) * 1000

    async def close(self) -> None:
        async with self._lock:
            for conn in self._connections:
                await conn.close()
            self._connections.clear()
            self._idle = asyncio.Queue(maxsize=self.pool_size)
            self._initialized = False
            logger.info("connection_pool_closed", db_path=str(self.db_path))


_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Get or create the process-wide pool from storage settings."""
    global _pool
    if _pool is None:
        storage = get_settings().storage
        _pool = ConnectionPool(
            db_path=storage.db_path,
            pool_size=storage.pool_size,
            busy_timeout=storage.busy_timeout,
            acquire_timeout=storage.acquire_timeout,
        )
        await _pool.initialize()
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    """Autocommit connection from the global pool, for reads."""
    pool = await get_pool()
    async with pool.acquire() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    """Write transaction on a connection from the global pool."""
    pool = await get_pool()
    async with pool.transaction() as conn:
        yield conn
