"""Database connection management"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
import psycopg
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool
from gramps_memory.config import DATABASE_URL, DB_POOL_MIN_SIZE, DB_POOL_MAX_SIZE

logger = logging.getLogger(__name__)


class Database:
    """Database connection pool manager"""

    def __init__(self, connection_string: str = DATABASE_URL):
        self.connection_string = connection_string
        self._pool: Optional[AsyncConnectionPool] = None

    async def init_pool(self) -> None:
        """Initialize connection pool"""
        logger.info("Initializing database connection pool")
        self._pool = AsyncConnectionPool(
            self.connection_string,
            min_size=DB_POOL_MIN_SIZE,
            max_size=DB_POOL_MAX_SIZE,
            open=False
        )
        await self._pool.open()

    async def close_pool(self) -> None:
        """Close connection pool"""
        if self._pool:
            logger.info("Closing database connection pool")
            await self._pool.close()
            self._pool = None

    @asynccontextmanager
    async def connection(self) -> AsyncGenerator[psycopg.AsyncConnection, None]:
        """Get database connection from pool"""
        if not self._pool:
            raise RuntimeError("Database pool not initialized")

        async with self._pool.connection() as conn:
            conn.row_factory = dict_row
            yield conn

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[psycopg.AsyncConnection, None]:
        """Get a connection whose statements commit or roll back together"""
        async with self.connection() as conn:
            async with conn.transaction():
                yield conn

    @asynccontextmanager
    async def cursor(
        self, conn: Optional[psycopg.AsyncConnection] = None
    ) -> AsyncGenerator[psycopg.AsyncCursor, None]:
        """
        Get a cursor for a single query

        With ``conn`` the cursor joins that connection's transaction and the
        caller owns the commit. Without it a pooled connection is used and
        committed when the block exits.
        """
        if conn is not None:
            async with conn.cursor() as cur:
                yield cur
            return

        async with self.connection() as own_conn:
            async with own_conn.cursor() as cur:
                yield cur
            await own_conn.commit()


# Global database instance
db = Database()
