from __future__ import annotations

import os
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Awaitable, Callable, Optional

import asyncpg
from dotenv import load_dotenv

from tracker.domain.errors import StoreError

load_dotenv()


@dataclass(frozen=True)
class PostgresConfig:
    host: str
    port: int
    database: str
    user: str
    password: str


def load_config_from_env() -> PostgresConfig:
    """
    Reads PostgreSQL settings from the environment (.env included).
    Upper layers never see this; they receive a ready PostgresDatabase.
    """
    host = os.getenv("DB_HOST", "localhost")
    port = int(os.getenv("DB_PORT", "5432"))
    database = os.getenv("DB_NAME", "tracker")
    user = os.getenv("DB_USER", "tracker")
    password = os.getenv("DB_PASSWORD", "tracker")

    return PostgresConfig(
        host=host,
        port=port,
        database=database,
        user=user,
        password=password,
    )


class PostgresDatabase:
    """
    Connection-pool wrapper around asyncpg.

    Repositories depend on this class only through execute/fetch/fetchrow;
    driver and transport failures come out as StoreError.
    """

    def __init__(self, config: PostgresConfig) -> None:
        self._config = config
        self._pool: Optional[asyncpg.Pool] = None

    @property
    def connected(self) -> bool:
        return self._pool is not None

    async def connect(self) -> None:
        if self._pool is not None:
            return

        try:
            self._pool = await asyncpg.create_pool(
                host=self._config.host,
                port=self._config.port,
                database=self._config.database,
                user=self._config.user,
                password=self._config.password,
                min_size=1,
                max_size=10,
            )
        except (asyncpg.PostgresError, OSError) as exc:
            raise StoreError(f"Cannot connect to PostgreSQL: {exc}") from exc

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None

    @asynccontextmanager
    async def _acquire(self) -> AsyncIterator[asyncpg.Connection]:
        if self._pool is None:
            raise StoreError("PostgresDatabase is not connected")

        try:
            async with self._pool.acquire() as connection:
                yield connection
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
            raise StoreError(str(exc)) from exc

    async def execute(self, query: str, *args: Any) -> str:
        """
        Runs a statement without result rows (INSERT/UPDATE/DELETE/...).
        Returns the PostgreSQL status string.
        """
        async with self._acquire() as connection:
            return await connection.execute(query, *args)

    async def executemany(self, query: str, args: list) -> None:
        """
        Runs one statement for every argument tuple inside a single transaction.
        """
        async with self._acquire() as connection:
            async with connection.transaction():
                await connection.executemany(query, args)

    async def fetch(self, query: str, *args: Any) -> list[asyncpg.Record]:
        async with self._acquire() as connection:
            rows = await connection.fetch(query, *args)
            return list(rows)

    async def fetchrow(self, query: str, *args: Any) -> Optional[asyncpg.Record]:
        async with self._acquire() as connection:
            return await connection.fetchrow(query, *args)

    async def with_connection(
        self,
        func: Callable[[asyncpg.Connection], Awaitable[Any]],
    ) -> Any:
        """
        Hands a raw connection to func; used for transactions.
        """
        async with self._acquire() as connection:
            return await func(connection)
