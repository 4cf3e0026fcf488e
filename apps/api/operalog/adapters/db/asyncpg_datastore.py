"""PostgreSQL datastore backed by an asyncpg connection pool."""

from __future__ import annotations

from collections.abc import Sequence
import json
import logging
import time
from typing import Any

import asyncpg

from operalog.adapters.db.base import Datastore, DatastoreError

logger = logging.getLogger(__name__)


async def _init_connection(connection: asyncpg.Connection) -> None:
    for type_name in ("json", "jsonb"):
        await connection.set_type_codec(
            type_name,
            encoder=json.dumps,
            decoder=json.loads,
            schema="pg_catalog",
        )


class AsyncpgDatastore(Datastore):
    """Process-wide pool handle; opened and closed by the application lifespan."""

    def __init__(self, dsn: str, *, min_size: int = 1, max_size: int = 10) -> None:
        self._dsn = dsn
        self._min_size = min_size
        self._max_size = max_size
        self._pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        if self._pool is not None:
            return
        try:
            self._pool = await asyncpg.create_pool(
                self._dsn,
                min_size=self._min_size,
                max_size=self._max_size,
                init=_init_connection,
            )
        except (OSError, asyncpg.PostgresError) as exc:
            raise DatastoreError("Unable to connect to the database", connection_failed=True) from exc
        logger.info("datastore.connected min_size=%s max_size=%s", self._min_size, self._max_size)

    async def close(self) -> None:
        if self._pool is None:
            return
        await self._pool.close()
        self._pool = None
        logger.info("datastore.closed")

    async def fetch(self, query: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        if self._pool is None:
            raise DatastoreError("Database pool is not initialised", connection_failed=True)

        started = time.perf_counter()
        try:
            records = await self._pool.fetch(query, *params)
        except asyncpg.PostgresError as exc:
            logger.error("datastore.query_failed sqlstate=%s", exc.sqlstate)
            raise DatastoreError(str(exc), sqlstate=exc.sqlstate) from exc
        except (OSError, TimeoutError, asyncpg.InterfaceError) as exc:
            logger.error("datastore.connection_failed error=%s", type(exc).__name__)
            raise DatastoreError("Database connection failed", connection_failed=True) from exc

        logger.debug(
            "datastore.query_executed duration_ms=%.1f rows=%s",
            (time.perf_counter() - started) * 1000,
            len(records),
        )
        return [dict(record) for record in records]

    async def ping(self) -> bool:
        try:
            await self.fetch("SELECT NOW()")
        except DatastoreError:
            return False
        return True


__all__ = ["AsyncpgDatastore"]
