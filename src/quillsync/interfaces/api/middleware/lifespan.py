"""Lifespan middleware - opens resources on startup, releases them on shutdown."""

import logging
from typing import Any

from psycopg_pool import AsyncConnectionPool

from quillsync.application.ports import BackgroundRunner

logger = logging.getLogger(__name__)


class LifespanMiddleware:
    """Opens the connection pool on startup.

    On shutdown, drains detached reconciliation first so it can still reach the
    database, then closes the index client and the pool.
    """

    def __init__(
        self,
        pool: AsyncConnectionPool,
        background_runner: BackgroundRunner | None = None,
        semantic_index: Any = None,
    ) -> None:
        self._pool = pool
        self._runner = background_runner
        self._index = semantic_index

    async def process_startup(self, scope: dict[str, Any], event: dict[str, Any]) -> None:
        await self._pool.open()
        logger.info("Connection pool opened")

    async def process_shutdown(self, scope: dict[str, Any], event: dict[str, Any]) -> None:
        if self._runner is not None:
            await self._runner.drain()
        aclose = getattr(self._index, "aclose", None)
        if aclose is not None:
            await aclose()
        await self._pool.close()
        logger.info("Connection pool closed")
