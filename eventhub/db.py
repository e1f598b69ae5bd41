"""Shared MongoDB connection.

``connection_cache`` is built when this module is imported, so a missing
MONGODB_URI fails at startup instead of on the first query. Concurrent
callers of ``connect_to_database()`` share one in-flight attempt; a failed
attempt is forgotten so the next call retries.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import timezone
from typing import Any

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from eventhub.stores.mongo_store import ensure_indexes

logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = "eventhub"

Connector = Callable[[str, str | None], Awaitable[Any]]


async def connect_motor(uri: str, database_name: str | None) -> AsyncIOMotorDatabase:
    """Open a Motor client, confirm the server answers and create indexes."""
    client = AsyncIOMotorClient(
        uri,
        serverSelectionTimeoutMS=getattr(settings, "MONGODB_SERVER_SELECTION_TIMEOUT_MS", 5000),
        tz_aware=True,
        tzinfo=timezone.utc,
    )
    # Closed on cancellation too, e.g. ConnectionCache.close() mid-ping.
    try:
        await client.admin.command("ping")
        if database_name:
            db = client[database_name]
        else:
            db = client.get_default_database(default=DEFAULT_DB_NAME)
        await ensure_indexes(db)
    except BaseException:
        client.close()
        raise
    return db


class ConnectionCache:
    """Lazily established database handle shared by every caller."""

    def __init__(
        self,
        uri: str | None,
        database_name: str | None = None,
        connector: Connector | None = None,
    ) -> None:
        if not uri:
            raise ImproperlyConfigured(
                "Please define the MONGODB_URI environment variable"
            )
        self._uri = uri
        self._database_name = database_name
        self._connector = connector or connect_motor
        self._handle: Any = None
        self._pending: asyncio.Task | None = None

    @property
    def connected(self) -> bool:
        return self._handle is not None

    async def get(self) -> Any:
        """Return the shared handle, connecting on first use."""
        if self._handle is not None:
            return self._handle
        if self._pending is None:
            logger.info("Connecting to MongoDB")
            self._pending = asyncio.ensure_future(self._establish())
        # One caller being cancelled must not cancel the shared attempt.
        return await asyncio.shield(self._pending)

    async def _establish(self) -> Any:
        try:
            handle = await self._connector(self._uri, self._database_name)
        except Exception:
            logger.error("MongoDB connection failed", exc_info=True)
            self._pending = None
            raise
        logger.info("Connected to MongoDB")
        self._handle = handle
        self._pending = None
        return handle

    async def close(self) -> None:
        """Close the client and forget the handle and any pending attempt."""
        pending, self._pending = self._pending, None
        if pending is not None and not pending.done():
            pending.cancel()
        handle, self._handle = self._handle, None
        client = getattr(handle, "client", None)
        if client is not None:
            client.close()
            logger.info("MongoDB connection closed")


connection_cache = ConnectionCache(
    getattr(settings, "MONGODB_URI", None),
    database_name=getattr(settings, "MONGODB_DB_NAME", None),
)


async def connect_to_database() -> Any:
    """Return the process-wide database handle."""
    return await connection_cache.get()
