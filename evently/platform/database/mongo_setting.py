"""
MongoDB connection lifecycle.

One `MongoConnectionManager` lives for the whole process (built as a DI singleton).
The first `acquire()` connects; every later call gets the cached database handle
without I/O. Concurrent first calls share a single in-flight connect attempt.
"""

import asyncio
from typing import Any, Callable, Optional

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from evently.platform.exception.exceptions import DatabaseConnectionError
from evently.platform.logging.loguru_io import Logger


ClientFactory = Callable[..., AsyncMongoClient]


class MongoConnectionManager:
    """
    Process-scoped cache of the MongoDB database handle.

    Usage:
        database = await connection_manager.acquire()
        await database['events'].find_one({'slug': slug})
    """

    def __init__(
        self,
        *,
        uri: str,
        database_name: str,
        max_pool_size: int = 10,
        server_selection_timeout_ms: int = 5000,
        socket_timeout_ms: int = 45000,
        client_factory: ClientFactory = AsyncMongoClient,
    ) -> None:
        self._uri = uri
        self._database_name = database_name
        self._client_options: dict[str, Any] = {
            'maxPoolSize': max_pool_size,
            'serverSelectionTimeoutMS': server_selection_timeout_ms,
            'socketTimeoutMS': socket_timeout_ms,
            'tz_aware': True,
        }
        self._client_factory = client_factory
        self._client: Optional[AsyncMongoClient] = None
        self._database: Optional[AsyncDatabase] = None
        self._pending: Optional[asyncio.Task[AsyncDatabase]] = None

    @property
    def is_connected(self) -> bool:
        return self._database is not None

    async def acquire(self) -> AsyncDatabase:
        if self._database is not None:
            return self._database

        if self._pending is None:
            self._pending = asyncio.create_task(self._connect())

        # shield: a cancelled caller must not cancel the attempt other callers wait on
        return await asyncio.shield(self._pending)

    async def _connect(self) -> AsyncDatabase:
        client: Optional[AsyncMongoClient] = None
        try:
            # Bad client options surface as ValueError/TypeError from the constructor
            client = self._client_factory(self._uri, **self._client_options)
            # The driver connects lazily; ping so an unreachable server fails here, not on first query
            await client.admin.command('ping')
            database = client.get_default_database(default=self._database_name)
        except asyncio.CancelledError:
            await self._abandon(client)
            raise
        except Exception as e:
            await self._abandon(client)
            Logger.base.error(f'❌ [MongoDB] Connection error: {type(e).__name__}: {e}')
            raise DatabaseConnectionError(f'Unable to connect to MongoDB: {e}') from e

        self._client = client
        self._database = database
        Logger.base.info(f'✅ [MongoDB] Connected to database "{database.name}"')
        return database

    async def _abandon(self, client: Optional[AsyncMongoClient]) -> None:
        # Only the attempt that is still registered may clear the marker; close() may have moved on
        if self._pending is asyncio.current_task():
            self._pending = None
        if client is not None:
            await client.close()

    async def close(self) -> None:
        """Close the client on application shutdown, abandoning any connect still in flight."""
        pending, self._pending = self._pending, None
        if pending is not None and not pending.done():
            pending.cancel()
            await asyncio.gather(pending, return_exceptions=True)

        if self._client is not None:
            await self._client.close()
        self._client = None
        self._database = None
