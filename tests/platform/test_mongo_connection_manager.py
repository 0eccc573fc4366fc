"""
MongoConnectionManager unit tests
"""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from evently.platform.database.mongo_setting import MongoConnectionManager
from evently.platform.exception.exceptions import DatabaseConnectionError


def _make_client(database, *, ping_error: Exception | None = None):
    async def _ping(*args, **kwargs):
        # Yield to the loop so concurrent callers overlap the in-flight attempt
        await asyncio.sleep(0.01)
        if ping_error is not None:
            raise ping_error
        return {'ok': 1.0}

    client = Mock()
    client.admin.command = AsyncMock(side_effect=_ping)
    client.get_default_database = Mock(return_value=database)
    client.close = AsyncMock()
    return client


def _make_manager(client_factory) -> MongoConnectionManager:
    return MongoConnectionManager(
        uri='mongodb://localhost:27017/evently_test',
        database_name='evently_test',
        client_factory=client_factory,
    )


class TestMongoConnectionManager:
    @pytest.mark.asyncio
    async def test_concurrent_acquires_share_one_connect(self, mongo_database):
        client = _make_client(mongo_database)
        factory = Mock(return_value=client)
        manager = _make_manager(factory)

        handles = await asyncio.gather(*(manager.acquire() for _ in range(10)))

        assert all(handle is mongo_database for handle in handles)
        factory.assert_called_once()
        client.admin.command.assert_awaited_once_with('ping')
        assert manager.is_connected

    @pytest.mark.asyncio
    async def test_cached_handle_needs_no_io(self, mongo_database):
        client = _make_client(mongo_database)
        factory = Mock(return_value=client)
        manager = _make_manager(factory)

        first = await manager.acquire()
        second = await manager.acquire()

        assert first is second
        factory.assert_called_once()
        assert client.admin.command.await_count == 1

    @pytest.mark.asyncio
    async def test_client_options(self, mongo_database):
        factory = Mock(return_value=_make_client(mongo_database))
        manager = MongoConnectionManager(
            uri='mongodb://db.internal:27017/evently',
            database_name='evently',
            max_pool_size=20,
            client_factory=factory,
        )

        await manager.acquire()

        factory.assert_called_once_with(
            'mongodb://db.internal:27017/evently',
            maxPoolSize=20,
            serverSelectionTimeoutMS=5000,
            socketTimeoutMS=45000,
            tz_aware=True,
        )
        factory.return_value.get_default_database.assert_called_once_with(default='evently')

    @pytest.mark.asyncio
    async def test_failed_connect_reaches_every_waiter(self, mongo_database):
        client = _make_client(mongo_database, ping_error=ServerSelectionTimeoutError('no servers'))
        factory = Mock(return_value=client)
        manager = _make_manager(factory)

        results = await asyncio.gather(
            *(manager.acquire() for _ in range(5)), return_exceptions=True
        )

        assert all(isinstance(result, DatabaseConnectionError) for result in results)
        assert len({id(result) for result in results}) == 1
        assert results[0].status_code == 503
        factory.assert_called_once()
        client.close.assert_awaited_once()
        assert not manager.is_connected

    @pytest.mark.asyncio
    async def test_next_acquire_after_failure_retries(self, mongo_database):
        broken = _make_client(mongo_database, ping_error=ServerSelectionTimeoutError('no servers'))
        healthy = _make_client(mongo_database)
        factory = Mock(side_effect=[broken, healthy])
        manager = _make_manager(factory)

        with pytest.raises(DatabaseConnectionError):
            await manager.acquire()

        handle = await manager.acquire()

        assert handle is mongo_database
        assert factory.call_count == 2

    @pytest.mark.asyncio
    async def test_invalid_client_options_wrapped_and_retried(self, mongo_database):
        healthy = _make_client(mongo_database)
        bad_option = ValueError('The value of maxPoolSize must be a non negative integer')
        factory = Mock(side_effect=[bad_option, healthy])
        manager = _make_manager(factory)

        with pytest.raises(DatabaseConnectionError) as exc_info:
            await manager.acquire()

        assert isinstance(exc_info.value.__cause__, ValueError)
        assert await manager.acquire() is mongo_database
        assert factory.call_count == 2

    @pytest.mark.asyncio
    async def test_cancelled_caller_does_not_cancel_shared_attempt(self, mongo_database):
        factory = Mock(return_value=_make_client(mongo_database))
        manager = _make_manager(factory)

        first = asyncio.create_task(manager.acquire())
        await asyncio.sleep(0)
        first.cancel()

        handle = await manager.acquire()

        assert handle is mongo_database
        factory.assert_called_once()
        with pytest.raises(asyncio.CancelledError):
            await first

    @pytest.mark.asyncio
    async def test_close_drops_cached_handle(self, mongo_database):
        client = _make_client(mongo_database)
        manager = _make_manager(Mock(return_value=client))
        await manager.acquire()

        await manager.close()

        client.close.assert_awaited_once()
        assert not manager.is_connected

    @pytest.mark.asyncio
    async def test_close_during_connect_leaves_no_open_client(self, mongo_database):
        slow = _make_client(mongo_database)
        healthy = _make_client(mongo_database)
        factory = Mock(side_effect=[slow, healthy])
        manager = _make_manager(factory)

        waiter = asyncio.create_task(manager.acquire())
        # Let the connect reach its ping before shutting down
        await asyncio.sleep(0.001)
        await manager.close()

        with pytest.raises(asyncio.CancelledError):
            await waiter
        slow.close.assert_awaited_once()
        assert not manager.is_connected

        assert await manager.acquire() is mongo_database
        assert factory.call_count == 2
