"""
Test Configuration and Fixtures

Environment setup MUST happen before any application import: settings are read
at import time and a missing MONGODB_URI is fatal.

Unit tests run against `InMemoryCollection`, an async stand-in for the handful
of collection methods the repositories call. Nothing here talks to a server.
"""

import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    os.environ.setdefault('MONGODB_URI', 'mongodb://localhost:27017/evently_test')
    os.environ.setdefault('MONGODB_DB', 'evently_test')
    os.environ.setdefault('DEBUG', 'true')

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)


_early_setup_test_environment()

import copy  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402
from typing import Any, Callable  # noqa: E402
from unittest.mock import AsyncMock, Mock  # noqa: E402

import pytest  # noqa: E402
from pymongo.errors import DuplicateKeyError  # noqa: E402

from evently.platform.database.mongo_setting import MongoConnectionManager  # noqa: E402
from evently.service.listing.driven_adapter.repo.booking_repo_impl import (  # noqa: E402
    BookingRepoImpl,
)
from evently.service.listing.driven_adapter.repo.event_repo_impl import (  # noqa: E402
    EventRepoImpl,
)


# =============================================================================
# In-memory collection
# =============================================================================


def _matches(document: dict[str, Any], query: dict[str, Any]) -> bool:
    for key, condition in query.items():
        value = document.get(key)
        if isinstance(condition, dict) and '$ne' in condition:
            if value == condition['$ne']:
                return False
        elif value != condition:
            return False
    return True


class InMemoryCursor:
    def __init__(self, documents: list[dict[str, Any]]) -> None:
        self._documents = documents

    def sort(self, key: str, direction: int = 1) -> 'InMemoryCursor':
        self._documents.sort(key=lambda document: document[key], reverse=direction < 0)
        return self

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        return self._documents[:length] if length else list(self._documents)


class InMemoryCollection:
    def __init__(self, name: str) -> None:
        self.name = name
        self.documents: list[dict[str, Any]] = []
        self.unique_keys: set[str] = set()
        self.indexes: list[tuple[str, bool]] = []

    def _check_unique(self, candidate: dict[str, Any]) -> None:
        for key in self.unique_keys:
            for document in self.documents:
                if document['_id'] != candidate['_id'] and document.get(key) == candidate.get(key):
                    raise DuplicateKeyError(f'E11000 duplicate key error: {key}', code=11000)

    async def create_index(self, key: str, unique: bool = False) -> str:
        self.indexes.append((key, unique))
        if unique:
            self.unique_keys.add(key)
        return f'{key}_1'

    async def find_one(
        self, query: dict[str, Any], projection: dict[str, Any] | None = None
    ) -> dict[str, Any] | None:
        for document in self.documents:
            if _matches(document, query):
                return copy.deepcopy(document)
        return None

    def find(self, query: dict[str, Any]) -> InMemoryCursor:
        return InMemoryCursor(
            [copy.deepcopy(document) for document in self.documents if _matches(document, query)]
        )

    async def count_documents(self, query: dict[str, Any], limit: int | None = None) -> int:
        count = sum(1 for document in self.documents if _matches(document, query))
        return min(count, limit) if limit else count

    async def insert_one(self, document: dict[str, Any]) -> Mock:
        self._check_unique(document)
        self.documents.append(copy.deepcopy(document))
        return Mock(inserted_id=document['_id'])

    async def find_one_and_update(
        self, query: dict[str, Any], update: dict[str, Any], return_document: bool = False
    ) -> dict[str, Any] | None:
        for index, document in enumerate(self.documents):
            if _matches(document, query):
                updated = document | copy.deepcopy(update['$set'])
                self._check_unique(updated)
                self.documents[index] = updated
                return copy.deepcopy(updated if return_document else document)
        return None


class InMemoryDatabase:
    def __init__(self, name: str = 'evently_test') -> None:
        self.name = name
        self.collections: dict[str, InMemoryCollection] = {}

    def __getitem__(self, name: str) -> InMemoryCollection:
        return self.collections.setdefault(name, InMemoryCollection(name))


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def mongo_database() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture
def mongo_client_factory(mongo_database):
    """Stands in for AsyncMongoClient: ping succeeds, default database is in-memory."""
    client = Mock()
    client.admin.command = AsyncMock(return_value={'ok': 1.0})
    client.get_default_database = Mock(return_value=mongo_database)
    client.close = AsyncMock()
    return Mock(return_value=client)


@pytest.fixture
def connection_manager(mongo_client_factory) -> MongoConnectionManager:
    return MongoConnectionManager(
        uri='mongodb://localhost:27017/evently_test',
        database_name='evently_test',
        client_factory=mongo_client_factory,
    )


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Deterministic clock: each call is one second after the previous one."""
    start = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
    ticks = iter(range(1_000_000))

    def _now() -> datetime:
        return start + timedelta(seconds=next(ticks))

    return _now


@pytest.fixture
def event_repo(connection_manager, clock) -> EventRepoImpl:
    return EventRepoImpl(connection_manager=connection_manager, clock=clock)


@pytest.fixture
def booking_repo(connection_manager, event_repo, clock) -> BookingRepoImpl:
    return BookingRepoImpl(connection_manager=connection_manager, event_repo=event_repo, clock=clock)


@pytest.fixture
def event_fields() -> dict[str, Any]:
    return {
        'title': 'PyCon Lisbon 2024',
        'description': 'Three days of talks and sprints',
        'overview': 'The yearly Python gathering',
        'image': '/images/pycon.png',
        'venue': 'Centro de Congressos',
        'location': 'Lisbon, Portugal',
        'date': '2024-02-29',
        'time': '9:30',
        'mode': 'offline',
        'audience': 'Developers',
        'agenda': ['Keynote', 'Talks', 'Sprints'],
        'organizer': 'Python Portugal',
        'tags': ['python', 'conference'],
    }
