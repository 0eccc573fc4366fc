"""
Event Repository Implementation - MongoDB

Every write runs the same fixed pipeline before anything is committed:
schema validation -> slug derivation -> date normalization -> time normalization.
A failure in any step aborts the write, so a failed create/update leaves no trace.
"""

from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import DuplicateKeyError

from evently.platform.database.mongo_setting import MongoConnectionManager
from evently.platform.exception.exceptions import (
    DuplicateSlugError,
    NotFoundError,
    ValidationError,
)
from evently.platform.logging.loguru_io import Logger
from evently.platform.types.object_id_types import parse_object_id
from evently.service.listing.app.interface.i_event_repo import IEventRepo
from evently.service.listing.domain.entity.event_entity import EventEntity
from evently.service.listing.domain.event_normalizer import (
    disambiguate_slug,
    normalize_date,
    normalize_time,
    slugify,
)
from evently.service.listing.domain.schema.document_schema import validate_document
from evently.service.listing.domain.schema.event_schema import (
    EVENT_WRITABLE_FIELDS,
    EventDocument,
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EventRepoImpl(IEventRepo):
    COLLECTION = 'events'

    def __init__(
        self,
        *,
        connection_manager: MongoConnectionManager,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.connection_manager = connection_manager
        self._clock = clock

    async def _collection(self) -> AsyncCollection:
        database = await self.connection_manager.acquire()
        return database[self.COLLECTION]

    @staticmethod
    def _derive_slug(title: str) -> str:
        slug = slugify(title)
        if not slug:
            raise ValidationError('Title must contain at least one letter or digit')
        return slug

    @Logger.io
    async def create(self, *, fields: Mapping[str, Any]) -> EventEntity:
        document = validate_document(EventDocument, fields)
        collection = await self._collection()

        # New documents never get a suffixed slug: a taken slug is rejected outright
        slug = self._derive_slug(document.title)
        if await collection.find_one({'slug': slug}, {'_id': 1}) is not None:
            raise DuplicateSlugError(slug)

        date = normalize_date(document.date)
        time = normalize_time(document.time)

        now = self._clock()
        record = document.model_dump(mode='json') | {
            '_id': ObjectId(),
            'slug': slug,
            'date': date,
            'time': time,
            'createdAt': now,
            'updatedAt': now,
        }
        try:
            await collection.insert_one(record)
        except DuplicateKeyError as e:
            raise DuplicateSlugError(slug) from e

        Logger.base.info(f'✅ [EVENT] Created event "{slug}"')
        return EventEntity.from_document(record)

    @Logger.io
    async def update(self, *, event_id: str, fields: Mapping[str, Any]) -> EventEntity:
        object_id = parse_object_id(event_id, field='event id')
        collection = await self._collection()

        existing = await collection.find_one({'_id': object_id})
        if existing is None:
            raise NotFoundError(f'Event with ID {event_id} not found')

        changes = {key: value for key, value in fields.items() if key in EVENT_WRITABLE_FIELDS}
        if not changes:
            return EventEntity.from_document(existing)

        # Required-field checks apply to the document as it will look after the write
        merged = {key: existing.get(key) for key in EVENT_WRITABLE_FIELDS} | changes
        document = validate_document(EventDocument, merged)
        written: dict[str, Any] = document.model_dump(mode='json', include=set(changes))

        now = self._clock()
        if 'title' in changes:
            slug = self._derive_slug(document.title)
            taken = await collection.find_one(
                {'slug': slug, '_id': {'$ne': object_id}}, {'_id': 1}
            )
            if taken is not None:
                slug = disambiguate_slug(slug, now=now)
                Logger.base.info(f'🔀 [EVENT] Slug taken, using "{slug}" for event {event_id}')
            written['slug'] = slug
        if 'date' in changes:
            written['date'] = normalize_date(document.date)
        if 'time' in changes:
            written['time'] = normalize_time(document.time)
        written['updatedAt'] = now

        try:
            updated = await collection.find_one_and_update(
                {'_id': object_id},
                {'$set': written},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as e:
            raise DuplicateSlugError(written.get('slug', existing['slug'])) from e

        if updated is None:
            raise NotFoundError(f'Event with ID {event_id} not found')
        return EventEntity.from_document(updated)

    @Logger.io
    async def find_by_slug(self, *, slug: str) -> EventEntity:
        key = slug.lower().strip() if isinstance(slug, str) else ''
        if not key:
            raise ValidationError('Invalid slug parameter')

        collection = await self._collection()
        document = await collection.find_one({'slug': key})
        if document is None:
            raise NotFoundError(f'Event with slug "{slug}" not found')
        return EventEntity.from_document(document)

    @Logger.io
    async def get_by_id(self, *, event_id: str) -> Optional[EventEntity]:
        object_id = parse_object_id(event_id, field='event id')
        collection = await self._collection()
        document = await collection.find_one({'_id': object_id})
        return EventEntity.from_document(document) if document is not None else None

    @Logger.io
    async def exists(self, *, event_id: str) -> bool:
        object_id = parse_object_id(event_id, field='event id')
        collection = await self._collection()
        return await collection.count_documents({'_id': object_id}, limit=1) > 0

    @Logger.io(truncate_content=True)
    async def list_events(self) -> List[EventEntity]:
        collection = await self._collection()
        documents = await collection.find({}).sort('createdAt', -1).to_list()
        return [EventEntity.from_document(document) for document in documents]

    @Logger.io
    async def ensure_indexes(self) -> None:
        collection = await self._collection()
        await collection.create_index('slug', unique=True)
