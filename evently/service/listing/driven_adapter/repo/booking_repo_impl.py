"""
Booking Repository Implementation - MongoDB

MongoDB has no foreign keys, so a booking's eventId is checked against the
events collection before every write that sets it. The check and the write are
two separate operations: an event deleted in between leaves a dangling booking.
"""

from datetime import datetime, timezone
from typing import Callable, List

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection

from evently.platform.database.mongo_setting import MongoConnectionManager
from evently.platform.exception.exceptions import NotFoundError, ReferentialIntegrityError
from evently.platform.logging.loguru_io import Logger
from evently.platform.types.object_id_types import parse_object_id
from evently.service.listing.app.interface.i_booking_repo import IBookingRepo
from evently.service.listing.app.interface.i_event_repo import IEventRepo
from evently.service.listing.domain.entity.booking_entity import BookingEntity
from evently.service.listing.domain.schema.booking_schema import BookingDocument
from evently.service.listing.domain.schema.document_schema import validate_document


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BookingRepoImpl(IBookingRepo):
    COLLECTION = 'bookings'

    def __init__(
        self,
        *,
        connection_manager: MongoConnectionManager,
        event_repo: IEventRepo,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.connection_manager = connection_manager
        self.event_repo = event_repo
        self._clock = clock

    async def _collection(self) -> AsyncCollection:
        database = await self.connection_manager.acquire()
        return database[self.COLLECTION]

    async def _ensure_event_exists(self, event_id: ObjectId) -> None:
        if not await self.event_repo.exists(event_id=str(event_id)):
            raise ReferentialIntegrityError(
                f'Event with ID {event_id} does not exist. Cannot create booking.'
            )

    @Logger.io
    async def create(self, *, event_id: str, email: str) -> BookingEntity:
        event_object_id = parse_object_id(event_id, field='event id')
        await self._ensure_event_exists(event_object_id)

        document = validate_document(BookingDocument, {'email': email})

        now = self._clock()
        record = {
            '_id': ObjectId(),
            'eventId': event_object_id,
            'email': document.email,
            'createdAt': now,
            'updatedAt': now,
        }
        collection = await self._collection()
        await collection.insert_one(record)

        Logger.base.info(f'✅ [BOOKING] Booked event {event_object_id}')
        return BookingEntity.from_document(record)

    @Logger.io
    async def reassign_event(self, *, booking_id: str, event_id: str) -> BookingEntity:
        booking_object_id = parse_object_id(booking_id, field='booking id')
        event_object_id = parse_object_id(event_id, field='event id')

        collection = await self._collection()
        existing = await collection.find_one({'_id': booking_object_id})
        if existing is None:
            raise NotFoundError(f'Booking with ID {booking_id} not found')
        if existing['eventId'] == event_object_id:
            return BookingEntity.from_document(existing)

        await self._ensure_event_exists(event_object_id)

        updated = await collection.find_one_and_update(
            {'_id': booking_object_id},
            {'$set': {'eventId': event_object_id, 'updatedAt': self._clock()}},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise NotFoundError(f'Booking with ID {booking_id} not found')
        return BookingEntity.from_document(updated)

    @Logger.io(truncate_content=True)
    async def list_by_event(self, *, event_id: str) -> List[BookingEntity]:
        event_object_id = parse_object_id(event_id, field='event id')
        collection = await self._collection()
        documents = await collection.find({'eventId': event_object_id}).sort('createdAt', 1).to_list()
        return [BookingEntity.from_document(document) for document in documents]

    @Logger.io
    async def ensure_indexes(self) -> None:
        collection = await self._collection()
        await collection.create_index('eventId')
