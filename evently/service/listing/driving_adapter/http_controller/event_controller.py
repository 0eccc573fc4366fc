from typing import Any, Dict, List

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Body, Depends, status

from evently.platform.config.di import Container
from evently.service.listing.app.interface.i_booking_repo import IBookingRepo
from evently.service.listing.app.interface.i_event_repo import IEventRepo
from evently.service.listing.driving_adapter.schema.booking_schema import BookingResponse
from evently.service.listing.driving_adapter.schema.event_schema import EventResponse


router = APIRouter()


@router.get('', status_code=status.HTTP_200_OK)
@inject
async def list_events(
    event_repo: IEventRepo = Depends(Provide[Container.event_repo]),
) -> List[EventResponse]:
    events = await event_repo.list_events()
    return [EventResponse.model_validate(event) for event in events]


@router.get('/{slug}', status_code=status.HTTP_200_OK)
@inject
async def get_event_by_slug(
    slug: str,
    event_repo: IEventRepo = Depends(Provide[Container.event_repo]),
) -> EventResponse:
    event = await event_repo.find_by_slug(slug=slug)
    return EventResponse.model_validate(event)


@router.post('', status_code=status.HTTP_201_CREATED)
@inject
async def create_event(
    fields: Dict[str, Any] = Body(...),
    event_repo: IEventRepo = Depends(Provide[Container.event_repo]),
) -> EventResponse:
    event = await event_repo.create(fields=fields)
    return EventResponse.model_validate(event)


@router.patch('/{event_id}', status_code=status.HTTP_200_OK)
@inject
async def update_event(
    event_id: str,
    fields: Dict[str, Any] = Body(...),
    event_repo: IEventRepo = Depends(Provide[Container.event_repo]),
) -> EventResponse:
    event = await event_repo.update(event_id=event_id, fields=fields)
    return EventResponse.model_validate(event)


@router.get('/{event_id}/bookings', status_code=status.HTTP_200_OK)
@inject
async def list_event_bookings(
    event_id: str,
    booking_repo: IBookingRepo = Depends(Provide[Container.booking_repo]),
) -> List[BookingResponse]:
    bookings = await booking_repo.list_by_event(event_id=event_id)
    return [BookingResponse.model_validate(booking) for booking in bookings]
