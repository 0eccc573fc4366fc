from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, status

from evently.platform.config.di import Container
from evently.service.listing.app.interface.i_booking_repo import IBookingRepo
from evently.service.listing.driving_adapter.schema.booking_schema import (
    BookingCreateRequest,
    BookingResponse,
)


router = APIRouter()


@router.post('', status_code=status.HTTP_201_CREATED)
@inject
async def create_booking(
    request: BookingCreateRequest,
    booking_repo: IBookingRepo = Depends(Provide[Container.booking_repo]),
) -> BookingResponse:
    booking = await booking_repo.create(event_id=request.event_id, email=request.email)
    return BookingResponse.model_validate(booking)
