"""
Booking Repository Interface
"""

from abc import ABC, abstractmethod
from typing import List

from evently.service.listing.domain.entity.booking_entity import BookingEntity


class IBookingRepo(ABC):
    @abstractmethod
    async def create(self, *, event_id: str, email: str) -> BookingEntity:
        """Insert a booking for an existing event. Raises ReferentialIntegrityError."""
        pass

    @abstractmethod
    async def reassign_event(self, *, booking_id: str, event_id: str) -> BookingEntity:
        """Point a booking at another event, re-running the existence check."""
        pass

    @abstractmethod
    async def list_by_event(self, *, event_id: str) -> List[BookingEntity]:
        pass

    @abstractmethod
    async def ensure_indexes(self) -> None:
        pass
