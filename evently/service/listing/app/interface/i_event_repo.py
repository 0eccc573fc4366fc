"""
Event Repository Interface
"""

from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional

from evently.service.listing.domain.entity.event_entity import EventEntity


class IEventRepo(ABC):
    @abstractmethod
    async def create(self, *, fields: Mapping[str, Any]) -> EventEntity:
        """Validate, normalize and insert a new event."""
        pass

    @abstractmethod
    async def update(self, *, event_id: str, fields: Mapping[str, Any]) -> EventEntity:
        """Apply a partial update; only the written fields are re-normalized."""
        pass

    @abstractmethod
    async def find_by_slug(self, *, slug: str) -> EventEntity:
        """Case- and whitespace-insensitive lookup. Raises NotFoundError."""
        pass

    @abstractmethod
    async def get_by_id(self, *, event_id: str) -> Optional[EventEntity]:
        pass

    @abstractmethod
    async def exists(self, *, event_id: str) -> bool:
        pass

    @abstractmethod
    async def list_events(self) -> List[EventEntity]:
        """All events, newest first."""
        pass

    @abstractmethod
    async def ensure_indexes(self) -> None:
        pass
