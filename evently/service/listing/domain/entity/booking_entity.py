from datetime import datetime
from typing import Any, Mapping, Self

import attrs


@attrs.define(frozen=True)
class BookingEntity:
    id: str
    event_id: str
    email: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> Self:
        return cls(
            id=str(document['_id']),
            event_id=str(document['eventId']),
            email=document['email'],
            created_at=document.get('createdAt'),
            updated_at=document.get('updatedAt'),
        )
