from datetime import datetime
from typing import Any, Mapping, Self

import attrs

from evently.service.listing.domain.enum.event_mode import EventMode


@attrs.define(frozen=True)
class EventEntity:
    """Read projection of a stored event document."""

    id: str
    title: str
    slug: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str
    time: str
    mode: EventMode
    audience: str
    agenda: tuple[str, ...] = attrs.field(converter=tuple)
    organizer: str
    tags: tuple[str, ...] = attrs.field(converter=tuple)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> Self:
        return cls(
            id=str(document['_id']),
            title=document['title'],
            slug=document['slug'],
            description=document['description'],
            overview=document['overview'],
            image=document['image'],
            venue=document['venue'],
            location=document['location'],
            date=document['date'],
            time=document['time'],
            mode=EventMode(document['mode']),
            audience=document['audience'],
            agenda=document['agenda'],
            organizer=document['organizer'],
            tags=document['tags'],
            created_at=document.get('createdAt'),
            updated_at=document.get('updatedAt'),
        )
