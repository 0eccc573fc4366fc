from typing import Any, List

from pydantic import Field, field_validator

from evently.service.listing.domain.enum.event_mode import EventMode
from evently.service.listing.domain.schema.document_schema import DocumentSchema


class EventDocument(DocumentSchema):
    """Base constraints every stored event satisfies, before normalization."""

    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    overview: str = Field(min_length=1)
    image: str = Field(min_length=1)
    venue: str = Field(min_length=1)
    location: str = Field(min_length=1)
    date: str = Field(min_length=1)
    time: str = Field(min_length=1)
    mode: EventMode
    audience: str = Field(min_length=1)
    agenda: List[str] = Field(min_length=1)
    organizer: str = Field(min_length=1)
    tags: List[str] = Field(min_length=1)

    @field_validator('mode', mode='before')
    @classmethod
    def lowercase_mode(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v


# Keys a caller may write; slug and timestamps are system-managed
EVENT_WRITABLE_FIELDS = frozenset(EventDocument.model_fields)
