import re

from pydantic import field_validator

from evently.service.listing.domain.schema.document_schema import DocumentSchema


_EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


class BookingDocument(DocumentSchema):
    email: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.lower()
        if not _EMAIL_PATTERN.match(v):
            raise ValueError('Please provide a valid email address')
        return v
