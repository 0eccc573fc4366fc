from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class BookingCreateRequest(BaseModel):
    # Format checks belong to the repository; the request only has to carry the values
    event_id: str
    email: str


class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    event_id: str
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
