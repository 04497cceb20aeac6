"""Event schemas."""

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field


class EventCreate(BaseModel):
    title: str = Field(..., min_length=5, max_length=255)
    event_date: date
    event_time: str = Field(..., min_length=1, max_length=32)
    location: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    # Defaults to the creator's own chapter when omitted; null means network-wide
    chapter_id: uuid.UUID | None = None


class EventResponse(BaseModel):
    id: uuid.UUID
    title: str
    event_date: date
    event_time: str
    location: str
    description: str | None = None
    created_by: str
    chapter_id: uuid.UUID | None = None
    chapter_name: str | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
