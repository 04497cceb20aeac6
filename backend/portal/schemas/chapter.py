"""Chapter request/response schemas."""

import uuid
from datetime import date, datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from portal.core.states import ChapterStatus
from portal.schemas.common import validate_http_url


class ChapterCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    institution: str = Field(..., min_length=2, max_length=255)
    location: str | None = Field(None, max_length=255)
    president_name: str = Field(..., min_length=2, max_length=255)
    president_email: EmailStr
    email: EmailStr
    founded_date: date | None = None
    status: ChapterStatus
    logo_url: str | None = None

    @field_validator("logo_url")
    @classmethod
    def validate_logo(cls, v: str | None) -> str | None:
        return validate_http_url(v) or None


class ChapterUpdate(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=255)
    institution: str | None = Field(None, min_length=2, max_length=255)
    location: str | None = Field(None, max_length=255)
    president_name: str | None = Field(None, min_length=2, max_length=255)
    president_email: EmailStr | None = None
    email: EmailStr | None = None
    founded_date: date | None = None
    status: ChapterStatus | None = None
    logo_url: str | None = None

    @field_validator("logo_url")
    @classmethod
    def validate_logo(cls, v: str | None) -> str | None:
        return validate_http_url(v) or None


class ChapterResponse(BaseModel):
    id: uuid.UUID
    name: str
    institution: str
    location: str | None = None
    president_name: str
    president_email: str
    email: str
    founded_date: date | None = None
    status: str
    logo_url: str | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
