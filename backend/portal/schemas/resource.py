"""Resource library schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from portal.core.states import ResourceCategory, ResourceFileType
from portal.schemas.common import normalize_tags, validate_http_url


class ResourceCreate(BaseModel):
    title: str = Field(..., min_length=5, max_length=255)
    category: ResourceCategory = ResourceCategory.OTHER
    file_type: ResourceFileType
    url: str = Field(..., min_length=1, max_length=2048)
    size_label: str | None = Field(None, max_length=32)
    tags: list[str] = Field(default_factory=list)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return validate_http_url(v)

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v):
        return normalize_tags(v)


class ResourceResponse(BaseModel):
    id: uuid.UUID
    title: str
    category: str
    file_type: str
    url: str
    size_label: str | None = None
    tags: list[str] = []
    uploaded_by: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
