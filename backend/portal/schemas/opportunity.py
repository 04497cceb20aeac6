"""Opportunity request/response schemas."""

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field, computed_field, field_validator

from portal.core.policy import effective_opportunity_status
from portal.core.states import OpportunityStatus, OpportunityType
from portal.schemas.common import normalize_tags, validate_http_url


class OpportunityCreate(BaseModel):
    """Submission form. A client-supplied ``status`` is ignored."""

    title: str = Field(..., min_length=5, max_length=255)
    organization: str = Field(..., min_length=2, max_length=255)
    type: OpportunityType
    location: str = Field(..., min_length=2, max_length=255)
    deadline: date
    description: str = Field(..., min_length=20)
    link: str = Field(..., max_length=2048)
    tags: list[str] = Field(default_factory=list)

    @field_validator("deadline")
    @classmethod
    def deadline_in_future(cls, v: date) -> date:
        if v <= date.today():
            raise ValueError("Deadline must be in the future")
        return v

    @field_validator("link")
    @classmethod
    def validate_link(cls, v: str) -> str:
        if not v:
            raise ValueError("Must be a valid URL")
        return validate_http_url(v)

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v):
        return normalize_tags(v)


class OpportunityResponse(BaseModel):
    id: uuid.UUID
    title: str
    organization: str
    type: str
    location: str
    deadline: date
    description: str
    link: str
    tags: list[str] = []
    status: str | None = None
    created_by: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def effective_status(self) -> OpportunityStatus:
        return effective_opportunity_status(self.status)
