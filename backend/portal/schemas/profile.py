"""Profile setup/edit and directory schemas."""

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from portal.core.states import MembershipType
from portal.schemas.common import normalize_tags, validate_http_url


class SocialLinks(BaseModel):
    linkedin: str = ""
    twitter: str = ""
    instagram: str = ""

    @field_validator("linkedin", "twitter", "instagram")
    @classmethod
    def validate_link(cls, v: str) -> str:
        return validate_http_url(v) or ""


class ProfileSetup(BaseModel):
    """First-time profile completion. Role and statuses are never accepted."""

    full_name: str = Field(..., min_length=2, max_length=255)
    phone_number: str | None = Field(None, max_length=50)
    school: str | None = Field(None, max_length=255)
    chapter_id: uuid.UUID | None = None
    major: str = Field(..., min_length=2, max_length=255)
    interests: list[str] = Field(..., min_length=1)
    affiliations: list[str] = Field(default_factory=list)
    membership_type: MembershipType = MembershipType.INDIVIDUAL
    join_date: date = Field(default_factory=date.today)
    chapter_join_date: date | None = None
    intake_cohort: str | None = Field(None, max_length=100)
    skills: str | None = Field(None, max_length=1000)
    social_links: SocialLinks = Field(default_factory=SocialLinks)
    emergency_contact_name: str | None = Field(None, max_length=255)
    emergency_contact_phone: str | None = Field(None, max_length=50)

    @field_validator("interests", "affiliations", mode="before")
    @classmethod
    def split_tags(cls, v):
        return normalize_tags(v)


class ProfileUpdate(BaseModel):
    """Owner edits. Email, role and workflow states are not editable here."""

    full_name: str | None = Field(None, min_length=2, max_length=255)
    phone_number: str | None = Field(None, max_length=50)
    school: str | None = Field(None, max_length=255)
    chapter_id: uuid.UUID | None = None
    major: str | None = Field(None, min_length=2, max_length=255)
    interests: list[str] | None = None
    affiliations: list[str] | None = None
    membership_type: MembershipType | None = None
    chapter_join_date: date | None = None
    intake_cohort: str | None = Field(None, max_length=100)
    skills: str | None = Field(None, max_length=1000)
    social_links: SocialLinks | None = None
    emergency_contact_name: str | None = Field(None, max_length=255)
    emergency_contact_phone: str | None = Field(None, max_length=50)

    @field_validator("interests", "affiliations", mode="before")
    @classmethod
    def split_tags(cls, v):
        return None if v is None else normalize_tags(v)


class ProfileResponse(BaseModel):
    id: str
    email: str
    full_name: str
    phone_number: str | None = None
    school: str | None = None
    major: str | None = None
    interests: list[str] = []
    affiliations: list[str] = []
    skills: str | None = None
    social_links: dict = {}
    emergency_contact_name: str | None = None
    emergency_contact_phone: str | None = None
    membership_type: str
    membership_status: str
    role: str
    chapter_id: uuid.UUID | None = None
    chapter_name: str | None = None
    chapter_approval_status: str
    join_date: date | None = None
    chapter_join_date: date | None = None
    intake_cohort: str | None = None
    profile_completed: bool
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class MemberListItem(BaseModel):
    id: str
    full_name: str
    email: str
    school: str | None = None
    major: str | None = None
    interests: list[str] = []
    membership_type: str
    membership_status: str
    role: str
    chapter_id: uuid.UUID | None = None
    chapter_name: str | None = None

    model_config = {"from_attributes": True}
