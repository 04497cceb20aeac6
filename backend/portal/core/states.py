"""Closed vocabularies for roles, workflow states and record categories.

Each workflow concern gets its own explicit state; "no request" is a state
of its own (``ChapterLinkState.NONE``) rather than a missing field.
"""

from enum import StrEnum


class Role(StrEnum):
    MEMBER = "member"
    MODERATOR = "moderator"
    ADMIN = "admin"


class MembershipType(StrEnum):
    INDIVIDUAL = "Individual Member"
    CHAPTER = "Chapter Member"
    FELLOW = "Fellow"
    ALUMNI = "Alumni"


class MembershipState(StrEnum):
    PENDING = "Pending"
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    INVALID = "Invalid"
    REJECTED = "Rejected"


class ChapterLinkState(StrEnum):
    NONE = "none"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ChapterStatus(StrEnum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    PENDING = "Pending"


class OpportunityStatus(StrEnum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# Rows written before opportunities had a status column are published.
LEGACY_OPPORTUNITY_STATUS = OpportunityStatus.APPROVED


class OpportunityType(StrEnum):
    INTERNSHIP = "Internship"
    FELLOWSHIP = "Fellowship"
    JOB = "Job"
    SCHOLARSHIP = "Scholarship"
    CONFERENCE = "Conference"


class ResourceCategory(StrEnum):
    GOVERNANCE = "Governance & Organizational"
    CHAPTER_DEVELOPMENT = "Chapter Development"
    MEMBERSHIP_EXPERIENCE = "Membership Experience"
    CAREER_READINESS = "Career Readiness"
    OTHER = "Other"


class ResourceFileType(StrEnum):
    PDF = "PDF"
    DOCX = "DOCX"
    XLSX = "XLSX"
    ZIP = "ZIP"
    LINK = "LINK"


class Decision(StrEnum):
    APPROVE = "approve"
    REJECT = "reject"


class MetadataKey(StrEnum):
    TAGS = "tags"
    AFFILIATIONS = "affiliations"


def sql_in(enum_cls: type[StrEnum]) -> str:
    """Render an enum's values as a SQL ``IN (...)`` list for CHECK constraints."""
    return ", ".join(f"'{member.value}'" for member in enum_cls)
