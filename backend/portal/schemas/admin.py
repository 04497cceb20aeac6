"""Admin console request/response schemas."""

import uuid

from pydantic import BaseModel

from portal.core.states import Decision, MembershipState, OpportunityStatus, Role


class DecisionRequest(BaseModel):
    decision: Decision


class ApprovalQueueItem(BaseModel):
    id: str
    full_name: str
    email: str
    school: str | None = None
    membership_type: str
    membership_status: str
    chapter_id: uuid.UUID | None = None
    chapter_name: str | None = None
    chapter_approval_status: str
    is_new_member: bool
    is_chapter_request: bool


class MemberAdminUpdate(BaseModel):
    """Manual override; sending ``chapter_id: null`` clears the chapter."""

    membership_status: MembershipState | None = None
    chapter_id: uuid.UUID | None = None
    role: Role | None = None


class StatusTransitionRequest(BaseModel):
    status: OpportunityStatus
