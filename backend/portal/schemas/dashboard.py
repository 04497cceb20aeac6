from pydantic import BaseModel

from portal.schemas.event import EventResponse
from portal.schemas.profile import ProfileResponse


class DashboardResponse(BaseModel):
    profile: ProfileResponse
    events: list[EventResponse]
    opportunities_count: int
    pending_approvals: int | None = None
    can_create_events: bool = False
