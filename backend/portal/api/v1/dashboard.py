"""Member dashboard: profile summary, visible events, opportunity count."""

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.dependencies import get_actor, get_db, require_onboarded
from portal.core.policy import Action, Actor, authorize
from portal.models.user import User
from portal.schemas.dashboard import DashboardResponse
from portal.schemas.event import EventResponse
from portal.services import membership, profiles
from portal.services.scoping import events_query, public_opportunities_query

router = APIRouter()


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    user: User = Depends(require_onboarded),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> DashboardResponse:
    events = (await db.execute(events_query(actor))).scalars().all()
    opportunities_count = (
        await db.execute(
            select(func.count()).select_from(public_opportunities_query().subquery())
        )
    ).scalar_one()

    pending = None
    if authorize(actor, Action.ACCESS_CONSOLE):
        pending = await membership.count_pending(db, actor)

    return DashboardResponse(
        profile=await profiles.to_profile_response(db, user),
        events=[EventResponse.model_validate(e) for e in events],
        opportunities_count=opportunities_count,
        pending_approvals=pending,
        can_create_events=authorize(actor, Action.CREATE_EVENT),
    )
