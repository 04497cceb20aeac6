"""Actor-scoped query builders.

Every list read in the API starts from one of these, so the visibility
rules in ``portal.core.policy`` apply the same way on every screen.
"""

import uuid
from collections.abc import Iterable

from sqlalchemy import Select, String, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.policy import (
    Actor,
    chapter_management_scope,
    event_visibility,
    member_management_scope,
    member_visibility,
    published_opportunity,
    resource_visibility,
)
from portal.core.states import ChapterLinkState, MembershipState, OpportunityStatus
from portal.models.chapter import Chapter
from portal.models.event import Event
from portal.models.opportunity import Opportunity
from portal.models.resource import Resource
from portal.models.user import User

UNKNOWN_CHAPTER = "Unknown chapter"


def members_query(
    actor: Actor,
    *,
    search: str | None = None,
    chapter_id: uuid.UUID | None = None,
    membership_type: str | None = None,
) -> Select:
    stmt = select(User).where(member_visibility(actor)).order_by(User.full_name.asc())
    if search:
        term = f"%{search.strip().lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(User.full_name).like(term),
                func.lower(User.email).like(term),
                func.lower(func.coalesce(User.school, "")).like(term),
            )
        )
    if chapter_id is not None:
        stmt = stmt.where(User.chapter_id == chapter_id)
    if membership_type:
        stmt = stmt.where(User.membership_type == membership_type)
    return stmt


def pending_members_query(actor: Actor) -> Select:
    """Approval queue: new signups and chapter join/transfer requests."""
    return (
        select(User)
        .where(
            member_management_scope(actor),
            User.profile_completed.is_(True),
            or_(
                User.membership_status == MembershipState.PENDING.value,
                User.chapter_approval_status == ChapterLinkState.PENDING.value,
            ),
        )
        .order_by(User.created_at.asc())
    )


def managed_chapters_query(actor: Actor) -> Select:
    return (
        select(Chapter)
        .where(chapter_management_scope(actor, Chapter.id))
        .order_by(Chapter.name.asc())
    )


def public_opportunities_query(
    *, type: str | None = None, search: str | None = None
) -> Select:
    stmt = (
        select(Opportunity)
        .where(published_opportunity())
        .order_by(Opportunity.deadline.asc(), Opportunity.created_at.desc())
    )
    if type:
        stmt = stmt.where(Opportunity.type == type)
    if search:
        term = f"%{search.strip().lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(Opportunity.title).like(term),
                func.lower(Opportunity.organization).like(term),
                # tags is a JSON list; match against its text form
                func.lower(cast(Opportunity.tags, String)).like(term),
            )
        )
    return stmt


def pending_opportunities_query() -> Select:
    return (
        select(Opportunity)
        .where(Opportunity.status == OpportunityStatus.PENDING.value)
        .order_by(Opportunity.created_at.asc())
    )


def resources_query(actor: Actor, *, category: str | None = None) -> Select:
    stmt = select(Resource).where(resource_visibility(actor)).order_by(Resource.created_at.desc())
    if category:
        stmt = stmt.where(Resource.category == category)
    return stmt


def events_query(actor: Actor) -> Select:
    return (
        select(Event)
        .where(event_visibility(actor))
        .order_by(Event.event_date.asc(), Event.event_time.asc())
    )


async def chapter_names(db: AsyncSession, chapter_ids: Iterable[uuid.UUID | None]) -> dict:
    """Map chapter ids to names; ids of deleted chapters map to UNKNOWN_CHAPTER."""
    wanted = {cid for cid in chapter_ids if cid is not None}
    if not wanted:
        return {}
    result = await db.execute(select(Chapter.id, Chapter.name).where(Chapter.id.in_(wanted)))
    names = {row.id: row.name for row in result}
    return {cid: names.get(cid, UNKNOWN_CHAPTER) for cid in wanted}
