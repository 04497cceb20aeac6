"""Opportunity approval workflow.

Submissions always start ``pending``; only admins move them on. Rows with
no status predate the workflow and count as published.
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.exceptions import NotFoundError, ProblemDetailError
from portal.core.policy import Action, Actor, authorize, effective_opportunity_status, enforce
from portal.core.states import OpportunityStatus
from portal.models.opportunity import Opportunity
from portal.schemas.opportunity import OpportunityCreate
from portal.services.scoping import pending_opportunities_query, public_opportunities_query

logger = logging.getLogger(__name__)

OPPORTUNITY_TRANSITIONS: dict[OpportunityStatus, list[OpportunityStatus]] = {
    OpportunityStatus.PENDING: [OpportunityStatus.APPROVED, OpportunityStatus.REJECTED],
    OpportunityStatus.APPROVED: [],
    OpportunityStatus.REJECTED: [],
}


def _validate_transition(current: OpportunityStatus, requested: OpportunityStatus) -> None:
    """Raise 422 if the transition is not allowed."""
    allowed = OPPORTUNITY_TRANSITIONS.get(current, [])
    if requested not in allowed:
        raise ProblemDetailError(
            422,
            "Invalid status transition",
            f"Cannot transition opportunity from '{current}' to '{requested}'; "
            f"allowed: {[s.value for s in allowed]}",
        )


async def create_opportunity(
    db: AsyncSession, actor: Actor, body: OpportunityCreate
) -> Opportunity:
    data = body.model_dump()
    data["type"] = body.type.value
    opportunity = Opportunity(
        **data,
        created_by=actor.user_id,
        status=OpportunityStatus.PENDING.value,
    )
    db.add(opportunity)
    await db.flush()
    logger.info("Opportunity %s submitted by %s", opportunity.id, actor.user_id)
    return opportunity


async def list_published(
    db: AsyncSession, *, type: str | None = None, search: str | None = None
) -> list[Opportunity]:
    result = await db.execute(public_opportunities_query(type=type, search=search))
    return list(result.scalars().all())


async def list_pending(db: AsyncSession, actor: Actor) -> list[Opportunity]:
    enforce(actor, Action.REVIEW_OPPORTUNITY)
    result = await db.execute(pending_opportunities_query())
    return list(result.scalars().all())


async def get_visible(db: AsyncSession, actor: Actor, opportunity_id: uuid.UUID) -> Opportunity:
    opportunity = await db.get(Opportunity, opportunity_id)
    # Unpublished submissions are invisible to everyone but the creator and admins
    if opportunity is None or not authorize(actor, Action.VIEW_OPPORTUNITY, opportunity):
        raise NotFoundError("Opportunity")
    return opportunity


async def review(
    db: AsyncSession,
    actor: Actor,
    opportunity_id: uuid.UUID,
    requested: OpportunityStatus,
) -> Opportunity:
    enforce(actor, Action.REVIEW_OPPORTUNITY)

    result = await db.execute(select(Opportunity).where(Opportunity.id == opportunity_id))
    opportunity = result.scalar_one_or_none()
    if opportunity is None:
        raise NotFoundError("Opportunity")

    current = effective_opportunity_status(opportunity.status)
    if requested == current:
        return opportunity
    _validate_transition(current, requested)

    opportunity.status = requested.value
    await db.flush()
    logger.info("Opportunity %s %s by %s", opportunity_id, requested.value, actor.user_id)
    return opportunity


async def delete_opportunity(db: AsyncSession, actor: Actor, opportunity_id: uuid.UUID) -> None:
    opportunity = await db.get(Opportunity, opportunity_id)
    if opportunity is None:
        raise NotFoundError("Opportunity")
    enforce(actor, Action.DELETE_OPPORTUNITY, opportunity)

    await db.delete(opportunity)
    await db.flush()
    logger.info("Opportunity %s deleted by %s", opportunity_id, actor.user_id)
