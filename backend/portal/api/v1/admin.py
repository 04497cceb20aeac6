"""Admin console: approval queue, member overrides, opportunity review.

Moderators reach the member and chapter screens for their own chapter only;
opportunity review is admin-only.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.dependencies import get_actor, get_db
from portal.core.policy import Action, Actor, enforce
from portal.models.user import User
from portal.schemas.admin import (
    ApprovalQueueItem,
    DecisionRequest,
    MemberAdminUpdate,
    StatusTransitionRequest,
)
from portal.schemas.chapter import ChapterResponse
from portal.schemas.opportunity import OpportunityResponse
from portal.schemas.profile import ProfileResponse
from portal.services import membership, opportunities, profiles
from portal.services.scoping import chapter_names, managed_chapters_query

router = APIRouter()


def _queue_item(user: User, names: dict) -> ApprovalQueueItem:
    return ApprovalQueueItem(
        id=user.id,
        full_name=user.full_name,
        email=user.email,
        school=user.school,
        membership_type=user.membership_type,
        membership_status=user.membership_status,
        chapter_id=user.chapter_id,
        chapter_name=names.get(user.chapter_id),
        chapter_approval_status=user.chapter_approval_status,
        is_new_member=membership.has_pending_membership(user),
        is_chapter_request=membership.has_pending_chapter_request(user),
    )


@router.get("/approvals", response_model=list[ApprovalQueueItem])
async def list_approvals(
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> list[ApprovalQueueItem]:
    """Pending signups and chapter requests within the caller's scope."""
    users = await membership.list_pending(db, actor)
    names = await chapter_names(db, (u.chapter_id for u in users))
    return [_queue_item(u, names) for u in users]


@router.post("/approvals/{user_id}", response_model=ProfileResponse)
async def decide_approval(
    user_id: str,
    body: DecisionRequest,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    user = await membership.decide(db, actor, user_id, body.decision)
    return await profiles.to_profile_response(db, user)


@router.patch("/members/{user_id}", response_model=ProfileResponse)
async def edit_member(
    user_id: str,
    body: MemberAdminUpdate,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    user = await membership.edit_member(db, actor, user_id, body)
    return await profiles.to_profile_response(db, user)


@router.get("/chapters", response_model=list[ChapterResponse])
async def list_managed_chapters(
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> list[ChapterResponse]:
    enforce(actor, Action.ACCESS_CONSOLE)
    result = await db.execute(managed_chapters_query(actor))
    return [ChapterResponse.model_validate(c) for c in result.scalars().all()]


@router.get("/opportunities/pending", response_model=list[OpportunityResponse])
async def list_pending_opportunities(
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> list[OpportunityResponse]:
    items = await opportunities.list_pending(db, actor)
    return [OpportunityResponse.model_validate(o) for o in items]


@router.patch("/opportunities/{opportunity_id}/status", response_model=OpportunityResponse)
async def transition_opportunity(
    opportunity_id: uuid.UUID,
    body: StatusTransitionRequest,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> OpportunityResponse:
    """Approve or reject a pending opportunity. Decisions are final."""
    opportunity = await opportunities.review(db, actor, opportunity_id, body.status)
    return OpportunityResponse.model_validate(opportunity)
