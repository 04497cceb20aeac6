"""Membership approval workflow.

A user can be waiting on two independent decisions: their network
membership (``membership_status = Pending``) and a chapter join or transfer
(``chapter_approval_status = pending``). One approve/reject decision settles
whichever of the two is pending; anything already settled is left alone, so
repeating a decision is a no-op.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.exceptions import HOME_PATH, ForbiddenError, NotFoundError
from portal.core.policy import Action, Actor, enforce
from portal.core.states import ChapterLinkState, Decision, MembershipState
from portal.models.chapter import Chapter
from portal.models.user import User
from portal.schemas.admin import MemberAdminUpdate
from portal.services.scoping import pending_members_query

logger = logging.getLogger(__name__)

MEMBERSHIP_OUTCOMES: dict[Decision, MembershipState] = {
    Decision.APPROVE: MembershipState.ACTIVE,
    Decision.REJECT: MembershipState.REJECTED,
}

CHAPTER_LINK_OUTCOMES: dict[Decision, ChapterLinkState] = {
    Decision.APPROVE: ChapterLinkState.APPROVED,
    Decision.REJECT: ChapterLinkState.REJECTED,
}


def has_pending_membership(user: User) -> bool:
    return user.membership_status == MembershipState.PENDING


def has_pending_chapter_request(user: User) -> bool:
    return user.chapter_approval_status == ChapterLinkState.PENDING


def is_pending(user: User) -> bool:
    return has_pending_membership(user) or has_pending_chapter_request(user)


def decision_updates(user: User, decision: Decision) -> dict[str, str]:
    """Field changes a decision makes to ``user``. Empty when nothing is pending."""
    updates: dict[str, str] = {}
    if has_pending_membership(user):
        updates["membership_status"] = MEMBERSHIP_OUTCOMES[decision].value
    if has_pending_chapter_request(user):
        updates["chapter_approval_status"] = CHAPTER_LINK_OUTCOMES[decision].value
    return updates


async def list_pending(db: AsyncSession, actor: Actor) -> list[User]:
    enforce(actor, Action.ACCESS_CONSOLE)
    result = await db.execute(pending_members_query(actor))
    return list(result.scalars().all())


async def _get_managed_user(db: AsyncSession, actor: Actor, user_id: str) -> User:
    enforce(actor, Action.ACCESS_CONSOLE)
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("Member")
    enforce(actor, Action.MANAGE_MEMBER, user)
    return user


async def decide(db: AsyncSession, actor: Actor, user_id: str, decision: Decision) -> User:
    """Apply an approve/reject decision to every pending concern of a user."""
    user = await _get_managed_user(db, actor, user_id)

    updates = decision_updates(user, decision)
    if not updates:
        logger.info(
            "No pending request for %s; %s by %s ignored", user_id, decision, actor.user_id
        )
        return user

    for field, value in updates.items():
        setattr(user, field, value)
    await db.flush()

    logger.info(
        "Member %s %sd by %s (%s)",
        user_id,
        decision.value,
        actor.user_id,
        ", ".join(f"{k}={v}" for k, v in updates.items()),
    )
    return user


async def edit_member(
    db: AsyncSession, actor: Actor, user_id: str, body: MemberAdminUpdate
) -> User:
    """Manual override of membership status, chapter and (admins only) role.

    This bypasses the approval workflow; it is also the only way to give a
    rejected member another chance.
    """
    user = await _get_managed_user(db, actor, user_id)
    changes = body.model_dump(exclude_unset=True)

    if "role" in changes and changes["role"] is not None:
        enforce(actor, Action.ASSIGN_ROLE)
        user.role = changes["role"].value

    if changes.get("membership_status") is not None:
        user.membership_status = changes["membership_status"].value

    if "chapter_id" in changes:
        chapter_id = changes["chapter_id"]
        if chapter_id is not None:
            if not actor.is_admin and not actor.in_chapter(chapter_id):
                raise ForbiddenError(
                    "Moderators can only assign their own chapter", redirect_to=HOME_PATH
                )
            if await db.get(Chapter, chapter_id) is None:
                raise NotFoundError("Chapter")
            user.chapter_approval_status = ChapterLinkState.APPROVED.value
        else:
            user.chapter_approval_status = ChapterLinkState.NONE.value
        user.chapter_id = chapter_id

    await db.flush()
    logger.info("Member %s edited by %s: %s", user_id, actor.user_id, sorted(changes))
    return user


async def count_pending(db: AsyncSession, actor: Actor) -> int:
    result = await db.execute(
        select(func.count()).select_from(pending_members_query(actor).subquery())
    )
    return result.scalar_one()
