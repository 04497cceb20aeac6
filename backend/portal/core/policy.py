"""Authorization policy: one place that decides what an actor may see and do.

``authorize`` answers for a single record; the ``*_visibility`` helpers
express the same read rules as SQL predicates so list queries are scoped
by exactly the same logic. The Postgres RLS policies in the Alembic
migrations mirror these rules at the storage layer.
"""

import uuid
from dataclasses import dataclass
from enum import StrEnum

from sqlalchemy import and_, false, func, or_, true
from sqlalchemy.sql.elements import ColumnElement

from portal.core.exceptions import HOME_PATH, ForbiddenError
from portal.core.states import (
    LEGACY_OPPORTUNITY_STATUS,
    ChapterLinkState,
    MembershipState,
    OpportunityStatus,
    ResourceCategory,
    Role,
)
from portal.models.event import Event
from portal.models.opportunity import Opportunity
from portal.models.resource import Resource
from portal.models.user import User

RESTRICTED_RESOURCE_CATEGORIES = frozenset({ResourceCategory.CHAPTER_DEVELOPMENT})
RESTRICTED_RESOURCE_ROLES = frozenset({Role.ADMIN, Role.MODERATOR})


@dataclass(frozen=True)
class Actor:
    """Who is calling, resolved once per request."""

    user_id: str
    role: Role
    chapter_id: uuid.UUID | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_moderator(self) -> bool:
        return self.role == Role.MODERATOR

    def in_chapter(self, chapter_id: uuid.UUID | None) -> bool:
        return self.chapter_id is not None and chapter_id == self.chapter_id


def actor_for(user: User) -> Actor:
    """Actor for a user row. Only an approved chapter link grants chapter scope."""
    approved = user.chapter_approval_status == ChapterLinkState.APPROVED
    return Actor(
        user_id=user.id,
        role=Role(user.role),
        chapter_id=user.chapter_id if approved else None,
    )


class Action(StrEnum):
    ACCESS_CONSOLE = "access_console"
    VIEW_MEMBER = "view_member"
    MANAGE_MEMBER = "manage_member"
    ASSIGN_ROLE = "assign_role"
    CREATE_CHAPTER = "create_chapter"
    MANAGE_CHAPTER = "manage_chapter"
    DELETE_CHAPTER = "delete_chapter"
    VIEW_OPPORTUNITY = "view_opportunity"
    REVIEW_OPPORTUNITY = "review_opportunity"
    DELETE_OPPORTUNITY = "delete_opportunity"
    VIEW_RESOURCE = "view_resource"
    CREATE_RESOURCE = "create_resource"
    DELETE_RESOURCE = "delete_resource"
    VIEW_EVENT = "view_event"
    CREATE_EVENT = "create_event"
    DELETE_EVENT = "delete_event"
    EDIT_METADATA = "edit_metadata"


# Admin console actions bounce unauthorized callers to the home page.
CONSOLE_ACTIONS = frozenset(
    {
        Action.ACCESS_CONSOLE,
        Action.MANAGE_MEMBER,
        Action.ASSIGN_ROLE,
        Action.CREATE_CHAPTER,
        Action.MANAGE_CHAPTER,
        Action.DELETE_CHAPTER,
        Action.REVIEW_OPPORTUNITY,
        Action.EDIT_METADATA,
    }
)


def effective_opportunity_status(status: str | None) -> OpportunityStatus:
    return OpportunityStatus(status) if status else LEGACY_OPPORTUNITY_STATUS


def authorize(actor: Actor, action: Action, target=None) -> bool:
    """Return True if ``actor`` may perform ``action`` on ``target``."""
    if actor.is_admin:
        return True

    match action:
        case Action.ACCESS_CONSOLE:
            return actor.is_moderator
        case Action.VIEW_MEMBER:
            if target.id == actor.user_id:
                return True
            if not target.profile_completed:
                return False
            if actor.is_moderator:
                return actor.in_chapter(target.chapter_id)
            return target.membership_status == MembershipState.ACTIVE
        case Action.MANAGE_MEMBER:
            # Nobody but an admin decides on their own record
            if target.id == actor.user_id:
                return False
            return actor.is_moderator and actor.in_chapter(target.chapter_id)
        case Action.MANAGE_CHAPTER:
            return actor.is_moderator and actor.in_chapter(target.id)
        case Action.VIEW_OPPORTUNITY:
            return (
                effective_opportunity_status(target.status) == OpportunityStatus.APPROVED
                or target.created_by == actor.user_id
            )
        case Action.DELETE_OPPORTUNITY:
            return target.created_by == actor.user_id
        case Action.VIEW_RESOURCE:
            return (
                target.category not in RESTRICTED_RESOURCE_CATEGORIES
                or actor.role in RESTRICTED_RESOURCE_ROLES
            )
        case Action.DELETE_RESOURCE:
            return target.uploaded_by == actor.user_id
        case Action.VIEW_EVENT:
            return target.chapter_id is None or actor.in_chapter(target.chapter_id)
        case Action.DELETE_EVENT:
            return target.created_by == actor.user_id
        case _:
            # ASSIGN_ROLE, CREATE/DELETE_CHAPTER, REVIEW_OPPORTUNITY,
            # CREATE_RESOURCE, CREATE_EVENT, EDIT_METADATA
            return False


def enforce(actor: Actor, action: Action, target=None) -> None:
    """Raise 403 unless ``authorize`` allows the action."""
    if authorize(actor, action, target):
        return
    redirect_to = HOME_PATH if action in CONSOLE_ACTIONS else None
    raise ForbiddenError(
        f"Role '{actor.role}' may not {action.value.replace('_', ' ')}",
        redirect_to=redirect_to,
    )


# ---------------------------------------------------------------------------
# SQL predicates for list queries (same rules as ``authorize``)
# ---------------------------------------------------------------------------


def _chapter_match(column, actor: Actor) -> ColumnElement[bool]:
    if actor.chapter_id is None:
        return false()
    return column == actor.chapter_id


def member_visibility(actor: Actor) -> ColumnElement[bool]:
    if actor.is_admin:
        return true()
    onboarded = User.profile_completed.is_(True)
    if actor.is_moderator:
        scoped = and_(onboarded, _chapter_match(User.chapter_id, actor))
    else:
        scoped = and_(onboarded, User.membership_status == MembershipState.ACTIVE.value)
    return or_(User.id == actor.user_id, scoped)


def member_management_scope(actor: Actor) -> ColumnElement[bool]:
    if actor.is_admin:
        return true()
    if actor.is_moderator:
        return and_(_chapter_match(User.chapter_id, actor), User.id != actor.user_id)
    return false()


def chapter_management_scope(actor: Actor, chapter_id_column) -> ColumnElement[bool]:
    if actor.is_admin:
        return true()
    if actor.is_moderator:
        return _chapter_match(chapter_id_column, actor)
    return false()


def published_opportunity() -> ColumnElement[bool]:
    return (
        func.coalesce(Opportunity.status, LEGACY_OPPORTUNITY_STATUS.value)
        == OpportunityStatus.APPROVED.value
    )


def resource_visibility(actor: Actor) -> ColumnElement[bool]:
    if actor.role in RESTRICTED_RESOURCE_ROLES:
        return true()
    return Resource.category.not_in([c.value for c in RESTRICTED_RESOURCE_CATEGORIES])


def event_visibility(actor: Actor) -> ColumnElement[bool]:
    if actor.is_admin:
        return true()
    return or_(Event.chapter_id.is_(None), _chapter_match(Event.chapter_id, actor))
