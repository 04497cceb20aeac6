"""Profile onboarding, owner edits and directory reads."""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.exceptions import DASHBOARD_PATH, NotFoundError, ProblemDetailError
from portal.core.policy import Action, Actor, authorize
from portal.core.states import ChapterLinkState, MembershipState, MembershipType, Role
from portal.models.chapter import Chapter
from portal.models.user import User
from portal.schemas.profile import MemberListItem, ProfileResponse, ProfileSetup, ProfileUpdate
from portal.services.metadata import canonical_affiliations
from portal.services.scoping import chapter_names, members_query

logger = logging.getLogger(__name__)

# An explicit null in an edit leaves these untouched
NON_NULLABLE_PROFILE_FIELDS = frozenset(
    {"full_name", "major", "interests", "affiliations", "membership_type", "social_links"}
)


async def _require_chapter(db: AsyncSession, chapter_id: uuid.UUID) -> None:
    if await db.get(Chapter, chapter_id) is None:
        raise ProblemDetailError(422, "Unknown chapter", f"Chapter {chapter_id} does not exist")


async def to_profile_response(db: AsyncSession, user: User) -> ProfileResponse:
    names = await chapter_names(db, [user.chapter_id])
    response = ProfileResponse.model_validate(user)
    response.chapter_name = names.get(user.chapter_id)
    return response


async def complete_setup(db: AsyncSession, user: User, body: ProfileSetup) -> User:
    """First-time onboarding. Always lands in the approval queue as Pending."""
    if user.profile_completed:
        raise ProblemDetailError(
            409,
            "Profile already completed",
            "This profile has already been set up",
            error_type="profile-complete",
            redirect_to=DASHBOARD_PATH,
        )
    if body.membership_type == MembershipType.CHAPTER and body.chapter_id is None:
        raise ProblemDetailError(
            422, "Chapter required", "Chapter members must choose a chapter"
        )
    if body.chapter_id is not None:
        await _require_chapter(db, body.chapter_id)

    data = body.model_dump(exclude={"social_links", "affiliations"})
    for field, value in data.items():
        setattr(user, field, value)
    user.membership_type = body.membership_type.value
    user.social_links = body.social_links.model_dump()
    user.affiliations = await canonical_affiliations(db, body.affiliations)

    user.membership_status = MembershipState.PENDING.value
    user.role = Role.MEMBER.value
    user.chapter_approval_status = (
        ChapterLinkState.PENDING.value if body.chapter_id else ChapterLinkState.NONE.value
    )
    user.profile_completed = True

    await db.flush()
    logger.info("Profile completed for %s (chapter=%s)", user.id, user.chapter_id)
    return user


async def update_profile(db: AsyncSession, user: User, body: ProfileUpdate) -> User:
    """Owner edit. Moving to another chapter opens a transfer request."""
    changes = body.model_dump(exclude_unset=True)

    if "chapter_id" in changes:
        chapter_id = changes.pop("chapter_id")
        if chapter_id != user.chapter_id:
            if chapter_id is None:
                user.chapter_approval_status = ChapterLinkState.NONE.value
            else:
                await _require_chapter(db, chapter_id)
                user.chapter_approval_status = ChapterLinkState.PENDING.value
                logger.info("Chapter transfer requested by %s to %s", user.id, chapter_id)
            user.chapter_id = chapter_id

    if changes.get("affiliations") is not None:
        user.affiliations = await canonical_affiliations(db, changes.pop("affiliations"))
    if changes.get("social_links") is not None:
        user.social_links = body.social_links.model_dump()
        changes.pop("social_links")
    if changes.get("membership_type") is not None:
        user.membership_type = changes.pop("membership_type").value

    for field, value in changes.items():
        if value is None and field in NON_NULLABLE_PROFILE_FIELDS:
            continue
        setattr(user, field, value)

    await db.flush()
    return user


async def get_visible_profile(db: AsyncSession, actor: Actor, user_id: str) -> User:
    user = await db.get(User, user_id)
    if user is None or not authorize(actor, Action.VIEW_MEMBER, user):
        raise NotFoundError("Profile")
    return user


async def list_members(
    db: AsyncSession,
    actor: Actor,
    *,
    search: str | None = None,
    chapter_id: uuid.UUID | None = None,
    membership_type: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> list[MemberListItem]:
    stmt = members_query(
        actor, search=search, chapter_id=chapter_id, membership_type=membership_type
    )
    result = await db.execute(stmt.offset(offset).limit(limit))
    users = result.scalars().all()

    names = await chapter_names(db, (u.chapter_id for u in users))
    items = []
    for u in users:
        item = MemberListItem.model_validate(u)
        item.chapter_name = names.get(u.chapter_id)
        items.append(item)
    return items
