"""Members directory and individual profile pages."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.dependencies import get_actor, get_db, require_onboarded
from portal.core.policy import Actor
from portal.core.states import MembershipType
from portal.schemas.profile import MemberListItem, ProfileResponse
from portal.services import profiles

router = APIRouter(dependencies=[Depends(require_onboarded)])

DEFAULT_LIMIT = 50


@router.get("/members", response_model=list[MemberListItem])
async def list_members(
    search: str | None = Query(None, max_length=100),
    chapter_id: uuid.UUID | None = Query(None),
    membership_type: MembershipType | None = Query(None),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=200),
    offset: int = Query(0, ge=0),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> list[MemberListItem]:
    """Directory, scoped to what the caller's role may see."""
    return await profiles.list_members(
        db,
        actor,
        search=search,
        chapter_id=chapter_id,
        membership_type=membership_type.value if membership_type else None,
        limit=limit,
        offset=offset,
    )


@router.get("/profiles/{user_id}", response_model=ProfileResponse)
async def get_profile(
    user_id: str,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    user = await profiles.get_visible_profile(db, actor, user_id)
    return await profiles.to_profile_response(db, user)
