"""The caller's own profile: onboarding and edits."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.dependencies import get_current_user, get_db
from portal.models.user import User
from portal.schemas.profile import ProfileResponse, ProfileSetup, ProfileUpdate
from portal.services import profiles

router = APIRouter()


@router.post("/setup", response_model=ProfileResponse)
async def setup_profile(
    body: ProfileSetup,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    """Complete onboarding. The new member waits in the approval queue."""
    await profiles.complete_setup(db, user, body)
    return await profiles.to_profile_response(db, user)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    return await profiles.to_profile_response(db, user)


@router.patch("/me", response_model=ProfileResponse)
async def update_my_profile(
    body: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    await profiles.update_profile(db, user, body)
    return await profiles.to_profile_response(db, user)
