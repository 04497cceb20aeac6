"""FastAPI dependency chain: JWT → User → Actor → SET LOCAL.

The resolved ``Actor`` is the only session context the services see. On
Postgres the same identity is pushed into transaction-local settings so the
row-level security policies enforce the identical rules.
"""

import logging
from collections.abc import AsyncGenerator

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.exceptions import (
    AccountExistsError,
    NotAuthenticatedError,
    ProfileIncompleteError,
)
from portal.core.policy import Actor, actor_for
from portal.core.security import decode_access_token
from portal.core.states import ChapterLinkState, MembershipState, MembershipType, Role
from portal.db.session import async_session_factory
from portal.models.user import User

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async DB session. Commits on success, rolls back on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def set_rls_context(db: AsyncSession, **values: str) -> None:
    """SET LOCAL ``app.<name>`` for each value. No-op outside Postgres."""
    if db.bind.dialect.name != "postgresql":
        return
    for name, value in values.items():
        await db.execute(
            text("SELECT set_config(:name, :value, true)"),
            {"name": f"app.{name}", "value": value},
        )


async def get_current_user_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict:
    """Extract and verify the Bearer token, returning JWT claims."""
    if credentials is None:
        raise NotAuthenticatedError("Missing authorization header")

    try:
        claims = await decode_access_token(credentials.credentials)
    except JWTError as e:
        raise NotAuthenticatedError(f"Invalid token: {e}") from e

    return claims


async def get_current_user(
    claims: dict = Depends(get_current_user_claims),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the token subject to a User row.

    Auto-provisions a bare, not-yet-onboarded record the first time a
    subject is seen; profile setup completes it.
    """
    sub = claims.get("sub")
    if not sub:
        raise NotAuthenticatedError("Token missing sub claim")

    # RLS lets a caller read and create only their own row at this point
    await set_rls_context(db, current_user_id=sub)

    result = await db.execute(select(User).where(User.id == sub))
    user = result.scalar_one_or_none()

    if user is None:
        email = claims.get("email", f"{sub}@placeholder.local")
        user = User(
            id=sub,
            email=email,
            full_name=claims.get("name", email),
            membership_type=MembershipType.INDIVIDUAL.value,
            membership_status=MembershipState.PENDING.value,
            role=Role.MEMBER.value,
            chapter_approval_status=ChapterLinkState.NONE.value,
            profile_completed=False,
        )
        db.add(user)
        try:
            await db.flush()
        except IntegrityError as exc:
            # Same email already registered under another sub (e.g. federated sign-in)
            await db.rollback()
            logger.warning("Provisioning %s collided with an existing email", sub)
            raise AccountExistsError() from exc
        logger.info("Provisioned user %s", sub)

    return user


async def get_actor(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Actor:
    """Build the per-request Actor and publish it to the RLS settings."""
    actor = actor_for(user)
    await set_rls_context(
        db,
        current_role=actor.role.value,
        current_chapter_id=str(actor.chapter_id) if actor.chapter_id else "",
    )
    return actor


async def require_onboarded(user: User = Depends(get_current_user)) -> User:
    """Send users without a completed profile to profile setup."""
    if not user.profile_completed:
        raise ProfileIncompleteError()
    return user
