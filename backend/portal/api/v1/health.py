"""Health check endpoint."""

import logging

from fastapi import APIRouter
from sqlalchemy import text

from portal.core.config import settings
from portal.core.security import get_jwks
from portal.db.session import engine

logger = logging.getLogger(__name__)

router = APIRouter()

VERSION = "0.1.0"


async def _database_status() -> str:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Health check: database unreachable")
        return "error"
    return "ok"


async def _identity_status() -> str:
    """Token verification needs the Cognito JWKS; mock mode signs locally."""
    if settings.COGNITO_MOCK:
        return "mock"
    try:
        jwks = await get_jwks()
    except Exception:
        logger.exception("Health check: JWKS unreachable")
        return "error"
    return "ok" if jwks.get("keys") else "error"


@router.get("/health")
async def health_check():
    """Check the database and the identity provider's signing keys."""
    db_status = await _database_status()
    identity_status = await _identity_status()

    healthy = db_status == "ok" and identity_status in ("ok", "mock")
    return {
        "status": "ok" if healthy else "degraded",
        "db": db_status,
        "identity": identity_status,
        "version": VERSION,
    }
