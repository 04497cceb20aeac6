"""Aggregate all v1 sub-routers."""

from fastapi import APIRouter

from portal.api.v1.admin import router as admin_router
from portal.api.v1.auth import router as auth_router
from portal.api.v1.chapters import router as chapters_router
from portal.api.v1.dashboard import router as dashboard_router
from portal.api.v1.events import router as events_router
from portal.api.v1.health import router as health_router
from portal.api.v1.members import router as members_router
from portal.api.v1.metadata import router as metadata_router
from portal.api.v1.opportunities import router as opportunities_router
from portal.api.v1.profile import router as profile_router
from portal.api.v1.resources import router as resources_router
from portal.schemas.common import ErrorResponse

api_v1_router = APIRouter(
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    }
)

api_v1_router.include_router(health_router, tags=["health"])
api_v1_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_v1_router.include_router(profile_router, prefix="/profile", tags=["profile"])
api_v1_router.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])
api_v1_router.include_router(members_router, tags=["members"])
api_v1_router.include_router(chapters_router, prefix="/chapters", tags=["chapters"])
api_v1_router.include_router(
    opportunities_router, prefix="/opportunities", tags=["opportunities"]
)
api_v1_router.include_router(resources_router, prefix="/resources", tags=["resources"])
api_v1_router.include_router(events_router, prefix="/events", tags=["events"])
api_v1_router.include_router(metadata_router, prefix="/metadata", tags=["metadata"])
api_v1_router.include_router(admin_router, prefix="/admin", tags=["admin"])
