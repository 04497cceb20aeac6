"""RFC 7807 Problem Details error handling.

Error bodies may carry a ``redirect_to`` navigation hint telling the
front-end where to send the user (login, home, profile setup).
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"
HOME_PATH = "/"
PROFILE_SETUP_PATH = "/profile/setup"
DASHBOARD_PATH = "/dashboard"

# SQLSTATE insufficient_privilege, raised when an RLS policy rejects a write
PERMISSION_DENIED_SQLSTATE = "42501"


class ProblemDetailError(Exception):
    """Raise for RFC 7807 problem+json responses."""

    def __init__(
        self,
        status: int,
        title: str,
        detail: str,
        error_type: str | None = None,
        redirect_to: str | None = None,
    ):
        self.status = status
        self.title = title
        self.detail = detail
        self.error_type = error_type or "about:blank"
        self.redirect_to = redirect_to


class NotAuthenticatedError(ProblemDetailError):
    def __init__(self, detail: str = "Authentication required"):
        super().__init__(401, "Unauthorized", detail, redirect_to=LOGIN_PATH)


class ForbiddenError(ProblemDetailError):
    def __init__(
        self, detail: str = "You do not have access to this resource", redirect_to=None
    ):
        super().__init__(403, "Forbidden", detail, redirect_to=redirect_to)


class NotFoundError(ProblemDetailError):
    def __init__(self, what: str):
        super().__init__(404, "Not Found", f"{what} not found")


class AccountExistsError(ProblemDetailError):
    def __init__(self):
        super().__init__(
            409,
            "Account exists",
            "An account with this email already exists with another sign-in method. "
            "Sign in the way you first registered.",
            error_type="account-exists",
            redirect_to=LOGIN_PATH,
        )


class ProfileIncompleteError(ProblemDetailError):
    def __init__(self):
        super().__init__(
            409,
            "Profile incomplete",
            "Complete your profile before continuing",
            error_type="profile-incomplete",
            redirect_to=PROFILE_SETUP_PATH,
        )


def _problem(
    request: Request,
    status: int,
    title: str,
    detail,
    error_type: str = "about:blank",
    redirect_to: str | None = None,
) -> JSONResponse:
    content = {
        "type": error_type,
        "title": title,
        "status": status,
        "detail": detail,
        "instance": str(request.url.path),
    }
    if redirect_to:
        content["redirect_to"] = redirect_to
    return JSONResponse(
        status_code=status,
        content=content,
        media_type="application/problem+json",
    )


async def problem_detail_handler(request: Request, exc: ProblemDetailError) -> JSONResponse:
    return _problem(
        request, exc.status, exc.title, exc.detail, exc.error_type, exc.redirect_to
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _problem(
        request,
        exc.status_code,
        exc.detail if isinstance(exc.detail, str) else "Error",
        exc.detail,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    # errors() may hold exception objects in ctx; keep only the serializable parts
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return _problem(request, 422, "Validation Error", errors)


async def database_error_handler(request: Request, exc: DBAPIError) -> JSONResponse:
    sqlstate = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
    if sqlstate == PERMISSION_DENIED_SQLSTATE:
        logger.error("Database denied access on %s: %s", request.url.path, exc.orig)
        return _problem(
            request,
            503,
            "Storage permission denied",
            "The database rejected this operation. Check the row-level "
            "security policies and grants for the application role.",
            error_type="storage-permission-denied",
        )
    logger.exception("Database error on %s", request.url.path)
    return _problem(request, 500, "Internal Server Error", "A database error occurred")


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return _problem(request, 500, "Internal Server Error", "An unexpected error occurred")
