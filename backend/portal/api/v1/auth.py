"""Authentication endpoints (proxied to the identity provider)."""

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from portal.core.config import settings
from portal.schemas.auth import (
    PasswordResetRequest,
    SignInRequest,
    SignUpRequest,
    TokenResponse,
)
from portal.services.auth_service import (
    AuthProviderError,
    refresh_cognito_token,
    request_password_reset,
    sign_in,
    sign_up,
)

router = APIRouter()

REFRESH_COOKIE_PATH = "/api/v1/auth/refresh"
REFRESH_COOKIE_MAX_AGE = 2592000  # 30 days


def _token_response(tokens: dict, status_code: int = 200) -> JSONResponse:
    """Access token in the body, refresh token in an httpOnly cookie."""
    body = TokenResponse(access_token=tokens["access_token"], user_sub=tokens.get("sub"))
    response = JSONResponse(content=body.model_dump(), status_code=status_code)
    if "refresh_token" in tokens:
        response.set_cookie(
            key="refresh_token",
            value=tokens["refresh_token"],
            httponly=True,
            secure=settings.ENVIRONMENT != "development",
            samesite="strict",
            path=REFRESH_COOKIE_PATH,
            max_age=REFRESH_COOKIE_MAX_AGE,
        )
    return response


@router.post("/sign-up", status_code=201)
async def register(body: SignUpRequest):
    """Create an email/password account. New users continue at profile setup."""
    tokens = await sign_up(body.email, body.password, body.full_name)
    if "access_token" not in tokens:
        return JSONResponse(
            status_code=202,
            content={"user_sub": tokens["sub"], "detail": "Check your email to confirm"},
        )
    return _token_response(tokens, status_code=201)


@router.post("/sign-in")
async def login(body: SignInRequest):
    tokens = await sign_in(body.email, body.password)
    return _token_response(tokens)


@router.post("/password-reset", status_code=202)
async def password_reset(body: PasswordResetRequest):
    """Ask the provider to email a reset code. Always 202 for unknown emails."""
    try:
        await request_password_reset(body.email)
    except AuthProviderError as exc:
        if exc.status != 401:
            raise
    return {"detail": "If the account exists, a reset email has been sent"}


@router.post("/refresh")
async def refresh_token(request: Request):
    """Refresh the access token using the httpOnly refresh cookie.

    - Origin validation (same-site allowlist)
    - Content-Type enforcement (application/json)
    - POST-only (enforced by router)
    """
    # 1. Origin validation against ALLOWED_ORIGINS
    origin = request.headers.get("origin", "")
    if origin:
        if origin not in settings.allowed_origins_list:
            raise HTTPException(status_code=403, detail="Invalid origin")
    elif settings.ENVIRONMENT != "development":
        # Outside dev a browser origin is mandatory (curl/tests only in dev)
        raise HTTPException(status_code=403, detail="Invalid origin")

    # 2. Content-Type enforcement
    content_type = request.headers.get("content-type", "")
    if not content_type.startswith("application/json"):
        raise HTTPException(status_code=415, detail="Unsupported media type")

    # 3. Extract refresh token from cookie
    refresh_token_value = request.cookies.get("refresh_token")
    if not refresh_token_value:
        raise HTTPException(status_code=401, detail="No refresh token")

    # 4. Call Cognito (or mock)
    try:
        new_tokens = await refresh_cognito_token(refresh_token_value)
    except AuthProviderError as exc:
        raise HTTPException(status_code=401, detail="Refresh token invalid or expired") from exc

    return _token_response(new_tokens)
