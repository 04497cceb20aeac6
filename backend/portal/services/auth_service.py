"""Cognito authentication proxy (real + mock modes).

Sign-up, sign-in, password reset and token refresh all happen at the
identity provider; this module only relays them and maps provider errors
to messages the portal shows its users.
"""

import logging
import uuid

from portal.core.config import settings
from portal.core.exceptions import ProblemDetailError

logger = logging.getLogger(__name__)

# Cognito error code -> (HTTP status, user-facing message)
COGNITO_ERRORS: dict[str, tuple[int, str]] = {
    "NotAuthorizedException": (401, "Invalid email or password."),
    "UserNotFoundException": (401, "Invalid email or password."),
    "UsernameExistsException": (409, "Email already in use."),
    "InvalidPasswordException": (422, "Password does not meet the requirements."),
    "UserNotConfirmedException": (403, "Confirm your email address before signing in."),
    "LimitExceededException": (429, "Too many attempts. Try again later."),
    "CodeDeliveryFailureException": (
        502,
        "Failed to send reset email. Check if the email is correct.",
    ),
}


class AuthProviderError(ProblemDetailError):
    def __init__(self, code: str):
        status, message = COGNITO_ERRORS.get(code, (400, "Authentication failed."))
        super().__init__(status, "Authentication failed", message, error_type=f"auth/{code}")


def mock_sub_for(email: str) -> str:
    """Stable mock subject per email, so mock sign-up and sign-in agree."""
    return f"mock-{uuid.uuid5(uuid.NAMESPACE_URL, email.lower())}"


def _cognito_client():  # type: ignore[no-untyped-def]
    import boto3

    return boto3.client("cognito-idp", region_name=settings.COGNITO_REGION)


def _call_cognito(operation: str, **kwargs) -> dict:
    from botocore.exceptions import ClientError

    client = _cognito_client()
    try:
        return getattr(client, operation)(ClientId=settings.COGNITO_CLIENT_ID, **kwargs)
    except ClientError as exc:
        code = exc.response.get("Error", {}).get("Code", "Unknown")
        logger.warning("Cognito %s failed: %s", operation, code)
        raise AuthProviderError(code) from exc


def _mock_tokens(email: str, name: str | None = None) -> dict:
    from portal.core.security import create_mock_access_token

    sub = mock_sub_for(email)
    return {
        "access_token": create_mock_access_token(sub=sub, email=email, name=name),
        "refresh_token": f"mock-refresh-{sub}",
        "sub": sub,
    }


async def sign_up(email: str, password: str, full_name: str | None = None) -> dict:
    """Register with email/password. Returns tokens when immediately usable."""
    if settings.COGNITO_MOCK:
        return _mock_tokens(email, full_name)

    attributes = [{"Name": "email", "Value": email}]
    if full_name:
        attributes.append({"Name": "name", "Value": full_name})
    response = _call_cognito(
        "sign_up", Username=email, Password=password, UserAttributes=attributes
    )
    if not response.get("UserConfirmed"):
        # Email verification pending; the user signs in afterwards
        return {"sub": response["UserSub"]}
    return await sign_in(email, password)


async def sign_in(email: str, password: str) -> dict:
    if settings.COGNITO_MOCK:
        return _mock_tokens(email)

    response = _call_cognito(
        "initiate_auth",
        AuthFlow="USER_PASSWORD_AUTH",
        AuthParameters={"USERNAME": email, "PASSWORD": password},
    )
    result = response["AuthenticationResult"]
    return {"access_token": result["AccessToken"], "refresh_token": result["RefreshToken"]}


async def request_password_reset(email: str) -> None:
    if settings.COGNITO_MOCK:
        logger.info("Mock password reset requested for %s", email)
        return
    _call_cognito("forgot_password", Username=email)


async def refresh_cognito_token(refresh_token: str) -> dict:
    """Call Cognito REFRESH_TOKEN_AUTH flow.

    In mock mode, returns a fresh mock access token.
    """
    if settings.COGNITO_MOCK:
        return _mock_refresh(refresh_token)

    response = _call_cognito(
        "initiate_auth",
        AuthFlow="REFRESH_TOKEN_AUTH",
        AuthParameters={"REFRESH_TOKEN": refresh_token},
    )
    result = response["AuthenticationResult"]
    tokens: dict[str, str] = {"access_token": result["AccessToken"]}

    # Cognito may or may not return a new refresh token (rotation)
    if "RefreshToken" in result:
        tokens["refresh_token"] = result["RefreshToken"]

    return tokens


def _mock_refresh(refresh_token: str) -> dict:
    """Generate a mock refresh response for local development."""
    from portal.core.security import create_mock_access_token

    sub = refresh_token.removeprefix("mock-refresh-") or "mock-user-sub"
    return {
        "access_token": create_mock_access_token(sub=sub, email="dev@example.com"),
        "refresh_token": f"mock-refresh-{sub}",
    }
