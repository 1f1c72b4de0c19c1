"""
JWT Authentication middleware.

Validates access tokens issued by the auth module and extracts the
requester's identity.
"""

from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from shared.config import get_settings
from shared.exceptions import AuthenticationError
from shared.models import AuthenticatedUser
from modules.auth.exceptions import AdminRequiredError
from modules.auth.models import TokenPayload, TokenType
from modules.auth.tokens import decode_token as decode_jwt

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


class AuthError(HTTPException):
    """Authentication error with consistent format."""
    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


def decode_token(token: str) -> TokenPayload:
    """
    Decode and validate an access token.

    Args:
        token: The JWT token string

    Returns:
        TokenPayload with decoded claims

    Raises:
        AuthError: If token is invalid, expired, or not an access token
    """
    try:
        return decode_jwt(token, TokenType.ACCESS, get_settings())
    except AuthenticationError as e:
        raise AuthError(e.message)


def get_user_from_payload(payload: TokenPayload) -> AuthenticatedUser:
    """Convert token claims to the request identity."""
    return AuthenticatedUser(id=payload.sub, email=payload.email)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthenticatedUser:
    """
    Dependency that requires authentication.

    Use this for endpoints that require a logged-in user.

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    if credentials is None:
        raise AuthError("Missing authorization header")

    payload = decode_token(credentials.credentials)
    return get_user_from_payload(payload)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[AuthenticatedUser]:
    """
    Dependency that optionally extracts user if authenticated.

    Use this for endpoints that work with or without authentication,
    such as reading a public board. An invalid token is treated as
    anonymous.
    """
    if credentials is None:
        return None

    try:
        payload = decode_token(credentials.credentials)
        return get_user_from_payload(payload)
    except AuthError:
        return None


async def require_admin(
    user: AuthenticatedUser = Depends(get_current_user),
) -> AuthenticatedUser:
    """Dependency that requires the user's email to be in ADMIN_EMAILS."""
    admins = {email.strip().lower() for email in get_settings().admin_emails}
    if user.email.lower() not in admins:
        raise AdminRequiredError()
    return user
