"""
Authentication API endpoints.

Register, login, token refresh, email verification and the current
user's profile. Errors raised by the service are mapped to HTTP
responses by the application's exception handler.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response

from api.middleware.auth import get_current_user
from api.dependencies import get_auth_service
from shared.models import AuthenticatedUser

from .interfaces import IAuthService
from .models import (
    AccessTokenResponse,
    AuthResponse,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    UserProfile,
    VerifyEmailRequest,
)
from .exceptions import UserNotFoundError

router = APIRouter()


def client_ip(request: Request) -> Optional[str]:
    """First address in X-Forwarded-For, else the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    body: RegisterRequest,
    service: IAuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Create an email/password account.

    The verification token is not returned; delivering it is the email
    collaborator's job.
    """
    result = await service.register(body.email, body.password, body.name)
    return AuthResponse(user=result.user, tokens=result.tokens)


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    request: Request,
    service: IAuthService = Depends(get_auth_service),
) -> AuthResponse:
    return await service.login(
        body.email,
        body.password,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )


@router.post("/refresh", response_model=AccessTokenResponse)
async def refresh(
    body: RefreshRequest,
    service: IAuthService = Depends(get_auth_service),
) -> AccessTokenResponse:
    access_token = await service.refresh_access_token(body.refresh_token)
    return AccessTokenResponse(access_token=access_token)


@router.post("/verify-email", response_model=UserProfile)
async def verify_email(
    body: VerifyEmailRequest,
    service: IAuthService = Depends(get_auth_service),
) -> UserProfile:
    return await service.verify_email(body.token)


@router.post("/logout", status_code=204)
async def logout(user: AuthenticatedUser = Depends(get_current_user)) -> Response:
    """Tokens are stateless; the client discards them."""
    return Response(status_code=204)


@router.get("/me", response_model=UserProfile)
async def get_me(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> UserProfile:
    profile = await service.get_user_by_id(user.id)
    if profile is None:
        raise UserNotFoundError(user.id)
    return profile
