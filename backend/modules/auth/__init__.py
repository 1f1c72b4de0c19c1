"""
Authentication module.

Handles registration, sign-in, token issue/refresh and email verification.

Public API:
- IAuthService: Interface for auth operations
- User: Full stored user (credentials included)
- UserProfile: User without credential fields
- Auth exceptions: InvalidTokenError, InvalidCredentialsError, etc.
"""

from .interfaces import IAuthService
from .models import (
    AuthProvider,
    AuthResponse,
    GoogleProfile,
    RegistrationResult,
    TokenPair,
    TokenPayload,
    TokenType,
    User,
    UserProfile,
)
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    InvalidCredentialsError,
    InactiveAccountError,
    EmailAlreadyRegisteredError,
    EmailAlreadyVerifiedError,
    UserNotFoundError,
    AdminRequiredError,
)

__all__ = [
    # Interface
    "IAuthService",
    # Models
    "AuthProvider",
    "AuthResponse",
    "GoogleProfile",
    "RegistrationResult",
    "TokenPair",
    "TokenPayload",
    "TokenType",
    "User",
    "UserProfile",
    # Exceptions
    "InvalidTokenError",
    "ExpiredTokenError",
    "MissingTokenError",
    "InvalidCredentialsError",
    "InactiveAccountError",
    "EmailAlreadyRegisteredError",
    "EmailAlreadyVerifiedError",
    "UserNotFoundError",
    "AdminRequiredError",
]
