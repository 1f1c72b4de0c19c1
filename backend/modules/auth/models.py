"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class AuthProvider(str, Enum):
    """How a user signs in."""

    EMAIL = "email"
    GOOGLE = "google"


class TokenType(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"
    VERIFICATION = "verification"


class TokenPayload(BaseModel):
    """Decoded claims of a token issued by this service."""

    sub: str = Field(..., description="Subject (user ID); email for verification tokens")
    email: str = Field(..., description="User's email")
    type: TokenType = Field(..., description="Token purpose")
    exp: int = Field(..., description="Expiration timestamp")
    iat: int = Field(..., description="Issued at timestamp")


class User(BaseModel):
    """
    Full user record as stored.

    Carries credentials; never return it from an endpoint.
    Use UserProfile.from_user() for responses.
    """

    id: str
    email: str
    password_hash: Optional[str] = None
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    auth_provider: AuthProvider = AuthProvider.EMAIL
    auth_provider_id: Optional[str] = None
    email_verified: bool = False
    verification_token: Optional[str] = None
    subscription_tier: str = "student"
    subscription_status: str = "active"
    subscription_start_date: Optional[datetime] = None
    subscription_end_date: Optional[datetime] = None
    is_active: bool = True
    last_login_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class UserProfile(BaseModel):
    """User without credential fields."""

    id: str = Field(..., description="User ID (UUID)")
    email: str = Field(..., description="Email address")
    name: Optional[str] = Field(None, description="Display name")
    avatar_url: Optional[str] = Field(None, description="Avatar URL")
    auth_provider: AuthProvider = AuthProvider.EMAIL
    email_verified: bool = False
    subscription_tier: str = Field(default="student", description="Subscription tier")
    subscription_status: str = "active"
    is_active: bool = True
    last_login_at: Optional[datetime] = None
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls.model_validate(user.model_dump(exclude={"password_hash", "verification_token"}))


class GoogleProfile(BaseModel):
    """Subset of an external identity provider profile we rely on."""

    id: str = Field(..., description="Provider's user ID")
    email: EmailStr
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72, description="bcrypt uses at most 72 bytes")
    name: Optional[str] = Field(None, max_length=100)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str


class VerifyEmailRequest(BaseModel):
    token: str


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class AuthResponse(BaseModel):
    """Response for register/login."""

    user: UserProfile
    tokens: TokenPair


class AccessTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class RegistrationResult(BaseModel):
    """
    Outcome of a registration.

    verification_token is handed to the email collaborator; the API
    response carries only user and tokens.
    """

    user: UserProfile
    tokens: TokenPair
    verification_token: str
