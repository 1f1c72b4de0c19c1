"""
Authentication service implementation.

Owns registration, password and external-identity sign-in, token
issue/refresh and email verification. Every sign-in attempt is reported
to the login audit.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Any

from shared.config import Settings, get_settings
from shared.models import AuthenticatedUser
from modules.audit.models import LoginAttempt, LoginMethod

from .interfaces import IAuthService
from .models import (
    AuthProvider,
    AuthResponse,
    GoogleProfile,
    RegistrationResult,
    TokenPair,
    TokenType,
    User,
    UserProfile,
)
from .repository import UserRepository
from .tokens import create_token, decode_token, hash_password, verify_password
from .exceptions import (
    EmailAlreadyRegisteredError,
    EmailAlreadyVerifiedError,
    InactiveAccountError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
)

logger = logging.getLogger(__name__)


class AuthService(IAuthService):
    """
    Implementation of the authentication service.

    Users live in the users table (via UserRepository); tokens are HS256
    JWTs signed with the configured secrets.
    """

    def __init__(
        self,
        users: UserRepository,
        audit: Any = None,  # IAuditService - injected
        settings: Optional[Settings] = None,
    ):
        self._users = users
        self._audit = audit
        self._settings = settings or get_settings()

    async def register(self, email: str, password: str, name: Optional[str] = None) -> RegistrationResult:
        email = email.strip().lower()
        if self._users.get_by_email(email) is not None:
            raise EmailAlreadyRegisteredError(email)

        verification_token = create_token(email, email, TokenType.VERIFICATION, self._settings)
        user = self._users.create({
            "email": email,
            "password_hash": hash_password(password),
            "name": name or email.split("@")[0],
            "auth_provider": AuthProvider.EMAIL.value,
            "email_verified": False,
            "verification_token": verification_token,
            "subscription_tier": "student",
            "subscription_status": "active",
            "is_active": True,
        })
        logger.info(f"Registered user {user.id}")

        return RegistrationResult(
            user=UserProfile.from_user(user),
            tokens=self._issue_tokens(user),
            verification_token=verification_token,
        )

    async def login(
        self,
        email: str,
        password: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> AuthResponse:
        email = email.strip().lower()
        user = self._users.get_by_email(email)

        if user is None or not user.password_hash or not verify_password(password, user.password_hash):
            await self._record(email, AuthProvider.EMAIL, False, user, ip_address, user_agent, "Invalid credentials")
            logger.warning(f"Failed login for {email}")
            raise InvalidCredentialsError()

        if not user.is_active:
            await self._record(email, AuthProvider.EMAIL, False, user, ip_address, user_agent, "Account is inactive")
            logger.warning(f"Login refused for inactive user {user.id}")
            raise InactiveAccountError()

        user = self._stamp_login(user)
        await self._record(email, AuthProvider.EMAIL, True, user, ip_address, user_agent)
        logger.info(f"User {user.id} logged in")

        return AuthResponse(user=UserProfile.from_user(user), tokens=self._issue_tokens(user))

    async def login_with_google(
        self,
        profile: GoogleProfile,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> AuthResponse:
        """
        Find the user by email, linking the provider ID on first use, or
        create a verified student-tier account.
        """
        email = str(profile.email).strip().lower()
        user = self._users.get_by_email(email)

        if user is None:
            user = self._users.create({
                "email": email,
                "name": profile.display_name or email.split("@")[0],
                "avatar_url": profile.avatar_url,
                "auth_provider": AuthProvider.GOOGLE.value,
                "auth_provider_id": profile.id,
                "email_verified": True,
                "subscription_tier": "student",
                "subscription_status": "active",
                "is_active": True,
            })
            logger.info(f"Created user {user.id} from Google sign-in")
        elif not user.auth_provider_id:
            user = self._users.update(user.id, {
                "auth_provider_id": profile.id,
                "avatar_url": user.avatar_url or profile.avatar_url,
                "email_verified": True,
            }) or user

        if not user.is_active:
            await self._record(email, AuthProvider.GOOGLE, False, user, ip_address, user_agent, "Account is inactive")
            raise InactiveAccountError()

        user = self._stamp_login(user)
        await self._record(email, AuthProvider.GOOGLE, True, user, ip_address, user_agent)
        logger.info(f"User {user.id} logged in with Google")

        return AuthResponse(user=UserProfile.from_user(user), tokens=self._issue_tokens(user))

    async def refresh_access_token(self, refresh_token: str) -> str:
        payload = decode_token(refresh_token, TokenType.REFRESH, self._settings)
        user = self._users.get_by_id(payload.sub)
        if user is None or not user.is_active:
            raise InvalidTokenError("User not found or inactive")
        return create_token(user.id, user.email, TokenType.ACCESS, self._settings)

    async def verify_email(self, token: str) -> UserProfile:
        payload = decode_token(token, TokenType.VERIFICATION, self._settings)
        user = self._users.get_by_email(payload.email)
        if user is None:
            raise InvalidTokenError("Invalid verification token")
        if user.email_verified:
            raise EmailAlreadyVerifiedError(user.email)

        updated = self._users.update(user.id, {"email_verified": True, "verification_token": None})
        logger.info(f"Verified email for user {user.id}")
        return UserProfile.from_user(updated or user)

    async def validate_token(self, token: str) -> AuthenticatedUser:
        if not token:
            raise MissingTokenError()
        payload = decode_token(token, TokenType.ACCESS, self._settings)
        return AuthenticatedUser(id=payload.sub, email=payload.email)

    async def get_user_by_id(self, user_id: str) -> Optional[UserProfile]:
        user = self._users.get_by_id(user_id)
        return UserProfile.from_user(user) if user else None

    async def get_user_by_email(self, email: str) -> Optional[UserProfile]:
        user = self._users.get_by_email(email)
        return UserProfile.from_user(user) if user else None

    def _issue_tokens(self, user: User) -> TokenPair:
        return TokenPair(
            access_token=create_token(user.id, user.email, TokenType.ACCESS, self._settings),
            refresh_token=create_token(user.id, user.email, TokenType.REFRESH, self._settings),
        )

    def _stamp_login(self, user: User) -> User:
        updated = self._users.update(user.id, {"last_login_at": datetime.now(timezone.utc).isoformat()})
        return updated or user

    async def _record(
        self,
        email: str,
        method: AuthProvider,
        success: bool,
        user: Optional[User],
        ip_address: Optional[str],
        user_agent: Optional[str],
        error_message: Optional[str] = None,
    ) -> None:
        if self._audit is None:
            return
        await self._audit.log_login(LoginAttempt(
            email=email,
            login_method=LoginMethod(method.value),
            success=success,
            user_id=user.id if user else None,
            ip_address=ip_address,
            user_agent=user_agent,
            error_message=error_message,
        ))

