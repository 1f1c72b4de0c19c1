"""
Authentication module interface.

Other modules should depend on IAuthService, not the concrete implementation.
This enables testing with mocks and future extraction to a microservice.
"""

from typing import Protocol, Optional, runtime_checkable

from shared.models import AuthenticatedUser

from .models import AuthResponse, GoogleProfile, RegistrationResult, UserProfile


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for authentication operations.

    This protocol defines the contract that the auth module exposes
    to other modules. Implementations must provide all these methods.
    """

    async def register(self, email: str, password: str, name: Optional[str] = None) -> RegistrationResult:
        """
        Create an email/password account.

        Returns:
            The new user's profile, a token pair and an email verification token

        Raises:
            EmailAlreadyRegisteredError: If the email is taken
        """
        ...

    async def login(
        self,
        email: str,
        password: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> AuthResponse:
        """
        Password login. Every attempt is written to the login audit.

        Raises:
            InvalidCredentialsError: Unknown email, no password set, or wrong password
            InactiveAccountError: If the account is deactivated
        """
        ...

    async def login_with_google(
        self,
        profile: GoogleProfile,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> AuthResponse:
        """Find or create the user behind an external identity and sign them in."""
        ...

    async def refresh_access_token(self, refresh_token: str) -> str:
        """
        Exchange a refresh token for a new access token.

        Raises:
            AuthenticationError: If the token is invalid or the user is gone/inactive
        """
        ...

    async def verify_email(self, token: str) -> UserProfile:
        """Mark the email named by a verification token as verified."""
        ...

    async def validate_token(self, token: str) -> AuthenticatedUser:
        """
        Validate an access token and return the authenticated user.

        Raises:
            AuthenticationError: If token is missing, invalid or expired
        """
        ...

    async def get_user_by_id(self, user_id: str) -> Optional[UserProfile]:
        """
        Get a user's profile by their ID.

        Returns:
            UserProfile if found, None otherwise
        """
        ...

    async def get_user_by_email(self, email: str) -> Optional[UserProfile]:
        """
        Get a user's profile by their email.

        Returns:
            UserProfile if found, None otherwise
        """
        ...
