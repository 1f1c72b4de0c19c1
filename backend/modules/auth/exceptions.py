"""
Authentication module exceptions.

These exceptions are raised by the auth module and mapped to HTTP
responses by the API error handler.
"""

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


class InvalidTokenError(AuthenticationError):
    """Raised when a JWT token is invalid or malformed."""

    def __init__(self, message: str = "Invalid authentication token"):
        super().__init__(message, code="INVALID_TOKEN")


class ExpiredTokenError(AuthenticationError):
    """Raised when a JWT token has expired."""

    def __init__(self, message: str = "Authentication token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class MissingTokenError(AuthenticationError):
    """Raised when no authentication token is provided."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="MISSING_TOKEN")


class InvalidCredentialsError(AuthenticationError):
    """Raised on a failed password login. Does not say which part was wrong."""

    def __init__(self):
        super().__init__("Invalid credentials", code="INVALID_CREDENTIALS")


class InactiveAccountError(AuthenticationError):
    """Raised when a deactivated user tries to sign in."""

    def __init__(self):
        super().__init__("Account is inactive", code="ACCOUNT_INACTIVE")


class EmailAlreadyRegisteredError(ConflictError):
    """Raised when registering an email that already has an account."""

    def __init__(self, email: str):
        super().__init__(
            "User with this email already exists",
            code="EMAIL_ALREADY_REGISTERED",
            details={"email": email},
        )


class EmailAlreadyVerifiedError(ValidationError):
    def __init__(self, email: str):
        super().__init__(
            "Email already verified",
            code="EMAIL_ALREADY_VERIFIED",
            details={"email": email},
        )


class UserNotFoundError(NotFoundError):
    """Raised when a referenced user doesn't exist."""

    def __init__(self, user_id: str):
        super().__init__(
            f"User not found: {user_id}",
            code="USER_NOT_FOUND",
            details={"user_id": user_id},
        )


class AdminRequiredError(AuthorizationError):
    """Raised when a non-admin calls an admin endpoint."""

    def __init__(self):
        super().__init__("Administrator access required", code="ADMIN_REQUIRED")
