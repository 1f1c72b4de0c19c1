"""
Base exception classes for the Vimpl backend.

Each module should define its own exceptions that inherit from these bases.
The API layer maps each base class to an HTTP status code, so a module
exception only has to pick the right parent.
"""

from typing import Optional, Any


class VimplError(Exception):
    """
    Base exception for all Vimpl errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(VimplError):
    """Resource not found."""

    pass


class ValidationError(VimplError):
    """Input validation failed."""

    pass


class AuthenticationError(VimplError):
    """Authentication failed (invalid or missing credentials)."""

    pass


class AuthorizationError(VimplError):
    """Authorization failed (insufficient permissions)."""

    pass


class ConflictError(VimplError):
    """The request conflicts with the current state of a resource."""

    pass


class LimitExceededError(VimplError):
    """A plan limit prevents the operation."""

    pass


class ExternalServiceError(VimplError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
