"""
Subscriptions module exceptions.
"""

from shared.exceptions import VimplError, NotFoundError


class SubscriptionError(VimplError):
    """Base exception for subscription errors."""

    pass


class SubscriptionUserNotFoundError(NotFoundError):
    """Raised when a tier change targets a user that doesn't exist."""

    def __init__(self, user_id: str):
        super().__init__(
            f"User not found: {user_id}",
            code="USER_NOT_FOUND",
            details={"user_id": user_id},
        )
