"""
Boards module exceptions.
"""

from typing import Optional

from shared.exceptions import (
    NotFoundError,
    ValidationError,
    AuthorizationError,
    ConflictError,
    LimitExceededError,
)


class CollaboratorNotFoundError(NotFoundError):
    """Raised when removing a user who is not a collaborator on the board."""

    def __init__(self, board_id: str, user_id: str):
        super().__init__(
            f"User {user_id} is not a collaborator on board {board_id}",
            code="COLLABORATOR_NOT_FOUND",
            details={"board_id": board_id, "user_id": user_id},
        )


class BoardNotFoundError(NotFoundError):
    """Raised when a board is not found."""

    def __init__(self, board_id: str):
        super().__init__(
            f"Board not found: {board_id}",
            code="BOARD_NOT_FOUND",
            details={"board_id": board_id},
        )


class SectionNotFoundError(NotFoundError):
    """Raised when a section is not found on the given board."""

    def __init__(self, section_id: str):
        super().__init__(
            f"Section not found: {section_id}",
            code="SECTION_NOT_FOUND",
            details={"section_id": section_id},
        )


class PostitNotFoundError(NotFoundError):
    """Raised when a post-it is not found on the given board."""

    def __init__(self, postit_id: str):
        super().__init__(
            f"Post-it not found: {postit_id}",
            code="POSTIT_NOT_FOUND",
            details={"postit_id": postit_id},
        )


class BoardAccessDeniedError(AuthorizationError):
    """
    Raised when the requester lacks the level an operation needs.

    Details never include collaborator information.
    """

    def __init__(self, board_id: str, required: str):
        super().__init__(
            f"Insufficient permission on board {board_id} (requires {required})",
            code="BOARD_ACCESS_DENIED",
            details={"board_id": board_id, "required_permission": required},
        )


class VersionConflictError(ConflictError):
    """
    Raised when an update was based on a stale board version.

    The client should re-fetch the board and retry against current_version.
    """

    def __init__(
        self,
        board_id: str,
        current_version: int,
        expected_version: Optional[int] = None,
    ):
        super().__init__(
            "Board has been modified by another user. Please refresh and try again.",
            code="VERSION_CONFLICT",
            details={
                "board_id": board_id,
                "current_version": current_version,
                "expected_version": expected_version,
            },
        )
        self.current_version = current_version


class BoardCreationDeniedError(LimitExceededError):
    """Raised when the subscription gate refuses a new board."""

    def __init__(self, reason: str, user_id: Optional[str] = None):
        super().__init__(
            reason,
            code="BOARD_LIMIT_EXCEEDED",
            details={"user_id": user_id} if user_id else {},
        )


class InvalidShareTargetError(ValidationError):
    """Raised when a board cannot be shared with the given user."""

    def __init__(self, email: str, reason: str):
        super().__init__(
            f"Cannot share board with {email}: {reason}",
            code="INVALID_SHARE_TARGET",
            details={"email": email, "reason": reason},
        )


class InvalidSectionError(ValidationError):
    """Raised when a post-it references a section on another board."""

    def __init__(self, section_id: str, board_id: str):
        super().__init__(
            f"Section {section_id} does not belong to board {board_id}",
            code="INVALID_SECTION",
            details={"section_id": section_id, "board_id": board_id},
        )


class SlugTakenError(ConflictError):
    """Raised when a board insert loses a race for its slug."""

    def __init__(self, slug: str):
        super().__init__(
            f"Board slug already in use: {slug}",
            code="SLUG_TAKEN",
            details={"slug": slug},
        )
