"""
Login audit module exceptions.
"""

from shared.exceptions import VimplError, ValidationError


class AuditError(VimplError):
    """Base exception for audit errors."""

    pass


class InvalidRetentionError(ValidationError):
    """Raised when a cleanup is asked to keep a non-positive number of days."""

    def __init__(self, days_to_keep: int):
        super().__init__(
            f"days_to_keep must be positive, got {days_to_keep}",
            code="INVALID_RETENTION",
            details={"days_to_keep": days_to_keep},
        )
