"""
Login audit module.

Records sign-in attempts and serves admin reporting over them.

Public API:
- IAuditService: Interface for audit operations
- LoginAttempt: Input for recording an attempt
- LoginAudit: A recorded attempt
"""

from .interfaces import IAuditService
from .models import (
    LoginMethod,
    LoginAudit,
    LoginAttempt,
    LoginAuditFilters,
    LoginAuditListResponse,
    LoginStats,
)
from .exceptions import AuditError, InvalidRetentionError

__all__ = [
    # Interface
    "IAuditService",
    # Models
    "LoginMethod",
    "LoginAudit",
    "LoginAttempt",
    "LoginAuditFilters",
    "LoginAuditListResponse",
    "LoginStats",
    # Exceptions
    "AuditError",
    "InvalidRetentionError",
]
