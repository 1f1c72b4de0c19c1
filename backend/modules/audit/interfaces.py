"""
Login audit module interface.

The auth module records attempts through IAuditService; the admin API
reads through it.
"""

from datetime import datetime
from typing import Protocol, Optional, runtime_checkable

from .models import LoginAttempt, LoginAudit, LoginAuditFilters, LoginStats


@runtime_checkable
class IAuditService(Protocol):
    """Interface for the login audit trail."""

    async def log_login(self, attempt: LoginAttempt) -> Optional[LoginAudit]:
        """
        Record a sign-in attempt.

        A failure to record must never fail the sign-in itself, so
        implementations log the error and return None instead of raising.
        """
        ...

    async def get_login_audits(self, filters: LoginAuditFilters) -> list[LoginAudit]:
        """List audit records matching filters, newest first."""
        ...

    async def get_user_login_history(self, user_id: str, limit: int = 50) -> list[LoginAudit]:
        """A single user's most recent attempts."""
        ...

    async def get_login_stats(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> LoginStats:
        """Aggregate counts over an optional date window."""
        ...

    async def export_all_logins(self) -> list[LoginAudit]:
        """Every audit record, newest first."""
        ...

    async def cleanup_old_audits(self, days_to_keep: int = 90) -> int:
        """Delete records older than days_to_keep. Returns the number deleted."""
        ...
