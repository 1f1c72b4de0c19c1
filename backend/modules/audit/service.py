"""
Login audit service implementation.

Records every sign-in attempt and serves the admin reporting queries.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from shared.exceptions import ExternalServiceError

from .interfaces import IAuditService
from .models import LoginAttempt, LoginAudit, LoginAuditFilters, LoginStats
from .repository import AuditRepository
from .exceptions import InvalidRetentionError

logger = logging.getLogger(__name__)


class AuditService(IAuditService):
    """Audit service backed by the login_audits table."""

    def __init__(self, repository: AuditRepository):
        self._repo = repository

    async def log_login(self, attempt: LoginAttempt) -> Optional[LoginAudit]:
        data = attempt.model_dump(mode="json")
        data["email"] = attempt.email.strip().lower()
        try:
            return self._repo.insert(data)
        except ExternalServiceError as e:
            # Sign-in proceeds even when the trail can't be written
            logger.error(f"Failed to record login attempt for {data['email']}: {e.message}")
            return None

    async def get_login_audits(self, filters: LoginAuditFilters) -> list[LoginAudit]:
        return self._repo.list_audits(filters)

    async def get_user_login_history(self, user_id: str, limit: int = 50) -> list[LoginAudit]:
        return self._repo.list_audits(LoginAuditFilters(user_id=user_id, limit=limit))

    async def get_login_stats(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> LoginStats:
        """
        Aggregate attempts in the window.

        success_rate is the percentage of successful attempts rounded to two
        decimals, 0 when there were no attempts.
        """
        audits = self._repo.list_between(start_date, end_date)

        total = len(audits)
        successful = sum(1 for a in audits if a.success)
        by_method: dict[str, int] = {}
        for audit in audits:
            by_method[audit.login_method.value] = by_method.get(audit.login_method.value, 0) + 1
        unique_users = len({a.user_id for a in audits if a.user_id})

        return LoginStats(
            total_logins=total,
            successful_logins=successful,
            failed_logins=total - successful,
            by_method=by_method,
            unique_users=unique_users,
            success_rate=round(successful / total * 100, 2) if total else 0.0,
        )

    async def export_all_logins(self) -> list[LoginAudit]:
        return self._repo.list_between()

    async def cleanup_old_audits(self, days_to_keep: int = 90) -> int:
        if days_to_keep <= 0:
            raise InvalidRetentionError(days_to_keep)

        cutoff = datetime.now(timezone.utc) - timedelta(days=days_to_keep)
        deleted = self._repo.delete_older_than(cutoff)
        logger.info(f"Deleted {deleted} login audit records older than {days_to_keep} days")
        return deleted

