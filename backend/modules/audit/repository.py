"""
Login audit repository.

Encapsulates Supabase queries against the login_audits table.
"""

from datetime import datetime
from typing import Optional, Any

from shared.repository import BaseRepository
from .models import LoginAudit, LoginAuditFilters


class AuditRepository(BaseRepository[LoginAudit]):
    """Repository for login audit rows. Rows are append-only apart from retention cleanup."""

    def insert(self, data: dict[str, Any]) -> LoginAudit:
        result = self._execute(self._db.table("login_audits").insert(data))
        return self._map_to_audit(result.data[0])

    def list_audits(self, filters: LoginAuditFilters) -> list[LoginAudit]:
        """Audit rows matching filters, newest first, at most filters.limit."""
        query = self._db.table("login_audits").select("*")
        if filters.user_id:
            query = query.eq("user_id", filters.user_id)
        if filters.email:
            query = query.eq("email", filters.email.strip().lower())
        if filters.success is not None:
            query = query.eq("success", filters.success)
        if filters.login_method:
            query = query.eq("login_method", filters.login_method.value)
        if filters.start_date:
            query = query.gte("created_at", filters.start_date.isoformat())
        if filters.end_date:
            query = query.lte("created_at", filters.end_date.isoformat())

        result = self._execute(query.order("created_at", desc=True).limit(filters.limit))
        return [self._map_to_audit(row) for row in result.data]

    def list_between(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> list[LoginAudit]:
        """Every audit row in an optional date window, newest first."""
        query = self._db.table("login_audits").select("*")
        if start_date:
            query = query.gte("created_at", start_date.isoformat())
        if end_date:
            query = query.lte("created_at", end_date.isoformat())
        result = self._execute(query.order("created_at", desc=True))
        return [self._map_to_audit(row) for row in result.data]

    def delete_older_than(self, cutoff: datetime) -> int:
        """
        Delete rows created before cutoff.

        Returns:
            Number of rows deleted.
        """
        result = self._execute(
            self._db.table("login_audits").delete().lt("created_at", cutoff.isoformat())
        )
        return len(result.data or [])

    def _map_to_audit(self, data: dict[str, Any]) -> LoginAudit:
        return LoginAudit(
            id=str(data["id"]),
            user_id=str(data["user_id"]) if data.get("user_id") else None,
            email=data["email"],
            login_method=data["login_method"],
            success=data["success"],
            ip_address=data.get("ip_address"),
            user_agent=data.get("user_agent"),
            error_message=data.get("error_message"),
            created_at=data["created_at"],
        )
