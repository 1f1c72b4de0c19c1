"""
User repository for database access.

Encapsulates Supabase queries against the users table. Subscription
fields live on the user row, so the subscriptions module reads and
writes tiers through this repository too.
"""

import logging
from typing import Optional, Any

from shared.repository import BaseRepository
from .models import User

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for user data access.

    Emails are stored lower-cased; lookups normalise their argument the
    same way.
    """

    def get_by_id(self, user_id: str) -> Optional[User]:
        result = self._execute(self._db.table("users").select("*").eq("id", user_id))
        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    def get_by_email(self, email: str) -> Optional[User]:
        result = self._execute(
            self._db.table("users").select("*").eq("email", email.strip().lower())
        )
        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    def create(self, data: dict[str, Any]) -> User:
        """
        Insert a user row.

        Args:
            data: Column values; email is normalised before the insert.

        Returns:
            Created User with generated ID and timestamps.
        """
        data = {**data, "email": data["email"].strip().lower()}
        result = self._execute(self._db.table("users").insert(data))
        logger.debug(f"Inserted user {result.data[0]['id']}")
        return self._map_to_user(result.data[0])

    def update(self, user_id: str, data: dict[str, Any]) -> Optional[User]:
        """
        Update columns on a user row and stamp updated_at.

        Returns:
            The updated User, or None if no row matched.
        """
        data = {**data, "updated_at": self._now_iso()}
        result = self._execute(self._db.table("users").update(data).eq("id", user_id))
        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    def list_users(self) -> list[User]:
        """All users, newest first."""
        result = self._execute(
            self._db.table("users").select("*").order("created_at", desc=True)
        )
        return [self._map_to_user(row) for row in result.data]

    def _map_to_user(self, data: dict[str, Any]) -> User:
        """Map database row to User model."""
        return User(
            id=str(data["id"]),
            email=data["email"],
            password_hash=data.get("password_hash"),
            name=data.get("name"),
            avatar_url=data.get("avatar_url"),
            auth_provider=data.get("auth_provider") or "email",
            auth_provider_id=data.get("auth_provider_id"),
            email_verified=data.get("email_verified", False),
            verification_token=data.get("verification_token"),
            subscription_tier=data.get("subscription_tier") or "student",
            subscription_status=data.get("subscription_status") or "active",
            subscription_start_date=data.get("subscription_start_date"),
            subscription_end_date=data.get("subscription_end_date"),
            is_active=data.get("is_active", True),
            last_login_at=data.get("last_login_at"),
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )
