"""
Subscriptions service implementation.

Holds the board creation gate and tier lifecycle. Tier data lives on the
user row; board counts come from the board store.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from modules.auth.models import User
from modules.auth.repository import UserRepository

from .interfaces import ISubscriptionService, IBoardCounter
from .models import (
    BoardCreationDecision,
    BoardStats,
    COMMERCIAL_PERIOD_DAYS,
    SubscriptionInfo,
    SubscriptionStatus,
    SubscriptionSummary,
    SubscriptionTier,
    get_tier_details,
)
from .exceptions import SubscriptionUserNotFoundError

logger = logging.getLogger(__name__)


class SubscriptionService(ISubscriptionService):
    """
    Subscription service.

    Payment is not handled here; upgrade and downgrade change the stored
    tier directly.
    """

    def __init__(self, users: UserRepository, boards: IBoardCounter):
        self._users = users
        self._boards = boards

    async def can_create_board(self, user_id: str) -> BoardCreationDecision:
        user = self._users.get_by_id(user_id)
        if user is None:
            return BoardCreationDecision(allowed=False, reason="User not found.")

        tier = get_tier_details(user.subscription_tier)
        if tier.board_limit is None:
            return BoardCreationDecision(allowed=True)

        count = self._boards.count_boards_for_user(user_id)
        if count >= tier.board_limit:
            logger.warning(f"Board creation refused for user {user_id}: {count}/{tier.board_limit} boards")
            return BoardCreationDecision(
                allowed=False,
                reason=(
                    f"You have reached the maximum number of boards ({tier.board_limit}) "
                    f"for the {tier.name} plan. Upgrade to Commercial for unlimited boards."
                ),
            )

        return BoardCreationDecision(allowed=True)

    async def get_board_stats(self, user_id: str) -> BoardStats:
        user = self._require_user(user_id)
        tier = get_tier_details(user.subscription_tier)
        count = self._boards.count_boards_for_user(user_id)
        return BoardStats(
            current_boards=count,
            board_limit=tier.board_limit,
            can_create_more=tier.board_limit is None or count < tier.board_limit,
        )

    async def get_subscription(self, user_id: str) -> SubscriptionInfo:
        """The user's tier, status, dates and board stats."""
        is_active = await self.is_subscription_active(user_id)
        user = self._require_user(user_id)
        tier = get_tier_details(user.subscription_tier)
        return SubscriptionInfo(
            tier=tier.id,
            tier_name=tier.name,
            status=user.subscription_status,
            start_date=user.subscription_start_date,
            end_date=user.subscription_end_date,
            is_active=is_active,
            stats=await self.get_board_stats(user_id),
        )

    async def upgrade_to_commercial(self, user_id: str) -> User:
        """Start a commercial period of COMMERCIAL_PERIOD_DAYS from now."""
        self._require_user(user_id)
        now = datetime.now(timezone.utc)
        user = self._users.update(user_id, {
            "subscription_tier": SubscriptionTier.COMMERCIAL.value,
            "subscription_status": SubscriptionStatus.ACTIVE.value,
            "subscription_start_date": now.isoformat(),
            "subscription_end_date": (now + timedelta(days=COMMERCIAL_PERIOD_DAYS)).isoformat(),
        })
        if user is None:
            raise SubscriptionUserNotFoundError(user_id)
        logger.info(f"User {user_id} upgraded to commercial")
        return user

    async def downgrade_to_student(self, user_id: str) -> User:
        self._require_user(user_id)
        user = self._users.update(user_id, {
            "subscription_tier": SubscriptionTier.STUDENT.value,
            "subscription_status": SubscriptionStatus.ACTIVE.value,
            "subscription_start_date": datetime.now(timezone.utc).isoformat(),
            "subscription_end_date": None,
        })
        if user is None:
            raise SubscriptionUserNotFoundError(user_id)
        logger.info(f"User {user_id} downgraded to student")
        return user

    async def is_subscription_active(self, user_id: str) -> bool:
        user = self._users.get_by_id(user_id)
        if user is None:
            return False

        if user.subscription_tier != SubscriptionTier.COMMERCIAL.value:
            return True

        if user.subscription_status != SubscriptionStatus.ACTIVE.value:
            return False

        end = user.subscription_end_date
        if end is not None:
            if end.tzinfo is None:
                end = end.replace(tzinfo=timezone.utc)
            if end < datetime.now(timezone.utc):
                logger.info(f"Commercial subscription for user {user_id} expired")
                await self.downgrade_to_student(user_id)
                return False

        return True

    async def list_subscriptions(self) -> list[SubscriptionSummary]:
        counts = self._boards.count_boards_by_owner()
        return [
            SubscriptionSummary(
                user_id=user.id,
                email=user.email,
                name=user.name,
                tier=user.subscription_tier,
                status=user.subscription_status,
                start_date=user.subscription_start_date,
                end_date=user.subscription_end_date,
                board_count=counts.get(user.id, 0),
                created_at=user.created_at,
            )
            for user in self._users.list_users()
        ]

    def _require_user(self, user_id: str) -> User:
        user = self._users.get_by_id(user_id)
        if user is None:
            raise SubscriptionUserNotFoundError(user_id)
        return user

