"""
Subscriptions module interface.

The boards module calls the gate through ISubscriptionService. The
service counts boards through IBoardCounter so it never imports the
boards module.
"""

from typing import Protocol, runtime_checkable

from .models import BoardCreationDecision, BoardStats, SubscriptionSummary


@runtime_checkable
class IBoardCounter(Protocol):
    """Owned-board counts, supplied by the board store."""

    def count_boards_for_user(self, user_id: str) -> int:
        ...

    def count_boards_by_owner(self) -> dict[str, int]:
        ...


@runtime_checkable
class ISubscriptionService(Protocol):
    """
    Interface for subscription operations.

    This protocol defines the contract that the subscriptions module
    exposes to the boards module and the API layer.
    """

    async def can_create_board(self, user_id: str) -> BoardCreationDecision:
        """
        Decide whether user_id may create another board.

        Read-only. Student tier allows creation while the owned count is
        below the limit; commercial is unlimited; an unknown user is refused.
        """
        ...

    async def get_board_stats(self, user_id: str) -> BoardStats:
        """Owned count, tier limit and whether another board fits."""
        ...

    async def is_subscription_active(self, user_id: str) -> bool:
        """
        Whether the user's subscription is in force.

        An expired commercial subscription is downgraded as a side effect.
        """
        ...

    async def list_subscriptions(self) -> list[SubscriptionSummary]:
        """Every user's subscription with their owned board count."""
        ...
