"""
Portfolio module interface.
"""

from typing import Protocol, runtime_checkable

from .models import ActivityEntry, BoardComparison, PortfolioDashboard


@runtime_checkable
class IPortfolioService(Protocol):
    """Read-only reporting across the boards a user owns."""

    async def get_dashboard(self, user_id: str) -> PortfolioDashboard:
        """
        Per-board highlights and a summary over all owned boards.

        Raises:
            UserNotFoundError: If the user doesn't exist
        """
        ...

    async def get_board_comparison(self, user_id: str) -> BoardComparison:
        """Per-board metrics with averages; zero boards yields zero averages."""
        ...

    async def get_recent_activity(self, user_id: str, limit: int = 20) -> list[ActivityEntry]:
        """Newest event log entries across owned boards."""
        ...
