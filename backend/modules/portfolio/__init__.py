"""
Portfolio module.

Dashboard, board comparison and recent activity over a user's boards.
"""

from .interfaces import IPortfolioService
from .models import (
    PortfolioDashboard,
    PortfolioSummary,
    BoardHighlights,
    BoardComparison,
    ActivityEntry,
)

__all__ = [
    "IPortfolioService",
    "PortfolioDashboard",
    "PortfolioSummary",
    "BoardHighlights",
    "BoardComparison",
    "ActivityEntry",
]
