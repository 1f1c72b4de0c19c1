"""
Portfolio module data models.

Read-only aggregates over a user's owned boards.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class StatusCounts(BaseModel):
    todo: int = 0
    inprogress: int = 0
    done: int = 0


class RecentActivity(BaseModel):
    """Post-its touched in the recent window."""

    created: int = 0
    updated: int = Field(0, description="Updated in the window but created before it")


class BoardHighlights(BaseModel):
    board_id: str
    board_title: str
    board_slug: str
    last_accessed: Optional[datetime] = None
    total_sections: int = 0
    total_postits: int = 0
    postits_by_status: StatusCounts = Field(default_factory=StatusCounts)
    recent_activity: RecentActivity = Field(default_factory=RecentActivity)
    team_member_count: int = 0
    has_risk_matrix: bool = False
    high_risk_items: int = 0


class PortfolioUser(BaseModel):
    id: str
    name: Optional[str] = None
    email: str
    subscription_tier: str


class PortfolioSummary(BaseModel):
    total_boards: int = 0
    total_postits: int = 0
    total_sections: int = 0
    completion_rate: int = Field(0, description="Rounded percentage of post-its done")
    active_boards: int = Field(0, description="Boards accessed in the active window")


class PortfolioDashboard(BaseModel):
    user: PortfolioUser
    summary: PortfolioSummary
    boards: list[BoardHighlights]


class BoardMetrics(BaseModel):
    total_items: int
    completion_rate: int
    team_size: int
    recent_activity: int
    high_risk_items: int


class BoardComparisonItem(BaseModel):
    title: str
    slug: str
    metrics: BoardMetrics


class ComparisonAverages(BaseModel):
    completion_rate: int = 0
    items_per_board: int = 0
    sections_per_board: int = 0


class BoardComparison(BaseModel):
    boards: list[BoardComparisonItem]
    averages: ComparisonAverages


class ActivityEntry(BaseModel):
    """An entry from a board's client-side event log."""

    type: str
    element_id: Optional[str] = None
    element_type: Optional[str] = None
    details: Optional[str] = None
    timestamp: str = Field(..., description="As recorded by the client, 'YYYY-MM-DD HH:MM:SS'")
    board_id: str
    board_title: str
    board_slug: str
