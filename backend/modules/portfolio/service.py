"""
Portfolio service implementation.

Aggregates a user's owned boards from the board rows and the section and
post-it index rows. Activity comes from each board's grid_data event log,
the authoritative client state.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Any

from modules.auth.exceptions import UserNotFoundError
from modules.auth.repository import UserRepository
from modules.boards.models import Board, Postit, PostitStatus, Section, SectionKind
from modules.boards.repository import BoardRepository

from .interfaces import IPortfolioService
from .models import (
    ActivityEntry,
    BoardComparison,
    BoardComparisonItem,
    BoardHighlights,
    BoardMetrics,
    ComparisonAverages,
    PortfolioDashboard,
    PortfolioSummary,
    PortfolioUser,
    RecentActivity,
    StatusCounts,
)

logger = logging.getLogger(__name__)

HIGH_RISK_THRESHOLD = 7500
RECENT_WINDOW = timedelta(days=7)
ACTIVE_WINDOW = timedelta(days=30)


def _percent(part: int, whole: int) -> int:
    """Percentage rounded half up; 0 for an empty whole."""
    if whole <= 0:
        return 0
    return int(part * 100 / whole + 0.5)


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class PortfolioService(IPortfolioService):
    """Portfolio reporting over the board store."""

    def __init__(self, boards: BoardRepository, users: UserRepository):
        self._boards = boards
        self._users = users

    async def get_dashboard(self, user_id: str) -> PortfolioDashboard:
        user = self._users.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)

        boards = self._boards.list_owned_boards(user_id)
        board_ids = [b.id for b in boards]
        sections = self._group(self._boards.list_sections(board_ids))
        postits = self._group(self._boards.list_postits(board_ids))

        now = datetime.now(timezone.utc)
        highlights = [
            self._highlight(board, sections.get(board.id, []), postits.get(board.id, []), now)
            for board in boards
        ]

        total_postits = sum(h.total_postits for h in highlights)
        total_done = sum(h.postits_by_status.done for h in highlights)
        active_cutoff = now - ACTIVE_WINDOW
        summary = PortfolioSummary(
            total_boards=len(highlights),
            total_postits=total_postits,
            total_sections=sum(h.total_sections for h in highlights),
            completion_rate=_percent(total_done, total_postits),
            active_boards=sum(
                1 for h in highlights
                if h.last_accessed is not None and _aware(h.last_accessed) > active_cutoff
            ),
        )

        return PortfolioDashboard(
            user=PortfolioUser(
                id=user.id,
                name=user.name,
                email=user.email,
                subscription_tier=user.subscription_tier,
            ),
            summary=summary,
            boards=highlights,
        )

    async def get_board_comparison(self, user_id: str) -> BoardComparison:
        dashboard = await self.get_dashboard(user_id)
        summary = dashboard.summary

        items = [
            BoardComparisonItem(
                title=h.board_title,
                slug=h.board_slug,
                metrics=BoardMetrics(
                    total_items=h.total_postits,
                    completion_rate=_percent(h.postits_by_status.done, h.total_postits),
                    team_size=h.team_member_count,
                    recent_activity=h.recent_activity.created + h.recent_activity.updated,
                    high_risk_items=h.high_risk_items,
                ),
            )
            for h in dashboard.boards
        ]

        averages = ComparisonAverages()
        if summary.total_boards:
            averages = ComparisonAverages(
                completion_rate=summary.completion_rate,
                items_per_board=int(summary.total_postits / summary.total_boards + 0.5),
                sections_per_board=int(summary.total_sections / summary.total_boards + 0.5),
            )
        return BoardComparison(boards=items, averages=averages)

    async def get_recent_activity(self, user_id: str, limit: int = 20) -> list[ActivityEntry]:
        entries: list[ActivityEntry] = []
        for board in self._boards.list_owned_boards(user_id):
            for event in board.grid_data.get("eventLog") or []:
                entry = self._to_activity(board, event)
                if entry is not None:
                    entries.append(entry)

        # Client timestamps are zero-padded, so string order is time order
        entries.sort(key=lambda e: e.timestamp, reverse=True)
        return entries[:limit]

    def _highlight(
        self,
        board: Board,
        sections: list[Section],
        postits: list[Postit],
        now: datetime,
    ) -> BoardHighlights:
        recent_cutoff = now - RECENT_WINDOW
        created = sum(1 for p in postits if _aware(p.created_at) > recent_cutoff)
        updated = sum(
            1 for p in postits
            if _aware(p.updated_at) > recent_cutoff and _aware(p.created_at) <= recent_cutoff
        )

        return BoardHighlights(
            board_id=board.id,
            board_title=board.title,
            board_slug=board.slug,
            last_accessed=board.last_accessed_at,
            total_sections=len(sections),
            total_postits=len(postits),
            postits_by_status=StatusCounts(
                todo=sum(1 for p in postits if p.status == PostitStatus.TODO),
                inprogress=sum(1 for p in postits if p.status == PostitStatus.IN_PROGRESS),
                done=sum(1 for p in postits if p.status == PostitStatus.DONE),
            ),
            recent_activity=RecentActivity(created=created, updated=updated),
            team_member_count=len(board.grid_data.get("teamMembers") or []),
            has_risk_matrix=any(s.type == SectionKind.MATRIX for s in sections),
            high_risk_items=sum(
                1 for p in postits
                if p.risk_score is not None and p.risk_score > HIGH_RISK_THRESHOLD
            ),
        )

    def _to_activity(self, board: Board, event: Any) -> Optional[ActivityEntry]:
        if not isinstance(event, dict) or not event.get("timestamp") or not event.get("type"):
            logger.debug(f"Skipping malformed event log entry on board {board.id}")
            return None
        details = event.get("details")
        return ActivityEntry(
            type=str(event["type"]),
            element_id=event.get("elementId"),
            element_type=event.get("elementType"),
            details=details if details is None or isinstance(details, str) else str(details),
            timestamp=str(event["timestamp"]),
            board_id=board.id,
            board_title=board.title,
            board_slug=board.slug,
        )

    @staticmethod
    def _group(rows: list) -> dict[str, list]:
        grouped: dict[str, list] = {}
        for row in rows:
            grouped.setdefault(row.board_id, []).append(row)
        return grouped

