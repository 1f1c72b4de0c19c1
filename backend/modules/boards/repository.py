"""
Board repository for database access.

Encapsulates all Supabase queries and data mapping for board-related tables:
- boards
- board_collaborators
- sections
- postits

The boards.version and boards.grid_data columns are written only through
update_versioned(), which runs the update_board_versioned() database
function (see migrations/003_board_write_permission.sql). That function locks
the row, resolves the requester's level, compares the version and applies the
change in one transaction.
"""

import logging
from typing import Optional, Any

from shared.exceptions import ExternalServiceError
from shared.repository import BaseRepository
from .models import (
    Board,
    Collaborator,
    PermissionLevel,
    Section,
    Postit,
    VersionedWriteResult,
    WriteStatus,
)
from .exceptions import SlugTakenError

logger = logging.getLogger(__name__)

# Postgres SQLSTATE for a UNIQUE constraint violation
UNIQUE_VIOLATION = "23505"


class BoardRepository(BaseRepository[Board]):
    """
    Repository for board data access.

    Handles all database operations for boards and related entities.
    All methods return Pydantic models with proper mapping from database rows.

    Note: Authorization is resolved by the service layer. The one exception
    is update_versioned(), which re-checks the requester's level under the
    row lock.
    """

    # -------------------------------------------------------------------------
    # Board operations
    # -------------------------------------------------------------------------

    def create_board(self, data: dict[str, Any]) -> Board:
        """
        Create a new board record.

        Args:
            data: Dictionary with board fields (user_id, title, slug, ...)

        Returns:
            Created Board with generated ID and timestamps.

        Raises:
            SlugTakenError: If another board took the slug first.
        """
        try:
            result = self._execute(self._db.table("boards").insert(data))
        except ExternalServiceError as e:
            if e.details.get("db_code") == UNIQUE_VIOLATION:
                raise SlugTakenError(data["slug"]) from e
            raise
        return self._map_to_board(result.data[0])

    def get_board_by_id(self, board_id: str) -> Optional[Board]:
        """
        Get a board by ID together with all its collaborator rows.

        Args:
            board_id: The board UUID.

        Returns:
            Board, or None if not found.
        """
        result = self._execute(
            self._db.table("boards")
            .select("*, board_collaborators(*)")
            .eq("id", board_id)
        )
        if not result.data:
            return None
        return self._map_to_board(result.data[0])

    def get_board_by_slug(self, slug: str) -> Optional[Board]:
        """Get a board by its slug together with its collaborator rows."""
        result = self._execute(
            self._db.table("boards")
            .select("*, board_collaborators(*)")
            .eq("slug", slug)
        )
        if not result.data:
            return None
        return self._map_to_board(result.data[0])

    def slug_exists(self, slug: str) -> bool:
        """Check whether a slug is already taken."""
        result = self._execute(self._db.table("boards").select("id").eq("slug", slug))
        return bool(result.data)

    def list_owned_boards(self, user_id: str) -> list[Board]:
        """List boards owned by a user, most recently accessed first."""
        result = self._execute(
            self._db.table("boards")
            .select("*")
            .eq("user_id", user_id)
            .order("last_accessed_at", desc=True)
        )
        return [self._map_to_board(row) for row in result.data]

    def list_boards_for_user(self, user_id: str) -> list[Board]:
        """
        List boards a user owns or collaborates on (accepted invites only).

        Returns:
            Boards with collaborator rows, most recently updated first.
        """
        owned = self._execute(
            self._db.table("boards")
            .select("*, board_collaborators(*)")
            .eq("user_id", user_id)
        )
        memberships = self._execute(
            self._db.table("board_collaborators")
            .select("board_id")
            .eq("user_id", user_id)
            .not_.is_("accepted_at", "null")
        )

        rows = {row["id"]: row for row in owned.data}
        shared_ids = [m["board_id"] for m in memberships.data if m["board_id"] not in rows]
        if shared_ids:
            shared = self._execute(
                self._db.table("boards")
                .select("*, board_collaborators(*)")
                .in_("id", shared_ids)
            )
            for row in shared.data:
                rows[row["id"]] = row

        boards = [self._map_to_board(row) for row in rows.values()]
        boards.sort(key=lambda b: b.updated_at, reverse=True)
        return boards

    def count_boards_for_user(self, user_id: str) -> int:
        """Count the boards a user owns."""
        result = self._execute(
            self._db.table("boards").select("id", count="exact").eq("user_id", user_id)
        )
        return result.count or 0

    def count_boards_by_owner(self) -> dict[str, int]:
        """Owned-board counts for every user that owns at least one board."""
        result = self._execute(self._db.table("boards").select("user_id"))
        counts: dict[str, int] = {}
        for row in result.data:
            owner = str(row["user_id"])
            counts[owner] = counts.get(owner, 0) + 1
        return counts

    def touch_last_accessed(self, board_id: str) -> None:
        """Stamp last_accessed_at. Does not change version."""
        self._execute(
            self._db.table("boards")
            .update({"last_accessed_at": self._now_iso()})
            .eq("id", board_id)
        )

    def update_versioned(
        self,
        board_id: str,
        changes: dict[str, Any],
        expected_version: Optional[int] = None,
        requester_id: Optional[str] = None,
        required: PermissionLevel = PermissionLevel.EDIT,
    ) -> VersionedWriteResult:
        """
        Apply changes to a board and increment its version atomically.

        The database function holds a row lock while it resolves the
        requester's level, compares the version and writes, so concurrent
        callers presenting the same expected_version cannot both succeed and
        a collaborator removed after the service read the board cannot write.

        Args:
            board_id: The board UUID.
            changes: Mutable column values to write.
            expected_version: Version the caller read, or None to skip the compare.
            requester_id: User making the change; None is an anonymous caller.
            required: Level the requester must hold at write time.

        Returns:
            VersionedWriteResult with status ok (and the updated board),
            conflict (and the current version), forbidden or not_found.
        """
        result = self._execute(
            self._db.rpc(
                "update_board_versioned",
                {
                    "p_board_id": board_id,
                    "p_changes": changes,
                    "p_expected_version": expected_version,
                    "p_requester_id": requester_id,
                    "p_required_level": required.value,
                },
            )
        )
        payload = result.data or {}
        status = WriteStatus(payload.get("status", WriteStatus.NOT_FOUND.value))
        logger.debug(f"Versioned write on board {board_id}: {status.value}")

        if status == WriteStatus.OK:
            board = self._map_to_board(payload["board"])
            return VersionedWriteResult(status=status, current_version=board.version, board=board)

        return VersionedWriteResult(status=status, current_version=payload.get("current_version"))

    def delete_board(self, board_id: str) -> bool:
        """
        Delete a board.

        Note: Collaborators, sections and post-its are deleted via CASCADE.
        """
        self._execute(self._db.table("boards").delete().eq("id", board_id))
        return True

    # -------------------------------------------------------------------------
    # Collaborator operations
    # -------------------------------------------------------------------------

    def list_collaborators(self, board_id: str) -> list[Collaborator]:
        result = self._execute(
            self._db.table("board_collaborators")
            .select("*")
            .eq("board_id", board_id)
            .order("created_at")
        )
        return [self._map_to_collaborator(row) for row in result.data]

    def upsert_collaborator(self, data: dict[str, Any]) -> Collaborator:
        """Insert or update the (board_id, user_id) collaborator row."""
        result = self._execute(
            self._db.table("board_collaborators").upsert(data, on_conflict="board_id,user_id")
        )
        return self._map_to_collaborator(result.data[0])

    def delete_collaborator(self, board_id: str, user_id: str) -> bool:
        """
        Remove a collaborator row.

        Returns:
            True if a row was deleted.
        """
        result = self._execute(
            self._db.table("board_collaborators")
            .delete()
            .eq("board_id", board_id)
            .eq("user_id", user_id)
        )
        return bool(result.data)

    # -------------------------------------------------------------------------
    # Section index operations
    # -------------------------------------------------------------------------

    def create_section(self, data: dict[str, Any]) -> Section:
        result = self._execute(self._db.table("sections").insert(data))
        return self._map_to_section(result.data[0])

    def get_section(self, section_id: str) -> Optional[Section]:
        result = self._execute(self._db.table("sections").select("*").eq("id", section_id))
        if not result.data:
            return None
        return self._map_to_section(result.data[0])

    def update_section(self, section_id: str, data: dict[str, Any]) -> Section:
        data = {**data, "updated_at": self._now_iso()}
        result = self._execute(
            self._db.table("sections").update(data).eq("id", section_id)
        )
        return self._map_to_section(result.data[0])

    def delete_section(self, section_id: str) -> None:
        self._execute(self._db.table("sections").delete().eq("id", section_id))

    def list_sections(self, board_ids: list[str]) -> list[Section]:
        """Section rows for a set of boards."""
        if not board_ids:
            return []
        result = self._execute(
            self._db.table("sections").select("*").in_("board_id", board_ids)
        )
        return [self._map_to_section(row) for row in result.data]

    # -------------------------------------------------------------------------
    # Post-it index operations
    # -------------------------------------------------------------------------

    def create_postit(self, data: dict[str, Any]) -> Postit:
        result = self._execute(self._db.table("postits").insert(data))
        return self._map_to_postit(result.data[0])

    def get_postit(self, postit_id: str) -> Optional[Postit]:
        result = self._execute(self._db.table("postits").select("*").eq("id", postit_id))
        if not result.data:
            return None
        return self._map_to_postit(result.data[0])

    def update_postit(self, postit_id: str, data: dict[str, Any]) -> Postit:
        data = {**data, "updated_at": self._now_iso()}
        result = self._execute(
            self._db.table("postits").update(data).eq("id", postit_id)
        )
        return self._map_to_postit(result.data[0])

    def delete_postit(self, postit_id: str) -> None:
        self._execute(self._db.table("postits").delete().eq("id", postit_id))

    def list_postits(self, board_ids: list[str]) -> list[Postit]:
        """Post-it rows for a set of boards."""
        if not board_ids:
            return []
        result = self._execute(
            self._db.table("postits").select("*").in_("board_id", board_ids)
        )
        return [self._map_to_postit(row) for row in result.data]

    # -------------------------------------------------------------------------
    # Private mapping methods
    # -------------------------------------------------------------------------

    def _map_to_board(self, data: dict[str, Any]) -> Board:
        """Map database row to Board model."""
        collaborators = [
            self._map_to_collaborator(c) for c in data.get("board_collaborators") or []
        ]
        return Board(
            id=str(data["id"]),
            user_id=str(data["user_id"]),
            title=data["title"],
            slug=data["slug"],
            description=data.get("description"),
            grid_data=data.get("grid_data") or {},
            settings=data.get("settings") or {},
            version=data.get("version", 0),
            is_public=data.get("is_public", False),
            collaborators=collaborators,
            created_at=data["created_at"],
            updated_at=data["updated_at"],
            last_accessed_at=data.get("last_accessed_at"),
        )

    def _map_to_collaborator(self, data: dict[str, Any]) -> Collaborator:
        return Collaborator(
            id=str(data["id"]),
            board_id=str(data["board_id"]),
            user_id=str(data["user_id"]),
            permission=data["permission"],
            invited_by=str(data["invited_by"]) if data.get("invited_by") else None,
            accepted_at=data.get("accepted_at"),
            created_at=data.get("created_at"),
        )

    def _map_to_section(self, data: dict[str, Any]) -> Section:
        return Section(
            id=str(data["id"]),
            board_id=str(data["board_id"]),
            type=data["type"],
            title=data.get("title") or "",
            content=data.get("content") or {},
            position=data.get("position") or {},
            locked=data.get("locked", False),
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )

    def _map_to_postit(self, data: dict[str, Any]) -> Postit:
        return Postit(
            id=str(data["id"]),
            board_id=str(data["board_id"]),
            section_id=str(data["section_id"]) if data.get("section_id") else None,
            title=data.get("title") or "",
            content=data.get("content") or "",
            color=data.get("color"),
            status=data.get("status") or "todo",
            x_value=data.get("x_value"),
            y_value=data.get("y_value"),
            risk_score=data.get("risk_score"),
            position=data.get("position") or {},
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )
