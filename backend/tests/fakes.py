"""
In-memory stand-ins for the Supabase-backed repositories.

They implement the same methods the services call, so service tests can
exercise real permission, versioning and gating logic without a database.
update_versioned() holds a lock across the permission check, the compare and
the write, the same guarantee the update_board_versioned() database function
gives.
"""

import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from modules.auth.models import User
from modules.boards.models import (
    Board,
    Collaborator,
    PermissionLevel,
    Postit,
    Section,
    VersionedWriteResult,
    WriteStatus,
)
from modules.boards.permissions import resolve_permission


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryUserRepository:
    def __init__(self) -> None:
        self.users: dict[str, User] = {}

    def add(self, **fields: Any) -> User:
        now = _now()
        data = {"id": str(uuid.uuid4()), "created_at": now, "updated_at": now, **fields}
        data["email"] = data["email"].strip().lower()
        user = User.model_validate(data)
        self.users[user.id] = user
        return user

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        email = email.strip().lower()
        return next((u for u in self.users.values() if u.email == email), None)

    def create(self, data: dict[str, Any]) -> User:
        return self.add(**data)

    def update(self, user_id: str, data: dict[str, Any]) -> Optional[User]:
        user = self.users.get(user_id)
        if user is None:
            return None
        updated = User.model_validate({**user.model_dump(), **data, "updated_at": _now()})
        self.users[user_id] = updated
        return updated

    def list_users(self) -> list[User]:
        return sorted(self.users.values(), key=lambda u: u.created_at, reverse=True)


class InMemoryBoardRepository:
    """
    Board store with a compare-and-set versioned write.

    before_write, when set, runs after the service has read the board and
    before the locked write; tests use it to open a race window.
    """

    def __init__(self) -> None:
        self.boards: dict[str, Board] = {}
        self.collaborators: dict[tuple[str, str], Collaborator] = {}
        self.sections: dict[str, Section] = {}
        self.postits: dict[str, Postit] = {}
        self.touched: list[str] = []
        self.before_write: Optional[Callable[[], None]] = None
        self._lock = threading.Lock()

    # Boards

    def add_board(self, user_id: str, title: str = "Board", **fields: Any) -> Board:
        now = _now()
        data = {
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "title": title,
            "slug": fields.pop("slug", None) or f"{title.lower().replace(' ', '-')}-{uuid.uuid4().hex[:6]}",
            "created_at": now,
            "updated_at": now,
            **fields,
        }
        board = Board.model_validate(data)
        self.boards[board.id] = board
        return board

    def create_board(self, data: dict[str, Any]) -> Board:
        return self.add_board(**data)

    def get_board_by_id(self, board_id: str) -> Optional[Board]:
        board = self.boards.get(board_id)
        return self._with_collaborators(board) if board else None

    def get_board_by_slug(self, slug: str) -> Optional[Board]:
        board = next((b for b in self.boards.values() if b.slug == slug), None)
        return self._with_collaborators(board) if board else None

    def slug_exists(self, slug: str) -> bool:
        return any(b.slug == slug for b in self.boards.values())

    def list_owned_boards(self, user_id: str) -> list[Board]:
        return [b for b in self.boards.values() if b.user_id == user_id]

    def list_boards_for_user(self, user_id: str) -> list[Board]:
        shared = {
            c.board_id for c in self.collaborators.values()
            if c.user_id == user_id and c.is_accepted
        }
        boards = [
            self._with_collaborators(b) for b in self.boards.values()
            if b.user_id == user_id or b.id in shared
        ]
        return sorted(boards, key=lambda b: b.updated_at, reverse=True)

    def count_boards_for_user(self, user_id: str) -> int:
        return len(self.list_owned_boards(user_id))

    def count_boards_by_owner(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for board in self.boards.values():
            counts[board.user_id] = counts.get(board.user_id, 0) + 1
        return counts

    def touch_last_accessed(self, board_id: str) -> None:
        self.touched.append(board_id)
        board = self.boards.get(board_id)
        if board is not None:
            self.boards[board_id] = board.model_copy(update={"last_accessed_at": _now()})

    def update_versioned(
        self,
        board_id: str,
        changes: dict[str, Any],
        expected_version: Optional[int] = None,
        requester_id: Optional[str] = None,
        required: PermissionLevel = PermissionLevel.EDIT,
    ) -> VersionedWriteResult:
        if self.before_write is not None:
            self.before_write()

        with self._lock:
            board = self.boards.get(board_id)
            if board is None:
                return VersionedWriteResult(status=WriteStatus.NOT_FOUND)
            if not resolve_permission(self._with_collaborators(board), requester_id, required):
                return VersionedWriteResult(status=WriteStatus.FORBIDDEN)
            if expected_version is not None and expected_version != board.version:
                return VersionedWriteResult(status=WriteStatus.CONFLICT, current_version=board.version)

            updated = Board.model_validate({
                **board.model_dump(),
                **changes,
                "version": board.version + 1,
                "updated_at": _now(),
            })
            self.boards[board_id] = updated
            return VersionedWriteResult(
                status=WriteStatus.OK,
                current_version=updated.version,
                board=updated,
            )

    def delete_board(self, board_id: str) -> bool:
        self.boards.pop(board_id, None)
        for key in [k for k in self.collaborators if k[0] == board_id]:
            del self.collaborators[key]
        self.sections = {k: s for k, s in self.sections.items() if s.board_id != board_id}
        self.postits = {k: p for k, p in self.postits.items() if p.board_id != board_id}
        return True

    # Collaborators

    def add_collaborator(
        self,
        board_id: str,
        user_id: str,
        permission: str,
        accepted: bool = True,
    ) -> Collaborator:
        return self.upsert_collaborator({
            "board_id": board_id,
            "user_id": user_id,
            "permission": permission,
            "accepted_at": _now() if accepted else None,
        })

    def list_collaborators(self, board_id: str) -> list[Collaborator]:
        return [c for (b, _), c in self.collaborators.items() if b == board_id]

    def upsert_collaborator(self, data: dict[str, Any]) -> Collaborator:
        key = (data["board_id"], data["user_id"])
        existing = self.collaborators.get(key)
        collaborator = Collaborator.model_validate({
            "id": existing.id if existing else str(uuid.uuid4()),
            "created_at": existing.created_at if existing else _now(),
            **data,
        })
        self.collaborators[key] = collaborator
        return collaborator

    def delete_collaborator(self, board_id: str, user_id: str) -> bool:
        return self.collaborators.pop((board_id, user_id), None) is not None

    # Sections

    def create_section(self, data: dict[str, Any]) -> Section:
        now = _now()
        section = Section.model_validate({"id": str(uuid.uuid4()), "created_at": now, "updated_at": now, **data})
        self.sections[section.id] = section
        return section

    def get_section(self, section_id: str) -> Optional[Section]:
        return self.sections.get(section_id)

    def update_section(self, section_id: str, data: dict[str, Any]) -> Section:
        section = Section.model_validate({**self.sections[section_id].model_dump(), **data, "updated_at": _now()})
        self.sections[section_id] = section
        return section

    def delete_section(self, section_id: str) -> None:
        self.sections.pop(section_id, None)

    def list_sections(self, board_ids: list[str]) -> list[Section]:
        return [s for s in self.sections.values() if s.board_id in board_ids]

    # Post-its

    def create_postit(self, data: dict[str, Any]) -> Postit:
        now = _now()
        postit = Postit.model_validate({
            "id": str(uuid.uuid4()),
            "created_at": data.pop("created_at", now),
            "updated_at": data.pop("updated_at", now),
            **data,
        })
        self.postits[postit.id] = postit
        return postit

    def get_postit(self, postit_id: str) -> Optional[Postit]:
        return self.postits.get(postit_id)

    def update_postit(self, postit_id: str, data: dict[str, Any]) -> Postit:
        postit = Postit.model_validate({**self.postits[postit_id].model_dump(), **data, "updated_at": _now()})
        self.postits[postit_id] = postit
        return postit

    def delete_postit(self, postit_id: str) -> None:
        self.postits.pop(postit_id, None)

    def list_postits(self, board_ids: list[str]) -> list[Postit]:
        return [p for p in self.postits.values() if p.board_id in board_ids]

    def _with_collaborators(self, board: Board) -> Board:
        return board.model_copy(update={"collaborators": self.list_collaborators(board.id)})
