"""
Board service implementation.

Every board-scoped operation loads the board with its collaborator rows,
resolves the requester's permission, and only then touches the store.

Board content (grid_data) and version are written only by update_board(),
through the repository's versioned write. Section and post-it operations
maintain the index rows and never touch grid_data or version.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Optional, Any

from shared.config import Settings, get_settings
from shared.exceptions import ValidationError

from .interfaces import IBoardService
from .models import (
    Board,
    BoardListItem,
    BoardListResponse,
    Collaborator,
    CreateBoardRequest,
    CreatePostitRequest,
    CreateSectionRequest,
    MUTABLE_BOARD_FIELDS,
    PermissionLevel,
    Postit,
    Section,
    ShareBoardRequest,
    ShareBoardResponse,
    UpdatePostitRequest,
    UpdateSectionRequest,
    WriteStatus,
)
from .permissions import effective_permission, resolve_permission
from .repository import BoardRepository
from .exceptions import (
    BoardAccessDeniedError,
    BoardCreationDeniedError,
    BoardNotFoundError,
    CollaboratorNotFoundError,
    InvalidSectionError,
    InvalidShareTargetError,
    PostitNotFoundError,
    SectionNotFoundError,
    SlugTakenError,
    VersionConflictError,
)

logger = logging.getLogger(__name__)

_SLUG_INVALID = re.compile(r"[^a-z0-9]+")

# Inserts tried before a slug race is reported as a conflict
SLUG_ATTEMPTS = 5


def slugify(title: str) -> str:
    """
    Lower-case title with runs of anything but [a-z0-9] collapsed to "-".

    Falls back to "board" when nothing usable is left.
    """
    slug = _SLUG_INVALID.sub("-", title.lower()).strip("-")
    return slug or "board"


def compute_risk_score(x_value: Optional[float], y_value: Optional[float]) -> Optional[float]:
    """Probability x consequence, when both axes are set."""
    if x_value is None or y_value is None:
        return None
    return x_value * y_value


class BoardService(IBoardService):
    """
    Board service with Supabase backend.

    Implements IBoardService. Consults the subscription gate before
    creating boards and the user store when sharing by email.
    """

    def __init__(
        self,
        repository: BoardRepository,
        subscriptions: Any = None,  # ISubscriptionService - injected
        users: Any = None,          # UserRepository - injected
        settings: Optional[Settings] = None,
    ):
        self._repo = repository
        self._subscriptions = subscriptions
        self._users = users
        self._settings = settings or get_settings()

    # -------------------------------------------------------------------------
    # Boards
    # -------------------------------------------------------------------------

    async def list_boards(self, user_id: str) -> BoardListResponse:
        items = []
        for board in self._repo.list_boards_for_user(user_id):
            permission = effective_permission(board, user_id)
            if permission is None:
                continue
            items.append(BoardListItem(
                id=board.id,
                title=board.title,
                slug=board.slug,
                description=board.description,
                is_public=board.is_public,
                version=board.version,
                is_owner=board.user_id == user_id,
                permission=permission,
                updated_at=board.updated_at,
                last_accessed_at=board.last_accessed_at,
            ))
        return BoardListResponse(boards=items, total=len(items))

    async def get_board(self, board_id: str, user_id: Optional[str]) -> Board:
        board = self._load_authorized(board_id, user_id, PermissionLevel.VIEW)
        self._repo.touch_last_accessed(board.id)
        return self._visible_to(board, user_id)

    async def get_board_by_slug(self, slug: str, user_id: Optional[str]) -> Board:
        board = self._repo.get_board_by_slug(slug)
        if board is None:
            raise BoardNotFoundError(slug)
        self._authorize(board, user_id, PermissionLevel.VIEW)
        self._repo.touch_last_accessed(board.id)
        return self._visible_to(board, user_id)

    async def create_board(self, user_id: str, request: CreateBoardRequest) -> Board:
        # Gate and insert are separate statements; concurrent creations by
        # one user can both pass the count check.
        if self._subscriptions is not None:
            decision = await self._subscriptions.can_create_board(user_id)
            if not decision.allowed:
                raise BoardCreationDeniedError(decision.reason or "Board limit reached", user_id)

        data = {
            "user_id": user_id,
            "title": request.title.strip(),
            "description": request.description,
            "grid_data": {},
            "settings": {},
            "version": 0,
            "is_public": False,
            "last_accessed_at": datetime.now(timezone.utc).isoformat(),
        }
        for attempt in range(SLUG_ATTEMPTS):
            slug = self._unique_slug(request.title)
            try:
                board = self._repo.create_board({**data, "slug": slug})
                break
            except SlugTakenError:
                # Another board took the slug between the check and the insert
                if attempt == SLUG_ATTEMPTS - 1:
                    raise
                logger.debug(f"Slug {slug} taken concurrently, retrying")

        logger.info(f"Board {board.id} created by user {user_id}")
        return board

    async def update_board(
        self,
        board_id: str,
        user_id: Optional[str],
        changes: dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> Board:
        board = self._load_authorized(board_id, user_id, PermissionLevel.EDIT)
        changes = self._mutable_changes(changes)

        # Early out on a version we already know is stale; the write
        # repeats the compare under the row lock.
        if expected_version is not None and expected_version != board.version:
            logger.warning(
                f"Version conflict on board {board_id}: expected {expected_version}, "
                f"current {board.version}"
            )
            raise VersionConflictError(board_id, board.version, expected_version)

        result = self._repo.update_versioned(
            board_id,
            changes,
            expected_version,
            requester_id=user_id,
            required=PermissionLevel.EDIT,
        )

        if result.status == WriteStatus.NOT_FOUND:
            raise BoardNotFoundError(board_id)
        if result.status == WriteStatus.FORBIDDEN:
            # Access was revoked or lowered after the read above
            logger.warning(f"User {user_id or 'anonymous'} lost edit on board {board_id} before the write")
            raise BoardAccessDeniedError(board_id, PermissionLevel.EDIT.value)
        if result.status == WriteStatus.CONFLICT:
            logger.warning(
                f"Version conflict on board {board_id}: expected {expected_version}, "
                f"current {result.current_version}"
            )
            raise VersionConflictError(board_id, result.current_version, expected_version)

        updated = result.board.model_copy(update={"collaborators": board.collaborators})
        logger.info(f"Board {board_id} updated to version {updated.version} by user {user_id}")
        return self._visible_to(updated, user_id)

    async def delete_board(self, board_id: str, user_id: str) -> None:
        board = self._repo.get_board_by_id(board_id)
        if board is None:
            raise BoardNotFoundError(board_id)
        if board.user_id != user_id:
            logger.warning(f"User {user_id} denied delete on board {board_id}")
            raise BoardAccessDeniedError(board_id, PermissionLevel.ADMIN.value)

        self._repo.delete_board(board_id)
        logger.info(f"Board {board_id} deleted by user {user_id}")

    # -------------------------------------------------------------------------
    # Sharing
    # -------------------------------------------------------------------------

    async def share_board(
        self,
        board_id: str,
        user_id: str,
        request: ShareBoardRequest,
    ) -> ShareBoardResponse:
        board = self._load_authorized(board_id, user_id, PermissionLevel.ADMIN)
        email = str(request.email).strip().lower()
        share_url = f"{self._settings.frontend_url}/board.html?id={board_id}"

        target = self._users.get_by_email(email) if self._users is not None else None
        if target is None:
            # No account yet; invite delivery happens outside this service
            logger.info(f"Board {board_id} shared with unregistered email by user {user_id}")
            return ShareBoardResponse(email=email, collaborator=None, share_url=share_url)

        if target.id == board.user_id:
            raise InvalidShareTargetError(email, "user already owns this board")

        existing = next((c for c in board.collaborators if c.user_id == target.id), None)
        now = datetime.now(timezone.utc).isoformat()
        collaborator = self._repo.upsert_collaborator({
            "board_id": board_id,
            "user_id": target.id,
            "permission": request.permission.value,
            "invited_by": existing.invited_by if existing and existing.invited_by else user_id,
            "accepted_at": existing.accepted_at.isoformat() if existing and existing.accepted_at else now,
        })
        logger.info(
            f"Board {board_id} shared with user {target.id} ({request.permission.value}) by user {user_id}"
        )
        return ShareBoardResponse(email=email, collaborator=collaborator, share_url=share_url)

    async def list_collaborators(self, board_id: str, user_id: str) -> list[Collaborator]:
        self._load_authorized(board_id, user_id, PermissionLevel.VIEW)
        return self._repo.list_collaborators(board_id)

    async def remove_collaborator(
        self,
        board_id: str,
        user_id: str,
        collaborator_user_id: str,
    ) -> None:
        self._load_authorized(board_id, user_id, PermissionLevel.ADMIN)
        if not self._repo.delete_collaborator(board_id, collaborator_user_id):
            raise CollaboratorNotFoundError(board_id, collaborator_user_id)
        logger.info(f"User {collaborator_user_id} removed from board {board_id} by user {user_id}")

    # -------------------------------------------------------------------------
    # Section index
    # -------------------------------------------------------------------------

    async def create_section(
        self,
        board_id: str,
        user_id: str,
        request: CreateSectionRequest,
    ) -> Section:
        self._load_authorized(board_id, user_id, PermissionLevel.EDIT)
        data = request.model_dump(mode="json")
        data["board_id"] = board_id
        return self._repo.create_section(data)

    async def update_section(
        self,
        board_id: str,
        section_id: str,
        user_id: str,
        request: UpdateSectionRequest,
    ) -> Section:
        self._load_authorized(board_id, user_id, PermissionLevel.EDIT)
        section = self._get_section(board_id, section_id)

        data = request.model_dump(mode="json", exclude_unset=True)
        if not data:
            return section
        return self._repo.update_section(section_id, data)

    async def delete_section(self, board_id: str, section_id: str, user_id: str) -> None:
        self._load_authorized(board_id, user_id, PermissionLevel.EDIT)
        self._get_section(board_id, section_id)
        self._repo.delete_section(section_id)

    # -------------------------------------------------------------------------
    # Post-it index
    # -------------------------------------------------------------------------

    async def create_postit(
        self,
        board_id: str,
        user_id: str,
        request: CreatePostitRequest,
    ) -> Postit:
        self._load_authorized(board_id, user_id, PermissionLevel.EDIT)
        if request.section_id is not None:
            section = self._repo.get_section(request.section_id)
            if section is None or section.board_id != board_id:
                raise InvalidSectionError(request.section_id, board_id)

        data = request.model_dump(mode="json")
        data["board_id"] = board_id
        data["risk_score"] = compute_risk_score(request.x_value, request.y_value)
        return self._repo.create_postit(data)

    async def update_postit(
        self,
        board_id: str,
        postit_id: str,
        user_id: str,
        request: UpdatePostitRequest,
    ) -> Postit:
        self._load_authorized(board_id, user_id, PermissionLevel.EDIT)
        postit = self._get_postit(board_id, postit_id)

        data = request.model_dump(mode="json", exclude_unset=True)
        if not data:
            return postit
        if "x_value" in data or "y_value" in data:
            data["risk_score"] = compute_risk_score(
                data.get("x_value", postit.x_value),
                data.get("y_value", postit.y_value),
            )
        return self._repo.update_postit(postit_id, data)

    async def delete_postit(self, board_id: str, postit_id: str, user_id: str) -> None:
        self._load_authorized(board_id, user_id, PermissionLevel.EDIT)
        self._get_postit(board_id, postit_id)
        self._repo.delete_postit(postit_id)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _load_authorized(
        self,
        board_id: str,
        user_id: Optional[str],
        required: PermissionLevel,
    ) -> Board:
        board = self._repo.get_board_by_id(board_id)
        if board is None:
            raise BoardNotFoundError(board_id)
        self._authorize(board, user_id, required)
        return board

    def _authorize(self, board: Board, user_id: Optional[str], required: PermissionLevel) -> None:
        if not resolve_permission(board, user_id, required):
            logger.warning(
                f"User {user_id or 'anonymous'} denied {required.value} on board {board.id}"
            )
            raise BoardAccessDeniedError(board.id, required.value)

    def _visible_to(self, board: Board, user_id: Optional[str]) -> Board:
        """Collaborator rows are only returned to requesters who can manage them."""
        if effective_permission(board, user_id) == PermissionLevel.ADMIN:
            return board
        return board.model_copy(update={"collaborators": []})

    def _mutable_changes(self, changes: dict[str, Any]) -> dict[str, Any]:
        dropped = set(changes) - MUTABLE_BOARD_FIELDS
        if dropped:
            logger.debug(f"Ignoring non-updatable board fields: {sorted(dropped)}")

        allowed = {k: v for k, v in changes.items() if k in MUTABLE_BOARD_FIELDS}
        if "title" in allowed and not str(allowed["title"] or "").strip():
            raise ValidationError("Board title cannot be empty", code="INVALID_TITLE")
        return allowed

    def _unique_slug(self, title: str) -> str:
        base = slugify(title)
        slug = base
        counter = 1
        while self._repo.slug_exists(slug):
            slug = f"{base}-{counter}"
            counter += 1
        return slug

    def _get_section(self, board_id: str, section_id: str) -> Section:
        section = self._repo.get_section(section_id)
        if section is None or section.board_id != board_id:
            raise SectionNotFoundError(section_id)
        return section

    def _get_postit(self, board_id: str, postit_id: str) -> Postit:
        postit = self._repo.get_postit(postit_id)
        if postit is None or postit.board_id != board_id:
            raise PostitNotFoundError(postit_id)
        return postit

