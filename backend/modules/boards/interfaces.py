"""
Boards module interface.

The API layer and the portfolio module depend on IBoardService for all
board operations. Every board-scoped operation resolves the requester's
permission before touching the store.
"""

from typing import Protocol, Optional, Any, runtime_checkable

from .models import (
    Board,
    BoardListResponse,
    Collaborator,
    CreateBoardRequest,
    CreatePostitRequest,
    CreateSectionRequest,
    Postit,
    Section,
    ShareBoardRequest,
    ShareBoardResponse,
    UpdatePostitRequest,
    UpdateSectionRequest,
)


@runtime_checkable
class IBoardService(Protocol):
    """
    Interface for board operations.

    This protocol defines the contract that the boards module exposes
    to the API layer and other modules.
    """

    async def list_boards(self, user_id: str) -> BoardListResponse:
        """
        Boards the user owns or has accepted an invite to.

        Returns:
            Boards with the requester's effective permission, most recently
            updated first
        """
        ...

    async def get_board(self, board_id: str, user_id: Optional[str]) -> Board:
        """
        Get a board the requester can view.

        Collaborator rows are included only for requesters holding admin;
        everyone else gets an empty list.

        Args:
            board_id: Board UUID
            user_id: Requester, or None for an anonymous caller

        Raises:
            BoardNotFoundError: If the board doesn't exist
            BoardAccessDeniedError: If the requester can't view it
        """
        ...

    async def get_board_by_slug(self, slug: str, user_id: Optional[str]) -> Board:
        """Same as get_board(), addressed by slug."""
        ...

    async def create_board(self, user_id: str, request: CreateBoardRequest) -> Board:
        """
        Create a board owned by user_id, starting at version 0.

        Raises:
            BoardCreationDeniedError: If the subscription gate refuses
            SlugTakenError: If concurrent inserts keep taking the slug
        """
        ...

    async def update_board(
        self,
        board_id: str,
        user_id: Optional[str],
        changes: dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> Board:
        """
        Apply a partial update and increment the version by one.

        Identity, owner, timestamp and version fields in changes are
        ignored. When expected_version is given it must equal the stored
        version at write time.

        Raises:
            BoardNotFoundError: If the board doesn't exist
            BoardAccessDeniedError: If the requester lacks edit permission,
                including access lost between the read and the locked write
            VersionConflictError: If expected_version is stale; carries the
                current version so the caller can re-fetch and retry
        """
        ...

    async def delete_board(self, board_id: str, user_id: str) -> None:
        """
        Delete a board. Owner only.

        Raises:
            BoardNotFoundError: If the board doesn't exist
            BoardAccessDeniedError: If the requester is not the owner
        """
        ...

    async def share_board(
        self,
        board_id: str,
        user_id: str,
        request: ShareBoardRequest,
    ) -> ShareBoardResponse:
        """
        Grant a registered user access to a board (requires admin).

        An email with no account is accepted without creating a row.
        """
        ...

    async def list_collaborators(self, board_id: str, user_id: str) -> list[Collaborator]:
        ...

    async def remove_collaborator(
        self,
        board_id: str,
        user_id: str,
        collaborator_user_id: str,
    ) -> None:
        ...

    async def create_section(
        self,
        board_id: str,
        user_id: str,
        request: CreateSectionRequest,
    ) -> Section:
        ...

    async def update_section(
        self,
        board_id: str,
        section_id: str,
        user_id: str,
        request: UpdateSectionRequest,
    ) -> Section:
        ...

    async def delete_section(self, board_id: str, section_id: str, user_id: str) -> None:
        ...

    async def create_postit(
        self,
        board_id: str,
        user_id: str,
        request: CreatePostitRequest,
    ) -> Postit:
        ...

    async def update_postit(
        self,
        board_id: str,
        postit_id: str,
        user_id: str,
        request: UpdatePostitRequest,
    ) -> Postit:
        ...

    async def delete_postit(self, board_id: str, postit_id: str, user_id: str) -> None:
        ...
