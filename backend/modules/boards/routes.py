"""
Board API endpoints.

Board CRUD with optimistic concurrency, sharing, and the section/post-it
index. Module exceptions (not found, access denied, version conflict,
limit exceeded) are mapped to HTTP responses by the application's
exception handler.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Response

from api.middleware.auth import get_current_user, get_optional_user
from api.dependencies import get_board_service
from shared.models import AuthenticatedUser

from .interfaces import IBoardService
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
    UpdateBoardRequest,
    UpdatePostitRequest,
    UpdateSectionRequest,
)

router = APIRouter()


@router.get("", response_model=BoardListResponse)
async def list_boards(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IBoardService = Depends(get_board_service),
) -> BoardListResponse:
    """Boards the current user owns or collaborates on."""
    return await service.list_boards(user.id)


@router.post("", response_model=Board, status_code=201)
async def create_board(
    request: CreateBoardRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IBoardService = Depends(get_board_service),
) -> Board:
    """
    Create a board.

    Refused with 403 and an upgrade message when the user's plan is at
    its board limit.
    """
    return await service.create_board(user.id, request)


@router.get("/slug/{slug}", response_model=Board)
async def get_board_by_slug(
    slug: str,
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    service: IBoardService = Depends(get_board_service),
) -> Board:
    return await service.get_board_by_slug(slug, user.id if user else None)


@router.get("/{board_id}", response_model=Board)
async def get_board(
    board_id: str,
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    service: IBoardService = Depends(get_board_service),
) -> Board:
    """Anonymous callers can read public boards."""
    return await service.get_board(board_id, user.id if user else None)


@router.put("/{board_id}", response_model=Board)
async def update_board(
    board_id: str,
    request: UpdateBoardRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IBoardService = Depends(get_board_service),
) -> Board:
    """
    Partially update a board.

    Send expectedVersion to have the write refused with 409 if someone
    else saved first; the 409 body carries details.current_version.
    """
    return await service.update_board(
        board_id,
        user.id,
        request.changes(),
        request.expected_version,
    )


@router.delete("/{board_id}", status_code=204)
async def delete_board(
    board_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IBoardService = Depends(get_board_service),
) -> Response:
    await service.delete_board(board_id, user.id)
    return Response(status_code=204)


@router.post("/{board_id}/share", response_model=ShareBoardResponse)
async def share_board(
    board_id: str,
    request: ShareBoardRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IBoardService = Depends(get_board_service),
) -> ShareBoardResponse:
    return await service.share_board(board_id, user.id, request)


@router.get("/{board_id}/collaborators", response_model=list[Collaborator])
async def list_collaborators(
    board_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IBoardService = Depends(get_board_service),
) -> list[Collaborator]:
    return await service.list_collaborators(board_id, user.id)


@router.delete("/{board_id}/collaborators/{collaborator_user_id}", status_code=204)
async def remove_collaborator(
    board_id: str,
    collaborator_user_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IBoardService = Depends(get_board_service),
) -> Response:
    await service.remove_collaborator(board_id, user.id, collaborator_user_id)
    return Response(status_code=204)


@router.post("/{board_id}/sections", response_model=Section, status_code=201)
async def create_section(
    board_id: str,
    request: CreateSectionRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IBoardService = Depends(get_board_service),
) -> Section:
    return await service.create_section(board_id, user.id, request)


@router.put("/{board_id}/sections/{section_id}", response_model=Section)
async def update_section(
    board_id: str,
    section_id: str,
    request: UpdateSectionRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IBoardService = Depends(get_board_service),
) -> Section:
    return await service.update_section(board_id, section_id, user.id, request)


@router.delete("/{board_id}/sections/{section_id}", status_code=204)
async def delete_section(
    board_id: str,
    section_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IBoardService = Depends(get_board_service),
) -> Response:
    await service.delete_section(board_id, section_id, user.id)
    return Response(status_code=204)


@router.post("/{board_id}/postits", response_model=Postit, status_code=201)
async def create_postit(
    board_id: str,
    request: CreatePostitRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IBoardService = Depends(get_board_service),
) -> Postit:
    return await service.create_postit(board_id, user.id, request)


@router.put("/{board_id}/postits/{postit_id}", response_model=Postit)
async def update_postit(
    board_id: str,
    postit_id: str,
    request: UpdatePostitRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IBoardService = Depends(get_board_service),
) -> Postit:
    return await service.update_postit(board_id, postit_id, user.id, request)


@router.delete("/{board_id}/postits/{postit_id}", status_code=204)
async def delete_postit(
    board_id: str,
    postit_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IBoardService = Depends(get_board_service),
) -> Response:
    await service.delete_postit(board_id, postit_id, user.id)
    return Response(status_code=204)
