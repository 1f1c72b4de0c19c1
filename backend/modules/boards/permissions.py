"""
Board permission resolution.

Pure functions deciding what a requester may do on a board. Nothing here
touches the store; callers load the board (with its collaborator rows)
first and pass it in.

Resolution order for resolve_permission():
1. The owner is granted everything.
2. A public board grants view to anyone, including anonymous callers.
3. Otherwise the requester's accepted collaborator row decides, by rank.
"""

from typing import Optional

from .models import Board, Collaborator, PermissionLevel


def find_accepted_collaborator(board: Board, user_id: Optional[str]) -> Optional[Collaborator]:
    """Return the requester's accepted collaborator row, if any."""
    if user_id is None:
        return None
    for collaborator in board.collaborators:
        if collaborator.user_id == user_id and collaborator.is_accepted:
            return collaborator
    return None


def resolve_permission(
    board: Board,
    requester_id: Optional[str],
    required: PermissionLevel,
) -> bool:
    """
    Decide whether requester_id holds at least the required level on board.

    Args:
        board: Board with its collaborator rows loaded
        requester_id: Authenticated user ID, or None for an anonymous caller
        required: Level the operation needs

    Returns:
        True if access is granted
    """
    if requester_id is not None and board.user_id == requester_id:
        return True

    if board.is_public and required == PermissionLevel.VIEW:
        return True

    collaborator = find_accepted_collaborator(board, requester_id)
    if collaborator is None:
        return False

    return collaborator.permission.rank >= required.rank


def effective_permission(board: Board, requester_id: Optional[str]) -> Optional[PermissionLevel]:
    """
    Highest level requester_id holds on board, or None for no access.

    Agrees with resolve_permission(): a level is granted exactly when it is
    at or below the value returned here.
    """
    if requester_id is not None and board.user_id == requester_id:
        return PermissionLevel.ADMIN

    collaborator = find_accepted_collaborator(board, requester_id)
    if collaborator is not None:
        return collaborator.permission

    if board.is_public:
        return PermissionLevel.VIEW

    return None
