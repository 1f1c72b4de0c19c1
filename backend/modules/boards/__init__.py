"""
Boards module.

Planning boards with optimistic concurrency, collaborator permissions,
and the section/post-it index.

Public API:
- IBoardService: Interface for board operations
- resolve_permission: Permission check for a (board, requester, level)
- Board: A planning board with its collaborators
- PermissionLevel: view < edit < admin
"""

from .interfaces import IBoardService
from .permissions import resolve_permission, effective_permission
from .models import (
    Board,
    BoardListItem,
    BoardListResponse,
    Collaborator,
    PermissionLevel,
    SectionKind,
    PostitStatus,
    Section,
    Postit,
    CreateBoardRequest,
    UpdateBoardRequest,
    ShareBoardRequest,
    ShareBoardResponse,
    MUTABLE_BOARD_FIELDS,
)
from .exceptions import (
    BoardNotFoundError,
    BoardAccessDeniedError,
    VersionConflictError,
    BoardCreationDeniedError,
    CollaboratorNotFoundError,
    SectionNotFoundError,
    PostitNotFoundError,
    InvalidShareTargetError,
    InvalidSectionError,
    SlugTakenError,
)

__all__ = [
    # Interface
    "IBoardService",
    # Permissions
    "resolve_permission",
    "effective_permission",
    # Models
    "Board",
    "BoardListItem",
    "BoardListResponse",
    "Collaborator",
    "PermissionLevel",
    "SectionKind",
    "PostitStatus",
    "Section",
    "Postit",
    "CreateBoardRequest",
    "UpdateBoardRequest",
    "ShareBoardRequest",
    "ShareBoardResponse",
    "MUTABLE_BOARD_FIELDS",
    # Exceptions
    "BoardNotFoundError",
    "BoardAccessDeniedError",
    "VersionConflictError",
    "BoardCreationDeniedError",
    "CollaboratorNotFoundError",
    "SectionNotFoundError",
    "PostitNotFoundError",
    "InvalidShareTargetError",
    "InvalidSectionError",
    "SlugTakenError",
]
