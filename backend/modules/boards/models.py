"""
Boards module data models.

These models define the board aggregate: the board itself, its collaborators,
and the section/post-it index rows that mirror its layout blob.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, ConfigDict, EmailStr, Field


class PermissionLevel(str, Enum):
    """Capability levels on a board, ordered view < edit < admin."""

    VIEW = "view"
    EDIT = "edit"
    ADMIN = "admin"

    @property
    def rank(self) -> int:
        return PERMISSION_RANKS[self]


PERMISSION_RANKS: dict[PermissionLevel, int] = {
    PermissionLevel.VIEW: 1,
    PermissionLevel.EDIT: 2,
    PermissionLevel.ADMIN: 3,
}


class SectionKind(str, Enum):
    """Panel types a board section can take."""

    TEXT = "text"
    TEAM = "team"              # Team roster
    KPI = "kpi"                # KPI tracker
    MATRIX = "matrix"          # Risk matrix (probability x consequence)
    WEEKPLAN = "weekplan"      # Week planner
    ACTIONS = "actions"        # Action log table
    POSTIT_AREA = "postit-area"  # Free-form note area
    KANBAN = "kanban"


class PostitStatus(str, Enum):
    """Workflow status of a post-it."""

    TODO = "todo"
    IN_PROGRESS = "inprogress"
    DONE = "done"


class WriteStatus(str, Enum):
    """Outcome of a versioned board write."""

    OK = "ok"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


# Board columns a caller may change through update_board().
MUTABLE_BOARD_FIELDS = frozenset({"title", "description", "grid_data", "settings", "is_public"})


class Position(BaseModel):
    """Grid placement of a section or post-it."""

    x: float = 0
    y: float = 0
    w: Optional[float] = None
    h: Optional[float] = None


class Collaborator(BaseModel):
    """
    A non-owner user's access grant on a board.

    A row with accepted_at unset is a pending invite and carries no
    effective permission.
    """

    id: str = Field(..., description="Collaborator row ID")
    board_id: str = Field(..., description="Board ID")
    user_id: str = Field(..., description="Collaborating user ID")
    permission: PermissionLevel = Field(..., description="Granted level")
    invited_by: Optional[str] = Field(None, description="User who sent the invite")
    accepted_at: Optional[datetime] = Field(None, description="When the invite was accepted")
    created_at: Optional[datetime] = None

    @property
    def is_accepted(self) -> bool:
        return self.accepted_at is not None


class Board(BaseModel):
    """
    A planning board.

    grid_data is the authoritative layout/content blob (sections, post-it
    positions, team roster, event logs, locked sections). version is the
    optimistic concurrency token, incremented on every successful update.
    """

    id: str = Field(..., description="Board ID (UUID)")
    user_id: str = Field(..., description="Owner user ID")
    title: str = Field(..., description="Human title")
    slug: str = Field(..., description="Globally unique slug")
    description: Optional[str] = Field(None, description="Board description")
    grid_data: dict[str, Any] = Field(default_factory=dict, description="Layout/content blob")
    settings: dict[str, Any] = Field(default_factory=dict, description="Board settings")
    version: int = Field(default=0, ge=0, description="Concurrency token")
    is_public: bool = Field(default=False, description="Readable by anyone")
    collaborators: list[Collaborator] = Field(
        default_factory=list,
        description="Collaborator rows (pending and accepted); empty unless the requester is a board admin",
    )
    created_at: datetime
    updated_at: datetime
    last_accessed_at: Optional[datetime] = None


class BoardListItem(BaseModel):
    """Summary row for board listings."""

    id: str
    title: str
    slug: str
    description: Optional[str] = None
    is_public: bool = False
    version: int = 0
    is_owner: bool = Field(..., description="Whether the requester owns the board")
    permission: PermissionLevel = Field(..., description="Requester's effective level")
    updated_at: datetime
    last_accessed_at: Optional[datetime] = None


class BoardListResponse(BaseModel):
    """Boards visible to a user."""

    boards: list[BoardListItem]
    total: int


class VersionedWriteResult(BaseModel):
    """Result of the transactional compare-and-set write on a board row."""

    status: WriteStatus
    current_version: Optional[int] = None
    board: Optional[Board] = None


class CreateBoardRequest(BaseModel):
    """Request to create a new board."""

    title: str = Field(..., min_length=1, max_length=200, description="Board title")
    description: Optional[str] = Field(None, max_length=2000)


class UpdateBoardRequest(BaseModel):
    """
    Partial board update.

    Only the mutable board fields are recognised; identity, owner and
    timestamp fields sent by a client are ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    grid_data: Optional[dict[str, Any]] = Field(None, alias="gridData")
    settings: Optional[dict[str, Any]] = None
    is_public: Optional[bool] = Field(None, alias="isPublic")
    expected_version: Optional[int] = Field(
        None,
        ge=0,
        alias="expectedVersion",
        description="Version the client last read; omit to skip the conflict check",
    )

    def changes(self) -> dict[str, Any]:
        """The fields the client actually sent, without the version token."""
        data = self.model_dump(exclude_unset=True, exclude={"expected_version"})
        # description is the only nullable column
        return {k: v for k, v in data.items() if v is not None or k == "description"}


class ShareBoardRequest(BaseModel):
    """Request to share a board with another user by email."""

    email: EmailStr
    permission: PermissionLevel = PermissionLevel.EDIT


class ShareBoardResponse(BaseModel):
    """Outcome of a share request."""

    email: str
    collaborator: Optional[Collaborator] = Field(
        None,
        description="Collaborator row when the email belongs to a registered user",
    )
    share_url: str = Field(..., description="Link to the board in the frontend")


# -----------------------------------------------------------------------------
# Section / post-it index rows
# -----------------------------------------------------------------------------


class Section(BaseModel):
    """A typed panel within a board (index row)."""

    id: str
    board_id: str
    type: SectionKind
    title: str = ""
    content: dict[str, Any] = Field(default_factory=dict)
    position: Position = Field(default_factory=Position)
    locked: bool = False
    created_at: datetime
    updated_at: datetime


class CreateSectionRequest(BaseModel):
    type: SectionKind
    title: str = Field(default="", max_length=200)
    content: dict[str, Any] = Field(default_factory=dict)
    position: Position = Field(default_factory=Position)
    locked: bool = False


class UpdateSectionRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: Optional[SectionKind] = None
    title: Optional[str] = Field(None, max_length=200)
    content: Optional[dict[str, Any]] = None
    position: Optional[Position] = None
    locked: Optional[bool] = None


class Postit(BaseModel):
    """A movable content item within a board (index row)."""

    id: str
    board_id: str
    section_id: Optional[str] = None
    title: str = ""
    content: str = ""
    color: Optional[str] = None
    status: PostitStatus = PostitStatus.TODO
    x_value: Optional[float] = None
    y_value: Optional[float] = None
    risk_score: Optional[float] = Field(None, description="x_value * y_value on a risk matrix")
    position: Position = Field(default_factory=Position)
    created_at: datetime
    updated_at: datetime


class CreatePostitRequest(BaseModel):
    section_id: Optional[str] = None
    title: str = Field(default="", max_length=500)
    content: str = ""
    color: Optional[str] = None
    status: PostitStatus = PostitStatus.TODO
    x_value: Optional[float] = None
    y_value: Optional[float] = None
    position: Position = Field(default_factory=Position)


class UpdatePostitRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = Field(None, max_length=500)
    content: Optional[str] = None
    color: Optional[str] = None
    status: Optional[PostitStatus] = None
    x_value: Optional[float] = None
    y_value: Optional[float] = None
    position: Optional[Position] = None
