"""
Login audit data models.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class LoginMethod(str, Enum):
    EMAIL = "email"
    GOOGLE = "google"


class LoginAudit(BaseModel):
    """One recorded sign-in attempt, successful or not."""

    id: str
    user_id: Optional[str] = Field(None, description="Null when the email matched no user")
    email: str
    login_method: LoginMethod
    success: bool
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    error_message: Optional[str] = None
    created_at: datetime


class LoginAttempt(BaseModel):
    """Input for recording a sign-in attempt."""

    email: str
    login_method: LoginMethod
    success: bool
    user_id: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    error_message: Optional[str] = None


class LoginAuditFilters(BaseModel):
    """Filters for listing audit records. All are optional and combine with AND."""

    user_id: Optional[str] = None
    email: Optional[str] = None
    success: Optional[bool] = None
    login_method: Optional[LoginMethod] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    limit: int = Field(default=100, ge=1, le=1000)


class LoginStats(BaseModel):
    total_logins: int = 0
    successful_logins: int = 0
    failed_logins: int = 0
    by_method: dict[str, int] = Field(default_factory=dict)
    unique_users: int = 0
    success_rate: float = Field(default=0.0, description="Percentage, two decimals")


class LoginAuditListResponse(BaseModel):
    audits: list[LoginAudit]
    total: int
