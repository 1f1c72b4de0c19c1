"""
Subscriptions module data models.

Tiers are a static catalogue, not stored rows. A user's tier is the
subscription_tier string on their user record, resolved here at
evaluation time.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class SubscriptionTier(str, Enum):
    """User subscription tiers."""

    STUDENT = "student"
    COMMERCIAL = "commercial"


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class TierDetails(BaseModel):
    """Catalogue entry for a tier."""

    id: SubscriptionTier
    name: str
    price: Decimal = Field(..., description="Monthly price in USD")
    board_limit: Optional[int] = Field(..., description="Max owned boards; None means unlimited")
    features: list[str] = Field(default_factory=list)


TIERS: dict[SubscriptionTier, TierDetails] = {
    SubscriptionTier.STUDENT: TierDetails(
        id=SubscriptionTier.STUDENT,
        name="Student",
        price=Decimal("0"),
        board_limit=1,
        features=[
            "1 planning board",
            "All section types",
            "Unlimited post-its",
            "Export to JSON",
            "Basic support",
        ],
    ),
    SubscriptionTier.COMMERCIAL: TierDetails(
        id=SubscriptionTier.COMMERCIAL,
        name="Commercial",
        price=Decimal("9"),
        board_limit=None,
        features=[
            "Unlimited planning boards",
            "Portfolio dashboard",
            "All section types",
            "Unlimited post-its",
            "Export to JSON",
            "Board sharing",
            "Priority support",
            "Advanced analytics",
        ],
    ),
}

# Length of a commercial billing period
COMMERCIAL_PERIOD_DAYS = 30


def get_tier_details(tier: Optional[str]) -> TierDetails:
    """Catalogue entry for a stored tier string. Unknown values resolve to student."""
    if tier == SubscriptionTier.COMMERCIAL.value:
        return TIERS[SubscriptionTier.COMMERCIAL]
    return TIERS[SubscriptionTier.STUDENT]


class BoardCreationDecision(BaseModel):
    """Outcome of the board creation gate."""

    allowed: bool
    reason: Optional[str] = Field(None, description="Why creation was refused")


class BoardStats(BaseModel):
    current_boards: int
    board_limit: Optional[int] = Field(None, description="None means unlimited")
    can_create_more: bool


class SubscriptionInfo(BaseModel):
    """A user's subscription as shown to that user."""

    tier: SubscriptionTier
    tier_name: str
    status: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: bool
    stats: BoardStats


class SubscriptionSummary(BaseModel):
    """A user's subscription as listed for administrators."""

    user_id: str
    email: str
    name: Optional[str] = None
    tier: str
    status: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    board_count: int = 0
    created_at: datetime


class TiersResponse(BaseModel):
    tiers: list[TierDetails]
