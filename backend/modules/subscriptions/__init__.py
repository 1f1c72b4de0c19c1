"""
Subscriptions module.

Static tier catalogue, the board creation gate and tier lifecycle.

Public API:
- ISubscriptionService: Interface for subscription operations
- IBoardCounter: Board counts the gate relies on
- SubscriptionTier, TierDetails, get_tier_details: Tier catalogue
"""

from .interfaces import ISubscriptionService, IBoardCounter
from .models import (
    SubscriptionTier,
    SubscriptionStatus,
    TierDetails,
    TIERS,
    get_tier_details,
    BoardCreationDecision,
    BoardStats,
    SubscriptionInfo,
    SubscriptionSummary,
)
from .exceptions import SubscriptionError, SubscriptionUserNotFoundError

__all__ = [
    # Interfaces
    "ISubscriptionService",
    "IBoardCounter",
    # Models
    "SubscriptionTier",
    "SubscriptionStatus",
    "TierDetails",
    "TIERS",
    "get_tier_details",
    "BoardCreationDecision",
    "BoardStats",
    "SubscriptionInfo",
    "SubscriptionSummary",
    # Exceptions
    "SubscriptionError",
    "SubscriptionUserNotFoundError",
]
