"""
Subscription API endpoints.
"""

from fastapi import APIRouter, Depends

from api.middleware.auth import get_current_user
from api.dependencies import get_subscription_service
from shared.models import AuthenticatedUser
from modules.auth.models import UserProfile

from .service import SubscriptionService
from .models import TIERS, BoardCreationDecision, SubscriptionInfo, TiersResponse

router = APIRouter()


@router.get("/tiers", response_model=TiersResponse)
async def list_tiers() -> TiersResponse:
    """Tier catalogue. Public."""
    return TiersResponse(tiers=list(TIERS.values()))


@router.get("/current", response_model=SubscriptionInfo)
async def get_current_subscription(
    user: AuthenticatedUser = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionInfo:
    return await service.get_subscription(user.id)


@router.get("/can-create-board", response_model=BoardCreationDecision)
async def can_create_board(
    user: AuthenticatedUser = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
) -> BoardCreationDecision:
    return await service.can_create_board(user.id)


@router.post("/upgrade", response_model=UserProfile)
async def upgrade(
    user: AuthenticatedUser = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
) -> UserProfile:
    """Switch to the commercial plan. Payment collection happens elsewhere."""
    updated = await service.upgrade_to_commercial(user.id)
    return UserProfile.from_user(updated)


@router.post("/downgrade", response_model=UserProfile)
async def downgrade(
    user: AuthenticatedUser = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
) -> UserProfile:
    updated = await service.downgrade_to_student(user.id)
    return UserProfile.from_user(updated)
