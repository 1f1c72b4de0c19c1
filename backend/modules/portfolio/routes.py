"""
Portfolio API endpoints.
"""

from fastapi import APIRouter, Depends, Query

from api.middleware.auth import get_current_user
from api.dependencies import get_portfolio_service
from shared.models import AuthenticatedUser

from .interfaces import IPortfolioService
from .models import ActivityEntry, BoardComparison, PortfolioDashboard

router = APIRouter()


@router.get("/dashboard", response_model=PortfolioDashboard)
async def get_dashboard(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IPortfolioService = Depends(get_portfolio_service),
) -> PortfolioDashboard:
    return await service.get_dashboard(user.id)


@router.get("/comparison", response_model=BoardComparison)
async def get_comparison(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IPortfolioService = Depends(get_portfolio_service),
) -> BoardComparison:
    return await service.get_board_comparison(user.id)


@router.get("/activity", response_model=list[ActivityEntry])
async def get_activity(
    limit: int = Query(default=20, ge=1, le=100, description="Max entries"),
    user: AuthenticatedUser = Depends(get_current_user),
    service: IPortfolioService = Depends(get_portfolio_service),
) -> list[ActivityEntry]:
    return await service.get_recent_activity(user.id, limit)
