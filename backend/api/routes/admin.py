"""
Admin endpoints.

Login audit reporting and the subscription listing. Every route requires
an authenticated user listed in ADMIN_EMAILS.
"""

import json
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from shared.models import AuthenticatedUser
from modules.audit.interfaces import IAuditService
from modules.audit.models import (
    LoginAudit,
    LoginAuditFilters,
    LoginAuditListResponse,
    LoginMethod,
    LoginStats,
)
from modules.subscriptions.models import SubscriptionSummary
from modules.subscriptions.service import SubscriptionService

from ..dependencies import get_audit_service, get_subscription_service
from ..middleware.auth import require_admin

router = APIRouter()


@router.get("/login-audits", response_model=LoginAuditListResponse)
async def list_login_audits(
    user_id: Optional[str] = Query(default=None),
    email: Optional[str] = Query(default=None),
    success: Optional[bool] = Query(default=None),
    login_method: Optional[LoginMethod] = Query(default=None),
    start_date: Optional[datetime] = Query(default=None),
    end_date: Optional[datetime] = Query(default=None),
    limit: int = Query(default=100, ge=1, le=1000),
    admin: AuthenticatedUser = Depends(require_admin),
    service: IAuditService = Depends(get_audit_service),
) -> LoginAuditListResponse:
    audits = await service.get_login_audits(LoginAuditFilters(
        user_id=user_id,
        email=email,
        success=success,
        login_method=login_method,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
    ))
    return LoginAuditListResponse(audits=audits, total=len(audits))


@router.get("/login-audits/stats", response_model=LoginStats)
async def login_stats(
    start_date: Optional[datetime] = Query(default=None),
    end_date: Optional[datetime] = Query(default=None),
    admin: AuthenticatedUser = Depends(require_admin),
    service: IAuditService = Depends(get_audit_service),
) -> LoginStats:
    return await service.get_login_stats(start_date, end_date)


@router.get("/login-audits/download")
async def download_login_audits(
    admin: AuthenticatedUser = Depends(require_admin),
    service: IAuditService = Depends(get_audit_service),
) -> Response:
    """Every audit record as a JSON file attachment."""
    audits = await service.export_all_logins()
    body = json.dumps([a.model_dump(mode="json") for a in audits], indent=2)
    filename = f"login-audits-{datetime.now(timezone.utc).strftime('%Y-%m-%d')}.json"
    return Response(
        content=body,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.delete("/login-audits")
async def cleanup_login_audits(
    days_to_keep: int = Query(default=90, ge=1),
    admin: AuthenticatedUser = Depends(require_admin),
    service: IAuditService = Depends(get_audit_service),
) -> dict:
    deleted = await service.cleanup_old_audits(days_to_keep)
    return {"deleted": deleted, "days_to_keep": days_to_keep}


@router.get("/users/{user_id}/login-history", response_model=list[LoginAudit])
async def user_login_history(
    user_id: str,
    limit: int = Query(default=50, ge=1, le=1000),
    admin: AuthenticatedUser = Depends(require_admin),
    service: IAuditService = Depends(get_audit_service),
) -> list[LoginAudit]:
    return await service.get_user_login_history(user_id, limit)


@router.get("/subscriptions", response_model=list[SubscriptionSummary])
async def list_subscriptions(
    admin: AuthenticatedUser = Depends(require_admin),
    service: SubscriptionService = Depends(get_subscription_service),
) -> list[SubscriptionSummary]:
    return await service.list_subscriptions()
