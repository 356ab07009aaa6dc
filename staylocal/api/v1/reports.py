"""Reporting routes: admin dashboard, host statistics, revenue and user activity."""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from staylocal.api.deps import get_db, require_admin, require_host
from staylocal.errors import ValidationFailure
from staylocal.models.user import User
from staylocal.schemas.reports import (
    DashboardResponse,
    HostStatsResponse,
    RevenueReportResponse,
    UserActivityResponse,
)
from staylocal.services import report_service
from staylocal.services.report_service import Period

router = APIRouter(prefix="/api/v1/reports", tags=["reports"])


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> DashboardResponse:
    return await report_service.dashboard(db)


@router.get("/host-stats", response_model=HostStatsResponse)
async def host_stats(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_host),
) -> HostStatsResponse:
    """Statistics for the caller's own properties."""
    return await report_service.host_stats(db, current_user.id)


@router.get("/revenue", response_model=RevenueReportResponse)
async def revenue(
    period: Period = Query(Period.monthly),
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> RevenueReportResponse:
    return await report_service.revenue_report(db, period)


@router.get("/user-activity", response_model=UserActivityResponse)
async def user_activity(
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> UserActivityResponse:
    if start_date is not None and end_date is not None and end_date < start_date:
        raise ValidationFailure("end_date must not be before start_date")
    return await report_service.user_activity(db, start_date, end_date)
