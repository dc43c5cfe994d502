"""직원 대시보드 라우터.

Staff Dashboard Router — Home screen metrics for the caller.
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_staff
from app.database import get_db
from app.schemas.dashboard import StaffDashboardResponse
from app.services.auth_service import AuthContext
from app.services.dashboard_service import dashboard_service
from app.utils.dates import local_today

router: APIRouter = APIRouter()


@router.get("", response_model=StaffDashboardResponse)
async def get_staff_dashboard(
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_staff)],
    today: Annotated[date, Depends(local_today)],
) -> StaffDashboardResponse:
    """직원 대시보드 — 오늘 완료 여부, 차량 상태, 미완료 점검, 연속 제출 일수."""
    return await dashboard_service.staff_dashboard(db, ctx, today)
