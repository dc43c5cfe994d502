"""관리자 대시보드 라우터.

Admin Dashboard Router — Fleet-wide inspection metrics.
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.schemas.dashboard import AdminDashboardResponse
from app.services.auth_service import AuthContext
from app.services.dashboard_service import dashboard_service
from app.utils.dates import local_today

router: APIRouter = APIRouter()


@router.get("", response_model=AdminDashboardResponse)
async def get_admin_dashboard(
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_admin)],
    today: Annotated[date, Depends(local_today)],
) -> AdminDashboardResponse:
    """관리자 대시보드 — 오늘 제출 건수, 검토 대기, 이슈 비율, 상위 조치 항목, 유닛별 현황.

    Today's submissions, pending reviews, issue rate, top failing items,
    mean time to decision and per-unit coverage.
    """
    return await dashboard_service.admin_dashboard(db, today)
