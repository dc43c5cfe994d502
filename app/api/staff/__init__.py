"""직원 API 라우터 패키지 — 모든 직원 엔드포인트 통합.

Staff API Router package — Aggregates the staff-facing endpoints.
Every route requires the STAFF role.

Included routers:
    - workcheck: 일일 점검 (Daily workcheck lifecycle and evidence)
    - dashboard: 직원 대시보드 (Staff home metrics)
"""

from fastapi import APIRouter

from app.api.staff.workcheck import router as workcheck_router
from app.api.staff.dashboard import router as dashboard_router

staff_router: APIRouter = APIRouter()

staff_router.include_router(workcheck_router, prefix="/workcheck", tags=["Staff Workcheck"])
staff_router.include_router(dashboard_router, prefix="/dashboard", tags=["Staff Dashboard"])
