"""관리자 API 라우터 패키지 — 모든 관리자 엔드포인트 통합.

Admin API Router package — Aggregates all admin-facing endpoints
into a single router for inclusion in the FastAPI application.
Every route requires the ADMIN role.

Included routers:
    - workchecks: 점검 검토 (Workcheck review and decisions)
    - export: 점검 기록 내보내기 (CSV / Excel / PDF export)
    - dashboard: 관리자 대시보드 (Fleet metrics)
    - units: 유닛 관리 (Vehicle and equipment catalog)
    - check_items: 점검 항목 관리 (Check item catalog)
    - users: 사용자 관리 (Staff accounts)
"""

from fastapi import APIRouter

from app.api.admin.workchecks import router as workchecks_router
from app.api.admin.export import router as export_router
from app.api.admin.dashboard import router as dashboard_router
from app.api.admin.units import router as units_router
from app.api.admin.check_items import router as check_items_router
from app.api.admin.users import router as users_router

admin_router: APIRouter = APIRouter()

# ---------------------------------------------------------------------------
# 검토 라우터 등록 — Register review routers
# ---------------------------------------------------------------------------
admin_router.include_router(workchecks_router, prefix="/workchecks", tags=["Admin Workchecks"])
admin_router.include_router(export_router, prefix="/export", tags=["Admin Export"])
admin_router.include_router(dashboard_router, prefix="/dashboard", tags=["Admin Dashboard"])

# ---------------------------------------------------------------------------
# 카탈로그 라우터 등록 — Register catalog routers
# ---------------------------------------------------------------------------
admin_router.include_router(units_router, prefix="/units", tags=["Units"])
admin_router.include_router(check_items_router, prefix="/check-items", tags=["Check Items"])
admin_router.include_router(users_router, prefix="/users", tags=["Users"])
