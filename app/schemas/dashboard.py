"""대시보드 관련 Pydantic 응답 스키마 정의.

Dashboard Pydantic response schema definitions for the staff and admin
home screens. All values are recomputed on every request.
"""

from datetime import date
from pydantic import BaseModel

from app.schemas.workcheck import UnitBrief


# === 직원 대시보드 (Staff Dashboard) ===

class VehicleStatus(BaseModel):
    """오늘의 차량 상태 — Today's unit selection and lifecycle state."""

    has_vehicle_selected: bool
    workcheck_id: str | None = None
    unit: UnitBrief | None = None
    status: str | None = None  # "new" | "pending" | "approved" | "rejected"


class OpenTask(BaseModel):
    """미완료 점검 — Workcheck that is not submitted or still pending."""

    workcheck_id: str
    work_date: date
    unit_name: str
    status: str


class StaffDashboardResponse(BaseModel):
    """직원 대시보드 응답 스키마.

    Attributes:
        today_finished: 오늘 점검 완료 여부 (All of today's workchecks submitted)
        vehicle_status: 오늘의 차량 상태 (Today's vehicle status)
        open_tasks: 미완료 점검, 최대 10건 (Up to 10 open workchecks)
        streak: 연속 제출 일수, 최대 7 (Consecutive submitted days, max 7)
    """

    today_finished: bool
    vehicle_status: VehicleStatus
    open_tasks: list[OpenTask]
    streak: int


# === 관리자 대시보드 (Admin Dashboard) ===

class FailingItem(BaseModel):
    """조치 빈도 상위 항목 — Check item with the most non-empty action sets."""

    item_id: str
    code: str
    label: str
    count: int


class CoverageDay(BaseModel):
    """일자별 점검 여부 — Whether the unit had a submitted workcheck that day."""

    day: date
    covered: bool


class UnitCoverage(BaseModel):
    """유닛별 최근 7일 점검 현황 — Last 7 days for one unit, oldest first."""

    unit_id: str
    unit_name: str
    days: list[CoverageDay]


class AdminDashboardResponse(BaseModel):
    """관리자 대시보드 응답 스키마.

    Attributes:
        checks_completed_today: 오늘 제출된 점검 수 (Submitted today)
        pending_approvals: 검토 대기 수 (Pending approvals)
        issue_rate: 이슈 비율 % (Share of submitted workchecks with any action, 30 days)
        top_failing_items: 상위 5개 항목 (Top 5 check items by action count, 30 days)
        avg_time_to_approve: 평균 검토 소요 시간 (Mean hours to decision, 30 days)
        vehicle_coverage: 유닛별 최근 7일 (Per-unit coverage, last 7 days)
    """

    checks_completed_today: int
    pending_approvals: int
    issue_rate: float
    top_failing_items: list[FailingItem]
    avg_time_to_approve: float
    vehicle_coverage: list[UnitCoverage]
