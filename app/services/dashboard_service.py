"""대시보드 서비스 — 직원/관리자 홈 화면 지표 계산.

Dashboard Service — Read-only metrics for the staff and admin home
screens, recomputed on every request from workchecks, items and
approvals. All windows are anchored on ``today`` in the configured
timezone and compare work dates, so "last 30 days" is [today - 30, today].
"""

from collections import Counter
from datetime import date, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.workcheck import APPROVAL_PENDING, Workcheck
from app.repositories.unit_repository import unit_repository
from app.repositories.workcheck_repository import workcheck_repository
from app.schemas.dashboard import (
    AdminDashboardResponse,
    CoverageDay,
    FailingItem,
    OpenTask,
    StaffDashboardResponse,
    UnitCoverage,
    VehicleStatus,
)
from app.schemas.workcheck import UnitBrief
from app.services.auth_service import AuthContext
from app.services.workcheck_service import workcheck_status
from app.utils.dates import as_utc, days_back

# 집계 기간 — Aggregation windows
STREAK_MAX_DAYS: int = 7
COVERAGE_DAYS: int = 7
ISSUE_WINDOW_DAYS: int = 30
TOP_FAILING_LIMIT: int = 5
OPEN_TASK_LIMIT: int = 10


def compute_streak(submitted_days: set[date], today: date, max_days: int = STREAK_MAX_DAYS) -> int:
    """연속 제출 일수를 계산합니다.

    Count consecutive days walking back from ``today`` (inclusive) that
    appear in ``submitted_days``, capped at ``max_days``.

    Example:
        {today, today-1, today-2} → 3
    """
    streak: int = 0
    for offset in range(max_days):
        if today - timedelta(days=offset) not in submitted_days:
            break
        streak += 1
    return streak


def _has_issue(workcheck: Workcheck) -> bool:
    return any(item.actions for item in workcheck.items)


class DashboardService:
    """대시보드 지표를 계산하는 서비스.

    Service computing dashboard metrics.
    """

    async def staff_dashboard(
        self,
        db: AsyncSession,
        ctx: AuthContext,
        today: date,
    ) -> StaffDashboardResponse:
        """직원 대시보드 지표를 계산합니다.

        Compute today's completion, vehicle status, open workchecks and the
        submission streak of the caller.
        """
        recent: list[Workcheck] = await workcheck_repository.list_between(
            db, today - timedelta(days=STREAK_MAX_DAYS - 1), today, checker_id=ctx.user_id
        )
        todays: list[Workcheck] = [w for w in recent if w.work_date == today]

        if todays:
            current: Workcheck = todays[0]
            vehicle_status = VehicleStatus(
                has_vehicle_selected=True,
                workcheck_id=str(current.id),
                unit=UnitBrief(
                    id=str(current.unit.id),
                    name=current.unit.name,
                    type=current.unit.type,
                    number_plate=current.unit.number_plate,
                ),
                status=workcheck_status(current),
            )
        else:
            vehicle_status = VehicleStatus(has_vehicle_selected=False)

        open_workchecks: list[Workcheck] = await workcheck_repository.list_open(
            db, ctx.user_id, limit=OPEN_TASK_LIMIT
        )
        submitted_days: set[date] = {w.work_date for w in recent if w.is_submitted}

        return StaffDashboardResponse(
            today_finished=bool(todays) and all(w.is_submitted for w in todays),
            vehicle_status=vehicle_status,
            open_tasks=[
                OpenTask(
                    workcheck_id=str(w.id),
                    work_date=w.work_date,
                    unit_name=w.unit.name,
                    status=workcheck_status(w),
                )
                for w in open_workchecks
            ],
            streak=compute_streak(submitted_days, today),
        )

    async def admin_dashboard(self, db: AsyncSession, today: date) -> AdminDashboardResponse:
        """관리자 대시보드 지표를 계산합니다.

        Compute today's submissions, pending approvals, the 30-day issue
        rate, top failing check items, mean time to decision, and per-unit
        coverage for the last 7 days.
        """
        window: list[Workcheck] = await workcheck_repository.list_between(
            db, today - timedelta(days=ISSUE_WINDOW_DAYS), today
        )
        submitted: list[Workcheck] = [w for w in window if w.is_submitted]

        # 이슈 비율 — Submitted workchecks with at least one non-empty action set
        with_issues: int = sum(1 for w in submitted if _has_issue(w))
        issue_rate: float = round(with_issues / len(submitted) * 100, 2) if submitted else 0.0

        # 상위 조치 항목 — Count items with actions per check item
        counts: Counter = Counter()
        check_items: dict = {}
        for workcheck in window:
            for item in workcheck.items:
                if item.actions:
                    counts[item.item_id] += 1
                    check_items[item.item_id] = item.check_item
        top_failing: list[FailingItem] = [
            FailingItem(
                item_id=str(item_id),
                code=check_items[item_id].code,
                label=check_items[item_id].label,
                count=count,
            )
            for item_id, count in sorted(
                counts.items(), key=lambda pair: (-pair[1], check_items[pair[0]].code)
            )[:TOP_FAILING_LIMIT]
        ]

        # 평균 검토 소요 시간 — Hours between creation and decision
        durations: list[float] = [
            (as_utc(w.approval.approved_at) - as_utc(w.created_at)).total_seconds() / 3600
            for w in window
            if w.approval is not None
            and w.approval.status != APPROVAL_PENDING
            and w.approval.approved_at is not None
        ]
        avg_time_to_approve: float = round(sum(durations) / len(durations), 2) if durations else 0.0

        # 유닛별 점검 현황 — Submitted coverage per unit, last 7 days oldest first
        covered: set[tuple] = {(w.unit_id, w.work_date) for w in submitted}
        coverage_days: list[date] = days_back(today, COVERAGE_DAYS)
        units = await unit_repository.list_units(db)
        vehicle_coverage: list[UnitCoverage] = [
            UnitCoverage(
                unit_id=str(unit.id),
                unit_name=unit.name,
                days=[CoverageDay(day=d, covered=(unit.id, d) in covered) for d in coverage_days],
            )
            for unit in units
        ]

        return AdminDashboardResponse(
            checks_completed_today=sum(1 for w in submitted if w.work_date == today),
            pending_approvals=await workcheck_repository.count_pending_approvals(db),
            issue_rate=issue_rate,
            top_failing_items=top_failing,
            avg_time_to_approve=avg_time_to_approve,
            vehicle_coverage=vehicle_coverage,
        )


# 싱글턴 인스턴스 — Singleton instance
dashboard_service: DashboardService = DashboardService()
