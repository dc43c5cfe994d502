"""점검 레포지토리 — 일일 점검, 항목, 증빙 사진 조회.

Workcheck Repository — Queries for workchecks, their items and images.
Detail reads always eager-load the full graph (unit, checker, ordered
items with check item and images, approval with approver) because the
async session cannot lazy-load afterwards.
"""

from datetime import date
from uuid import UUID

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.user import User
from app.models.workcheck import (
    APPROVAL_APPROVED,
    APPROVAL_PENDING,
    APPROVAL_REJECTED,
    Approval,
    Workcheck,
    WorkcheckItem,
    WorkcheckItemImage,
)
from app.repositories.base import BaseRepository

# 상태 필터 값 — Status filter values accepted by the list endpoints
STATUS_NEW: str = "new"
STATUS_FILTERS: tuple[str, ...] = ("all", STATUS_NEW, APPROVAL_PENDING, APPROVAL_APPROVED, APPROVAL_REJECTED)


def detail_options() -> tuple:
    """점검 상세 로딩 옵션 — Eager-load options for the full workcheck graph."""
    return (
        selectinload(Workcheck.unit),
        selectinload(Workcheck.checker),
        selectinload(Workcheck.items).selectinload(WorkcheckItem.check_item),
        selectinload(Workcheck.items).selectinload(WorkcheckItem.images),
        selectinload(Workcheck.approval).selectinload(Approval.approver),
    )


def apply_status_filter(query: Select, status: str | None) -> Select:
    """검토 상태 필터를 SQL 조건으로 적용합니다.

    Apply an approval-status filter as SQL so that it runs before
    pagination. "new" means no approval row yet; "all" or None is a no-op.
    """
    if status is None or status == "all":
        return query
    if status == STATUS_NEW:
        return query.where(~Workcheck.approval.has())
    return query.where(Workcheck.approval.has(Approval.status == status))


class WorkcheckRepository(BaseRepository[Workcheck]):
    """점검 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for workchecks and their children.
    """

    def __init__(self) -> None:
        super().__init__(Workcheck)

    async def get_detail(self, db: AsyncSession, workcheck_id: UUID) -> Workcheck | None:
        """점검 상세를 전체 관계와 함께 조회합니다.

        Retrieve a non-deleted workcheck with its full graph loaded.
        populate_existing refreshes rows already in the identity map so
        that children added earlier in the same session are visible.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            workcheck_id: 점검 ID (Workcheck UUID)

        Returns:
            Workcheck | None: 점검 또는 None (Workcheck or None)
        """
        query: Select = (
            select(Workcheck)
            .options(*detail_options())
            .where(Workcheck.id == workcheck_id, Workcheck.is_deleted.is_(False))
            .execution_options(populate_existing=True)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_for_checker_on(
        self,
        db: AsyncSession,
        checker_id: UUID,
        day: date,
    ) -> Workcheck | None:
        """직원의 특정일 점검을 조회합니다.

        Retrieve the staff member's non-deleted workcheck for ``day`` with
        its full graph loaded.
        """
        query: Select = (
            select(Workcheck)
            .options(*detail_options())
            .where(
                Workcheck.checker_id == checker_id,
                Workcheck.work_date == day,
                Workcheck.is_deleted.is_(False),
            )
            .order_by(Workcheck.created_at)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(query)
        return result.scalars().first()

    async def unit_claimed_on(self, db: AsyncSession, unit_id: UUID, day: date) -> bool:
        """유닛이 해당일에 이미 점검 중인지 확인 — Claim check for (unit, day)."""
        query: Select = select(func.count()).select_from(Workcheck).where(
            Workcheck.unit_id == unit_id,
            Workcheck.work_date == day,
            Workcheck.is_deleted.is_(False),
        )
        return ((await db.execute(query)).scalar() or 0) > 0

    def history_query(
        self,
        checker_id: UUID,
        status: str | None = None,
        day: date | None = None,
    ) -> Select:
        """직원 점검 이력 쿼리를 생성합니다.

        Build the staff history query: own non-deleted workchecks, newest
        first, with status and date filters applied.
        """
        query: Select = (
            select(Workcheck)
            .options(*detail_options())
            .where(Workcheck.checker_id == checker_id, Workcheck.is_deleted.is_(False))
        )
        if day is not None:
            query = query.where(Workcheck.work_date == day)
        query = apply_status_filter(query, status)
        return query.order_by(Workcheck.work_date.desc(), Workcheck.created_at.desc())

    def admin_query(
        self,
        search: str | None = None,
        status: str | None = None,
        day: date | None = None,
    ) -> Select:
        """관리자 점검 목록 쿼리를 생성합니다.

        Build the admin listing query: submitted non-deleted workchecks,
        newest first. ``search`` matches the checker's first name, last name
        or username case-insensitively.

        Args:
            search: 검색어 (Search text)
            status: 검토 상태 필터 (Approval status filter)
            day: 점검일 필터 (Work date filter)

        Returns:
            Select: 필터가 적용된 쿼리 (Filtered query)
        """
        query: Select = (
            select(Workcheck)
            .join(User, Workcheck.checker_id == User.id)
            .options(*detail_options())
            .where(Workcheck.is_submitted.is_(True), Workcheck.is_deleted.is_(False))
        )
        if search:
            pattern: str = f"%{search.strip()}%"
            query = query.where(
                or_(
                    User.first_name.ilike(pattern),
                    User.last_name.ilike(pattern),
                    User.username.ilike(pattern),
                )
            )
        if day is not None:
            query = query.where(Workcheck.work_date == day)
        query = apply_status_filter(query, status)
        return query.order_by(Workcheck.created_at.desc())

    async def list_all(self, db: AsyncSession, query: Select) -> list[Workcheck]:
        """페이지네이션 없이 전체 조회 — Run a built query without pagination."""
        result = await db.execute(query)
        return list(result.scalars().unique().all())

    async def list_between(
        self,
        db: AsyncSession,
        start: date,
        end: date,
        checker_id: UUID | None = None,
    ) -> list[Workcheck]:
        """기간 내 점검 목록을 조회합니다 (대시보드용).

        List non-deleted workchecks with work_date in [start, end], optionally
        for one checker, with the full graph loaded.
        """
        query: Select = (
            select(Workcheck)
            .options(*detail_options())
            .where(
                Workcheck.is_deleted.is_(False),
                Workcheck.work_date >= start,
                Workcheck.work_date <= end,
            )
        )
        if checker_id is not None:
            query = query.where(Workcheck.checker_id == checker_id)
        result = await db.execute(query.order_by(Workcheck.created_at.desc()))
        return list(result.scalars().all())

    async def list_open(self, db: AsyncSession, checker_id: UUID, limit: int = 10) -> list[Workcheck]:
        """미완료 점검 — Not yet submitted, or submitted and awaiting review; newest first."""
        query: Select = (
            select(Workcheck)
            .options(selectinload(Workcheck.unit), selectinload(Workcheck.approval))
            .where(
                Workcheck.checker_id == checker_id,
                Workcheck.is_deleted.is_(False),
                or_(
                    Workcheck.is_submitted.is_(False),
                    Workcheck.approval.has(Approval.status == APPROVAL_PENDING),
                ),
            )
            .order_by(Workcheck.created_at.desc())
            .limit(limit)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def count_pending_approvals(self, db: AsyncSession) -> int:
        """검토 대기 건수 — Pending approvals on non-deleted workchecks."""
        query: Select = (
            select(func.count())
            .select_from(Approval)
            .join(Workcheck, Approval.workcheck_id == Workcheck.id)
            .where(Approval.status == APPROVAL_PENDING, Workcheck.is_deleted.is_(False))
        )
        return (await db.execute(query)).scalar() or 0

    async def get_item(self, db: AsyncSession, item_id: UUID) -> WorkcheckItem | None:
        """점검 항목을 소속 점검과 함께 조회합니다.

        Retrieve a workcheck item with its images, check item and parent
        workcheck (with approval) loaded.
        """
        query: Select = (
            select(WorkcheckItem)
            .options(
                selectinload(WorkcheckItem.images),
                selectinload(WorkcheckItem.check_item),
                selectinload(WorkcheckItem.workcheck).selectinload(Workcheck.approval),
            )
            .where(WorkcheckItem.id == item_id)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_image(
        self,
        db: AsyncSession,
        image_id: UUID | None = None,
        image_url: str | None = None,
    ) -> WorkcheckItemImage | None:
        """ID 또는 URL로 증빙 사진을 조회합니다.

        Retrieve an image by id, or by URL when no id is given, with the
        item → workcheck → approval chain loaded for ownership checks.
        """
        query: Select = select(WorkcheckItemImage).options(
            selectinload(WorkcheckItemImage.item)
            .selectinload(WorkcheckItem.workcheck)
            .selectinload(Workcheck.approval)
        )
        if image_id is not None:
            query = query.where(WorkcheckItemImage.id == image_id)
        else:
            query = query.where(WorkcheckItemImage.file_name == image_url)
        result = await db.execute(query)
        return result.scalars().first()


# 싱글턴 인스턴스 — Singleton instance
workcheck_repository: WorkcheckRepository = WorkcheckRepository()
