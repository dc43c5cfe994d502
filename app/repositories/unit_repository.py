"""유닛 레포지토리 — 차량 유닛 조회 및 당일 배정 가능 유닛 계산.

Unit Repository — Queries for vehicles, including the per-day list of
units that no staff member has claimed yet.
"""

from datetime import date
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.fleet import Unit
from app.models.workcheck import Workcheck
from app.repositories.base import BaseRepository


class UnitRepository(BaseRepository[Unit]):
    """유닛 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the units table.
    """

    def __init__(self) -> None:
        super().__init__(Unit)

    async def list_units(self, db: AsyncSession, include_deleted: bool = False) -> list[Unit]:
        """유닛 목록을 이름순으로 조회합니다.

        List units ordered by name.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            include_deleted: 소프트 삭제된 유닛 포함 여부 (Include soft-deleted units)

        Returns:
            list[Unit]: 유닛 목록 (List of units)
        """
        query: Select = select(Unit)
        if not include_deleted:
            query = query.where(Unit.is_deleted.is_(False))
        result = await db.execute(query.order_by(Unit.name))
        return list(result.scalars().all())

    async def get_live(self, db: AsyncSession, unit_id: UUID) -> Unit | None:
        """삭제되지 않은 유닛 조회 — Non-deleted unit by id, or None."""
        result = await db.execute(
            select(Unit).where(Unit.id == unit_id, Unit.is_deleted.is_(False))
        )
        return result.scalar_one_or_none()

    async def list_available(self, db: AsyncSession, day: date) -> list[Unit]:
        """당일 아무도 점검하지 않은 유닛 목록을 조회합니다.

        List non-deleted units not claimed by any non-deleted workcheck on
        ``day``, ordered by name.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            day: 점검일 (Calendar day)

        Returns:
            list[Unit]: 배정 가능 유닛 (Unclaimed units)
        """
        claimed = (
            select(Workcheck.unit_id)
            .where(Workcheck.work_date == day, Workcheck.is_deleted.is_(False))
        )
        query: Select = (
            select(Unit)
            .where(Unit.is_deleted.is_(False), Unit.id.not_in(claimed))
            .order_by(Unit.name)
        )
        result = await db.execute(query)
        return list(result.scalars().all())


# 싱글턴 인스턴스 — Singleton instance
unit_repository: UnitRepository = UnitRepository()
