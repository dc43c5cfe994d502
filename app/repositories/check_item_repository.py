"""점검 항목 레포지토리 — 카탈로그 조회 및 사용 여부 확인.

Check Item Repository — Catalog queries and usage counting.
"""

from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.fleet import CheckItem
from app.models.workcheck import WorkcheckItem
from app.repositories.base import BaseRepository


class CheckItemRepository(BaseRepository[CheckItem]):
    """점검 항목 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the check_items table.
    """

    def __init__(self) -> None:
        super().__init__(CheckItem)

    async def list_ordered(self, db: AsyncSession, active_only: bool = False) -> list[CheckItem]:
        """점검 항목을 정렬 순서대로 조회합니다.

        List check items by sort_order (code breaks ties).

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            active_only: 활성 항목만 조회 (Only active items)

        Returns:
            list[CheckItem]: 정렬된 항목 목록 (Ordered check items)
        """
        query: Select = select(CheckItem)
        if active_only:
            query = query.where(CheckItem.is_active.is_(True))
        result = await db.execute(query.order_by(CheckItem.sort_order, CheckItem.code))
        return list(result.scalars().all())

    async def count_usage(self, db: AsyncSession, check_item_id: UUID) -> int:
        """해당 항목을 참조하는 점검 수를 반환합니다.

        Count the distinct workchecks whose snapshot references the item.
        """
        query: Select = (
            select(func.count(func.distinct(WorkcheckItem.workcheck_id)))
            .where(WorkcheckItem.item_id == check_item_id)
        )
        return (await db.execute(query)).scalar() or 0


# 싱글턴 인스턴스 — Singleton instance
check_item_repository: CheckItemRepository = CheckItemRepository()
