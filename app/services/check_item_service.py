"""점검 항목 서비스 — 카탈로그 CRUD 및 정렬 순서 관리.

Check Item Service — Catalog CRUD and ordering. sort_order is kept dense
(1..n): every insert, move and delete renumbers the whole list in one
pass, so positions never collide or leave gaps.
"""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.fleet import CheckItem
from app.repositories.check_item_repository import check_item_repository
from app.schemas.fleet import CheckItemCreate, CheckItemResponse, CheckItemUpdate
from app.utils.exceptions import BadRequestError, ConflictError, NotFoundError


def _renumber(ordered: list[CheckItem]) -> None:
    for position, item in enumerate(ordered, start=1):
        item.sort_order = position


def _clamp(position: int, upper: int) -> int:
    return max(1, min(position, upper))


class CheckItemService:
    """점검 항목 카탈로그 비즈니스 로직을 처리하는 서비스.

    Service handling the check item catalog.
    """

    def _to_response(self, item: CheckItem) -> CheckItemResponse:
        return CheckItemResponse(
            id=str(item.id),
            code=item.code,
            label=item.label,
            sort_order=item.sort_order,
            is_active=item.is_active,
            created_at=item.created_at,
        )

    def _clean(self, code: str, label: str) -> tuple[str, str]:
        """코드는 공백 제거 후 대문자, 설명은 공백 제거. 둘 다 필수."""
        code = code.strip().upper()
        label = label.strip()
        if not code or not label:
            raise BadRequestError("Code and label are required")
        return code, label

    async def _ensure_code_free(self, db: AsyncSession, code: str, exclude_id: UUID | None = None) -> None:
        if await check_item_repository.exists(db, {"code": code}, exclude_id=exclude_id):
            raise ConflictError(f"Check item code '{code}' already exists")

    async def _get(self, db: AsyncSession, item_id: UUID) -> CheckItem:
        item: CheckItem | None = await check_item_repository.get_by_id(db, item_id)
        if item is None:
            raise NotFoundError("Check item not found")
        return item

    async def _flush_unique(self, db: AsyncSession, code: str) -> None:
        # 코드 고유 제약 위반 — Concurrent create/update with the same code
        try:
            async with db.begin_nested():
                await db.flush()
        except IntegrityError:
            raise ConflictError(f"Check item code '{code}' already exists")

    async def list_items(self, db: AsyncSession) -> list[CheckItemResponse]:
        """점검 항목 목록 — All check items in sort order."""
        items: list[CheckItem] = await check_item_repository.list_ordered(db)
        return [self._to_response(i) for i in items]

    async def create_item(self, db: AsyncSession, data: CheckItemCreate) -> CheckItemResponse:
        """점검 항목을 생성합니다.

        Create a check item. Without sort_order it is appended; with it the
        item is inserted at that position and the following items shift.

        Raises:
            BadRequestError: 코드 또는 설명 누락 (Code or label missing)
            ConflictError: 코드 중복 (Duplicate code)
        """
        code, label = self._clean(data.code, data.label)
        await self._ensure_code_free(db, code)

        ordered: list[CheckItem] = await check_item_repository.list_ordered(db)
        position: int = len(ordered) + 1
        if data.sort_order is not None:
            position = _clamp(data.sort_order, len(ordered) + 1)

        item = CheckItem(code=code, label=label, sort_order=position, is_active=data.is_active)
        db.add(item)
        ordered.insert(position - 1, item)
        _renumber(ordered)
        await self._flush_unique(db, code)
        await db.refresh(item)
        return self._to_response(item)

    async def update_item(self, db: AsyncSession, item_id: UUID, data: CheckItemUpdate) -> CheckItemResponse:
        """점검 항목을 수정합니다.

        Update code, label and active flag; a changed sort_order moves the
        item to that position.

        Raises:
            NotFoundError: 항목 없음 (Check item not found)
            BadRequestError: 코드 또는 설명 누락 (Code or label missing)
            ConflictError: 코드 중복 (Duplicate code)
        """
        item: CheckItem = await self._get(db, item_id)
        code, label = self._clean(data.code, data.label)
        if code != item.code:
            await self._ensure_code_free(db, code, exclude_id=item.id)

        item.code = code
        item.label = label
        if data.is_active is not None:
            item.is_active = data.is_active

        if data.sort_order is not None and data.sort_order != item.sort_order:
            ordered: list[CheckItem] = await check_item_repository.list_ordered(db)
            ordered.remove(item)
            ordered.insert(_clamp(data.sort_order, len(ordered) + 1) - 1, item)
            _renumber(ordered)

        await self._flush_unique(db, code)
        await db.refresh(item)
        return self._to_response(item)

    async def move_item(self, db: AsyncSession, item_id: UUID, direction: str) -> list[CheckItemResponse]:
        """점검 항목을 한 칸 위/아래로 이동합니다.

        Swap the item with its neighbour; a move past either edge is a
        no-op. Returns the whole list in its new order.

        Raises:
            NotFoundError: 항목 없음 (Check item not found)
        """
        item: CheckItem = await self._get(db, item_id)
        ordered: list[CheckItem] = await check_item_repository.list_ordered(db)
        index: int = ordered.index(item)
        target: int = index - 1 if direction == "up" else index + 1

        if 0 <= target < len(ordered):
            ordered[index], ordered[target] = ordered[target], ordered[index]
        _renumber(ordered)
        await db.flush()
        return [self._to_response(i) for i in ordered]

    async def set_active(self, db: AsyncSession, item_id: UUID, is_active: bool) -> CheckItemResponse:
        """활성 상태 변경 — Inactive items are left out of new workchecks."""
        item: CheckItem = await self._get(db, item_id)
        item = await check_item_repository.update(db, item, {"is_active": is_active})
        return self._to_response(item)

    async def delete_item(self, db: AsyncSession, item_id: UUID) -> None:
        """점검 항목을 삭제합니다.

        Hard-delete an unreferenced check item and close the gap in the
        ordering.

        Raises:
            NotFoundError: 항목 없음 (Check item not found)
            ConflictError: 점검에서 사용 중 (Referenced by workchecks)
        """
        item: CheckItem = await self._get(db, item_id)
        usage: int = await check_item_repository.count_usage(db, item.id)
        if usage > 0:
            raise ConflictError(f"Cannot delete check item. It is being used in {usage} workcheck(s)")

        await check_item_repository.delete(db, item)
        _renumber(await check_item_repository.list_ordered(db))
        await db.flush()


# 싱글턴 인스턴스 — Singleton instance
check_item_service: CheckItemService = CheckItemService()
