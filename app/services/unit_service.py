"""유닛 서비스 — 차량 유닛 CRUD 및 소프트 삭제/복원.

Unit Service — Business logic for vehicle CRUD. Units are never
hard-deleted because workchecks keep referencing them.
"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.fleet import Unit
from app.repositories.unit_repository import unit_repository
from app.schemas.fleet import UnitCreate, UnitResponse, UnitUpdate
from app.utils.exceptions import BadRequestError, NotFoundError


class UnitService:
    """유닛 관련 비즈니스 로직을 처리하는 서비스.

    Service handling vehicle unit business logic.
    """

    def _to_response(self, unit: Unit) -> UnitResponse:
        return UnitResponse(
            id=str(unit.id),
            name=unit.name,
            type=unit.type,
            number_plate=unit.number_plate,
            is_deleted=unit.is_deleted,
            deleted_at=unit.deleted_at,
            created_at=unit.created_at,
        )

    def _clean(self, data: UnitCreate | UnitUpdate) -> dict:
        """입력값 정리 — Trim text fields; name and type are required."""
        name: str = data.name.strip()
        unit_type: str = data.type.strip()
        if not name or not unit_type:
            raise BadRequestError("Unit name and type are required")
        plate: str | None = data.number_plate.strip() if data.number_plate else None
        return {"name": name, "type": unit_type, "number_plate": plate or None}

    async def _get(self, db: AsyncSession, unit_id: UUID) -> Unit:
        unit: Unit | None = await unit_repository.get_by_id(db, unit_id)
        if unit is None:
            raise NotFoundError("Unit not found")
        return unit

    async def list_units(self, db: AsyncSession, include_deleted: bool = False) -> list[UnitResponse]:
        """유닛 목록 조회 — Units ordered by name."""
        units: list[Unit] = await unit_repository.list_units(db, include_deleted=include_deleted)
        return [self._to_response(u) for u in units]

    async def create_unit(self, db: AsyncSession, data: UnitCreate) -> UnitResponse:
        """새 유닛을 생성합니다.

        Raises:
            BadRequestError: 이름 또는 유형 누락 (Name or type missing)
        """
        unit: Unit = await unit_repository.create(db, {**self._clean(data), "is_deleted": False})
        return self._to_response(unit)

    async def update_unit(self, db: AsyncSession, unit_id: UUID, data: UnitUpdate) -> UnitResponse:
        """유닛 정보를 수정합니다.

        Raises:
            NotFoundError: 유닛 없음 (Unit not found)
            BadRequestError: 이름 또는 유형 누락 (Name or type missing)
        """
        unit: Unit = await self._get(db, unit_id)
        unit = await unit_repository.update(db, unit, self._clean(data))
        return self._to_response(unit)

    async def delete_unit(self, db: AsyncSession, unit_id: UUID) -> None:
        """유닛을 소프트 삭제합니다.

        Soft-delete a unit: it disappears from selection lists while past
        workchecks keep their reference.

        Raises:
            NotFoundError: 유닛 없음 또는 이미 삭제됨 (Missing or already deleted)
        """
        unit: Unit = await self._get(db, unit_id)
        if unit.is_deleted:
            raise NotFoundError("Unit not found")
        await unit_repository.update(
            db, unit, {"is_deleted": True, "deleted_at": datetime.now(timezone.utc)}
        )

    async def restore_unit(self, db: AsyncSession, unit_id: UUID) -> UnitResponse:
        """삭제된 유닛을 복원합니다 — Clear the soft-delete flag and timestamp."""
        unit: Unit = await self._get(db, unit_id)
        unit = await unit_repository.update(db, unit, {"is_deleted": False, "deleted_at": None})
        return self._to_response(unit)


# 싱글턴 인스턴스 — Singleton instance
unit_service: UnitService = UnitService()
