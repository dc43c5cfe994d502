"""관리자 유닛 라우터 — 차량/장비 CRUD 및 복원.

Admin Unit Router — Vehicle and equipment catalog.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.schemas.fleet import UnitCreate, UnitResponse, UnitUpdate
from app.services.auth_service import AuthContext
from app.services.unit_service import unit_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[UnitResponse])
async def list_units(
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_admin)],
    include_deleted: Annotated[bool, Query(description="삭제된 유닛 포함 여부")] = False,
) -> list[UnitResponse]:
    """유닛 목록을 이름순으로 조회합니다.

    List units by name.
    """
    return await unit_service.list_units(db, include_deleted=include_deleted)


@router.post("", response_model=UnitResponse, status_code=201)
async def create_unit(
    data: UnitCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_admin)],
) -> UnitResponse:
    """새 유닛을 등록합니다.

    Register a new unit.
    """
    result: UnitResponse = await unit_service.create_unit(db, data)
    await db.commit()
    return result


@router.put("/{unit_id}", response_model=UnitResponse)
async def update_unit(
    unit_id: UUID,
    data: UnitUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_admin)],
) -> UnitResponse:
    """유닛 정보를 수정합니다."""
    result: UnitResponse = await unit_service.update_unit(db, unit_id, data)
    await db.commit()
    return result


@router.delete("/{unit_id}", status_code=204)
async def delete_unit(
    unit_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_admin)],
) -> None:
    """유닛 소프트 삭제 — 기존 점검 기록은 유지됩니다.

    Soft-delete a unit. Its past workchecks are kept.
    """
    await unit_service.delete_unit(db, unit_id)
    await db.commit()


@router.post("/{unit_id}/restore", response_model=UnitResponse)
async def restore_unit(
    unit_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_admin)],
) -> UnitResponse:
    """삭제된 유닛을 복원합니다."""
    result: UnitResponse = await unit_service.restore_unit(db, unit_id)
    await db.commit()
    return result
