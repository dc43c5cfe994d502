"""관리자 점검 항목 라우터 — 점검 항목 카탈로그 관리.

Admin Check Item Router — Catalog of check items shown on every new
workcheck, in sort order.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.schemas.common import MessageResponse
from app.schemas.fleet import (
    CheckItemActiveUpdate,
    CheckItemCreate,
    CheckItemMove,
    CheckItemResponse,
    CheckItemUpdate,
)
from app.services.auth_service import AuthContext
from app.services.check_item_service import check_item_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[CheckItemResponse])
async def list_check_items(
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_admin)],
) -> list[CheckItemResponse]:
    """점검 항목 목록 — 정렬 순서대로."""
    return await check_item_service.list_items(db)


@router.post("", response_model=CheckItemResponse, status_code=201)
async def create_check_item(
    data: CheckItemCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_admin)],
) -> CheckItemResponse:
    """점검 항목을 생성합니다. 정렬 순서 미지정 시 맨 뒤에 추가.

    Create a check item, appended unless a sort_order is given.
    """
    result: CheckItemResponse = await check_item_service.create_item(db, data)
    await db.commit()
    return result


@router.put("/{item_id}", response_model=CheckItemResponse)
async def update_check_item(
    item_id: UUID,
    data: CheckItemUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_admin)],
) -> CheckItemResponse:
    """점검 항목을 수정합니다.

    Update a check item. A changed sort_order moves it.
    """
    result: CheckItemResponse = await check_item_service.update_item(db, item_id, data)
    await db.commit()
    return result


@router.delete("/{item_id}", response_model=MessageResponse)
async def delete_check_item(
    item_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_admin)],
) -> MessageResponse:
    """점검 항목 삭제 — 사용 중이면 거부.

    Delete an unused check item.
    """
    await check_item_service.delete_item(db, item_id)
    await db.commit()
    return MessageResponse(message="Check item deleted successfully")


@router.post("/{item_id}/move", response_model=list[CheckItemResponse])
async def move_check_item(
    item_id: UUID,
    data: CheckItemMove,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_admin)],
) -> list[CheckItemResponse]:
    """점검 항목 순서 이동 — 위/아래 이웃과 교환.

    Swap with the neighbour above or below and return the new order.
    """
    result: list[CheckItemResponse] = await check_item_service.move_item(db, item_id, data.direction)
    await db.commit()
    return result


@router.patch("/{item_id}/active", response_model=CheckItemResponse)
async def set_check_item_active(
    item_id: UUID,
    data: CheckItemActiveUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_admin)],
) -> CheckItemResponse:
    """점검 항목 활성/비활성 전환."""
    result: CheckItemResponse = await check_item_service.set_active(db, item_id, data.is_active)
    await db.commit()
    return result
