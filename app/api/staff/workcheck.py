"""직원 점검 라우터 — 일일 점검 생성, 항목 기록, 사진, 제출.

Staff Workcheck Router — Daily inspection endpoints for staff members.
All endpoints act on the caller's own workchecks; another staff member's
records are reported as 404.
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_staff
from app.database import get_db
from app.schemas.common import MessageResponse
from app.schemas.workcheck import (
    HoursMeterUpdate,
    ImageUploadResponse,
    ItemUpdate,
    SubmitRequest,
    TodayUnselectedResponse,
    WorkcheckCreate,
    WorkcheckItemResponse,
    WorkcheckListResponse,
    WorkcheckResponse,
)
from app.services.auth_service import AuthContext
from app.services.evidence_service import evidence_service
from app.services.workcheck_service import workcheck_service
from app.utils.dates import local_today
from app.utils.exceptions import BadRequestError

router: APIRouter = APIRouter()


@router.get("/today", response_model=WorkcheckResponse | TodayUnselectedResponse)
async def get_today_workcheck(
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_staff)],
    today: Annotated[date, Depends(local_today)],
) -> WorkcheckResponse | TodayUnselectedResponse:
    """오늘의 점검 조회 — 없으면 선택 가능한 유닛 목록.

    Today's workcheck, or the units still available for selection.
    """
    return await workcheck_service.get_today(db, ctx, today)


@router.post("/create", response_model=WorkcheckResponse, status_code=201)
async def create_workcheck(
    data: WorkcheckCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_staff)],
    today: Annotated[date, Depends(local_today)],
) -> WorkcheckResponse:
    """오늘의 점검 생성 — 선택한 유닛으로 점검 시작.

    Start today's workcheck on the selected unit.
    """
    result: WorkcheckResponse = await workcheck_service.create(db, ctx, data.unit_id, today)
    await db.commit()
    return result


@router.get("/history", response_model=WorkcheckListResponse)
async def get_workcheck_history(
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_staff)],
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 10,
    status: Annotated[str | None, Query()] = None,
    day: Annotated[date | None, Query(alias="date")] = None,
) -> WorkcheckListResponse:
    """내 점검 이력 조회 — 상태/날짜 필터, 최신순.

    The caller's workchecks, newest first, filtered by status and date.
    """
    return await workcheck_service.history(db, ctx, page=page, per_page=per_page, status=status, day=day)


@router.put("/update-hours", response_model=WorkcheckResponse)
async def update_hours_meter(
    data: HoursMeterUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_staff)],
) -> WorkcheckResponse:
    """아워미터 입력.

    Store the hours meter reading.
    """
    result: WorkcheckResponse = await workcheck_service.update_hours_meter(
        db, ctx, data.workcheck_id, data.hours_meter
    )
    await db.commit()
    return result


@router.put("/update-item", response_model=WorkcheckItemResponse)
async def update_workcheck_item(
    data: ItemUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_staff)],
) -> WorkcheckItemResponse:
    """점검 항목 수정 — 조치 코드 또는 메모.

    Replace the action set or the note of an item.
    """
    result: WorkcheckItemResponse = await workcheck_service.update_item(
        db, ctx, data.item_id, data.field, data.value
    )
    await db.commit()
    return result


@router.post("/submit", response_model=WorkcheckResponse)
async def submit_workcheck(
    data: SubmitRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_staff)],
) -> WorkcheckResponse:
    """점검 제출 — 모든 항목 완료 및 아워미터 입력 필요.

    Submit for review. Every item must be complete and the hours meter set.
    """
    result: WorkcheckResponse = await workcheck_service.submit(db, ctx, data.workcheck_id)
    await db.commit()
    return result


@router.post("/upload-images", response_model=ImageUploadResponse)
async def upload_item_image(
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_staff)],
    today: Annotated[date, Depends(local_today)],
    image: Annotated[UploadFile, File()],
    item_id: Annotated[str | None, Form()] = None,
    item_id_camel: Annotated[str | None, Form(alias="itemId")] = None,
) -> ImageUploadResponse:
    """항목 증빙 사진 업로드 — 항목당 1장, 이미지, 최대 10MB.

    Upload the evidence photo of an item (one per item, image/*, 10MB max).
    """
    target: str | None = item_id or item_id_camel
    if not target:
        raise BadRequestError("item_id is required")
    result: ImageUploadResponse = await evidence_service.upload_image(db, ctx, target, image, today)
    await db.commit()
    return result


@router.delete("/delete-image", response_model=MessageResponse)
async def delete_item_image(
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_staff)],
    image_id: Annotated[str | None, Query()] = None,
    image_url: Annotated[str | None, Query()] = None,
) -> MessageResponse:
    """항목 증빙 사진 삭제 — ID 또는 URL로 지정.

    Delete an evidence photo by id or URL.
    """
    await evidence_service.delete_image(db, ctx, image_id=image_id, image_url=image_url)
    await db.commit()
    return MessageResponse(message="Image deleted successfully")


@router.get("/{workcheck_id}", response_model=WorkcheckResponse)
async def get_workcheck(
    workcheck_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_staff)],
) -> WorkcheckResponse:
    """내 점검 상세 조회.

    One of the caller's workchecks.
    """
    return await workcheck_service.get_detail(db, ctx, workcheck_id)
