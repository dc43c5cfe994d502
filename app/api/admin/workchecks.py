"""관리자 점검 라우터 — 제출된 점검 조회 및 승인/반려.

Admin Workcheck Router — Review queue for submitted workchecks.
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.schemas.workcheck import ApprovalDecision, WorkcheckListResponse, WorkcheckResponse
from app.services.approval_service import approval_service
from app.services.auth_service import AuthContext
from app.services.workcheck_service import workcheck_service

router: APIRouter = APIRouter()


@router.get("", response_model=WorkcheckListResponse)
async def list_workchecks(
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_admin)],
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 10,
    search: Annotated[str | None, Query(description="점검자 이름/아이디 검색")] = None,
    status: Annotated[str | None, Query(description="all | new | pending | approved | rejected")] = None,
    day: Annotated[date | None, Query(alias="date")] = None,
) -> WorkcheckListResponse:
    """제출된 점검 목록을 조회합니다.

    List submitted workchecks, newest first, with search, status and date
    filters.
    """
    return await approval_service.list_submitted(
        db, page=page, per_page=per_page, search=search, status=status, day=day
    )


@router.post("", response_model=WorkcheckResponse)
async def decide_workcheck(
    data: ApprovalDecision,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_admin)],
) -> WorkcheckResponse:
    """점검을 승인 또는 반려합니다.

    Approve or reject a workcheck. A decision is final until the staff
    member resubmits a rejected workcheck.
    """
    result: WorkcheckResponse = await approval_service.decide(
        db, ctx, data.workcheck_id, data.is_approved, data.comments
    )
    await db.commit()
    return result


@router.get("/{workcheck_id}", response_model=WorkcheckResponse)
async def get_workcheck(
    workcheck_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_admin)],
) -> WorkcheckResponse:
    """점검 상세 조회 — 모든 직원의 점검.

    Any staff member's workcheck.
    """
    return await workcheck_service.get_detail(db, ctx, workcheck_id)
