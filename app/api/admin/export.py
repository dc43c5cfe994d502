"""관리자 내보내기 라우터 — 점검 기록 파일 다운로드.

Admin Export Router — Download submitted workchecks as CSV, Excel or PDF.
"""

from datetime import date
from io import BytesIO
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.services.auth_service import AuthContext
from app.services.export_service import ExportFile, export_service
from app.utils.dates import local_today

router: APIRouter = APIRouter()


@router.get("/workchecks")
async def export_workchecks(
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_admin)],
    today: Annotated[date, Depends(local_today)],
    export: Annotated[str, Query(description="csv | excel | pdf")] = "csv",
    search: Annotated[str | None, Query()] = None,
    status: Annotated[str | None, Query()] = None,
    day: Annotated[date | None, Query(alias="date")] = None,
) -> StreamingResponse:
    """점검 기록 내보내기 — 목록과 같은 필터, 페이지네이션 없음."""
    file: ExportFile = await export_service.export_workchecks(
        db, export, today, search=search, status=status, day=day
    )
    return StreamingResponse(
        BytesIO(file.content),
        media_type=file.media_type,
        headers={"Content-Disposition": f'attachment; filename="{file.filename}"'},
    )
