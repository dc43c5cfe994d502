"""검토 서비스 — 관리자 승인/반려 결정 및 제출 목록.

Approval Service — Admin decisions on submitted workchecks and the
review listing. One decision per submission cycle: a decided approval
only reopens through the owner's resubmission after a rejection.
"""

from datetime import date, datetime, timezone
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.workcheck import (
    APPROVAL_APPROVED,
    APPROVAL_PENDING,
    APPROVAL_REJECTED,
    Approval,
    Workcheck,
)
from app.repositories.approval_repository import approval_repository
from app.repositories.workcheck_repository import STATUS_FILTERS, workcheck_repository
from app.schemas.workcheck import WorkcheckListResponse, WorkcheckResponse
from app.services.auth_service import AuthContext
from app.services.workcheck_service import workcheck_service
from app.utils.exceptions import BadRequestError, ConflictError, NotFoundError
from app.utils.ids import parse_uuid
from app.utils.pagination import page_count, paginate


class ApprovalService:
    """검토 관련 비즈니스 로직을 처리하는 서비스.

    Service handling admin review of workchecks.
    """

    async def decide(
        self,
        db: AsyncSession,
        ctx: AuthContext,
        workcheck_id: str | UUID,
        is_approved: bool,
        comments: str | None = None,
    ) -> WorkcheckResponse:
        """점검을 승인 또는 반려합니다.

        Record the admin's decision on a workcheck. The approval row is
        created when missing and updated in place otherwise; is_submitted is
        left unchanged.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            ctx: 인증 컨텍스트 (Authorization context, admin)
            workcheck_id: 점검 ID (Workcheck identifier)
            is_approved: 승인 여부 (True = approve, False = reject)
            comments: 검토 의견, 공백이면 null (Comments, blank stored as null)

        Returns:
            WorkcheckResponse: 결정이 반영된 점검 (Workcheck with the decision)

        Raises:
            NotFoundError: 점검 없음 또는 삭제됨 (Missing or deleted workcheck)
            ConflictError: 이미 결정됨 (Already decided)
        """
        wc_id: UUID = parse_uuid(workcheck_id, "Workcheck not found")
        workcheck: Workcheck | None = await workcheck_repository.get_detail(db, wc_id)
        if workcheck is None:
            raise NotFoundError("Workcheck not found")

        approval: Approval | None = workcheck.approval
        if approval is not None and approval.status != APPROVAL_PENDING:
            raise ConflictError("This workcheck has already been reviewed")

        decision: dict = {
            "status": APPROVAL_APPROVED if is_approved else APPROVAL_REJECTED,
            "approver_id": ctx.user_id,
            "comments": comments.strip() if comments and comments.strip() else None,
            "approved_at": datetime.now(timezone.utc),
        }
        if approval is None:
            await approval_repository.create(db, {"workcheck_id": workcheck.id, **decision})
        else:
            await approval_repository.update(db, approval, decision)

        return workcheck_service.to_response(await workcheck_repository.get_detail(db, workcheck.id))

    async def list_submitted(
        self,
        db: AsyncSession,
        page: int = 1,
        per_page: int = 10,
        search: str | None = None,
        status: str | None = None,
        day: date | None = None,
    ) -> WorkcheckListResponse:
        """제출된 점검 목록을 조회합니다 (관리자용).

        List submitted workchecks newest first with checker, unit and
        approval. Search, status and date filters run in SQL before
        pagination.

        Raises:
            BadRequestError: 알 수 없는 상태 필터 (Unknown status filter)
        """
        if status is not None and status not in STATUS_FILTERS:
            raise BadRequestError(f"Invalid status filter: {status}")

        query = workcheck_repository.admin_query(search=search, status=status, day=day)
        workchecks, total = await paginate(db, query, page, per_page)
        return WorkcheckListResponse(
            items=[workcheck_service.to_response(w) for w in workchecks],
            total=total,
            page=page,
            per_page=per_page,
            pages=page_count(total, per_page),
        )


# 싱글턴 인스턴스 — Singleton instance
approval_service: ApprovalService = ApprovalService()
