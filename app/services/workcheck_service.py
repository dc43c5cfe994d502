"""점검 서비스 — 일일 점검 생성, 항목 기록, 제출 비즈니스 로직.

Workcheck Service — Business logic for the daily inspection lifecycle.

State machine (workcheck + approval):
    NEW (no approval) → PENDING → APPROVED (terminal)
                                → REJECTED → PENDING (resubmission)

Edits to items, hours meter and evidence are allowed in NEW and REJECTED
and refused with 409 in PENDING and APPROVED.

Daily uniqueness (one per staff, one claim per unit) is pre-checked for a
friendly message and enforced by partial unique indexes; the insert runs
in a savepoint so a lost race surfaces as 409 as well.
"""

import json
import math
from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.fleet import CheckItem
from app.models.workcheck import (
    ACTION_CODES,
    APPROVAL_APPROVED,
    APPROVAL_PENDING,
    APPROVAL_REJECTED,
    Approval,
    Workcheck,
    WorkcheckItem,
)
from app.repositories.approval_repository import approval_repository
from app.repositories.check_item_repository import check_item_repository
from app.repositories.unit_repository import unit_repository
from app.repositories.workcheck_repository import STATUS_FILTERS, STATUS_NEW, workcheck_repository
from app.schemas.workcheck import (
    ApprovalApproved,
    ApprovalPending,
    ApprovalRejected,
    ItemImageResponse,
    TodayUnselectedResponse,
    UnitBrief,
    UserBrief,
    WorkcheckItemResponse,
    WorkcheckListResponse,
    WorkcheckResponse,
)
from app.services.auth_service import AuthContext
from app.utils.exceptions import BadRequestError, ConflictError, NotFoundError
from app.utils.ids import parse_uuid
from app.utils.pagination import page_count, paginate

# 수정 가능 필드 — Fields accepted by update_item
ITEM_FIELDS: tuple[str, ...] = ("actions", "note")


def workcheck_status(workcheck: Workcheck) -> str:
    """점검 생명주기 상태 — "new" | "pending" | "approved" | "rejected"."""
    if workcheck.approval is None:
        return STATUS_NEW
    return workcheck.approval.status


def ensure_editable(workcheck: Workcheck) -> None:
    """점검이 수정 가능한 상태인지 확인합니다.

    Raise ConflictError unless the workcheck is NEW or REJECTED.
    """
    status: str = workcheck_status(workcheck)
    if status == APPROVAL_APPROVED:
        raise ConflictError("This workcheck has been approved and can no longer be edited")
    if status == APPROVAL_PENDING:
        raise ConflictError("This workcheck is awaiting review and cannot be edited")


def parse_actions(value: Any) -> list[str]:
    """조치 코드 입력을 검증하고 정규화합니다.

    Validate an action set given as a list or as its JSON encoding.
    Duplicates collapse and the result follows the canonical P, B, L, T
    order. Malformed JSON, non-list values and unknown codes are rejected.

    Args:
        value: 조치 코드 목록 또는 JSON 문자열 (List of codes or JSON string)

    Returns:
        list[str]: 정규화된 조치 코드 (Normalized action codes)

    Raises:
        BadRequestError: 형식 오류 또는 알 수 없는 코드 (Malformed input or unknown code)
    """
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            raise BadRequestError("Actions must be a JSON list of action codes")
    if not isinstance(value, list):
        raise BadRequestError("Actions must be a list of action codes")

    codes: set[str] = set()
    for code in value:
        normalized: str = code.strip().upper() if isinstance(code, str) else ""
        if normalized not in ACTION_CODES:
            raise BadRequestError(f"Invalid action code: {code!r}. Allowed: {', '.join(ACTION_CODES)}")
        codes.add(normalized)
    return [code for code in ACTION_CODES if code in codes]


def _user_brief(user: Any) -> UserBrief | None:
    if user is None:
        return None
    return UserBrief(
        id=str(user.id),
        first_name=user.first_name,
        last_name=user.last_name,
        username=user.username,
    )


def _unit_brief(unit: Any) -> UnitBrief:
    return UnitBrief(id=str(unit.id), name=unit.name, type=unit.type, number_plate=unit.number_plate)


def item_to_response(item: WorkcheckItem) -> WorkcheckItemResponse:
    """점검 항목 모델을 응답 스키마로 변환합니다 (check_item, images 로드 필요)."""
    check_item: CheckItem = item.check_item
    return WorkcheckItemResponse(
        id=str(item.id),
        item_id=str(item.item_id),
        code=check_item.code,
        label=check_item.label,
        actions=list(item.actions or []),
        note=item.note or "",
        images=[
            ItemImageResponse(id=str(img.id), file_name=img.file_name, uploaded_at=img.uploaded_at)
            for img in item.images
        ],
        is_complete=item.is_complete,
    )


def approval_to_view(approval: Approval | None) -> ApprovalPending | ApprovalApproved | ApprovalRejected | None:
    """검토 레코드를 상태별 응답 변형으로 변환합니다.

    Convert the approval row to its status-tagged response variant.
    """
    if approval is None:
        return None
    if approval.status == APPROVAL_APPROVED:
        return ApprovalApproved(
            id=str(approval.id),
            approver=_user_brief(approval.approver),
            approved_at=approval.approved_at,
            comments=approval.comments,
        )
    if approval.status == APPROVAL_REJECTED:
        return ApprovalRejected(
            id=str(approval.id),
            approver=_user_brief(approval.approver),
            approved_at=approval.approved_at,
            comments=approval.comments,
        )
    return ApprovalPending(id=str(approval.id), submitted_at=approval.updated_at)


class WorkcheckService:
    """점검 생명주기 비즈니스 로직을 처리하는 서비스.

    Service handling the workcheck lifecycle for staff members.
    """

    def to_response(self, workcheck: Workcheck) -> WorkcheckResponse:
        """점검 모델을 상세 응답으로 변환합니다.

        Convert a fully loaded workcheck to WorkcheckResponse.

        Args:
            workcheck: 전체 관계가 로드된 점검 (Workcheck with full graph loaded)

        Returns:
            WorkcheckResponse: 점검 상세 응답 (Workcheck detail response)
        """
        items: list[WorkcheckItemResponse] = [item_to_response(i) for i in workcheck.items]
        return WorkcheckResponse(
            id=str(workcheck.id),
            work_date=workcheck.work_date,
            status=workcheck_status(workcheck),
            hours_meter=workcheck.hours_meter,
            is_submitted=workcheck.is_submitted,
            created_at=workcheck.created_at,
            checker=_user_brief(workcheck.checker),
            unit=_unit_brief(workcheck.unit),
            items=items,
            completed_items=sum(1 for i in items if i.is_complete),
            total_items=len(items),
            approval=approval_to_view(workcheck.approval),
        )

    async def _get_owned(self, db: AsyncSession, ctx: AuthContext, workcheck_id: str | UUID) -> Workcheck:
        """본인 점검 조회 — 타인 소유는 404로 숨김 (Another staff's workcheck is reported as missing)."""
        wc_id: UUID = parse_uuid(workcheck_id, "Workcheck not found")
        workcheck: Workcheck | None = await workcheck_repository.get_detail(db, wc_id)
        if workcheck is None or workcheck.checker_id != ctx.user_id:
            raise NotFoundError("Workcheck not found")
        return workcheck

    async def _get_owned_item(self, db: AsyncSession, ctx: AuthContext, item_id: str | UUID) -> WorkcheckItem:
        """본인 점검 항목 조회 — Item reachable through the caller's own workcheck."""
        it_id: UUID = parse_uuid(item_id, "Item not found")
        item: WorkcheckItem | None = await workcheck_repository.get_item(db, it_id)
        if (
            item is None
            or item.workcheck.is_deleted
            or item.workcheck.checker_id != ctx.user_id
        ):
            raise NotFoundError("Item not found")
        return item

    async def create(
        self,
        db: AsyncSession,
        ctx: AuthContext,
        unit_id: str,
        today: date,
    ) -> WorkcheckResponse:
        """오늘의 점검을 생성합니다.

        Create today's workcheck for the caller on the given unit, with one
        empty item per active check item in sort order.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            ctx: 인증 컨텍스트 (Authorization context)
            unit_id: 유닛 ID (Unit identifier)
            today: 점검일 (Calendar day in the configured timezone)

        Returns:
            WorkcheckResponse: 생성된 점검 (Created workcheck, fully joined)

        Raises:
            ConflictError: 오늘 점검이 이미 있거나 유닛이 선점됨
                           (Workcheck exists today, or unit already claimed)
            NotFoundError: 유닛이 없거나 삭제됨 (Unit missing or deleted)
        """
        existing: Workcheck | None = await workcheck_repository.get_for_checker_on(db, ctx.user_id, today)
        if existing is not None:
            raise ConflictError("You already have a workcheck for today")

        unit = await unit_repository.get_live(db, parse_uuid(unit_id, "Unit not found"))
        if unit is None:
            raise NotFoundError("Unit not found")
        if await workcheck_repository.unit_claimed_on(db, unit.id, today):
            raise ConflictError("This unit has already been selected by another staff member today")

        check_items: list[CheckItem] = await check_item_repository.list_ordered(db, active_only=True)
        workcheck = Workcheck(
            checker_id=ctx.user_id,
            unit_id=unit.id,
            work_date=today,
            is_submitted=False,
            is_deleted=False,
            items=[
                WorkcheckItem(item_id=check_item.id, position=position, actions=[], note="")
                for position, check_item in enumerate(check_items, start=1)
            ],
        )
        # 부분 고유 인덱스 위반 — Lost race on (checker, day) or (unit, day)
        try:
            async with db.begin_nested():
                db.add(workcheck)
                await db.flush()
        except IntegrityError:
            raise ConflictError("A workcheck for you or this unit already exists today")

        created: Workcheck | None = await workcheck_repository.get_detail(db, workcheck.id)
        return self.to_response(created)

    async def get_today(
        self,
        db: AsyncSession,
        ctx: AuthContext,
        today: date,
    ) -> WorkcheckResponse | TodayUnselectedResponse:
        """오늘의 점검 또는 선택 가능한 유닛 목록을 반환합니다.

        Return today's workcheck when it exists; otherwise the units nobody
        has claimed today, so the client can prompt for a selection.
        """
        workcheck: Workcheck | None = await workcheck_repository.get_for_checker_on(db, ctx.user_id, today)
        if workcheck is not None:
            return self.to_response(workcheck)

        units = await unit_repository.list_available(db, today)
        return TodayUnselectedResponse(available_units=[_unit_brief(u) for u in units])

    async def get_detail(
        self,
        db: AsyncSession,
        ctx: AuthContext,
        workcheck_id: str | UUID,
    ) -> WorkcheckResponse:
        """점검 상세 조회 — 직원은 본인 것만, 관리자는 전체.

        Staff see only their own workchecks; admins see any non-deleted one.
        """
        if ctx.is_admin:
            wc_id: UUID = parse_uuid(workcheck_id, "Workcheck not found")
            workcheck: Workcheck | None = await workcheck_repository.get_detail(db, wc_id)
            if workcheck is None:
                raise NotFoundError("Workcheck not found")
            return self.to_response(workcheck)
        return self.to_response(await self._get_owned(db, ctx, workcheck_id))

    async def history(
        self,
        db: AsyncSession,
        ctx: AuthContext,
        page: int = 1,
        per_page: int = 10,
        status: str | None = None,
        day: date | None = None,
    ) -> WorkcheckListResponse:
        """본인 점검 이력을 페이지 단위로 조회합니다.

        List the caller's workchecks newest first. Status and date filters
        are applied in SQL before pagination.

        Raises:
            BadRequestError: 알 수 없는 상태 필터 (Unknown status filter)
        """
        if status is not None and status not in STATUS_FILTERS:
            raise BadRequestError(f"Invalid status filter: {status}")

        query = workcheck_repository.history_query(ctx.user_id, status=status, day=day)
        workchecks, total = await paginate(db, query, page, per_page)
        return WorkcheckListResponse(
            items=[self.to_response(w) for w in workchecks],
            total=total,
            page=page,
            per_page=per_page,
            pages=page_count(total, per_page),
        )

    async def update_hours_meter(
        self,
        db: AsyncSession,
        ctx: AuthContext,
        workcheck_id: str,
        value: float,
    ) -> WorkcheckResponse:
        """아워미터 값을 저장합니다.

        Store the hours meter reading on the caller's workcheck.

        Raises:
            NotFoundError: 점검 없음 또는 타인 소유 (Missing or not owned)
            BadRequestError: 음수 또는 NaN/무한대 (Negative, NaN or infinite value)
            ConflictError: 수정 불가 상태 (Workcheck locked)
        """
        workcheck: Workcheck = await self._get_owned(db, ctx, workcheck_id)
        if not math.isfinite(value) or value < 0:
            raise BadRequestError("Hours meter must be a non-negative number")
        ensure_editable(workcheck)

        workcheck.hours_meter = value
        await db.flush()
        return self.to_response(await workcheck_repository.get_detail(db, workcheck.id))

    async def update_item(
        self,
        db: AsyncSession,
        ctx: AuthContext,
        item_id: str,
        field: str,
        value: Any,
    ) -> WorkcheckItemResponse:
        """점검 항목의 조치 코드 또는 메모를 수정합니다.

        Replace the action set or the note of one workcheck item.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            ctx: 인증 컨텍스트 (Authorization context)
            item_id: 점검 항목 ID (Workcheck item identifier)
            field: "actions" | "note"
            value: 새 값 (New value)

        Returns:
            WorkcheckItemResponse: 수정된 항목 (Updated item)

        Raises:
            NotFoundError: 항목 없음 또는 타인 소유 (Missing or not owned)
            BadRequestError: 잘못된 필드 또는 값 (Invalid field or value)
            ConflictError: 수정 불가 상태 (Workcheck locked)
        """
        item: WorkcheckItem = await self._get_owned_item(db, ctx, item_id)
        if field not in ITEM_FIELDS:
            raise BadRequestError(f"Invalid field: {field}. Allowed: {', '.join(ITEM_FIELDS)}")
        ensure_editable(item.workcheck)

        if field == "actions":
            item.actions = parse_actions(value)
        else:
            if value is not None and not isinstance(value, str):
                raise BadRequestError("Note must be text")
            item.note = value or ""

        await db.flush()
        return item_to_response(item)

    async def submit(
        self,
        db: AsyncSession,
        ctx: AuthContext,
        workcheck_id: str,
    ) -> WorkcheckResponse:
        """점검을 검토 요청으로 제출합니다.

        Submit the caller's workcheck for review. The first submission
        creates the approval; a resubmission after rejection resets the same
        approval to pending and clears the previous decision.

        Raises:
            NotFoundError: 점검 없음 또는 타인 소유 (Missing or not owned)
            ConflictError: 이미 승인됨 또는 검토 대기 중 (Approved or already pending)
            BadRequestError: 미완료 항목 또는 아워미터 미입력
                             (Incomplete items or missing hours meter)
        """
        workcheck: Workcheck = await self._get_owned(db, ctx, workcheck_id)
        approval: Approval | None = workcheck.approval

        if approval is not None and approval.status == APPROVAL_APPROVED:
            raise ConflictError("This workcheck has already been approved")

        remaining: int = sum(1 for item in workcheck.items if not item.is_complete)
        if remaining > 0:
            raise BadRequestError(f"Please complete all {remaining} remaining items before submitting")
        if workcheck.hours_meter is None:
            raise BadRequestError("Please enter hours meter reading")

        if approval is not None and approval.status == APPROVAL_PENDING:
            raise ConflictError("This workcheck is already awaiting review")

        if approval is None:
            try:
                async with db.begin_nested():
                    await approval_repository.create(
                        db, {"workcheck_id": workcheck.id, "status": APPROVAL_PENDING}
                    )
            except IntegrityError:
                raise ConflictError("This workcheck is already awaiting review")
        else:
            # 반려 후 재제출 — Reset the rejected decision in place
            approval.status = APPROVAL_PENDING
            approval.approver = None
            approval.approver_id = None
            approval.comments = None
            approval.approved_at = None

        workcheck.is_submitted = True
        await db.flush()
        return self.to_response(await workcheck_repository.get_detail(db, workcheck.id))


# 싱글턴 인스턴스 — Singleton instance
workcheck_service: WorkcheckService = WorkcheckService()
