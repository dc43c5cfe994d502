"""일일 점검 및 검토 관련 Pydantic 요청/응답 스키마 정의.

Workcheck and approval Pydantic request/response schema definitions.

Request bodies accept both snake_case and the camelCase keys used by the
mobile client (``unit_id`` / ``unitId``). Responses are snake_case.

The approval is exposed as a variant discriminated by ``status``:
    - pending: 검토 대기 (awaiting review)
    - approved: 승인 (approver, approved_at, optional comments)
    - rejected: 반려 (approver, approved_at, optional comments)
"""

from datetime import date, datetime
from typing import Annotated, Any, Literal, Union
from pydantic import AliasChoices, BaseModel, Field

from app.schemas.common import PageMeta


# === 요청 (Request) 스키마 ===

class WorkcheckCreate(BaseModel):
    """오늘의 점검 생성 요청 — Unit chosen for today's inspection."""

    unit_id: str = Field(validation_alias=AliasChoices("unit_id", "unitId"))


class HoursMeterUpdate(BaseModel):
    """아워미터 입력 요청 스키마.

    Attributes:
        workcheck_id: 점검 ID (Workcheck identifier)
        hours_meter: 아워미터 값 (Hours meter reading, >= 0)
    """

    workcheck_id: str = Field(validation_alias=AliasChoices("workcheck_id", "workcheckId"))
    hours_meter: float = Field(validation_alias=AliasChoices("hours_meter", "hoursMeter", "value"))


class ItemUpdate(BaseModel):
    """점검 항목 수정 요청 스키마.

    Item update request schema. ``field`` selects what ``value`` replaces:
    "actions" takes a list of action codes (or its JSON encoding), "note"
    takes text. Field and value validation happens in the service so that
    errors carry domain messages.

    Attributes:
        item_id: 점검 항목 ID (Workcheck item identifier)
        field: 수정 대상 ("actions" | "note")
        value: 새 값 (New value)
    """

    item_id: str = Field(validation_alias=AliasChoices("item_id", "itemId"))
    field: str
    value: Any = None


class SubmitRequest(BaseModel):
    """점검 제출 요청 — Workcheck to submit for review."""

    workcheck_id: str = Field(validation_alias=AliasChoices("workcheck_id", "workcheckId"))


class ApprovalDecision(BaseModel):
    """관리자 검토 결정 요청 스키마.

    Attributes:
        workcheck_id: 점검 ID (Workcheck identifier)
        is_approved: 승인 여부 (True = approve, False = reject)
        comments: 검토 의견 (Optional comments, blank stored as null)
    """

    workcheck_id: str = Field(validation_alias=AliasChoices("workcheck_id", "workcheckId"))
    is_approved: bool = Field(validation_alias=AliasChoices("is_approved", "isApproved"))
    comments: str | None = None


# === 응답 (Response) 스키마 ===

class UserBrief(BaseModel):
    """점검자/검토자 요약 — Checker or approver summary."""

    id: str
    first_name: str
    last_name: str
    username: str


class UnitBrief(BaseModel):
    """유닛 요약 — Unit summary."""

    id: str
    name: str
    type: str
    number_plate: str | None = None


class ItemImageResponse(BaseModel):
    """증빙 사진 응답 — Evidence photo."""

    id: str
    file_name: str
    uploaded_at: datetime | None = None


class WorkcheckItemResponse(BaseModel):
    """점검 항목 응답 스키마.

    Attributes:
        id: 점검 항목 ID (Workcheck item identifier)
        item_id: 카탈로그 항목 ID (Check item identifier)
        code / label: 카탈로그 코드와 설명 (Catalog code and label)
        actions: 조치 코드 (Action codes, canonical order)
        note: 메모 (Note)
        images: 증빙 사진, 최대 1장 (Evidence photos, at most one)
        is_complete: 완료 여부 (Actions present and exactly one photo)
    """

    id: str
    item_id: str
    code: str
    label: str
    actions: list[str]
    note: str
    images: list[ItemImageResponse]
    is_complete: bool


class ApprovalPending(BaseModel):
    """검토 대기 상태 — Submitted, awaiting a decision."""

    status: Literal["pending"] = "pending"
    id: str
    is_approved: None = None
    submitted_at: datetime | None = None


class ApprovalApproved(BaseModel):
    """승인 상태 — Terminal approved decision."""

    status: Literal["approved"] = "approved"
    id: str
    is_approved: Literal[True] = True
    approver: UserBrief | None = None
    approved_at: datetime
    comments: str | None = None


class ApprovalRejected(BaseModel):
    """반려 상태 — Rejected; the owner may edit and resubmit."""

    status: Literal["rejected"] = "rejected"
    id: str
    is_approved: Literal[False] = False
    approver: UserBrief | None = None
    approved_at: datetime
    comments: str | None = None


ApprovalView = Annotated[
    Union[ApprovalPending, ApprovalApproved, ApprovalRejected],
    Field(discriminator="status"),
]


class WorkcheckResponse(BaseModel):
    """점검 상세 응답 스키마.

    Workcheck detail response with unit, checker, ordered items and the
    approval variant. ``status`` is the lifecycle state: "new", "pending",
    "approved" or "rejected".
    """

    has_vehicle_selected: Literal[True] = True
    id: str
    work_date: date
    status: str
    hours_meter: float | None = None
    is_submitted: bool
    created_at: datetime | None = None
    checker: UserBrief
    unit: UnitBrief
    items: list[WorkcheckItemResponse]
    completed_items: int
    total_items: int
    approval: ApprovalView | None = None


class TodayUnselectedResponse(BaseModel):
    """오늘 점검 미생성 응답 — No workcheck yet today; units to pick from."""

    has_vehicle_selected: Literal[False] = False
    available_units: list[UnitBrief]


class WorkcheckListResponse(PageMeta):
    """점검 목록 페이지 응답 — One page of workchecks with metadata."""

    items: list[WorkcheckResponse]


class ImageUploadResponse(BaseModel):
    """증빙 사진 업로드 응답 — Stored image URL and row id."""

    image_url: str
    image_id: str
