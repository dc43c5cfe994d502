"""일일 차량 점검(Workcheck) 관련 SQLAlchemy ORM 모델 정의.

Workcheck SQLAlchemy ORM model definitions.
A workcheck is one staff member's daily inspection of one unit. At creation
it snapshots the active check items as workcheck items; each item records the
actions taken, a note and exactly one photo as evidence. Submission creates
the approval record which admins then decide.

Tables:
    - workchecks: 일일 점검 (Daily inspection record)
    - workcheck_items: 점검 항목 스냅샷 (Snapshot lines, one per active check item)
    - workcheck_item_images: 항목 증빙 사진 (Photo evidence, at most one per item)
    - approvals: 검토 결과 (Review decision, one per workcheck)

Constraints:
    - uq_workcheck_checker_day: 직원당 하루 1건 (one live workcheck per staff per day)
    - uq_workcheck_unit_day: 유닛당 하루 1건 (one live claim per unit per day)
    - workcheck_item_images.item_id UNIQUE (one image per item)
    - approvals.workcheck_id UNIQUE (one approval per workcheck)
"""

import uuid
from datetime import date, datetime, timezone
from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

# 점검 조치 코드 — Action codes in canonical order
# P=Periksa(점검/inspect), B=Bersihkan(청소/clean), L=Luminasi(윤활/lubricate), T=Tambah(보충/top-up)
ACTION_CODES: tuple[str, ...] = ("P", "B", "L", "T")

# 검토 상태 — Approval status values
APPROVAL_PENDING: str = "pending"
APPROVAL_APPROVED: str = "approved"
APPROVAL_REJECTED: str = "rejected"


class Workcheck(Base):
    """일일 점검 모델 — 직원 1명이 하루에 유닛 1대를 점검한 기록.

    Workcheck model — One staff member's daily inspection of one unit.

    work_date is the calendar day in the configured timezone; the partial
    unique indexes below make "one per staff per day" and "one claim per
    unit per day" hold at the database level for non-deleted rows.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        checker_id: 점검 직원 FK (Inspecting staff member)
        unit_id: 점검 유닛 FK (Inspected unit)
        work_date: 점검일 (Inspection calendar day)
        hours_meter: 아워미터 값 (Hours meter reading, required before submit)
        is_submitted: 제출 여부 (Stays true after a rejection)
        is_deleted: 소프트 삭제 여부 (Soft-delete flag)

    Relationships:
        checker, unit, items (ordered by snapshot position), approval
    """

    __tablename__ = "workchecks"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    checker_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # 유닛 FK — RESTRICT: 참조 중인 유닛은 하드 삭제 불가 (Referenced units cannot be hard-deleted)
    unit_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("units.id", ondelete="RESTRICT"), nullable=False)
    # 점검일 — Calendar day in settings.TIMEZONE
    work_date: Mapped[date] = mapped_column(Date, nullable=False)
    hours_meter: Mapped[float | None] = mapped_column(Float, nullable=True)
    is_submitted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    checker = relationship("User", foreign_keys=[checker_id])
    unit = relationship("Unit", foreign_keys=[unit_id])
    # 관계 — Snapshot lines in their creation-time order
    items = relationship("WorkcheckItem", back_populates="workcheck", cascade="all, delete-orphan", order_by="WorkcheckItem.position")
    approval = relationship("Approval", back_populates="workcheck", uselist=False, cascade="all, delete-orphan")


class WorkcheckItem(Base):
    """점검 항목 스냅샷 모델 — 점검 내 개별 체크리스트 라인.

    Workcheck item model — One checklist line within a workcheck, created
    once at workcheck creation from an active check item. Later catalog
    changes never add or remove lines of an existing workcheck.

    Complete ⟺ actions is non-empty AND exactly one image is attached.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        workcheck_id: 소속 점검 FK (Parent workcheck)
        item_id: 점검 항목 FK (Check item definition)
        position: 생성 시점 순서 (Snapshot position, 1-based)
        actions: 조치 코드 목록 (Action codes, set semantics, canonical order)
        note: 메모 (Free-text note)
    """

    __tablename__ = "workcheck_items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    workcheck_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("workchecks.id", ondelete="CASCADE"), nullable=False, index=True)
    # 점검 항목 FK — RESTRICT: 사용 중인 항목은 삭제 불가 (Referenced check items cannot be deleted)
    item_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("check_items.id", ondelete="RESTRICT"), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    # 조치 코드 — JSON list (JSONB on PostgreSQL), e.g. ["P", "L"]
    actions: Mapped[list[str]] = mapped_column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=list)
    note: Mapped[str] = mapped_column(Text, nullable=False, default="")

    workcheck = relationship("Workcheck", back_populates="items")
    check_item = relationship("CheckItem", foreign_keys=[item_id])
    images = relationship("WorkcheckItemImage", back_populates="item", cascade="all, delete-orphan")

    @property
    def is_complete(self) -> bool:
        """완료 여부 — Actions recorded and exactly one photo attached."""
        return bool(self.actions) and len(self.images) == 1


class WorkcheckItemImage(Base):
    """항목 증빙 사진 모델 — 점검 항목당 최대 1장.

    Workcheck item image model — Photo evidence for one workcheck item.
    The unique item_id column enforces the one-image-per-item limit.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        item_id: 소속 항목 FK (Parent workcheck item, UNIQUE)
        file_name: 저장소 URL (Opaque storage URL)
        uploaded_at: 업로드 일시 (Upload timestamp)
    """

    __tablename__ = "workcheck_item_images"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    item_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("workcheck_items.id", ondelete="CASCADE"), nullable=False, unique=True)
    file_name: Mapped[str] = mapped_column(String(1000), nullable=False)
    uploaded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    item = relationship("WorkcheckItem", back_populates="images")


class Approval(Base):
    """검토 결과 모델 — 점검 제출 1건에 대한 단일 검토 레코드.

    Approval model — The single review record of a workcheck.
    Created at first submission with status "pending"; a decision sets
    status to "approved" or "rejected" with approver, comments and
    approved_at. Resubmission after rejection resets the same row to
    "pending" and clears the decision fields. "approved" is terminal.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        workcheck_id: 점검 FK (Workcheck, UNIQUE — one approval per workcheck)
        status: 검토 상태 ("pending" | "approved" | "rejected")
        approver_id: 검토자 FK (Reviewer, null while pending)
        comments: 검토 의견 (Review comments, optional)
        approved_at: 결정 일시 (Decision timestamp, null while pending)
    """

    __tablename__ = "approvals"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    workcheck_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("workchecks.id", ondelete="CASCADE"), nullable=False, unique=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=APPROVAL_PENDING, index=True)
    approver_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    comments: Mapped[str | None] = mapped_column(Text, nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    workcheck = relationship("Workcheck", back_populates="approval")
    approver = relationship("User", foreign_keys=[approver_id])

    @property
    def is_approved(self) -> bool | None:
        """3상태 호환 값 — None while pending, True/False once decided."""
        if self.status == APPROVAL_APPROVED:
            return True
        if self.status == APPROVAL_REJECTED:
            return False
        return None


# 부분 고유 인덱스 — 삭제되지 않은 점검에만 적용 (Partial unique indexes on live rows)
Index(
    "uq_workcheck_checker_day",
    Workcheck.checker_id,
    Workcheck.work_date,
    unique=True,
    postgresql_where=Workcheck.is_deleted.is_(False),
    sqlite_where=Workcheck.is_deleted.is_(False),
)
Index(
    "uq_workcheck_unit_day",
    Workcheck.unit_id,
    Workcheck.work_date,
    unique=True,
    postgresql_where=Workcheck.is_deleted.is_(False),
    sqlite_where=Workcheck.is_deleted.is_(False),
)
