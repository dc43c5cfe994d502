"""차량 및 점검 항목 카탈로그 SQLAlchemy ORM 모델 정의.

Fleet catalog SQLAlchemy ORM model definitions.
Units are the vehicles being inspected; check items are the reusable
inspection steps that every new workcheck snapshots.

Tables:
    - units: 차량 유닛 (Vehicles, soft-deleted only)
    - check_items: 점검 항목 카탈로그 (Inspection step catalog, dense sort order)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Unit(Base):
    """차량 유닛 모델 — 점검 대상 차량.

    Unit model — A vehicle that staff inspect. Units referenced by
    workchecks are never hard-deleted; deletion sets is_deleted and
    deleted_at, and restore clears both.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 유닛 이름 (Unit name, e.g. "Truck-001")
        type: 차량 유형 (Vehicle type, e.g. "Dump Truck")
        number_plate: 번호판 (Number plate, optional)
        is_deleted: 소프트 삭제 여부 (Soft-delete flag)
        deleted_at: 삭제 일시 (Soft-delete timestamp)
    """

    __tablename__ = "units"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[str] = mapped_column(String(100), nullable=False)
    number_plate: Mapped[str | None] = mapped_column(String(30), nullable=True)
    # 소프트 삭제 — Soft delete flag and timestamp
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))


class CheckItem(Base):
    """점검 항목 모델 — 재사용 가능한 점검 단계.

    Check item model — Reusable inspection step in the catalog.
    Codes are stored trimmed and uppercased and are unique. sort_order is
    kept dense (1..n); the service renumbers siblings on every reorder.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        code: 항목 코드 (Unique uppercase code, e.g. "CHK01")
        label: 항목 설명 (Human-readable label)
        sort_order: 정렬 순서, 1부터 시작 (Display order, 1-based, dense)
        is_active: 활성 여부 (Only active items are snapshotted into new workchecks)
    """

    __tablename__ = "check_items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 항목 코드 — Unique uppercase code
    code: Mapped[str] = mapped_column(String(30), nullable=False, unique=True)
    label: Mapped[str] = mapped_column(String(255), nullable=False)
    # 정렬 순서 — Dense 1-based display order
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
