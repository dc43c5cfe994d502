"""유닛 및 점검 항목 카탈로그 Pydantic 요청/응답 스키마 정의.

Unit and check item catalog Pydantic request/response schema definitions.
Text fields are trimmed by the services; blank required values are
rejected there with a 400.
"""

from datetime import datetime
from typing import Literal
from pydantic import BaseModel, Field


# === 유닛 (Unit) 스키마 ===

class UnitCreate(BaseModel):
    """유닛 생성 요청 스키마.

    Attributes:
        name: 유닛 이름 (Unit name, required)
        type: 차량 유형 (Vehicle type, required)
        number_plate: 번호판 (Number plate, optional)
    """

    name: str
    type: str
    number_plate: str | None = None


class UnitUpdate(BaseModel):
    """유닛 수정 요청 스키마 — Same fields as creation, all required."""

    name: str
    type: str
    number_plate: str | None = None


class UnitResponse(BaseModel):
    """유닛 응답 스키마."""

    id: str
    name: str
    type: str
    number_plate: str | None = None
    is_deleted: bool = False
    deleted_at: datetime | None = None
    created_at: datetime | None = None


# === 점검 항목 (CheckItem) 스키마 ===

class CheckItemCreate(BaseModel):
    """점검 항목 생성 요청 스키마.

    Check item creation request schema.
    Without sort_order the item is appended at the end; with it the item
    is inserted at that position and later items shift down.

    Attributes:
        code: 항목 코드 (Code, stored trimmed and uppercased, unique)
        label: 항목 설명 (Label)
        sort_order: 삽입 위치 (1-based position, optional)
        is_active: 활성 여부 (Active flag, default true)
    """

    code: str
    label: str
    sort_order: int | None = Field(default=None, ge=1)
    is_active: bool = True


class CheckItemUpdate(BaseModel):
    """점검 항목 수정 요청 스키마.

    Check item update request schema. A changed sort_order moves the item
    to that position.
    """

    code: str
    label: str
    sort_order: int | None = Field(default=None, ge=1)
    is_active: bool | None = None


class CheckItemMove(BaseModel):
    """점검 항목 이동 요청 — Swap with the previous ("up") or next ("down") item."""

    direction: Literal["up", "down"]


class CheckItemActiveUpdate(BaseModel):
    """점검 항목 활성 상태 변경 요청 — Active flag toggle."""

    is_active: bool


class CheckItemResponse(BaseModel):
    """점검 항목 응답 스키마."""

    id: str
    code: str
    label: str
    sort_order: int
    is_active: bool
    created_at: datetime | None = None
