"""사용자 관련 SQLAlchemy ORM 모델 정의.

User SQLAlchemy ORM model definition.
Two fixed roles exist: STAFF (daily inspections) and ADMIN (review and
catalog management).

Tables:
    - users: 사용자 계정 (User accounts with role)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

# 역할 상수 — Role constants
ROLE_STAFF: str = "STAFF"
ROLE_ADMIN: str = "ADMIN"
ROLES: tuple[str, ...] = (ROLE_STAFF, ROLE_ADMIN)


class User(Base):
    """사용자 모델 — 점검 직원 및 관리자 계정.

    User model — Staff inspectors and admin reviewers.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        first_name: 이름 (First name)
        last_name: 성 (Last name)
        username: 로그인 아이디, 전역 고유 (Login ID, globally unique)
        password_hash: bcrypt 해시 (Bcrypt password hash)
        role: 역할 (Role: "STAFF" or "ADMIN")
        phone_number: 전화번호 (Phone number, optional)
        user_image: 프로필 이미지 URL (Profile image URL, optional)
        is_active: 활성 여부 (Inactive users cannot log in)
        last_login: 마지막 로그인 일시 (Last successful login)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 — User unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    # 로그인 아이디 — Unique login identifier
    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    # 비밀번호 해시 — bcrypt hash, never plain text
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    # 역할 — "STAFF" | "ADMIN"
    role: Mapped[str] = mapped_column(String(10), nullable=False, default=ROLE_STAFF)
    phone_number: Mapped[str | None] = mapped_column(String(30), nullable=True)
    # 프로필 이미지 URL — Storage URL of the profile picture
    user_image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    # 활성 여부 — Deactivated accounts are rejected at login and on every request
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    last_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    @property
    def full_name(self) -> str:
        """표시용 전체 이름 — Display name "first last"."""
        return f"{self.first_name} {self.last_name}".strip()
