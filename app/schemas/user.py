"""사용자 및 프로필 관련 Pydantic 요청/응답 스키마 정의.

User and Profile Pydantic request/response schema definitions.
Covers admin management of staff accounts and self-service profile updates.
"""

from datetime import datetime
from typing import Literal
from pydantic import BaseModel, Field

RoleName = Literal["STAFF", "ADMIN"]


# === 사용자 (User) 스키마 ===

class UserCreate(BaseModel):
    """사용자 생성 요청 스키마 (관리자용).

    User creation request schema (admin-only operation).
    The admin hands the temporary password to the new staff member.

    Attributes:
        first_name: 이름 (First name)
        last_name: 성 (Last name)
        username: 로그인 아이디 (Login username, globally unique)
        temporary_password: 임시 비밀번호 (Plain text, bcrypt-hashed on save)
        role: 역할 (Role, default STAFF)
        phone_number: 전화번호 (Optional phone number)
    """

    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    username: str = Field(min_length=1)
    temporary_password: str = Field(min_length=1)  # 임시 비밀번호 — 서버에서 해싱 (Hashed server-side)
    role: RoleName = "STAFF"
    phone_number: str | None = None


class UserUpdate(BaseModel):
    """사용자 수정 요청 스키마 (부분 업데이트).

    User update request schema (partial update).
    A non-empty password resets the user's password.
    """

    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = Field(default=None, min_length=1)
    username: str | None = Field(default=None, min_length=1)
    role: RoleName | None = None
    phone_number: str | None = None
    password: str | None = None  # 비밀번호 재설정 — 빈 값이면 유지 (Reset when non-empty)


class UserResponse(BaseModel):
    """사용자 응답 스키마.

    Attributes:
        id: 사용자 UUID (User identifier)
        first_name / last_name / full_name: 이름 (Names)
        username: 로그인 아이디 (Login username)
        role: 역할 (Role)
        phone_number: 전화번호 (Phone number)
        user_image: 프로필 이미지 URL (Profile image URL)
        is_active: 활성 상태 (Active status)
        last_login: 마지막 로그인 (Last login)
        created_at: 생성 일시 (Creation timestamp)
    """

    id: str
    first_name: str
    last_name: str
    full_name: str
    username: str
    role: str
    phone_number: str | None = None
    user_image: str | None = None
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime


# === 프로필 (Profile) 스키마 ===

class ProfileUpdate(BaseModel):
    """프로필 수정 요청 스키마.

    Profile update request schema. username and password are applied only
    for ADMIN callers; staff values for them are ignored.
    """

    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    phone_number: str | None = None
    user_image: str | None = None
    username: str | None = None  # 관리자만 변경 가능 (Admin only)
    password: str | None = None  # 관리자만 변경 가능 (Admin only)


class ProfileImageResponse(BaseModel):
    """프로필 이미지 업로드 응답 — Uploaded profile image URL."""

    image_url: str
