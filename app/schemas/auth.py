"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers login, token issuance and current user info.
"""

from datetime import datetime
from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """로그인 요청 스키마.

    Login request schema shared by staff and admin clients; the role in
    the issued token decides which routers the client may call.

    Attributes:
        username: 로그인 아이디 (User login identifier)
        password: 비밀번호 (Plain text password, verified against bcrypt hash)
    """

    username: str = Field(min_length=1)  # 로그인 아이디 (Login identifier)
    password: str = Field(min_length=1)  # 비밀번호 — 평문 (Plain text, compared to bcrypt hash)


class UserMeResponse(BaseModel):
    """현재 사용자 정보 응답 스키마 (GET /auth/me, GET /profile).

    Current user info response schema.

    Attributes:
        id: 사용자 UUID (User unique identifier)
        first_name: 이름 (First name)
        last_name: 성 (Last name)
        full_name: 전체 이름 (Display name)
        username: 로그인 아이디 (Login username)
        role: 역할 (Role: "STAFF" | "ADMIN")
        phone_number: 전화번호 (Phone number, nullable)
        user_image: 프로필 이미지 URL (Profile image URL, nullable)
        is_active: 활성 상태 (Account active status)
        last_login: 마지막 로그인 (Last successful login, nullable)
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


class TokenResponse(BaseModel):
    """JWT 토큰 발급 응답 스키마.

    Returned after a successful login together with the user profile.

    Attributes:
        access_token: JWT 액세스 토큰 (Access token)
        token_type: 토큰 유형 (Always "bearer")
        user: 로그인한 사용자 (Logged-in user)
    """

    access_token: str  # JWT 액세스 토큰 (Access token, TTL: JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    token_type: str = "bearer"  # 토큰 유형 — 항상 "bearer" (Token type for Authorization header)
    user: UserMeResponse
