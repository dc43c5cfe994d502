"""인증 서비스 — 로그인, 토큰 검증, 인증 컨텍스트 구성.

Auth Service — Business logic for login, token verification and the
authorization context passed explicitly into every handler.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import ROLE_ADMIN, User
from app.repositories.user_repository import user_repository
from app.schemas.auth import LoginRequest, TokenResponse, UserMeResponse
from app.utils.exceptions import UnauthorizedError
from app.utils.jwt import create_access_token, decode_token
from app.utils.password import verify_password


@dataclass(frozen=True)
class AuthContext:
    """인증 컨텍스트 — 요청을 보낸 사용자와 역할.

    Authorization context of a request: the authenticated user and the
    role that decides which capabilities the handler may use.

    Attributes:
        user: 인증된 사용자 (Authenticated, active user)
        role: 역할 ("STAFF" | "ADMIN")
    """

    user: User
    role: str

    @property
    def user_id(self) -> UUID:
        return self.user.id

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def to_me_response(user: User) -> UserMeResponse:
    """사용자 모델을 /me 응답으로 변환 — User model to UserMeResponse."""
    return UserMeResponse(
        id=str(user.id),
        first_name=user.first_name,
        last_name=user.last_name,
        full_name=user.full_name,
        username=user.username,
        role=user.role,
        phone_number=user.phone_number,
        user_image=user.user_image,
        is_active=user.is_active,
        last_login=user.last_login,
    )


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic.
    """

    async def login(self, db: AsyncSession, data: LoginRequest) -> TokenResponse:
        """아이디/비밀번호로 로그인하고 액세스 토큰을 발급합니다.

        Verify credentials, record the login time and issue an access token
        carrying the user id and role.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 로그인 요청 (Login request)

        Returns:
            TokenResponse: 토큰 및 사용자 정보 (Token and user profile)

        Raises:
            UnauthorizedError: 자격 증명 불일치 또는 비활성 계정
                               (Bad credentials or deactivated account)
        """
        user: User | None = await user_repository.get_by_username(db, data.username.strip())
        if user is None or not verify_password(data.password, user.password_hash):
            raise UnauthorizedError("Invalid username or password")
        if not user.is_active:
            raise UnauthorizedError("Account is deactivated")

        user.last_login = datetime.now(timezone.utc)
        await db.flush()

        token: str = create_access_token({"sub": str(user.id), "role": user.role})
        return TokenResponse(access_token=token, user=to_me_response(user))

    async def authenticate(self, db: AsyncSession, token: str) -> AuthContext:
        """액세스 토큰을 검증하고 인증 컨텍스트를 생성합니다.

        Decode the bearer token, load the user and build the AuthContext.
        The role comes from the database so that a role change takes effect
        on the next request.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            token: Bearer 토큰 문자열 (Bearer token)

        Returns:
            AuthContext: 인증 컨텍스트 (Authorization context)

        Raises:
            UnauthorizedError: 토큰 오류 또는 사용자 없음/비활성
                               (Invalid token, unknown or inactive user)
        """
        try:
            payload: dict = decode_token(token)
            if payload.get("type") != "access":
                raise UnauthorizedError("Invalid token type")
            user_id = UUID(payload["sub"])
        except (jwt.InvalidTokenError, KeyError, ValueError, TypeError):
            raise UnauthorizedError("Invalid or expired token")

        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None or not user.is_active:
            raise UnauthorizedError("User not found or inactive")

        return AuthContext(user=user, role=user.role)


# 싱글턴 인스턴스 — Singleton instance
auth_service: AuthService = AuthService()
