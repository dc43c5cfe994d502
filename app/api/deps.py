"""FastAPI 의존성 주입 모듈 — 인증 및 역할 기반 권한 검사.

FastAPI dependency injection module — Authentication and role gating.
Every handler receives an explicit AuthContext; the staff and admin
routers depend on require_staff / require_admin respectively.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <token> header)
    2. auth_service.authenticate()가 JWT를 검증하고 사용자를 조회
       (Token verified and user loaded)
    3. 비활성 사용자 또는 잘못된 토큰은 401 (Inactive user or bad token → 401)

Authorization Flow (require_role):
    1. get_auth_context로 컨텍스트 생성 (Context built by get_auth_context)
    2. 역할이 다르면 403 Forbidden (Role mismatch → 403)
"""

from typing import Annotated, Awaitable, Callable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.user import ROLE_ADMIN, ROLE_STAFF
from app.services.auth_service import AuthContext, auth_service
from app.utils.exceptions import ForbiddenError, UnauthorizedError

# HTTP Bearer 토큰 추출기 — 헤더 누락 시 401을 직접 반환하도록 auto_error 비활성화
# (Missing header is reported as 401 by get_auth_context)
security: HTTPBearer = HTTPBearer(auto_error=False)


async def get_auth_context(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthContext:
    """요청의 인증 컨텍스트를 생성합니다.

    Build the AuthContext of the request from its bearer token.

    Raises:
        UnauthorizedError: 토큰 누락/오류, 사용자 없음/비활성
                           (Missing or invalid token, unknown or inactive user)
    """
    if credentials is None:
        raise UnauthorizedError("Authentication required")
    return await auth_service.authenticate(db, credentials.credentials)


def require_role(role: str) -> Callable[..., Awaitable[AuthContext]]:
    """역할 기반 권한 검사 의존성 팩토리.

    Dependency factory returning the AuthContext when the caller has
    ``role`` and raising 403 otherwise.

    Args:
        role: 허용 역할 ("STAFF" | "ADMIN")

    Returns:
        FastAPI 의존성 함수 (FastAPI dependency function)
    """
    async def _check(
        ctx: Annotated[AuthContext, Depends(get_auth_context)],
    ) -> AuthContext:
        if ctx.role != role:
            raise ForbiddenError("Insufficient permissions")
        return ctx
    return _check


# 편의 의존성 — Pre-configured role dependencies
require_staff = require_role(ROLE_STAFF)
require_admin = require_role(ROLE_ADMIN)
