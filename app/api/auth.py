"""공통 인증 라우터 — 로그인 및 현재 사용자 조회.

Common Auth Router — Login and current-user endpoints shared by the
staff and admin clients.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_auth_context
from app.database import get_db
from app.schemas.auth import LoginRequest, TokenResponse, UserMeResponse
from app.services.auth_service import AuthContext, auth_service, to_me_response

router: APIRouter = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """로그인 — 아이디/비밀번호 확인 후 액세스 토큰 발급.

    Login endpoint. Verifies credentials and issues an access token.
    """
    result: TokenResponse = await auth_service.login(db, data)
    await db.commit()
    return result


@router.get("/me", response_model=UserMeResponse)
async def get_me(
    ctx: Annotated[AuthContext, Depends(get_auth_context)],
) -> UserMeResponse:
    """현재 사용자 정보 조회.

    Get the currently authenticated user.
    """
    return to_me_response(ctx.user)
