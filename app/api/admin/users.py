"""관리자 사용자 라우터 — 직원 계정 CRUD 및 활성 상태 관리.

Admin User Router — Staff account administration. Admins cannot
deactivate their own account.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.schemas.common import MessageResponse
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.services.auth_service import AuthContext
from app.services.user_service import user_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[UserResponse])
async def list_users(
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_admin)],
) -> list[UserResponse]:
    """사용자 목록을 최신순으로 조회합니다.

    List users, newest first.
    """
    return await user_service.list_users(db)


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    data: UserCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_admin)],
) -> UserResponse:
    """새 사용자를 생성합니다. 임시 비밀번호는 해시로 저장됩니다.

    Create a user with a temporary password.
    """
    result: UserResponse = await user_service.create_user(db, data)
    await db.commit()
    return result


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_admin)],
) -> UserResponse:
    """사용자 상세 정보를 조회합니다."""
    return await user_service.get_user(db, user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_admin)],
) -> UserResponse:
    """사용자 정보를 수정합니다. 비밀번호가 있으면 재설정.

    Update a user, resetting the password when one is given.
    """
    result: UserResponse = await user_service.update_user(db, user_id, data)
    await db.commit()
    return result


@router.delete("/{user_id}", response_model=MessageResponse)
async def deactivate_user(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_admin)],
) -> MessageResponse:
    """사용자 비활성화 — 기록 보존을 위해 행은 삭제하지 않습니다.

    Deactivate a user. The row is kept so that their workchecks stay
    attributable.
    """
    await user_service.deactivate_user(db, ctx, user_id)
    await db.commit()
    return MessageResponse(message="User deactivated successfully")


@router.post("/{user_id}/toggle-status", response_model=UserResponse)
async def toggle_user_status(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(require_admin)],
) -> UserResponse:
    """사용자 활성 상태를 전환합니다."""
    result: UserResponse = await user_service.toggle_status(db, ctx, user_id)
    await db.commit()
    return result
