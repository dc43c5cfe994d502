"""프로필 라우터 — 내 프로필 조회/수정 및 사진 업로드.

Profile Router — The caller's own profile, for both roles.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_auth_context
from app.database import get_db
from app.schemas.auth import UserMeResponse
from app.schemas.user import ProfileImageResponse, ProfileUpdate
from app.services.auth_service import AuthContext
from app.services.profile_service import profile_service

router: APIRouter = APIRouter()


@router.get("", response_model=UserMeResponse)
async def get_my_profile(
    ctx: Annotated[AuthContext, Depends(get_auth_context)],
) -> UserMeResponse:
    """내 프로필을 조회합니다.

    Get the current user's profile.
    """
    return await profile_service.get_profile(ctx)


@router.put("", response_model=UserMeResponse)
async def update_my_profile(
    data: ProfileUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(get_auth_context)],
) -> UserMeResponse:
    """내 프로필을 업데이트합니다. 아이디/비밀번호 변경은 관리자만.

    Update the current user's profile. Username and password changes apply
    to admins only.
    """
    result: UserMeResponse = await profile_service.update_profile(db, ctx, data)
    await db.commit()
    return result


@router.post("/image", response_model=ProfileImageResponse)
async def upload_my_profile_image(
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AuthContext, Depends(get_auth_context)],
    file: Annotated[UploadFile, File()],
) -> ProfileImageResponse:
    """프로필 사진 업로드 — 이미지, 최대 2MB.

    Upload a new profile picture (image/*, at most 2MB).
    """
    result: ProfileImageResponse = await profile_service.upload_image(db, ctx, file)
    await db.commit()
    return result
