"""프로필 서비스 — 현재 사용자 프로필 조회/수정 및 사진 업로드.

Profile Service — Self-service profile read, update and picture upload.
Only admins may change their own username and password here; staff
credentials are managed by admins.
"""

import time

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from app.config import settings
from app.models.user import User
from app.repositories.user_repository import user_repository
from app.schemas.auth import UserMeResponse
from app.schemas.user import ProfileImageResponse, ProfileUpdate
from app.services.auth_service import AuthContext, to_me_response
from app.services.evidence_service import remove_blob, sanitize_filename
from app.services.storage_service import storage_service
from app.utils.exceptions import BadRequestError, ConflictError
from app.utils.password import hash_password


class ProfileService:
    """프로필 관련 비즈니스 로직을 처리하는 서비스.

    Service handling the caller's own profile.
    """

    async def get_profile(self, ctx: AuthContext) -> UserMeResponse:
        """내 프로필 조회 — The caller's profile."""
        return to_me_response(ctx.user)

    async def update_profile(self, db: AsyncSession, ctx: AuthContext, data: ProfileUpdate) -> UserMeResponse:
        """내 프로필을 수정합니다.

        Update names, phone number and picture URL. For admins a new
        username and a non-empty password are applied as well; staff values
        for these fields are ignored.

        Raises:
            BadRequestError: 이름 누락 (Blank first or last name)
            ConflictError: 아이디 중복 (Username taken)
        """
        user: User = ctx.user
        first_name: str = data.first_name.strip()
        last_name: str = data.last_name.strip()
        if not first_name or not last_name:
            raise BadRequestError("First name and last name are required")

        update_data: dict = {
            "first_name": first_name,
            "last_name": last_name,
            "phone_number": data.phone_number or None,
            "user_image": data.user_image or None,
        }
        if ctx.is_admin:
            if data.username and data.username.strip() != user.username:
                username: str = data.username.strip()
                if await user_repository.exists(db, {"username": username}, exclude_id=user.id):
                    raise ConflictError("Username already exists")
                update_data["username"] = username
            if data.password:
                update_data["password_hash"] = hash_password(data.password)

        user = await user_repository.update(db, user, update_data)
        return to_me_response(user)

    async def upload_image(self, db: AsyncSession, ctx: AuthContext, upload: UploadFile) -> ProfileImageResponse:
        """프로필 사진을 업로드하고 이전 사진을 교체합니다.

        Upload a new profile picture (image/*, at most 2MB), store its URL on
        the user and remove the previous picture best-effort.

        Raises:
            BadRequestError: 이미지가 아니거나 2MB 초과 (Not an image or too large)
        """
        content_type: str = upload.content_type or ""
        if not content_type.startswith("image/"):
            raise BadRequestError("Only image files are allowed")
        if upload.size is not None and upload.size > settings.PROFILE_IMAGE_MAX_BYTES:
            raise BadRequestError("Image size must be 2MB or less")
        data: bytes = await upload.read()
        if len(data) > settings.PROFILE_IMAGE_MAX_BYTES:
            raise BadRequestError("Image size must be 2MB or less")

        user: User = ctx.user
        key: str = f"profiles/{user.id}-{int(time.time() * 1000)}-{sanitize_filename(upload.filename)}"
        image_url: str = await run_in_threadpool(storage_service.upload, key, data, content_type)

        previous: str | None = user.user_image
        await user_repository.update(db, user, {"user_image": image_url})
        if previous:
            await remove_blob(previous)
        return ProfileImageResponse(image_url=image_url)


# 싱글턴 인스턴스 — Singleton instance
profile_service: ProfileService = ProfileService()
