"""증빙 사진 서비스 — 점검 항목별 단일 사진 업로드/삭제.

Evidence Service — Upload and removal of the single photo attached to a
workcheck item.

Upload stores the blob first and writes the database row only after the
upload succeeded. Deletion removes the blob best-effort (a failure is
logged) and always removes the database row.
"""

import logging
import re
import secrets
import time
from datetime import date
from uuid import UUID

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from app.config import settings
from app.models.workcheck import WorkcheckItem, WorkcheckItemImage
from app.repositories.workcheck_repository import workcheck_repository
from app.schemas.workcheck import ImageUploadResponse
from app.services.auth_service import AuthContext
from app.services.storage_service import storage_service
from app.services.workcheck_service import ensure_editable
from app.utils.exceptions import BadRequestError, ConflictError, NotFoundError
from app.utils.ids import parse_uuid

logger = logging.getLogger(__name__)

# 파일명 허용 문자 외 제거 — Characters stripped from original file names
_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")

# 저장소 삭제 실패 예외 — Errors tolerated when removing a blob
STORAGE_ERRORS: tuple[type[Exception], ...] = (OSError, ValueError, BotoCoreError, ClientError)


def sanitize_filename(name: str | None) -> str:
    """원본 파일명에서 [A-Za-z0-9.-] 외 문자를 제거합니다."""
    cleaned: str = _UNSAFE_CHARS.sub("", name or "")
    return cleaned or "image"


def build_evidence_key(staff_id: UUID, item_id: UUID, upload_day: date, filename: str | None) -> str:
    """증빙 사진 storage key를 생성합니다.

    Build ``workcheck/{DD-MM-YYYY}/{staff}-{item}-{timestamp_ms}-{random}-{name}``.
    """
    timestamp_ms: int = int(time.time() * 1000)
    random_part: str = secrets.token_hex(4)
    folder: str = upload_day.strftime("%d-%m-%Y")
    return f"workcheck/{folder}/{staff_id}-{item_id}-{timestamp_ms}-{random_part}-{sanitize_filename(filename)}"


async def remove_blob(file_url: str) -> None:
    """저장소 파일 삭제 — 실패 시 경고 로그만 남깁니다 (Best-effort, failure logged)."""
    try:
        await run_in_threadpool(storage_service.delete, file_url)
    except STORAGE_ERRORS as exc:
        logger.warning("Failed to delete stored file %s: %s", file_url, exc)


class EvidenceService:
    """증빙 사진 관련 비즈니스 로직을 처리하는 서비스.

    Service handling evidence photos of workcheck items.
    """

    async def upload_image(
        self,
        db: AsyncSession,
        ctx: AuthContext,
        item_id: str,
        upload: UploadFile,
        today: date,
    ) -> ImageUploadResponse:
        """점검 항목에 증빙 사진을 업로드합니다.

        Upload the single evidence photo of a workcheck item.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            ctx: 인증 컨텍스트 (Authorization context)
            item_id: 점검 항목 ID (Workcheck item identifier)
            upload: 업로드 파일 (Multipart file)
            today: 업로드일, 폴더명에 사용 (Upload day, used for the folder)

        Returns:
            ImageUploadResponse: 저장된 URL과 이미지 ID (Stored URL and image id)

        Raises:
            NotFoundError: 항목 없음 또는 타인 소유 (Missing or not owned)
            ConflictError: 이미 사진이 있거나 수정 불가 상태 (Image exists or workcheck locked)
            BadRequestError: 이미지가 아니거나 10MB 초과 (Not an image or too large)
        """
        it_id: UUID = parse_uuid(item_id, "Item not found")
        item: WorkcheckItem | None = await workcheck_repository.get_item(db, it_id)
        if item is None or item.workcheck.is_deleted or item.workcheck.checker_id != ctx.user_id:
            raise NotFoundError("Item not found")

        if item.images:
            raise ConflictError("This item already has an image. Please delete the existing image first.")
        ensure_editable(item.workcheck)

        content_type: str = upload.content_type or ""
        if not content_type.startswith("image/"):
            raise BadRequestError("Only image files are allowed")
        # 크기가 알려지면 읽기 전에 거부 — Reject before buffering when the size is known
        if upload.size is not None and upload.size > settings.WORKCHECK_IMAGE_MAX_BYTES:
            raise BadRequestError("Image size must be 10MB or less")
        data: bytes = await upload.read()
        if len(data) > settings.WORKCHECK_IMAGE_MAX_BYTES:
            raise BadRequestError("Image size must be 10MB or less")

        key: str = build_evidence_key(ctx.user_id, item.id, today, upload.filename)
        image_url: str = await run_in_threadpool(storage_service.upload, key, data, content_type)

        # 동시 업로드 — item_id 고유 인덱스 위반 시 방금 올린 파일 정리
        # Concurrent upload lost the unique item_id race: drop the fresh blob
        image = WorkcheckItemImage(item_id=item.id, file_name=image_url)
        try:
            async with db.begin_nested():
                db.add(image)
                await db.flush()
        except IntegrityError:
            await remove_blob(image_url)
            raise ConflictError("This item already has an image. Please delete the existing image first.")

        return ImageUploadResponse(image_url=image_url, image_id=str(image.id))

    async def delete_image(
        self,
        db: AsyncSession,
        ctx: AuthContext,
        image_id: str | None = None,
        image_url: str | None = None,
    ) -> None:
        """증빙 사진을 삭제합니다.

        Delete an evidence photo addressed by id or by URL. Storage removal
        is best-effort; the database row is always deleted.

        Raises:
            BadRequestError: ID와 URL 모두 없음 (Neither id nor URL given)
            NotFoundError: 사진 없음 또는 타인 소유 (Missing or not owned)
            ConflictError: 수정 불가 상태 (Workcheck locked)
        """
        if not image_id and not image_url:
            raise BadRequestError("image_id or image_url is required")

        img_id: UUID | None = parse_uuid(image_id, "Image not found") if image_id else None
        image: WorkcheckItemImage | None = await workcheck_repository.get_image(
            db, image_id=img_id, image_url=image_url
        )
        if image is None:
            raise NotFoundError("Image not found")
        workcheck = image.item.workcheck
        if workcheck.is_deleted or workcheck.checker_id != ctx.user_id:
            raise NotFoundError("Image not found")
        ensure_editable(workcheck)

        await remove_blob(image.file_name)
        await db.delete(image)
        await db.flush()


# 싱글턴 인스턴스 — Singleton instance
evidence_service: EvidenceService = EvidenceService()
