"""스토리지 서비스 — S3 또는 로컬 파일 저장.

Storage Service — S3 or local file storage for evidence photos and
profile images. AWS 키가 비어있으면 자동으로 로컬 모드로 전환됩니다.
In local mode files are written under the uploads directory, which the
application serves at /uploads.
"""

from pathlib import Path

from app.config import settings

# 서버 루트 — Repository root, default parent of the uploads directory
_SERVER_ROOT: Path = Path(__file__).resolve().parent.parent.parent


class StorageService:
    """파일 업로드 서비스 — S3 또는 로컬 모드 자동 선택."""

    def __init__(self) -> None:
        self._client = None

    @property
    def is_local(self) -> bool:
        return not settings.AWS_ACCESS_KEY_ID or not settings.AWS_S3_BUCKET

    @property
    def uploads_dir(self) -> Path:
        """로컬 업로드 디렉토리 — .env의 LOCAL_UPLOADS_DIR 또는 server/uploads/"""
        if settings.LOCAL_UPLOADS_DIR:
            return Path(settings.LOCAL_UPLOADS_DIR)
        return _SERVER_ROOT / "uploads"

    @property
    def client(self):
        if self.is_local:
            return None
        if self._client is None:
            import boto3
            from botocore.config import Config as BotoConfig

            self._client = boto3.client(
                "s3",
                region_name=settings.AWS_S3_REGION,
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                config=BotoConfig(signature_version="s3v4"),
            )
        return self._client

    def _url_prefix(self) -> str:
        if self.is_local:
            return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/uploads/"
        return f"https://{settings.AWS_S3_BUCKET}.s3.{settings.AWS_S3_REGION}.amazonaws.com/"

    def public_url(self, key: str) -> str:
        """storage key의 공개 URL — Public URL of a stored object."""
        return self._url_prefix() + key

    def extract_key(self, file_url: str) -> str | None:
        """file URL에서 storage key를 추출합니다. 다른 저장소의 URL이면 None."""
        prefix = self._url_prefix()
        if file_url.startswith(prefix):
            return file_url[len(prefix):]
        return None

    def upload(self, key: str, data: bytes, content_type: str) -> str:
        """파일을 저장하고 공개 URL을 반환합니다.

        Store ``data`` under ``key`` and return its public URL.
        Errors from the filesystem or S3 propagate to the caller.
        """
        if self.is_local:
            path = self.uploads_dir / key
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
            return self.public_url(key)

        self.client.put_object(
            Bucket=settings.AWS_S3_BUCKET,
            Key=key,
            Body=data,
            ContentType=content_type,
        )
        return self.public_url(key)

    def delete(self, file_url: str) -> None:
        """URL로 파일을 삭제합니다.

        Delete the object behind ``file_url``. Raises ValueError when the URL
        does not belong to this storage; filesystem and S3 errors propagate.
        """
        key = self.extract_key(file_url)
        if not key:
            raise ValueError(f"URL is not managed by this storage: {file_url}")

        if self.is_local:
            (self.uploads_dir / key).unlink(missing_ok=True)
            return

        self.client.delete_object(Bucket=settings.AWS_S3_BUCKET, Key=key)


storage_service: StorageService = StorageService()
