"""증빙 사진 API 테스트 — 업로드, 항목당 1장 제한, 삭제, 잠금.

Evidence photo API tests against local storage.
"""

from io import BytesIO
from pathlib import Path
from types import SimpleNamespace
from uuid import UUID

import pytest
from fastapi import UploadFile
from httpx import AsyncClient
from sqlalchemy import func, select
from starlette.datastructures import Headers

from app.config import settings
from app.models.workcheck import WorkcheckItemImage
from app.repositories.workcheck_repository import workcheck_repository
from app.services.auth_service import AuthContext
from app.services.evidence_service import build_evidence_key, evidence_service, sanitize_filename
from app.services.storage_service import storage_service
from app.utils.exceptions import BadRequestError
from tests.conftest import (
    JPEG_BYTES,
    STAFF_WC,
    TODAY,
    auth_header,
    complete_workcheck,
    create_workcheck,
    submit_workcheck,
    upload_image,
)


def _stored_files(root: str) -> list[Path]:
    base = Path(root)
    return [p for p in base.rglob("*") if p.is_file()] if base.exists() else []


class _UnreadableFile(BytesIO):
    """읽으면 실패하는 파일 — Fails if the body is ever buffered."""

    def read(self, *args, **kwargs) -> bytes:
        raise AssertionError("upload body must not be read")


def _upload_file(data: bytes | None = None, size: int | None = None, name: str = "photo.jpg") -> UploadFile:
    file = BytesIO(data) if data is not None else _UnreadableFile()
    return UploadFile(
        file,
        size=size if size is not None else len(data or b""),
        filename=name,
        headers=Headers({"content-type": "image/jpeg"}),
    )


class TestUpload:
    """사진 업로드 테스트."""

    async def test_upload_stores_file_and_links_item(
        self, client: AsyncClient, staff_user, staff_token, units, check_items, local_storage
    ):
        workcheck = await create_workcheck(client, staff_token, units[0])
        item_id = workcheck["items"][0]["id"]

        res = await upload_image(client, staff_token, item_id, name="tyre front(1).jpg")
        assert res.status_code == 200
        data = res.json()
        assert f"/uploads/workcheck/10-03-2026/{staff_user.id}-{item_id}-" in data["image_url"]
        assert data["image_url"].endswith("-tyrefront1.jpg")
        assert len(_stored_files(local_storage)) == 1

        res = await client.get(f"{STAFF_WC}/{workcheck['id']}", headers=auth_header(staff_token))
        images = res.json()["items"][0]["images"]
        assert [img["id"] for img in images] == [data["image_id"]]
        assert images[0]["file_name"] == data["image_url"]

    async def test_upload_with_camel_case_item_id(self, client: AsyncClient, staff_token, units, check_items):
        workcheck = await create_workcheck(client, staff_token, units[0])
        res = await client.post(
            f"{STAFF_WC}/upload-images",
            files={"image": ("a.jpg", b"\xff\xd8\xff", "image/jpeg")},
            data={"itemId": workcheck["items"][0]["id"]},
            headers=auth_header(staff_token),
        )
        assert res.status_code == 200

    async def test_one_image_per_item(self, client: AsyncClient, staff_token, units, check_items):
        workcheck = await create_workcheck(client, staff_token, units[0])
        item_id = workcheck["items"][0]["id"]
        await upload_image(client, staff_token, item_id)

        res = await upload_image(client, staff_token, item_id)
        assert res.status_code == 409
        assert res.json()["detail"] == "This item already has an image. Please delete the existing image first."

    async def test_non_image_rejected(self, client: AsyncClient, staff_token, units, check_items):
        workcheck = await create_workcheck(client, staff_token, units[0])
        res = await client.post(
            f"{STAFF_WC}/upload-images",
            files={"image": ("report.pdf", b"%PDF-1.4", "application/pdf")},
            data={"item_id": workcheck["items"][0]["id"]},
            headers=auth_header(staff_token),
        )
        assert res.status_code == 400

    async def test_too_large_rejected(self, client: AsyncClient, monkeypatch, staff_token, units, check_items, local_storage):
        monkeypatch.setattr(settings, "WORKCHECK_IMAGE_MAX_BYTES", 16)
        workcheck = await create_workcheck(client, staff_token, units[0])

        res = await upload_image(client, staff_token, workcheck["items"][0]["id"])
        assert res.status_code == 400
        assert res.json()["detail"] == "Image size must be 10MB or less"
        assert _stored_files(local_storage) == []

    async def test_unique_item_index_rejects_lost_race(
        self, client: AsyncClient, monkeypatch, staff_token, units, check_items, local_storage
    ):
        """동시 업로드 — 고유 인덱스에서 409, 방금 올린 파일은 삭제."""
        workcheck = await create_workcheck(client, staff_token, units[0])
        item_id = workcheck["items"][0]["id"]
        first = await upload_image(client, staff_token, item_id)
        assert first.status_code == 200

        real_get_item = workcheck_repository.get_item

        async def _stale_item(db, it_id):
            item = await real_get_item(db, it_id)
            return SimpleNamespace(id=item.id, workcheck=item.workcheck, images=[])

        monkeypatch.setattr(workcheck_repository, "get_item", _stale_item)

        res = await upload_image(client, staff_token, item_id, name="second.jpg")
        assert res.status_code == 409
        assert res.json()["detail"] == "This item already has an image. Please delete the existing image first."

        stored = _stored_files(local_storage)
        assert len(stored) == 1
        assert first.json()["image_url"].endswith(stored[0].name)

    async def test_failed_storage_upload_writes_no_row(
        self, client: AsyncClient, db, monkeypatch, staff_user, staff_token, units, check_items, local_storage
    ):
        """저장 실패 시 DB 행 없음, 항목은 미완료 상태 유지."""
        workcheck = await create_workcheck(client, staff_token, units[0])
        item_id = workcheck["items"][0]["id"]
        await client.put(
            f"{STAFF_WC}/update-item",
            json={"item_id": item_id, "field": "actions", "value": ["P"]},
            headers=auth_header(staff_token),
        )

        def _storage_down(key, data, content_type):
            raise OSError("storage unavailable")

        monkeypatch.setattr(storage_service, "upload", _storage_down)

        ctx = AuthContext(user=staff_user, role="STAFF")
        with pytest.raises(OSError):
            await evidence_service.upload_image(db, ctx, item_id, _upload_file(JPEG_BYTES), TODAY)

        count = (
            await db.execute(
                select(func.count()).select_from(WorkcheckItemImage).where(WorkcheckItemImage.item_id == UUID(item_id))
            )
        ).scalar()
        assert count == 0
        assert _stored_files(local_storage) == []

        res = await client.get(f"{STAFF_WC}/{workcheck['id']}", headers=auth_header(staff_token))
        item = res.json()["items"][0]
        assert item["images"] == []
        assert item["is_complete"] is False

    async def test_declared_size_rejected_before_reading(
        self, client: AsyncClient, db, staff_user, staff_token, units, check_items
    ):
        workcheck = await create_workcheck(client, staff_token, units[0])
        upload = _upload_file(size=settings.WORKCHECK_IMAGE_MAX_BYTES + 1)

        ctx = AuthContext(user=staff_user, role="STAFF")
        with pytest.raises(BadRequestError) as exc_info:
            await evidence_service.upload_image(db, ctx, workcheck["items"][0]["id"], upload, TODAY)
        assert exc_info.value.detail == "Image size must be 10MB or less"

    async def test_missing_item_id(self, client: AsyncClient, staff_token):
        res = await client.post(
            f"{STAFF_WC}/upload-images",
            files={"image": ("a.jpg", b"\xff\xd8\xff", "image/jpeg")},
            headers=auth_header(staff_token),
        )
        assert res.status_code == 400

    async def test_other_staff_item_not_found(
        self, client: AsyncClient, staff_token, other_staff_token, units, check_items
    ):
        workcheck = await create_workcheck(client, staff_token, units[0])
        res = await upload_image(client, other_staff_token, workcheck["items"][0]["id"])
        assert res.status_code == 404

    async def test_delete_refused_while_pending(self, client: AsyncClient, staff_token, units, check_items):
        workcheck = await create_workcheck(client, staff_token, units[0])
        await complete_workcheck(client, staff_token, workcheck)
        await submit_workcheck(client, staff_token, workcheck["id"])

        detail = (await client.get(f"{STAFF_WC}/{workcheck['id']}", headers=auth_header(staff_token))).json()
        image_id = detail["items"][0]["images"][0]["id"]
        res = await client.delete(
            f"{STAFF_WC}/delete-image", params={"image_id": image_id}, headers=auth_header(staff_token)
        )
        assert res.status_code == 409


class TestDelete:
    """사진 삭제 테스트."""

    async def test_delete_by_id(self, client: AsyncClient, staff_token, units, check_items, local_storage):
        workcheck = await create_workcheck(client, staff_token, units[0])
        item_id = workcheck["items"][0]["id"]
        uploaded = (await upload_image(client, staff_token, item_id)).json()

        res = await client.delete(
            f"{STAFF_WC}/delete-image", params={"image_id": uploaded["image_id"]}, headers=auth_header(staff_token)
        )
        assert res.status_code == 200
        assert _stored_files(local_storage) == []

        # 삭제 후 다시 업로드 가능 — A new photo can be attached afterwards
        res = await upload_image(client, staff_token, item_id)
        assert res.status_code == 200

    async def test_delete_by_url(self, client: AsyncClient, staff_token, units, check_items):
        workcheck = await create_workcheck(client, staff_token, units[0])
        uploaded = (await upload_image(client, staff_token, workcheck["items"][0]["id"])).json()

        res = await client.delete(
            f"{STAFF_WC}/delete-image", params={"image_url": uploaded["image_url"]}, headers=auth_header(staff_token)
        )
        assert res.status_code == 200

        res = await client.get(f"{STAFF_WC}/{workcheck['id']}", headers=auth_header(staff_token))
        assert res.json()["items"][0]["images"] == []

    async def test_delete_requires_id_or_url(self, client: AsyncClient, staff_token):
        res = await client.delete(f"{STAFF_WC}/delete-image", headers=auth_header(staff_token))
        assert res.status_code == 400

    async def test_delete_missing_image(self, client: AsyncClient, staff_token):
        res = await client.delete(
            f"{STAFF_WC}/delete-image",
            params={"image_id": "00000000-0000-0000-0000-000000000000"},
            headers=auth_header(staff_token),
        )
        assert res.status_code == 404

    async def test_delete_other_staff_image(
        self, client: AsyncClient, staff_token, other_staff_token, units, check_items
    ):
        workcheck = await create_workcheck(client, staff_token, units[0])
        uploaded = (await upload_image(client, staff_token, workcheck["items"][0]["id"])).json()

        res = await client.delete(
            f"{STAFF_WC}/delete-image", params={"image_id": uploaded["image_id"]}, headers=auth_header(other_staff_token)
        )
        assert res.status_code == 404

    async def test_row_deleted_when_file_already_gone(
        self, client: AsyncClient, staff_token, units, check_items, local_storage
    ):
        """저장소 파일이 없어도 DB 행은 삭제."""
        workcheck = await create_workcheck(client, staff_token, units[0])
        uploaded = (await upload_image(client, staff_token, workcheck["items"][0]["id"])).json()
        for path in _stored_files(local_storage):
            path.unlink()

        res = await client.delete(
            f"{STAFF_WC}/delete-image", params={"image_id": uploaded["image_id"]}, headers=auth_header(staff_token)
        )
        assert res.status_code == 200


def test_sanitize_filename():
    assert sanitize_filename("my photo (1).JPG") == "myphoto1.JPG"
    assert sanitize_filename("사진.png") == ".png"
    assert sanitize_filename("") == "image"


def test_build_evidence_key_layout():
    key = build_evidence_key("staff", "item", TODAY, "a b.jpg")
    folder, name = key.split("/")[1:]
    assert key.startswith("workcheck/10-03-2026/staff-item-")
    assert folder == "10-03-2026"
    assert name.endswith("-ab.jpg")
    assert len(name.split("-")) == 5
