"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite database, session, and httpx client
fixtures. Every test gets a fresh schema. The pysqlite transaction handling
is switched to explicit BEGIN so that SAVEPOINTs (used by the create and
upload paths) behave as on PostgreSQL. "Today" is pinned through the
local_today dependency and uploads go to a temporary directory.
"""

from collections.abc import AsyncGenerator, Callable
from datetime import date

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.config import settings
from app.database import Base, get_db
from app.main import app
from app.models import *  # noqa: F401,F403 — register all models with metadata
from app.models.fleet import CheckItem, Unit
from app.models.user import ROLE_ADMIN, ROLE_STAFF, User
from app.utils.dates import local_today
from app.utils.jwt import create_access_token
from app.utils.password import hash_password

# ---------------------------------------------------------------------------
# 테스트 DB 설정
# ---------------------------------------------------------------------------
TEST_DATABASE_URL = "sqlite+aiosqlite://"

# 고정된 "오늘" — Pinned calendar day for every request
TODAY = date(2026, 3, 10)

# 최소 JPEG 헤더 — Small payload accepted as an image upload
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 64


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진 — 테스트마다 새 인메모리 DB와 스키마."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(eng.sync_engine, "connect")
    def _disable_implicit_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(eng.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture(autouse=True)
def local_storage(tmp_path, monkeypatch) -> str:
    """업로드를 임시 디렉토리에 저장하도록 로컬 모드를 강제합니다."""
    uploads = tmp_path / "uploads"
    monkeypatch.setattr(settings, "AWS_ACCESS_KEY_ID", "")
    monkeypatch.setattr(settings, "AWS_S3_BUCKET", "")
    monkeypatch.setattr(settings, "LOCAL_UPLOADS_DIR", str(uploads))
    return str(uploads)


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션과 오늘 날짜를 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[local_today] = lambda: TODAY

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def set_today(client) -> Callable[[date], None]:
    """요청 기준일 변경 — Move "today" for the following requests."""
    def _set(day: date) -> None:
        app.dependency_overrides[local_today] = lambda: day
    return _set


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
async def _make_user(db: AsyncSession, username: str, password: str, role: str, first: str, last: str) -> User:
    user = User(
        first_name=first,
        last_name=last,
        username=username,
        password_hash=hash_password(password),
        role=role,
        is_active=True,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def admin_user(db: AsyncSession) -> User:
    """관리자 사용자를 생성합니다."""
    return await _make_user(db, "alexsmith", "password123", ROLE_ADMIN, "Alex", "Smith")


@pytest_asyncio.fixture
async def staff_user(db: AsyncSession) -> User:
    """스태프 사용자를 생성합니다."""
    return await _make_user(db, "budi", "staff123!", ROLE_STAFF, "Budi", "Santoso")


@pytest_asyncio.fixture
async def other_staff(db: AsyncSession) -> User:
    """두 번째 스태프 사용자를 생성합니다."""
    return await _make_user(db, "citra", "staff456!", ROLE_STAFF, "Citra", "Lestari")


@pytest_asyncio.fixture
async def units(db: AsyncSession) -> list[Unit]:
    """테스트 유닛 2대를 생성합니다 (이름순)."""
    result = []
    for name, unit_type, plate in [
        ("DT-01", "Dump Truck", "B 1234 XY"),
        ("EX-01", "Excavator", None),
    ]:
        unit = Unit(name=name, type=unit_type, number_plate=plate)
        db.add(unit)
        result.append(unit)
    await db.flush()
    for unit in result:
        await db.refresh(unit)
    return result


@pytest_asyncio.fixture
async def check_items(db: AsyncSession) -> list[CheckItem]:
    """활성 점검 항목 3개를 생성합니다 (CHK01~CHK03)."""
    result = []
    for position, (code, label) in enumerate(
        [("CHK01", "Engine oil"), ("CHK02", "Tyres"), ("CHK03", "Lights")], 1
    ):
        item = CheckItem(code=code, label=label, sort_order=position, is_active=True)
        db.add(item)
        result.append(item)
    await db.flush()
    for item in result:
        await db.refresh(item)
    return result


def make_token(user: User) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({"sub": str(user.id), "role": user.role})


@pytest.fixture
def admin_token(admin_user) -> str:
    return make_token(admin_user)


@pytest.fixture
def staff_token(staff_user) -> str:
    return make_token(staff_user)


@pytest.fixture
def other_staff_token(other_staff) -> str:
    return make_token(other_staff)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


# ---------------------------------------------------------------------------
# 점검 흐름 헬퍼 — Workcheck flow helpers
# ---------------------------------------------------------------------------
STAFF_WC = "/api/v1/staff/workcheck"


async def create_workcheck(client: AsyncClient, token: str, unit: Unit) -> dict:
    res = await client.post(f"{STAFF_WC}/create", json={"unitId": str(unit.id)}, headers=auth_header(token))
    assert res.status_code == 201, res.text
    return res.json()


async def upload_image(client: AsyncClient, token: str, item_id: str, name: str = "photo.jpg"):
    return await client.post(
        f"{STAFF_WC}/upload-images",
        files={"image": (name, JPEG_BYTES, "image/jpeg")},
        data={"item_id": item_id},
        headers=auth_header(token),
    )


async def complete_workcheck(
    client: AsyncClient,
    token: str,
    workcheck: dict,
    hours: float = 1250.5,
    actions: list[str] | None = None,
) -> None:
    """모든 항목에 조치 코드와 사진을 기록하고 아워미터를 입력합니다."""
    for item in workcheck["items"]:
        res = await client.put(
            f"{STAFF_WC}/update-item",
            json={"item_id": item["id"], "field": "actions", "value": actions or ["P"]},
            headers=auth_header(token),
        )
        assert res.status_code == 200, res.text
        if not item["images"]:
            res = await upload_image(client, token, item["id"])
            assert res.status_code == 200, res.text
    res = await client.put(
        f"{STAFF_WC}/update-hours",
        json={"workcheck_id": workcheck["id"], "hours_meter": hours},
        headers=auth_header(token),
    )
    assert res.status_code == 200, res.text


async def submit_workcheck(client: AsyncClient, token: str, workcheck_id: str):
    return await client.post(
        f"{STAFF_WC}/submit", json={"workcheck_id": workcheck_id}, headers=auth_header(token)
    )


async def decide(client: AsyncClient, token: str, workcheck_id: str, approved: bool, comments: str | None = None):
    return await client.post(
        "/api/v1/admin/workchecks",
        json={"workcheckId": workcheck_id, "isApproved": approved, "comments": comments},
        headers=auth_header(token),
    )
