"""초기 데이터 시드 스크립트 — 관리자 계정 및 기본 점검 항목 생성.

Seed script — Creates the initial admin account and the default check
item catalog. Safe to run repeatedly: each part is skipped when it
already exists.

Usage:
    python -m app.seed

Creates:
    - 1개 관리자 계정: alexsmith / password123 (1 admin user)
    - 기본 점검 항목 10개 (10 default check items, only when the catalog is empty)
"""

import asyncio
import logging

from sqlalchemy import func, select

from app.database import Base, async_session, dispose_engine, engine
from app.models import CheckItem, User
from app.models.user import ROLE_ADMIN
from app.utils.password import hash_password

logger = logging.getLogger(__name__)

SEED_ADMIN_USERNAME: str = "alexsmith"
SEED_ADMIN_PASSWORD: str = "password123"

# 기본 점검 항목 (코드, 라벨) — Default catalog in display order
DEFAULT_CHECK_ITEMS: list[tuple[str, str]] = [
    ("ENG01", "Engine oil level"),
    ("ENG02", "Coolant level"),
    ("HYD01", "Hydraulic oil level and leaks"),
    ("FUE01", "Fuel level and leaks"),
    ("TYR01", "Tyres and wheel nuts"),
    ("BRK01", "Brakes and parking brake"),
    ("LGT01", "Lights and indicators"),
    ("HRN01", "Horn and reverse alarm"),
    ("WIP01", "Wipers and windscreen"),
    ("SAF01", "Seat belt, mirrors and fire extinguisher"),
]


async def seed() -> None:
    """데이터베이스를 초기 데이터로 시드합니다.

    Create missing tables, then insert the admin account and the default
    check items when they are absent.
    """
    # 테이블 생성 — Create all tables from ORM metadata
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        existing = await db.execute(select(User).where(User.username == SEED_ADMIN_USERNAME))
        if existing.scalar_one_or_none() is None:
            db.add(
                User(
                    first_name="Alex",
                    last_name="Smith",
                    username=SEED_ADMIN_USERNAME,
                    password_hash=hash_password(SEED_ADMIN_PASSWORD),
                    phone_number="081234567890",
                    role=ROLE_ADMIN,
                    is_active=True,
                )
            )
            logger.info("Seeded admin user %s", SEED_ADMIN_USERNAME)
        else:
            logger.info("Admin user %s already exists, skipping", SEED_ADMIN_USERNAME)

        count: int = (await db.execute(select(func.count()).select_from(CheckItem))).scalar() or 0
        if count == 0:
            for position, (code, label) in enumerate(DEFAULT_CHECK_ITEMS, 1):
                db.add(CheckItem(code=code, label=label, sort_order=position, is_active=True))
            logger.info("Seeded %d default check items", len(DEFAULT_CHECK_ITEMS))
        else:
            logger.info("Check item catalog has %d items, skipping", count)

        await db.commit()


async def main() -> None:
    try:
        await seed()
    finally:
        await dispose_engine()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s [%(name)s] %(message)s")
    asyncio.run(main())
