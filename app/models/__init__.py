"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
relationship resolution.

Modules:
    user: 사용자 계정 (User accounts, STAFF/ADMIN)
    fleet: 차량 유닛 및 점검 항목 카탈로그 (Units and check item catalog)
    workcheck: 일일 점검, 항목, 증빙 사진, 검토 (Workchecks, items, images, approvals)
"""

from app.models.user import User
from app.models.fleet import Unit, CheckItem
from app.models.workcheck import Workcheck, WorkcheckItem, WorkcheckItemImage, Approval

__all__ = [
    "User",
    "Unit", "CheckItem",
    "Workcheck", "WorkcheckItem", "WorkcheckItemImage", "Approval",
]
