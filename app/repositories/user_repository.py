"""사용자 레포지토리 — 사용자 계정 조회.

User Repository — Queries for user accounts.
"""

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the users table.
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def get_by_username(self, db: AsyncSession, username: str) -> User | None:
        """로그인 아이디로 사용자를 조회합니다.

        Retrieve a user by username (exact match).

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            username: 로그인 아이디 (Login ID)

        Returns:
            User | None: 사용자 또는 None (User or None)
        """
        result = await db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def list_newest_first(self, db: AsyncSession) -> list[User]:
        """전체 사용자 목록 — 최근 생성 순 (All users, newest first)."""
        query: Select = select(User).order_by(User.created_at.desc(), User.username)
        result = await db.execute(query)
        return list(result.scalars().all())


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
