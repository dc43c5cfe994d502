"""사용자 서비스 — 관리자용 계정 관리 비즈니스 로직.

User Service — Admin management of staff and admin accounts: creation
with a temporary password, edits, activation toggling and deactivation.
Accounts are never hard-deleted; deleting deactivates.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.repositories.user_repository import user_repository
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.services.auth_service import AuthContext
from app.utils.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from app.utils.password import hash_password


def to_user_response(user: User) -> UserResponse:
    """사용자 모델을 응답 스키마로 변환합니다 — User model to UserResponse."""
    return UserResponse(
        id=str(user.id),
        first_name=user.first_name,
        last_name=user.last_name,
        full_name=user.full_name,
        username=user.username,
        role=user.role,
        phone_number=user.phone_number,
        user_image=user.user_image,
        is_active=user.is_active,
        last_login=user.last_login,
        created_at=user.created_at,
    )


class UserService:
    """사용자 관리 비즈니스 로직을 처리하는 서비스.

    Service handling account administration.
    """

    async def _get(self, db: AsyncSession, user_id: UUID) -> User:
        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def _ensure_username_free(self, db: AsyncSession, username: str, exclude_id: UUID | None = None) -> None:
        if await user_repository.exists(db, {"username": username}, exclude_id=exclude_id):
            raise ConflictError("Username already exists")

    async def list_users(self, db: AsyncSession) -> list[UserResponse]:
        """사용자 목록 — All accounts, newest first."""
        users: list[User] = await user_repository.list_newest_first(db)
        return [to_user_response(u) for u in users]

    async def get_user(self, db: AsyncSession, user_id: UUID) -> UserResponse:
        """사용자 단건 조회 — One account by id."""
        return to_user_response(await self._get(db, user_id))

    async def create_user(self, db: AsyncSession, data: UserCreate) -> UserResponse:
        """새 계정을 생성합니다.

        Create an account with the given temporary password.

        Raises:
            BadRequestError: 필수값 누락 (Required field blank)
            ConflictError: 아이디 중복 (Username taken)
        """
        username: str = data.username.strip()
        first_name: str = data.first_name.strip()
        last_name: str = data.last_name.strip()
        if not username or not first_name or not last_name or not data.temporary_password.strip():
            raise BadRequestError("First name, last name, username and temporary password are required")
        await self._ensure_username_free(db, username)

        user: User = await user_repository.create(
            db,
            {
                "first_name": first_name,
                "last_name": last_name,
                "username": username,
                "password_hash": hash_password(data.temporary_password),
                "role": data.role,
                "phone_number": data.phone_number or None,
                "is_active": True,
            },
        )
        return to_user_response(user)

    async def update_user(self, db: AsyncSession, user_id: UUID, data: UserUpdate) -> UserResponse:
        """계정 정보를 수정합니다.

        Update names, username, phone number and role; a non-empty
        password resets the password.

        Raises:
            NotFoundError: 사용자 없음 (User not found)
            ConflictError: 아이디 중복 (Username taken)
        """
        user: User = await self._get(db, user_id)
        update_data: dict = data.model_dump(exclude_unset=True, exclude={"password"})

        for key in ("first_name", "last_name", "username"):
            if key in update_data:
                value: str = (update_data[key] or "").strip()
                if not value:
                    raise BadRequestError(f"{key.replace('_', ' ').capitalize()} is required")
                update_data[key] = value
        if "username" in update_data and update_data["username"] != user.username:
            await self._ensure_username_free(db, update_data["username"], exclude_id=user.id)
        if data.password:
            update_data["password_hash"] = hash_password(data.password)

        user = await user_repository.update(db, user, update_data)
        return to_user_response(user)

    async def toggle_status(self, db: AsyncSession, ctx: AuthContext, user_id: UUID) -> UserResponse:
        """계정 활성 상태를 전환합니다.

        Flip the active flag of an account.

        Raises:
            ForbiddenError: 본인 계정 (Caller's own account)
            NotFoundError: 사용자 없음 (User not found)
        """
        if user_id == ctx.user_id:
            raise ForbiddenError("You cannot change the status of your own account")
        user: User = await self._get(db, user_id)
        user = await user_repository.update(db, user, {"is_active": not user.is_active})
        return to_user_response(user)

    async def deactivate_user(self, db: AsyncSession, ctx: AuthContext, user_id: UUID) -> None:
        """계정을 비활성화합니다 (삭제 대신).

        Deactivate an account; its workchecks stay intact.

        Raises:
            ForbiddenError: 본인 계정 (Caller's own account)
            NotFoundError: 사용자 없음 (User not found)
        """
        if user_id == ctx.user_id:
            raise ForbiddenError("You cannot deactivate your own account")
        user: User = await self._get(db, user_id)
        await user_repository.update(db, user, {"is_active": False})


# 싱글턴 인스턴스 — Singleton instance
user_service: UserService = UserService()
