"""사용자 서비스 — 프로필, 환경설정, 계정 삭제 및 관리자 사용자 관리 비즈니스 로직.

User Service — Business logic for the user's own profile, notification
preferences and account deletion, and for admin user management
(listing, role changes, deletion).
"""

from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import UserRole
from app.models.user import User, default_preferences
from app.repositories.user_repository import user_repository
from app.schemas.user import PreferencesUpdate, RoleUpdate
from app.services.dashboard_service import dashboard_service
from app.utils.exceptions import NotFoundError
from app.utils.logging import get_logger
from app.utils.pagination import build_page

logger = get_logger(__name__)


def merge_preferences(current: dict[str, Any] | None, data: PreferencesUpdate) -> dict[str, Any]:
    """환경설정 병합.

    Merge a preferences update into the stored preferences. Notification
    flags that were sent overwrite the stored ones; the others are kept.
    Categories are replaced as a whole. A new dict is returned so the JSON
    column registers the change.
    """
    merged = default_preferences()
    if current:
        merged["notifications"].update(current.get("notifications") or {})
        merged["categories"] = list(current.get("categories") or [])

    if data.notifications is not None:
        flags = data.notifications.model_dump(exclude_none=True)
        merged["notifications"].update(flags)
    if data.categories is not None:
        merged["categories"] = [c.value for c in data.categories]
    return merged


class UserService:
    """사용자 관련 비즈니스 로직을 처리하는 서비스.

    Service handling user business logic.
    """

    def build_response(self, user: User) -> dict[str, Any]:
        """사용자 응답 딕셔너리 생성 — Serialize a user for the wire."""
        return {
            "id": str(user.id),
            "name": user.name,
            "email": user.email,
            "role": user.role,
            "avatar": user.avatar,
            "phone": user.phone,
            "address": {
                "street": user.street,
                "city": user.city,
                "state": user.state,
                "zipCode": user.zip_code,
            },
            "preferences": user.preferences or default_preferences(),
            "isActive": user.is_active,
            "createdAt": user.created_at,
            "updatedAt": user.updated_at,
        }

    # --- 본인 (Self-service) ---

    async def get_profile(self, db: AsyncSession, user: User) -> dict[str, Any]:
        """프로필 + 통계 — Profile with issue statistics."""
        return {
            "user": self.build_response(user),
            "stats": await dashboard_service.get_user_stats(db, user.id),
        }

    async def update_preferences(self, db: AsyncSession, user: User, data: PreferencesUpdate) -> User:
        user.preferences = merge_preferences(user.preferences, data)
        await db.flush()
        return user

    async def delete_account(self, db: AsyncSession, user: User) -> None:
        """본인 계정 삭제 — Delete the caller's account and everything it owns."""
        user_id = user.id
        await user_repository.delete_with_issues(db, user_id)
        logger.info("user_deleted", user_id=str(user_id), actor_id=str(user_id))

    # --- 관리자 (Admin) ---

    async def list_users(
        self,
        db: AsyncSession,
        role: UserRole | None = None,
        search: str | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> dict[str, Any]:
        users, total = await user_repository.search(
            db, role.value if role else None, search, page, per_page
        )
        return build_page([self.build_response(u) for u in users], total, page, per_page)

    async def update_role(self, db: AsyncSession, user_id: UUID, data: RoleUpdate, actor: User) -> User:
        user = await user_repository.update(db, user_id, {"role": data.role.value})
        if user is None:
            raise NotFoundError("User not found")
        logger.info("user_role_changed", user_id=str(user_id), actor_id=str(actor.id), role=data.role.value)
        return user

    async def delete_user(self, db: AsyncSession, user_id: UUID, actor: User) -> None:
        user = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        await user_repository.delete_with_issues(db, user_id)
        logger.info("user_deleted", user_id=str(user_id), actor_id=str(actor.id))


user_service: UserService = UserService()
