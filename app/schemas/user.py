"""사용자 관련 Pydantic 요청 스키마 정의.

User request schemas: self-service notification preferences and the
admin role change.
"""

from app.models.enums import IssueCategory, UserRole
from app.schemas.common import CamelModel


class NotificationPreferences(CamelModel):
    """알림 설정 — 지정한 플래그만 기존 값에 병합 (Only the flags sent are merged)."""

    email: bool | None = None
    push: bool | None = None


class PreferencesUpdate(CamelModel):
    """환경설정 수정 요청 스키마.

    Attributes:
        notifications: 알림 플래그, 기존 값과 병합 (Merged into the stored flags)
        categories: 구독 분류 목록, 통째로 교체 (Replaces the subscribed categories)
    """

    notifications: NotificationPreferences | None = None
    categories: list[IssueCategory] | None = None


class RoleUpdate(CamelModel):
    role: UserRole
