"""사용자 SQLAlchemy ORM 모델 정의.

User SQLAlchemy ORM model definition.
A user is a citizen, moderator or admin; citizens own the issues they report.

Tables:
    - users: 사용자 계정 (User accounts with role and notification preferences)
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.enums import UserRole


def default_preferences() -> dict[str, Any]:
    """기본 알림 설정 — Default preferences for a new account."""
    return {"notifications": {"email": True, "push": True}, "categories": []}


class User(Base):
    """사용자 모델 — 시스템 사용자 계정 정보.

    User model — System user account information.
    Email is globally unique. The role decides what the user may do
    with issues they do not own (see permission_service).

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 표시 이름 (Display name)
        email: 이메일 (Email address, unique)
        role: 역할 (citizen / moderator / admin)
        avatar: 프로필 이미지 URL (Avatar URL, optional)
        phone: 전화번호 (Phone number, optional)
        street/city/state/zip_code: 주소 (Postal address, optional)
        preferences: 알림 설정 JSON (Notification flags and category subscriptions)
        is_active: 활성 상태 (Inactive users cannot authenticate)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Relationships:
        issues: 이 사용자가 보고한 이슈 (Issues reported by this user)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 — User unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    # 이메일 — 전역 고유 (Globally unique, used as login identifier by the auth service)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=UserRole.CITIZEN.value)
    avatar: Mapped[str | None] = mapped_column(String(500), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    street: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(100), nullable=True)
    zip_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    # 알림 설정 — {"notifications": {"email": bool, "push": bool}, "categories": [str]}
    preferences: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=default_preferences)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    issues = relationship("Issue", back_populates="reporter", foreign_keys="Issue.reporter_id")

    @property
    def role_enum(self) -> UserRole:
        return UserRole(self.role)
