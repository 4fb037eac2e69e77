"""이슈 관련 SQLAlchemy ORM 모델 정의.

Issue-related SQLAlchemy ORM model definitions.
An issue is a civic problem reported by a citizen. Votes, comments and
tags are child tables; images are an ordered JSON list on the issue row.

Tables:
    - issues: 이슈 본문, 위치, 처리 상태 (Issue body, location and triage state)
    - issue_votes: 이슈별 사용자 투표 — (issue_id, user_id) 고유 (One vote row per user per issue)
    - issue_comments: 이슈 댓글, 추가 전용 (Append-only comments)
    - issue_tags: 이슈 태그 (Free-form tags, unique per issue)
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.enums import IssuePriority, IssueStatus, VoteType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Issue(Base):
    """이슈 모델 — 시민이 보고한 생활 민원.

    Issue model — A civic problem reported by a citizen.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        title: 제목 (Title, 5–100 chars)
        description: 상세 설명 (Description, 10–1000 chars)
        category: 분류 (IssueCategory value)
        priority: 우선순위 (IssuePriority value, default "Medium")
        status: 처리 상태 (IssueStatus value, default "Open")
        reporter_id: 보고자 FK (Owning user)
        assigned_to_id: 담당자 FK (Assigned staff user, optional)
        address/latitude/longitude/city/state/zip_code: 위치 (Location)
        images: 이미지 목록 JSON (Ordered list of {"url", "caption"})
        is_public: 공개 여부 (Shown in the public listing)
        is_anonymous: 익명 여부 (Reporter hidden from other citizens)
        view_count: 조회수 (Monotonic view counter)
        estimated_resolution_date: 예상 해결일 (Set by admins, optional)
        actual_resolution_date: 실제 해결일 (Set on entering Resolved/Closed)
        resolution_notes: 해결 메모 (Resolution notes, optional)
        last_activity: 최근 활동 일시 (Moved forward on every mutation)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Relationships:
        reporter / assigned_to: 사용자 (Users)
        votes: 투표 목록 (Vote rows, cascade delete)
        comments: 댓글 목록, 작성순 (Comments in arrival order, cascade delete)
        tags: 태그 목록 (Tag rows, cascade delete)
    """

    __tablename__ = "issues"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    priority: Mapped[str] = mapped_column(String(20), nullable=False, default=IssuePriority.MEDIUM.value)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=IssueStatus.OPEN.value)
    # 보고자 FK — 사용자 삭제 시 이슈도 삭제 (CASCADE: reporter deletion removes the issue)
    reporter_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    # 담당자 FK — 담당자 삭제 시 미배정 (SET NULL: assignee deletion unassigns)
    assigned_to_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    # 위치 — Location
    address: Mapped[str] = mapped_column(String(255), nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(100), nullable=True)
    zip_code: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # 이미지 — [{"url": str, "caption": str | None}], 업로드는 외부 스토리지 담당
    images: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    is_public: Mapped[bool] = mapped_column(Boolean, default=True)
    is_anonymous: Mapped[bool] = mapped_column(Boolean, default=False)
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    estimated_resolution_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    actual_resolution_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    resolution_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    last_activity: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        Index("ix_issues_category_status", "category", "status"),
        Index("ix_issues_reporter_id", "reporter_id"),
        Index("ix_issues_assigned_to_id", "assigned_to_id"),
        Index("ix_issues_created_at", "created_at"),
    )

    # 관계 — Relationships
    reporter = relationship("User", back_populates="issues", foreign_keys=[reporter_id])
    assigned_to = relationship("User", foreign_keys=[assigned_to_id])
    votes = relationship("IssueVote", back_populates="issue", cascade="all, delete-orphan")
    comments = relationship(
        "IssueComment",
        back_populates="issue",
        cascade="all, delete-orphan",
        order_by=lambda: [IssueComment.created_at, IssueComment.id],
    )
    tags = relationship("IssueTag", back_populates="issue", cascade="all, delete-orphan", order_by="IssueTag.position")

    @property
    def upvote_count(self) -> int:
        return sum(1 for v in self.votes if v.vote_type == VoteType.UPVOTE.value)

    @property
    def downvote_count(self) -> int:
        return sum(1 for v in self.votes if v.vote_type == VoteType.DOWNVOTE.value)

    @property
    def vote_count(self) -> int:
        """순 투표수 — Net votes, always recomputed from the vote rows (votes must be loaded)."""
        return self.upvote_count - self.downvote_count

    @property
    def tag_names(self) -> list[str]:
        return [t.tag for t in self.tags]


class IssueVote(Base):
    """이슈 투표 모델 — 사용자당 이슈별 최대 한 표.

    Issue vote model. The (issue_id, user_id) unique key guarantees a user
    is in at most one of the upvote/downvote sets of an issue.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        issue_id: 이슈 FK (Voted issue)
        user_id: 투표자 FK (Voting user)
        vote_type: 투표 종류 ("upvote" | "downvote")
        voted_at: 투표 일시 UTC (Time of the latest membership change)
    """

    __tablename__ = "issue_votes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    issue_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("issues.id", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    vote_type: Mapped[str] = mapped_column(String(10), nullable=False)
    voted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (
        UniqueConstraint("issue_id", "user_id", name="uq_issue_vote_issue_user"),
        Index("ix_issue_votes_user_id", "user_id"),
    )

    issue = relationship("Issue", back_populates="votes")


class IssueComment(Base):
    """이슈 댓글 모델 — 작성 후 수정/삭제 불가.

    Issue comment model. Comments are append-only; the author is cleared
    (not the comment) when the author account is deleted.
    """

    __tablename__ = "issue_comments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    issue_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("issues.id", ondelete="CASCADE"), nullable=False)
    author_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    content: Mapped[str] = mapped_column(String(500), nullable=False)
    # 공식 댓글 — 관리자/모더레이터만 설정 가능 (Only staff may post official comments)
    is_official: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (
        Index("ix_issue_comments_issue_id", "issue_id"),
    )

    issue = relationship("Issue", back_populates="comments")
    author = relationship("User")


class IssueTag(Base):
    """이슈 태그 모델."""

    __tablename__ = "issue_tags"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    issue_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("issues.id", ondelete="CASCADE"), nullable=False)
    tag: Mapped[str] = mapped_column(String(50), nullable=False)
    # 입력 순서 보존 — Preserves the order the tags were submitted in
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("issue_id", "tag", name="uq_issue_tag_issue_tag"),
        Index("ix_issue_tags_tag", "tag"),
    )

    issue = relationship("Issue", back_populates="tags")
