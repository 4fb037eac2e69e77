"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
relationship resolution.

Modules:
    enums: 분류, 우선순위, 상태, 역할, 투표 종류 (Closed domain enumerations)
    user: 사용자 (User accounts)
    issue: 이슈, 투표, 댓글, 태그 (Issues with votes, comments and tags)
"""

from app.models.user import User
from app.models.issue import Issue, IssueVote, IssueComment, IssueTag

__all__ = [
    "User",
    "Issue", "IssueVote", "IssueComment", "IssueTag",
]
