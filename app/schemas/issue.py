"""이슈 Pydantic 스키마.

Issue request schemas: submission, edits, votes, comments and admin triage.
String fields are trimmed before their length limits are checked.
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import Field, StringConstraints, field_validator

from app.models.enums import IssueCategory, IssuePriority, IssueStatus, VoteType
from app.schemas.common import CamelModel

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=5, max_length=100)]
Description = Annotated[str, StringConstraints(strip_whitespace=True, min_length=10, max_length=1000)]
Tag = Annotated[str, StringConstraints(strip_whitespace=True, max_length=50)]


def _normalize_tags(tags: list[str] | None) -> list[str] | None:
    """빈 태그 제거 및 중복 제거(입력 순서 유지) — Drop blanks and duplicates, keeping first occurrence."""
    if tags is None:
        return None
    seen: list[str] = []
    for tag in tags:
        if tag and tag not in seen:
            seen.append(tag)
    return seen


class Coordinates(CamelModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class LocationIn(CamelModel):
    address: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
    coordinates: Coordinates
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    zip_code: str | None = Field(default=None, max_length=20)


class ImageIn(CamelModel):
    """이미지 참조 — 업로드는 외부 스토리지, 여기서는 URL만 저장."""

    url: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=500)]
    caption: str | None = Field(default=None, max_length=200)


class IssueCreate(CamelModel):
    """이슈 등록 요청 스키마.

    Issue submission request schema.

    Attributes:
        title: 제목 (5–100 chars)
        description: 설명 (10–1000 chars)
        category: 분류 (one of the 9 categories)
        priority: 우선순위 (default Medium)
        location: 주소 + 좌표 (Address and coordinates)
        images: 이미지 목록 (Ordered image references)
        tags: 태그 목록 (Tags, blanks and duplicates dropped)
        is_anonymous: 익명 보고 (Hide the reporter from other citizens)
        is_public: 공개 여부 (Show in the public listing)
    """

    title: Title
    description: Description
    category: IssueCategory
    priority: IssuePriority = IssuePriority.MEDIUM
    location: LocationIn
    images: list[ImageIn] = Field(default_factory=list)
    tags: list[Tag] = Field(default_factory=list)
    is_anonymous: bool = False
    is_public: bool = True

    @field_validator("tags")
    @classmethod
    def _tags(cls, value: list[str]) -> list[str]:
        return _normalize_tags(value) or []


class IssueUpdate(CamelModel):
    """이슈 수정 요청 스키마 (부분 업데이트) — Reporter or staff field edits."""

    title: Title | None = None
    description: Description | None = None
    priority: IssuePriority | None = None
    tags: list[Tag] | None = None

    @field_validator("tags")
    @classmethod
    def _tags(cls, value: list[str] | None) -> list[str] | None:
        return _normalize_tags(value)


class VoteRequest(CamelModel):
    vote_type: VoteType


class CommentCreate(CamelModel):
    content: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=500)]
    is_official: bool = False


class IssueStatusUpdate(CamelModel):
    """관리자 상태 변경 요청 — 배정, 해결 메모, 예상 해결일 동시 변경 가능."""

    status: IssueStatus
    assigned_to: UUID | None = None
    resolution_notes: str | None = Field(default=None, max_length=2000)
    estimated_resolution_date: datetime | None = None


class IssuePriorityUpdate(CamelModel):
    priority: IssuePriority
