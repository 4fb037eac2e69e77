"""이슈 서비스 — 이슈 CRUD, 목록 조회, 댓글, 관리자 처리 비즈니스 로직.

Issue service — Business logic for issue submission, listings, detail
views, comments and admin triage. Authorization goes through
``permission_service``; queries go through ``issue_repository``.
"""

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import IssueStatus, SortField, SortOrder, VoteType
from app.models.issue import Issue, IssueComment, IssueTag
from app.models.user import User
from app.repositories.issue_repository import IssueFilter, issue_repository
from app.repositories.user_repository import user_repository
from app.schemas.issue import (
    CommentCreate,
    IssueCreate,
    IssuePriorityUpdate,
    IssueStatusUpdate,
    IssueUpdate,
)
from app.services.permission_service import IssueAction, permission_service
from app.utils.exceptions import NotFoundError
from app.utils.logging import get_logger
from app.utils.pagination import build_page

logger = get_logger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def user_summary(user: User | None) -> dict[str, Any] | None:
    """사용자 요약 — Compact user reference embedded in issue payloads."""
    if user is None:
        return None
    return {
        "id": str(user.id),
        "name": user.name,
        "email": user.email,
        "avatar": user.avatar,
    }


def _sync_tags(issue: Issue, names: list[str]) -> None:
    """태그 목록 교체 — 유지되는 태그는 기존 행 재사용 (Retained tags keep their rows)."""
    existing: dict[str, IssueTag] = {t.tag: t for t in issue.tags}
    rows: list[IssueTag] = []
    for position, name in enumerate(names):
        row = existing.get(name) or IssueTag(tag=name)
        row.position = position
        rows.append(row)
    issue.tags = rows


def next_resolution_date(
    old_status: IssueStatus,
    new_status: IssueStatus,
    current: datetime | None,
    now: datetime,
) -> datetime | None:
    """상태 변경 후 실제 해결일을 결정합니다.

    Decide ``actualResolutionDate`` after a status change:
        - 해결 상태 진입 (entering Resolved/Closed from outside) → now
        - Resolved ↔ Closed → 기존 값 유지 (kept)
        - 해결 상태 이탈 (reopening) → None
    """
    if not new_status.is_resolution:
        return None
    if old_status.is_resolution:
        return current
    return now


class IssueService:

    def build_response(
        self,
        issue: Issue,
        viewer: User | None = None,
        include_comments: bool = False,
    ) -> dict[str, Any]:
        """이슈 응답 딕셔너리 생성.

        Serialize an issue for ``viewer`` (None = anonymous). The reporter is
        hidden on anonymous issues unless the viewer may see it. Requires the
        reporter, assignee, votes, tags and comments to be loaded.
        """
        show_reporter = permission_service.can(viewer, IssueAction.SEE_REPORTER, issue)
        upvotes = issue.upvote_count
        downvotes = issue.downvote_count
        data: dict[str, Any] = {
            "id": str(issue.id),
            "title": issue.title,
            "description": issue.description,
            "category": issue.category,
            "priority": issue.priority,
            "status": issue.status,
            "reporter": user_summary(issue.reporter) if show_reporter else None,
            "assignedTo": user_summary(issue.assigned_to),
            "location": {
                "address": issue.address,
                "coordinates": {"lat": issue.latitude, "lng": issue.longitude},
                "city": issue.city,
                "state": issue.state,
                "zipCode": issue.zip_code,
            },
            "images": list(issue.images or []),
            "tags": issue.tag_names,
            "upvotes": upvotes,
            "downvotes": downvotes,
            "voteCount": issue.vote_count,
            "commentCount": len(issue.comments),
            "isPublic": issue.is_public,
            "isAnonymous": issue.is_anonymous,
            "viewCount": issue.view_count,
            "estimatedResolutionDate": issue.estimated_resolution_date,
            "actualResolutionDate": issue.actual_resolution_date,
            "resolutionNotes": issue.resolution_notes,
            "lastActivity": issue.last_activity,
            "createdAt": issue.created_at,
            "updatedAt": issue.updated_at,
        }
        if viewer is not None:
            vote = next((v for v in issue.votes if v.user_id == viewer.id), None)
            data["userVote"] = {
                "upvoted": vote is not None and vote.vote_type == VoteType.UPVOTE.value,
                "downvoted": vote is not None and vote.vote_type == VoteType.DOWNVOTE.value,
            }
        if include_comments:
            data["comments"] = [self.comment_response(c) for c in issue.comments]
        return data

    def comment_response(self, comment: IssueComment) -> dict[str, Any]:
        return {
            "id": str(comment.id),
            "user": user_summary(comment.author),
            "content": comment.content,
            "isOfficial": comment.is_official,
            "createdAt": comment.created_at,
        }

    async def _list(
        self,
        db: AsyncSession,
        filters: IssueFilter,
        viewer: User | None,
        sort_by: SortField,
        sort_order: SortOrder,
        page: int,
        per_page: int,
    ) -> dict[str, Any]:
        issues, total = await issue_repository.search(db, filters, sort_by, sort_order, page, per_page)
        items = [self.build_response(i, viewer) for i in issues]
        return build_page(items, total, page, per_page)

    # --- 목록 (Listings) ---

    async def list_public(
        self,
        db: AsyncSession,
        filters: IssueFilter,
        viewer: User | None = None,
        sort_by: SortField = SortField.CREATED_AT,
        sort_order: SortOrder = SortOrder.DESC,
        page: int = 1,
        per_page: int = 10,
    ) -> dict[str, Any]:
        """공개 이슈 목록 — Public listing; only issues flagged public."""
        filters.public_only = True
        return await self._list(db, filters, viewer, sort_by, sort_order, page, per_page)

    async def list_all(
        self,
        db: AsyncSession,
        filters: IssueFilter,
        viewer: User,
        sort_by: SortField = SortField.CREATED_AT,
        sort_order: SortOrder = SortOrder.DESC,
        page: int = 1,
        per_page: int = 20,
    ) -> dict[str, Any]:
        """관리자 이슈 목록 — Admin listing; public and private issues alike."""
        return await self._list(db, filters, viewer, sort_by, sort_order, page, per_page)

    async def list_reported_by(
        self,
        db: AsyncSession,
        user: User,
        status: IssueStatus | None = None,
        page: int = 1,
        per_page: int = 10,
    ) -> dict[str, Any]:
        filters = IssueFilter(reporter_id=user.id, status=status.value if status else None)
        return await self._list(db, filters, user, SortField.CREATED_AT, SortOrder.DESC, page, per_page)

    async def list_voted_by(
        self,
        db: AsyncSession,
        user: User,
        page: int = 1,
        per_page: int = 10,
    ) -> dict[str, Any]:
        """투표한 이슈 — Issues the user voted on, most recently active first."""
        filters = IssueFilter(voted_by=user.id)
        return await self._list(db, filters, user, SortField.LAST_ACTIVITY, SortOrder.DESC, page, per_page)

    # --- 상세 (Detail) ---

    async def get_visible(self, db: AsyncSession, issue_id: UUID, viewer: User | None) -> Issue:
        """조회 권한 확인 후 이슈 반환.

        Load an issue the viewer may see. A private issue is reported as
        missing to viewers who may not see it, so its existence is not leaked.
        """
        issue = await issue_repository.get_detail(db, issue_id)
        if issue is None or not permission_service.can(viewer, IssueAction.VIEW, issue):
            raise NotFoundError("Issue not found")
        return issue

    async def view_issue(self, db: AsyncSession, issue_id: UUID, viewer: User | None) -> dict[str, Any]:
        """상세 조회 + 조회수 증가 — Detail view; every successful view counts once."""
        issue = await self.get_visible(db, issue_id, viewer)
        await issue_repository.increment_view_count(db, issue)
        return self.build_response(issue, viewer, include_comments=True)

    # --- 등록/수정/삭제 (Create / update / delete) ---

    async def create_issue(self, db: AsyncSession, data: IssueCreate, reporter: User) -> Issue:
        location = data.location
        issue = await issue_repository.create(
            db,
            {
                "title": data.title,
                "description": data.description,
                "category": data.category.value,
                "priority": data.priority.value,
                "reporter_id": reporter.id,
                "address": location.address,
                "latitude": location.coordinates.lat,
                "longitude": location.coordinates.lng,
                "city": location.city,
                "state": location.state,
                "zip_code": location.zip_code,
                "images": [img.model_dump() for img in data.images],
                "tags": [IssueTag(tag=t, position=i) for i, t in enumerate(data.tags)],
                "is_anonymous": data.is_anonymous,
                "is_public": data.is_public,
            },
        )
        logger.info("issue_created", issue_id=str(issue.id), reporter_id=str(reporter.id), category=issue.category)
        return await issue_repository.get_detail(db, issue.id)

    async def update_issue(self, db: AsyncSession, issue_id: UUID, data: IssueUpdate, actor: User) -> Issue:
        issue = await issue_repository.get_detail(db, issue_id)
        if issue is None:
            raise NotFoundError("Issue not found")
        permission_service.ensure(actor, IssueAction.UPDATE, issue)

        update_data = data.model_dump(exclude_unset=True)
        tags = update_data.pop("tags", None)
        for field, value in update_data.items():
            if value is None:
                continue
            setattr(issue, field, value.value if field == "priority" else value)
        if tags is not None:
            _sync_tags(issue, tags)

        issue.last_activity = _now()
        await db.flush()
        return await issue_repository.get_detail(db, issue_id)

    async def delete_issue(self, db: AsyncSession, issue_id: UUID, actor: User) -> None:
        issue = await issue_repository.get_detail(db, issue_id)
        if issue is None:
            raise NotFoundError("Issue not found")
        permission_service.ensure(actor, IssueAction.DELETE, issue)

        await db.delete(issue)
        await db.flush()
        logger.info("issue_deleted", issue_id=str(issue_id), actor_id=str(actor.id))

    # --- 댓글 (Comments) ---

    async def add_comment(self, db: AsyncSession, issue_id: UUID, data: CommentCreate, author: User) -> IssueComment:
        """댓글 추가 — 공식 댓글은 운영진만 (Only staff may post official comments)."""
        issue = await self.get_visible(db, issue_id, author)
        if data.is_official:
            permission_service.ensure(author, IssueAction.COMMENT_OFFICIAL, issue)

        now = _now()
        comment = IssueComment(
            issue_id=issue.id,
            author=author,
            content=data.content,
            is_official=data.is_official,
            created_at=now,
        )
        db.add(comment)
        issue.last_activity = now
        await db.flush()
        return comment

    # --- 관리자 처리 (Admin triage) ---

    async def update_status(self, db: AsyncSession, issue_id: UUID, data: IssueStatusUpdate, actor: User) -> Issue:
        """상태 변경 — 배정, 해결 메모, 예상 해결일을 함께 반영합니다.

        Change the status, and optionally the assignee, resolution notes and
        estimated resolution date. The actual resolution date follows
        ``next_resolution_date``.
        """
        issue = await issue_repository.get_detail(db, issue_id)
        if issue is None:
            raise NotFoundError("Issue not found")
        permission_service.ensure(actor, IssueAction.TRIAGE, issue)

        fields = data.model_fields_set
        if "assigned_to" in fields:
            if data.assigned_to is not None and await user_repository.get_by_id(db, data.assigned_to) is None:
                raise NotFoundError("Assigned user not found")
            issue.assigned_to_id = data.assigned_to

        now = _now()
        old_status = IssueStatus(issue.status)
        issue.actual_resolution_date = next_resolution_date(
            old_status, data.status, issue.actual_resolution_date, now
        )
        issue.status = data.status.value
        if data.resolution_notes is not None:
            issue.resolution_notes = data.resolution_notes
        if data.estimated_resolution_date is not None:
            issue.estimated_resolution_date = data.estimated_resolution_date

        issue.last_activity = now
        await db.flush()
        logger.info(
            "issue_status_changed",
            issue_id=str(issue_id),
            actor_id=str(actor.id),
            old_status=old_status.value,
            new_status=data.status.value,
        )
        return await issue_repository.get_detail(db, issue_id)

    async def update_priority(self, db: AsyncSession, issue_id: UUID, data: IssuePriorityUpdate, actor: User) -> Issue:
        issue = await issue_repository.get_detail(db, issue_id)
        if issue is None:
            raise NotFoundError("Issue not found")
        permission_service.ensure(actor, IssueAction.TRIAGE, issue)

        issue.priority = data.priority.value
        issue.last_activity = _now()
        await db.flush()
        return await issue_repository.get_detail(db, issue_id)


issue_service: IssueService = IssueService()
