"""이슈 레포지토리 — 이슈 검색/정렬/페이지네이션 및 투표·집계 쿼리.

Issue repository — Builds the filtered, sorted and paginated issue queries,
and owns the vote, comment and aggregation queries on the issue tables.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import Select, case, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.enums import IssuePriority, SortField, SortOrder, VoteType
from app.models.issue import Issue, IssueComment, IssueTag, IssueVote
from app.repositories.base import BaseRepository
from app.utils.geo import BoundingBox

# 목록용 즉시 로딩 — Eager loads needed to render a list item (async forbids lazy loads)
_LIST_LOAD_OPTIONS = (
    selectinload(Issue.reporter),
    selectinload(Issue.assigned_to),
    selectinload(Issue.votes),
    selectinload(Issue.tags),
    selectinload(Issue.comments),
)

# 상세용 즉시 로딩 — Detail view also renders comment authors
_DETAIL_LOAD_OPTIONS = (
    selectinload(Issue.reporter),
    selectinload(Issue.assigned_to),
    selectinload(Issue.votes),
    selectinload(Issue.tags),
    selectinload(Issue.comments).selectinload(IssueComment.author),
)


@dataclass
class IssueFilter:
    """이슈 목록 조회 조건.

    Criteria for an issue listing. Every field is optional; unset fields
    do not constrain the result.

    Attributes:
        category / status / priority: 정확히 일치 (Exact match on enum fields)
        search: 제목·설명·태그 중 하나라도 포함 (Case-insensitive substring on title OR description OR any tag)
        bbox: 위치 경계 상자 (Bounding box on the coordinates)
        public_only: 공개 이슈만 (Only issues flagged public)
        reporter_id: 보고자 (Only issues reported by this user)
        voted_by: 투표자 (Only issues this user has a vote on)
    """

    category: str | None = None
    status: str | None = None
    priority: str | None = None
    search: str | None = None
    bbox: BoundingBox | None = None
    public_only: bool = False
    reporter_id: UUID | None = None
    voted_by: UUID | None = None


def like_pattern(text: str) -> str:
    """LIKE 와일드카드 이스케이프 후 부분 일치 패턴 생성 — Escape %, _ and \\ for a substring LIKE."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def vote_score_expression() -> Any:
    """순 투표수 상관 서브쿼리 — Correlated subquery computing upvotes − downvotes per issue."""
    return (
        select(
            func.coalesce(
                func.sum(case((IssueVote.vote_type == VoteType.UPVOTE.value, 1), else_=-1)),
                0,
            )
        )
        .where(IssueVote.issue_id == Issue.id)
        .correlate(Issue)
        .scalar_subquery()
    )


def priority_rank_expression() -> Any:
    """우선순위 심각도 순위 — Severity rank so that priority sorts Low < … < Critical."""
    return case({p.value: p.rank for p in IssuePriority}, value=Issue.priority, else_=-1)


class IssueRepository(BaseRepository[Issue]):

    def __init__(self) -> None:
        super().__init__(Issue)

    # --- 조회 (Queries) ---

    def build_query(
        self,
        filters: IssueFilter,
        sort_by: SortField = SortField.CREATED_AT,
        sort_order: SortOrder = SortOrder.DESC,
    ) -> Select:
        """필터·정렬이 적용된 SELECT 쿼리를 생성합니다.

        Build the filtered and ordered SELECT for an issue listing.
        Ties on the sort key break by creation time then id, ascending,
        so page boundaries are stable.
        """
        query: Select = (
            select(Issue)
            .options(*_LIST_LOAD_OPTIONS)
            .execution_options(populate_existing=True)
        )

        if filters.public_only:
            query = query.where(Issue.is_public.is_(True))
        if filters.category:
            query = query.where(Issue.category == filters.category)
        if filters.status:
            query = query.where(Issue.status == filters.status)
        if filters.priority:
            query = query.where(Issue.priority == filters.priority)
        if filters.reporter_id is not None:
            query = query.where(Issue.reporter_id == filters.reporter_id)
        if filters.voted_by is not None:
            query = query.where(
                Issue.id.in_(select(IssueVote.issue_id).where(IssueVote.user_id == filters.voted_by))
            )
        if filters.search:
            pattern = like_pattern(filters.search)
            query = query.where(
                or_(
                    Issue.title.ilike(pattern, escape="\\"),
                    Issue.description.ilike(pattern, escape="\\"),
                    Issue.tags.any(IssueTag.tag.ilike(pattern, escape="\\")),
                )
            )
        if filters.bbox is not None:
            box = filters.bbox
            query = query.where(
                Issue.latitude.between(box.min_lat, box.max_lat),
                Issue.longitude.between(box.min_lng, box.max_lng),
            )

        sort_columns: dict[SortField, Any] = {
            SortField.CREATED_AT: Issue.created_at,
            SortField.LAST_ACTIVITY: Issue.last_activity,
            SortField.PRIORITY: priority_rank_expression(),
            SortField.VOTE_COUNT: vote_score_expression(),
        }
        key = sort_columns[sort_by]
        primary = key.asc() if sort_order == SortOrder.ASC else key.desc()
        return query.order_by(primary, Issue.created_at.asc(), Issue.id.asc())

    async def search(
        self,
        db: AsyncSession,
        filters: IssueFilter,
        sort_by: SortField = SortField.CREATED_AT,
        sort_order: SortOrder = SortOrder.DESC,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[Sequence[Issue], int]:
        query = self.build_query(filters, sort_by, sort_order)
        return await self.get_paginated(db, query, page, per_page)

    async def get_detail(self, db: AsyncSession, issue_id: UUID) -> Issue | None:
        """이슈 상세 조회 — Issue with reporter, assignee, votes, tags and comment authors loaded.

        ``populate_existing`` refreshes an instance already in the session,
        so collections reflect rows added earlier in the same transaction.
        """
        query: Select = (
            select(Issue)
            .options(*_DETAIL_LOAD_OPTIONS)
            .where(Issue.id == issue_id)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_for_update(self, db: AsyncSession, issue_id: UUID) -> Issue | None:
        """행 잠금 조회 — Load the issue row under ``SELECT … FOR UPDATE``.

        Concurrent vote toggles on the same issue are serialized on this lock.
        """
        query: Select = (
            select(Issue)
            .where(Issue.id == issue_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def increment_view_count(self, db: AsyncSession, issue: Issue) -> None:
        # 원자적 증가 — Atomic increment, no read-modify-write
        await db.execute(
            update(Issue)
            .where(Issue.id == issue.id)
            .values(view_count=Issue.view_count + 1)
            .execution_options(synchronize_session=False)
        )
        await db.refresh(issue, ["view_count"])

    # --- 투표 (Votes) ---

    async def get_vote(self, db: AsyncSession, issue_id: UUID, user_id: UUID) -> IssueVote | None:
        result = await db.execute(
            select(IssueVote).where(IssueVote.issue_id == issue_id, IssueVote.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def vote_totals(self, db: AsyncSession, issue_id: UUID) -> tuple[int, int]:
        """이슈의 (추천 수, 비추천 수) — (upvotes, downvotes) counted in SQL."""
        result = await db.execute(
            select(IssueVote.vote_type, func.count())
            .where(IssueVote.issue_id == issue_id)
            .group_by(IssueVote.vote_type)
        )
        totals = {vote_type: count for vote_type, count in result.all()}
        return totals.get(VoteType.UPVOTE.value, 0), totals.get(VoteType.DOWNVOTE.value, 0)

    # --- 집계 (Aggregation) ---

    async def count_grouped(self, db: AsyncSession, column: Any) -> list[tuple[str, int]]:
        """컬럼 값별 이슈 수 — Issue counts grouped by ``column``."""
        result = await db.execute(select(column, func.count()).group_by(column))
        return [(label, count) for label, count in result.all()]

    async def count_created_since(self, db: AsyncSession, since: datetime) -> int:
        return await self.count(db, Issue.created_at >= since)

    async def resolution_spans(self, db: AsyncSession, *criteria: Any) -> list[tuple[datetime, datetime]]:
        """해결일이 있는 이슈의 (생성일, 해결일) 목록 — (created_at, actual_resolution_date) of resolved issues."""
        query: Select = select(Issue.created_at, Issue.actual_resolution_date).where(
            Issue.actual_resolution_date.is_not(None)
        )
        for criterion in criteria:
            query = query.where(criterion)
        result = await db.execute(query)
        return [(created, resolved) for created, resolved in result.all()]

    async def votes_received(self, db: AsyncSession, reporter_id: UUID) -> int:
        """사용자 이슈에 달린 전체 투표 수 — Votes cast on every issue the user reported."""
        result = await db.execute(
            select(func.count(IssueVote.id))
            .join(Issue, Issue.id == IssueVote.issue_id)
            .where(Issue.reporter_id == reporter_id)
        )
        return result.scalar() or 0


issue_repository: IssueRepository = IssueRepository()
