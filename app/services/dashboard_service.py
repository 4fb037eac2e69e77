"""대시보드 서비스 — 이슈 통계 집계 비즈니스 로직.

Dashboard Service — Aggregation for the public stats overview, the admin
dashboard and per-user profile stats. Counts are computed in SQL; the
average resolution time is computed here from (created, resolved) pairs so
the result does not depend on the database's interval arithmetic.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Iterable
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.enums import IssueStatus
from app.models.issue import Issue
from app.models.user import User
from app.repositories.issue_repository import issue_repository
from app.repositories.user_repository import user_repository
from app.utils.logging import get_logger

logger = get_logger(__name__)

_SECONDS_PER_DAY: float = 86400.0


def group_counts(rows: Iterable[tuple[str, int]]) -> list[dict[str, Any]]:
    """그룹별 집계 정렬 — ``[{label, count}]`` by count desc, then label asc."""
    ordered = sorted(rows, key=lambda row: (-row[1], row[0]))
    return [{"label": label, "count": count} for label, count in ordered]


def average_resolution_days(spans: Iterable[tuple[datetime, datetime]]) -> float:
    """평균 해결 기간(일).

    Mean of ``resolved - created`` in days, rounded to 2 decimals.
    Returns 0 when there are no resolved issues.
    """
    durations = [(resolved - created).total_seconds() / _SECONDS_PER_DAY for created, resolved in spans]
    if not durations:
        return 0
    return round(sum(durations) / len(durations), 2)


def empty_overview() -> dict[str, Any]:
    return {
        "overview": {
            "totalIssues": 0,
            "openIssues": 0,
            "inProgressIssues": 0,
            "resolvedIssues": 0,
            "avgResolutionTime": 0,
        },
        "categoryStats": [],
    }


class DashboardService:
    """대시보드 서비스.

    Aggregation service for the stats overview, the admin dashboard and
    profile stats.
    """

    async def get_overview(self, db: AsyncSession) -> dict[str, Any]:
        """공개 통계 개요.

        Public stats overview. When the database is unreachable the
        overview degrades to zeros and empty lists instead of failing.
        """
        try:
            return await self._overview(db)
        except (SQLAlchemyError, OSError) as exc:
            logger.warning("stats_overview_degraded", error=str(exc))
            return empty_overview()

    async def _overview(self, db: AsyncSession) -> dict[str, Any]:
        status_counts = dict(await issue_repository.count_grouped(db, Issue.status))
        category_rows = await issue_repository.count_grouped(db, Issue.category)
        spans = await issue_repository.resolution_spans(db)
        return {
            "overview": {
                "totalIssues": sum(status_counts.values()),
                "openIssues": status_counts.get(IssueStatus.OPEN.value, 0),
                "inProgressIssues": status_counts.get(IssueStatus.IN_PROGRESS.value, 0),
                "resolvedIssues": status_counts.get(IssueStatus.RESOLVED.value, 0),
                "avgResolutionTime": average_resolution_days(spans),
            },
            "categoryStats": group_counts(category_rows),
        }

    async def get_admin_dashboard(self, db: AsyncSession) -> dict[str, Any]:
        """관리자 대시보드 집계.

        Admin dashboard: totals, issues created in the last
        ``RECENT_ISSUE_DAYS`` days, grouped counts and the newest users.
        """
        since = datetime.now(timezone.utc) - timedelta(days=settings.RECENT_ISSUE_DAYS)
        total_users = await user_repository.count(db)
        total_issues = await issue_repository.count(db)
        recent_issues = await issue_repository.count_created_since(db, since)
        spans = await issue_repository.resolution_spans(db)
        newest: list[User] = list(await user_repository.get_newest(db, settings.RECENT_USERS_LIMIT))

        return {
            "overview": {
                "totalUsers": total_users,
                "totalIssues": total_issues,
                "recentIssues": recent_issues,
                "avgResolutionTime": average_resolution_days(spans),
            },
            "categoryStats": group_counts(await issue_repository.count_grouped(db, Issue.category)),
            "statusStats": group_counts(await issue_repository.count_grouped(db, Issue.status)),
            "priorityStats": group_counts(await issue_repository.count_grouped(db, Issue.priority)),
            "recentUsers": [
                {"id": str(u.id), "name": u.name, "email": u.email, "createdAt": u.created_at}
                for u in newest
            ],
        }

    async def get_user_stats(self, db: AsyncSession, user_id: UUID) -> dict[str, int]:
        """사용자 프로필 통계 — Counts for the user's own issues and votes received on them."""
        mine = Issue.reporter_id == user_id
        return {
            "totalIssues": await issue_repository.count(db, mine),
            "openIssues": await issue_repository.count(db, mine, Issue.status == IssueStatus.OPEN.value),
            "resolvedIssues": await issue_repository.count(db, mine, Issue.status == IssueStatus.RESOLVED.value),
            "totalVotes": await issue_repository.votes_received(db, user_id),
        }


dashboard_service: DashboardService = DashboardService()
