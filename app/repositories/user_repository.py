"""사용자 레포지토리 — 사용자 조회 및 계정 삭제 연쇄 처리.

User Repository — User listing queries and the account-deletion cascade.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.issue import Issue, IssueComment, IssueTag, IssueVote
from app.models.user import User
from app.repositories.base import BaseRepository
from app.repositories.issue_repository import like_pattern


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the users table.
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def search(
        self,
        db: AsyncSession,
        role: str | None = None,
        search: str | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[User], int]:
        """사용자 목록 검색 — 최신 가입순.

        List users, newest first, optionally filtered by role and a
        case-insensitive substring of name or email.
        """
        query: Select = select(User)
        if role:
            query = query.where(User.role == role)
        if search:
            pattern = like_pattern(search)
            query = query.where(
                or_(User.name.ilike(pattern, escape="\\"), User.email.ilike(pattern, escape="\\"))
            )
        query = query.order_by(User.created_at.desc(), User.id.asc())
        return await self.get_paginated(db, query, page, per_page)

    async def get_newest(self, db: AsyncSession, limit: int) -> Sequence[User]:
        result = await db.execute(select(User).order_by(User.created_at.desc()).limit(limit))
        return result.scalars().all()

    async def delete_with_issues(self, db: AsyncSession, user_id: UUID) -> None:
        """사용자 계정과 보고한 이슈를 함께 삭제합니다.

        Delete a user account and everything it owns, in dependency order:

        1. 사용자가 보고한 이슈의 투표·댓글·태그 및 사용자가 다른 이슈에 남긴 투표
           (votes, comments, tags of the user's issues, and the user's votes elsewhere)
        2. 다른 이슈의 사용자 댓글은 작성자만 비움 (comments elsewhere keep their text, author cleared)
        3. 사용자에게 배정된 이슈는 미배정 처리 (issues assigned to the user become unassigned)
        4. 사용자 이슈와 사용자 계정 (the user's issues, then the account)

        Bulk statements are used instead of ORM cascades so the whole
        cascade is a fixed number of queries regardless of issue count.
        """
        owned_issue_ids = select(Issue.id).where(Issue.reporter_id == user_id)
        no_sync = {"synchronize_session": False}

        await db.execute(
            delete(IssueVote)
            .where(or_(IssueVote.user_id == user_id, IssueVote.issue_id.in_(owned_issue_ids)))
            .execution_options(**no_sync)
        )
        await db.execute(
            delete(IssueComment).where(IssueComment.issue_id.in_(owned_issue_ids)).execution_options(**no_sync)
        )
        await db.execute(
            delete(IssueTag).where(IssueTag.issue_id.in_(owned_issue_ids)).execution_options(**no_sync)
        )
        await db.execute(
            update(IssueComment)
            .where(IssueComment.author_id == user_id)
            .values(author_id=None)
            .execution_options(**no_sync)
        )
        await db.execute(
            update(Issue)
            .where(Issue.assigned_to_id == user_id)
            .values(assigned_to_id=None)
            .execution_options(**no_sync)
        )
        await db.execute(delete(Issue).where(Issue.reporter_id == user_id).execution_options(**no_sync))
        await db.execute(delete(User).where(User.id == user_id).execution_options(**no_sync))
        # 세션에 남은 삭제된 객체 정리 — Drop stale instances from the identity map
        db.expunge_all()


user_repository: UserRepository = UserRepository()
