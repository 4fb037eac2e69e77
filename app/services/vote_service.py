"""투표 서비스 — 추천/비추천 토글.

Vote Service — Upvote/downvote toggling on issues.

Toggle rules for a user voting ``requested`` on an issue:
    - 같은 종류로 이미 투표함 → 투표 취소 (same vote again → removed)
    - 반대 종류로 투표함 → 종류 변경 (opposite vote → flipped)
    - 투표 없음 → 추가 (no vote → added)

The vote row for (issue, user) is unique, and the issue row is locked
for the duration of the toggle, so concurrent votes on one issue are
serialized rather than overwriting each other.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import VoteType
from app.models.issue import IssueVote
from app.models.user import User
from app.repositories.issue_repository import issue_repository
from app.services.permission_service import IssueAction, permission_service
from app.utils.exceptions import NotFoundError
from app.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class VoteResult:
    vote_count: int
    upvoted: bool
    downvoted: bool

    def to_response(self) -> dict:
        return {
            "message": "Vote recorded successfully",
            "voteCount": self.vote_count,
            "userVote": {"upvoted": self.upvoted, "downvoted": self.downvoted},
        }


def resolve_vote(current: VoteType | None, requested: VoteType) -> VoteType | None:
    """현재 투표와 요청으로 새 투표 상태를 결정합니다.

    Decide the user's vote after requesting ``requested`` while holding
    ``current``. Returns None when the vote is toggled off.
    """
    if current == requested:
        return None
    return requested


class VoteService:

    async def apply_vote(
        self,
        db: AsyncSession,
        issue_id: UUID,
        voter: User,
        requested: VoteType,
    ) -> VoteResult:
        """투표 토글 적용 — Apply one toggle; exactly one membership change per call.

        Issues the voter may not see are reported as missing.
        """
        issue = await issue_repository.get_for_update(db, issue_id)
        if issue is None or not permission_service.can(voter, IssueAction.VIEW, issue):
            raise NotFoundError("Issue not found")
        user_id = voter.id

        existing: IssueVote | None = await issue_repository.get_vote(db, issue_id, user_id)
        current = VoteType(existing.vote_type) if existing is not None else None
        outcome = resolve_vote(current, requested)
        now = datetime.now(timezone.utc)

        if outcome is None:
            await db.delete(existing)
        elif existing is None:
            db.add(IssueVote(issue_id=issue_id, user_id=user_id, vote_type=outcome.value, voted_at=now))
        else:
            existing.vote_type = outcome.value
            existing.voted_at = now

        issue.last_activity = now
        await db.flush()

        upvotes, downvotes = await issue_repository.vote_totals(db, issue_id)
        logger.info(
            "issue_voted",
            issue_id=str(issue_id),
            user_id=str(user_id),
            requested=requested.value,
            outcome=outcome.value if outcome else None,
        )
        return VoteResult(
            vote_count=upvotes - downvotes,
            upvoted=outcome == VoteType.UPVOTE,
            downvoted=outcome == VoteType.DOWNVOTE,
        )


vote_service: VoteService = VoteService()
