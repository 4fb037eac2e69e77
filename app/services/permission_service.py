"""권한 서비스 — (행위자, 행위, 리소스) 기반 단일 권한 판정.

Permission Service — The single capability check for issue operations.
Every route asks ``permission_service`` instead of comparing roles and
owners inline, so the rules live in one table.

Rules:
    view             공개 이슈는 누구나, 비공개는 보고자 + 운영진
                     (public: anyone; private: reporter and staff)
    update           보고자 + 관리자 + 모더레이터 (reporter, admin, moderator)
    delete           보고자 + 관리자 (reporter, admin)
    comment_official 관리자 + 모더레이터 (admin, moderator)
    triage           관리자 — 상태/우선순위/배정 (admin: status, priority, assignment)
    see_reporter     익명 이슈의 보고자 열람: 보고자 + 운영진
                     (reveal an anonymous reporter: reporter and staff)
"""

from enum import Enum

from app.models.enums import UserRole
from app.models.issue import Issue
from app.models.user import User
from app.utils.exceptions import ForbiddenError


class IssueAction(str, Enum):
    VIEW = "view"
    UPDATE = "update"
    DELETE = "delete"
    COMMENT_OFFICIAL = "comment_official"
    TRIAGE = "triage"
    SEE_REPORTER = "see_reporter"


_DENIED_MESSAGES: dict[IssueAction, str] = {
    IssueAction.VIEW: "Not authorized to view this issue",
    IssueAction.UPDATE: "Not authorized to update this issue",
    IssueAction.DELETE: "Not authorized to delete this issue",
    IssueAction.COMMENT_OFFICIAL: "Only admins and moderators can add official comments",
    IssueAction.TRIAGE: "Only admins can triage issues",
    IssueAction.SEE_REPORTER: "Not authorized to see the reporter of this issue",
}


class PermissionService:

    def can(self, actor: User | None, action: IssueAction, issue: Issue | None = None) -> bool:
        """행위 허용 여부 — Whether ``actor`` (None = anonymous) may perform ``action`` on ``issue``."""
        role: UserRole | None = actor.role_enum if actor is not None else None
        is_owner = actor is not None and issue is not None and issue.reporter_id == actor.id
        is_staff = role is not None and role.is_staff

        if action == IssueAction.VIEW:
            return issue is None or issue.is_public or is_owner or is_staff
        if action == IssueAction.UPDATE:
            return is_owner or is_staff
        if action == IssueAction.DELETE:
            return is_owner or role == UserRole.ADMIN
        if action == IssueAction.COMMENT_OFFICIAL:
            return is_staff
        if action == IssueAction.TRIAGE:
            return role == UserRole.ADMIN
        if action == IssueAction.SEE_REPORTER:
            return issue is None or not issue.is_anonymous or is_owner or is_staff
        return False

    def ensure(self, actor: User | None, action: IssueAction, issue: Issue | None = None) -> None:
        """권한 없으면 403 — Raise ForbiddenError unless ``can`` allows the action."""
        if not self.can(actor, action, issue):
            raise ForbiddenError(_DENIED_MESSAGES[action])


permission_service: PermissionService = PermissionService()
