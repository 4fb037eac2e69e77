"""도메인 열거형 정의.

Closed enumerations for the civic issue domain.
Values are the exact strings stored in the database and exchanged on the wire.
"""

from enum import Enum


class IssueCategory(str, Enum):
    ROADS_TRANSPORTATION = "Roads & Transportation"
    PUBLIC_SAFETY = "Public Safety"
    ENVIRONMENT = "Environment"
    UTILITIES = "Utilities"
    PARKS_RECREATION = "Parks & Recreation"
    HOUSING = "Housing"
    EDUCATION = "Education"
    HEALTHCARE = "Healthcare"
    OTHER = "Other"


class IssuePriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"

    @property
    def rank(self) -> int:
        """심각도 순위 — Severity rank used for sorting (Low=0 … Critical=3)."""
        return list(IssuePriority).index(self)


class IssueStatus(str, Enum):
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    UNDER_REVIEW = "Under Review"
    RESOLVED = "Resolved"
    CLOSED = "Closed"
    REJECTED = "Rejected"

    @property
    def is_resolution(self) -> bool:
        """해결 종결 상태 여부 — Whether entering this status records a resolution date."""
        return self in (IssueStatus.RESOLVED, IssueStatus.CLOSED)


class UserRole(str, Enum):
    CITIZEN = "citizen"
    MODERATOR = "moderator"
    ADMIN = "admin"

    @property
    def is_staff(self) -> bool:
        """운영진 여부 — Admins and moderators may post official comments and edit any issue."""
        return self in (UserRole.ADMIN, UserRole.MODERATOR)


class VoteType(str, Enum):
    UPVOTE = "upvote"
    DOWNVOTE = "downvote"


class SortField(str, Enum):
    """목록 정렬 기준 — Sort keys accepted by issue listings."""

    CREATED_AT = "createdAt"
    VOTE_COUNT = "voteCount"
    PRIORITY = "priority"
    LAST_ACTIVITY = "lastActivity"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"
