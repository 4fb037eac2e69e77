"""이슈 라우터 — 시민용 이슈 등록/조회/투표/댓글 API.

Issue Router — Public listing and detail, submission, edits, deletion,
votes, comments and the public stats overview.

Endpoints:
    GET    /issues                  공개 목록 (Public listing, optional auth)
    GET    /issues/stats/overview   통계 개요 (Public stats overview)
    GET    /issues/{id}             상세 조회 + 조회수 증가 (Detail, counts a view)
    POST   /issues                  등록 (Submit, auth)
    PUT    /issues/{id}             수정 (Edit: reporter, admin, moderator)
    DELETE /issues/{id}             삭제 (Delete: reporter, admin)
    POST   /issues/{id}/vote        투표 토글 (Toggle a vote, auth)
    POST   /issues/{id}/comments    댓글 추가 (Add a comment, auth)
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_optional_user
from app.config import settings
from app.database import get_db
from app.models.enums import IssueCategory, IssuePriority, IssueStatus, SortField, SortOrder
from app.models.user import User
from app.repositories.issue_repository import IssueFilter
from app.schemas.common import MessageResponse, PaginatedResponse
from app.schemas.issue import CommentCreate, IssueCreate, IssueUpdate, VoteRequest
from app.services.dashboard_service import dashboard_service
from app.services.issue_service import issue_service
from app.services.vote_service import vote_service
from app.utils.exceptions import BadRequestError
from app.utils.geo import BoundingBox, bounding_box

router: APIRouter = APIRouter()


def location_box(lat: float | None, lng: float | None, radius: float) -> BoundingBox | None:
    """위치 필터 — lat/lng는 함께 지정해야 함 (lat and lng must come together)."""
    if lat is None and lng is None:
        return None
    if lat is None or lng is None:
        raise BadRequestError("lat and lng must be provided together", field="lat" if lat is None else "lng")
    return bounding_box(lat, lng, radius)


@router.get("", response_model=PaginatedResponse)
async def list_issues(
    db: Annotated[AsyncSession, Depends(get_db)],
    viewer: Annotated[User | None, Depends(get_optional_user)],
    page: int = Query(1, ge=1),
    limit: int = Query(settings.ISSUES_PAGE_SIZE, ge=1, le=settings.ISSUES_MAX_PAGE_SIZE),
    category: IssueCategory | None = Query(None),
    status: IssueStatus | None = Query(None),
    priority: IssuePriority | None = Query(None),
    search: str | None = Query(None, max_length=100),
    sort_by: SortField = Query(SortField.CREATED_AT, alias="sortBy"),
    sort_order: SortOrder = Query(SortOrder.DESC, alias="sortOrder"),
    lat: float | None = Query(None, ge=-90, le=90),
    lng: float | None = Query(None, ge=-180, le=180),
    radius: float = Query(10, gt=0),
) -> dict:
    """공개 이슈 목록 조회. 필터, 정렬, 위치 반경 검색 지원."""
    filters = IssueFilter(
        category=category.value if category else None,
        status=status.value if status else None,
        priority=priority.value if priority else None,
        search=search.strip() if search else None,
        bbox=location_box(lat, lng, radius),
    )
    return await issue_service.list_public(db, filters, viewer, sort_by, sort_order, page, limit)


@router.get("/stats/overview")
async def get_stats_overview(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """이슈 통계 개요. DB 장애 시 0으로 채운 응답 반환."""
    return await dashboard_service.get_overview(db)


@router.get("/{issue_id}")
async def get_issue(
    issue_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    viewer: Annotated[User | None, Depends(get_optional_user)],
) -> dict:
    """이슈 상세 조회. 조회수 1 증가."""
    data = await issue_service.view_issue(db, issue_id, viewer)
    await db.commit()
    return data


@router.post("", status_code=201)
async def create_issue(
    data: IssueCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """이슈 등록."""
    issue = await issue_service.create_issue(db, data, current_user)
    await db.commit()
    return {
        "message": "Issue created successfully",
        "issue": issue_service.build_response(issue, current_user, include_comments=True),
    }


@router.put("/{issue_id}")
async def update_issue(
    issue_id: UUID,
    data: IssueUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """이슈 수정. 보고자, 관리자, 모더레이터 가능."""
    issue = await issue_service.update_issue(db, issue_id, data, current_user)
    await db.commit()
    return {
        "message": "Issue updated successfully",
        "issue": issue_service.build_response(issue, current_user, include_comments=True),
    }


@router.delete("/{issue_id}", response_model=MessageResponse)
async def delete_issue(
    issue_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """이슈 삭제. 보고자, 관리자 가능."""
    await issue_service.delete_issue(db, issue_id, current_user)
    await db.commit()
    return {"message": "Issue deleted successfully"}


@router.post("/{issue_id}/vote")
async def vote_issue(
    issue_id: UUID,
    data: VoteRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """투표 토글. 같은 종류 재투표 시 취소, 반대 종류면 변경."""
    result = await vote_service.apply_vote(db, issue_id, current_user, data.vote_type)
    await db.commit()
    return result.to_response()


@router.post("/{issue_id}/comments")
async def add_comment(
    issue_id: UUID,
    data: CommentCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """댓글 추가. 공식 댓글은 관리자/모더레이터만."""
    comment = await issue_service.add_comment(db, issue_id, data, current_user)
    await db.commit()
    return {"message": "Comment added successfully", "comment": issue_service.comment_response(comment)}
