"""관리자 이슈 라우터 — 전체 이슈 조회 및 상태/우선순위 처리 API.

Admin Issue Router — Listing of every issue (public or not) and triage:
status with assignment and resolution details, and priority.

Permission: admin
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.config import settings
from app.database import get_db
from app.models.enums import IssueCategory, IssuePriority, IssueStatus, SortField, SortOrder
from app.models.user import User
from app.repositories.issue_repository import IssueFilter
from app.schemas.common import PaginatedResponse
from app.schemas.issue import IssuePriorityUpdate, IssueStatusUpdate
from app.services.issue_service import issue_service

router: APIRouter = APIRouter()


@router.get("", response_model=PaginatedResponse)
async def list_all_issues(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    page: int = Query(1, ge=1),
    limit: int = Query(settings.ADMIN_PAGE_SIZE, ge=1, le=settings.ADMIN_MAX_PAGE_SIZE),
    category: IssueCategory | None = Query(None),
    status: IssueStatus | None = Query(None),
    priority: IssuePriority | None = Query(None),
    search: str | None = Query(None, max_length=100),
    sort_by: SortField = Query(SortField.CREATED_AT, alias="sortBy"),
    sort_order: SortOrder = Query(SortOrder.DESC, alias="sortOrder"),
) -> dict:
    """전체 이슈 목록 조회 (비공개 포함)."""
    filters = IssueFilter(
        category=category.value if category else None,
        status=status.value if status else None,
        priority=priority.value if priority else None,
        search=search.strip() if search else None,
    )
    return await issue_service.list_all(db, filters, current_user, sort_by, sort_order, page, limit)


@router.put("/{issue_id}/status")
async def update_issue_status(
    issue_id: UUID,
    data: IssueStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> dict:
    """이슈 상태 변경. 담당자 배정, 해결 메모, 예상 해결일 함께 변경 가능."""
    issue = await issue_service.update_status(db, issue_id, data, current_user)
    await db.commit()
    return {
        "message": "Issue status updated successfully",
        "issue": issue_service.build_response(issue, current_user),
    }


@router.put("/{issue_id}/priority")
async def update_issue_priority(
    issue_id: UUID,
    data: IssuePriorityUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> dict:
    """이슈 우선순위 변경."""
    issue = await issue_service.update_priority(db, issue_id, data, current_user)
    await db.commit()
    return {
        "message": "Issue priority updated successfully",
        "issue": issue_service.build_response(issue, current_user),
    }
