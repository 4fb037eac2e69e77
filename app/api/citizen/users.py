"""내 정보 라우터 — 프로필, 내 이슈, 투표한 이슈, 환경설정, 계정 삭제.

My Account Router — Profile with stats, my reported issues, issues I voted
on, notification preferences and account deletion.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.config import settings
from app.database import get_db
from app.models.enums import IssueStatus
from app.models.user import User
from app.schemas.common import MessageResponse, PaginatedResponse
from app.schemas.user import PreferencesUpdate
from app.services.issue_service import issue_service
from app.services.user_service import user_service

router: APIRouter = APIRouter()


@router.get("/profile")
async def get_profile(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """내 프로필 + 이슈 통계 조회."""
    return await user_service.get_profile(db, current_user)


@router.get("/issues", response_model=PaginatedResponse)
async def list_my_issues(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    page: int = Query(1, ge=1),
    limit: int = Query(settings.ISSUES_PAGE_SIZE, ge=1, le=settings.ISSUES_MAX_PAGE_SIZE),
    status: IssueStatus | None = Query(None),
) -> dict:
    """내가 보고한 이슈 목록 (최신순)."""
    return await issue_service.list_reported_by(db, current_user, status, page, limit)


@router.get("/voted-issues", response_model=PaginatedResponse)
async def list_voted_issues(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    page: int = Query(1, ge=1),
    limit: int = Query(settings.ISSUES_PAGE_SIZE, ge=1, le=settings.ISSUES_MAX_PAGE_SIZE),
) -> dict:
    """내가 투표한 이슈 목록 (최근 활동순)."""
    return await issue_service.list_voted_by(db, current_user, page, limit)


@router.put("/preferences")
async def update_preferences(
    data: PreferencesUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """알림 설정 수정. 알림 플래그는 병합, 분류 구독은 교체."""
    user = await user_service.update_preferences(db, current_user, data)
    await db.commit()
    return {"message": "Preferences updated successfully", "preferences": user.preferences}


@router.delete("/account", response_model=MessageResponse)
async def delete_account(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """내 계정 삭제. 내가 보고한 이슈도 함께 삭제."""
    await user_service.delete_account(db, current_user)
    await db.commit()
    return {"message": "Account deleted successfully"}
