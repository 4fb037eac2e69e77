"""관리자 사용자 라우터 — 사용자 목록, 역할 변경, 삭제 엔드포인트.

Admin User Router — User listing with role filter and name/email search,
role changes and account deletion.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.config import settings
from app.database import get_db
from app.models.enums import UserRole
from app.models.user import User
from app.schemas.common import MessageResponse, PaginatedResponse
from app.schemas.user import RoleUpdate
from app.services.user_service import user_service

router: APIRouter = APIRouter()


@router.get("", response_model=PaginatedResponse)
async def list_users(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    page: int = Query(1, ge=1),
    limit: int = Query(settings.ADMIN_PAGE_SIZE, ge=1, le=settings.ADMIN_MAX_PAGE_SIZE),
    role: Annotated[UserRole | None, Query(description="역할 필터")] = None,
    search: Annotated[str | None, Query(max_length=100, description="이름/이메일 검색")] = None,
) -> dict:
    """사용자 목록 조회 (최신 가입순).

    List users, newest first, filtered by role and a name/email substring.
    """
    return await user_service.list_users(db, role, search.strip() if search else None, page, limit)


@router.put("/{user_id}/role")
async def update_user_role(
    user_id: UUID,
    data: RoleUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> dict:
    """사용자 역할을 변경합니다."""
    user = await user_service.update_role(db, user_id, data, current_user)
    await db.commit()
    return {"message": "User role updated successfully", "user": user_service.build_response(user)}


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> dict:
    """사용자 계정과 그 사용자가 보고한 이슈를 삭제합니다."""
    await user_service.delete_user(db, user_id, current_user)
    await db.commit()
    return {"message": "User account deleted successfully"}
