"""관리자 대시보드 라우터 — 대시보드 집계 API.

Admin Dashboard Router — Totals, recent activity, grouped issue counts and
the newest users for the admin dashboard.

Permission: admin
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.models.user import User
from app.services.dashboard_service import dashboard_service

router: APIRouter = APIRouter()


@router.get("")
async def get_dashboard(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> dict:
    """관리자 대시보드 집계 조회."""
    return await dashboard_service.get_admin_dashboard(db)
