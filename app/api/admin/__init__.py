"""관리자 API 라우터 패키지 — 모든 관리자 엔드포인트 통합.

Admin API Router package — Aggregates all admin-facing endpoints
into a single router for inclusion in the FastAPI application.
Every endpoint requires the admin role.

Included routers:
    - dashboard: 대시보드 집계 (Dashboard aggregation)
    - issues: 전체 이슈 조회 및 상태/우선순위 처리 (Issue triage)
    - users: 사용자 관리 (User management)
"""

from fastapi import APIRouter

from app.api.admin.dashboard import router as dashboard_router
from app.api.admin.issues import router as issues_router
from app.api.admin.users import router as users_router

admin_router: APIRouter = APIRouter()

# 대시보드: /dashboard (Dashboard aggregation APIs)
admin_router.include_router(dashboard_router, prefix="/dashboard", tags=["Admin Dashboard"])
# 이슈 처리: /issues 하위 (Issue listing and triage)
admin_router.include_router(issues_router, prefix="/issues", tags=["Admin Issues"])
# 사용자 관리: /users 하위 (User management)
admin_router.include_router(users_router, prefix="/users", tags=["Admin Users"])
