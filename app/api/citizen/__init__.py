"""시민 API 라우터 패키지 — 공개/시민용 엔드포인트 통합.

Citizen API Router package — Aggregates the public and citizen-facing
endpoints into a single router for inclusion in the FastAPI application.

Included routers:
    - issues: 이슈 목록/상세/등록/수정/삭제/투표/댓글/통계 (Issues)
    - users: 내 프로필, 내 이슈, 환경설정, 계정 삭제 (My account)
"""

from fastapi import APIRouter

from app.api.citizen.issues import router as issues_router
from app.api.citizen.users import router as users_router

citizen_router: APIRouter = APIRouter()

citizen_router.include_router(issues_router, prefix="/issues", tags=["Issues"])
citizen_router.include_router(users_router, prefix="/users", tags=["Users"])
