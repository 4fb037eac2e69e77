"""FastAPI 애플리케이션 엔트리포인트 — 미들웨어 및 라우터 등록.

FastAPI application entry point — Logging, middleware, exception handlers
and router registration.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.middleware.axiom_logging import AxiomLoggingMiddleware
from app.utils.exceptions import register_exception_handlers
from app.utils.logging import configure_logging

configure_logging(settings.LOG_LEVEL)

app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# 예외 핸들러 — 400 검증 오류 / 500 내부 오류 응답 형태
# (400 validation and 500 internal error response shapes)
register_exception_handlers(app)

# API 로깅 미들웨어 — Request/response logging (Axiom, or structlog when unconfigured)
# CORS보다 먼저 등록하여 모든 요청을 캡처 (Registered before CORS to capture all requests)
app.add_middleware(AxiomLoggingMiddleware)

# CORS 미들웨어 — Cross-Origin Resource Sharing middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# 라우터 등록 — Router registration
# ---------------------------------------------------------------------------
# citizen_router: 이슈, 내 정보 (Issues, my account)
# admin_router: 대시보드, 이슈 처리, 사용자 관리 (Dashboard, triage, user management)
from app.api.admin import admin_router  # noqa: E402
from app.api.citizen import citizen_router  # noqa: E402

app.include_router(citizen_router, prefix="/api")
app.include_router(admin_router, prefix="/api/admin")
