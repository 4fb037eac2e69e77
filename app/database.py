"""데이터베이스 엔진 및 세션 설정 모듈.

Async SQLAlchemy engine, session factory and declarative base. Production
runs on PostgreSQL through asyncpg; tests point ``get_db`` at a SQLite
(aiosqlite) session instead.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from app.config import settings


def _engine_options(url: str) -> dict[str, Any]:
    """드라이버별 엔진 옵션 — Pool sizing only for the asyncpg driver."""
    if not url.startswith("postgresql+asyncpg"):
        return {}
    return {
        "pool_size": 5,
        "max_overflow": 10,
        # PgBouncer 트랜잭션 모드 — prepared statement 캐시 비활성화
        "connect_args": {"statement_cache_size": 0},
    }


engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
    **_engine_options(settings.DATABASE_URL),
)

# expire_on_commit=False: 커밋 후 응답 직렬화 시 재조회 없이 속성 접근
# (Responses are serialized after commit without reloading attributes)
async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """ORM 모델 공통 베이스 — Declarative base for users, issues and their children."""


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """요청 단위 세션 의존성.

    One session per request. Routers commit explicitly; anything left
    uncommitted when the request ends is rolled back on close.
    """
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()
