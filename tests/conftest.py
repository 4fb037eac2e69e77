"""테스트 인프라 — 임시 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — Temporary SQLite DB, session, and httpx client fixtures.
Each test gets its own database file under ``tmp_path`` with the schema
created from the ORM metadata, so tests never share rows.
"""

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.database import Base, get_db
from app.main import app
from app.models import *  # noqa: F401,F403 — register all models with metadata
from app.models.issue import Issue, IssueComment, IssueTag, IssueVote
from app.models.user import User
from app.utils.jwt import issue_access_token


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 테스트마다 새 SQLite 파일에 스키마를 생성합니다."""
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
async def make_user(db: AsyncSession, name: str, email: str, role: str = "citizen", **fields: Any) -> User:
    user = User(name=name, email=email, role=role, **fields)
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


async def make_issue(db: AsyncSession, reporter: User, **fields: Any) -> Issue:
    """테스트 이슈를 생성합니다. 지정하지 않은 필드는 기본값 사용."""
    tags: list[str] = fields.pop("tags", [])
    data: dict[str, Any] = {
        "title": "Pothole on Main Street",
        "description": "A deep pothole near the bus stop damages cars.",
        "category": "Roads & Transportation",
        "address": "100 Main St",
        "latitude": 40.7128,
        "longitude": -74.0060,
        "city": "New York",
    }
    data.update(fields)
    issue = Issue(reporter_id=reporter.id, **data)
    issue.tags = [IssueTag(tag=t, position=i) for i, t in enumerate(tags)]
    db.add(issue)
    await db.flush()
    await db.commit()
    return issue


async def add_vote(db: AsyncSession, issue: Issue, user: User, vote_type: str = "upvote") -> IssueVote:
    vote = IssueVote(issue_id=issue.id, user_id=user.id, vote_type=vote_type)
    db.add(vote)
    await db.commit()
    return vote


async def add_comment(db: AsyncSession, issue: Issue, author: User, content: str = "Seen it too") -> IssueComment:
    comment = IssueComment(issue_id=issue.id, author_id=author.id, content=content)
    db.add(comment)
    await db.commit()
    return comment


def days_ago(days: float) -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=days)


@pytest_asyncio.fixture
async def citizen(db: AsyncSession) -> User:
    """시민 사용자를 생성합니다."""
    return await make_user(db, "Alice Citizen", "alice@example.com")


@pytest_asyncio.fixture
async def other_citizen(db: AsyncSession) -> User:
    """다른 시민 사용자를 생성합니다."""
    return await make_user(db, "Bob Neighbor", "bob@example.com")


@pytest_asyncio.fixture
async def moderator(db: AsyncSession) -> User:
    """모더레이터 사용자를 생성합니다."""
    return await make_user(db, "Maya Moderator", "maya@example.com", role="moderator")


@pytest_asyncio.fixture
async def admin_user(db: AsyncSession) -> User:
    """관리자 사용자를 생성합니다."""
    return await make_user(db, "Adam Admin", "admin@example.com", role="admin")


@pytest_asyncio.fixture
async def issue(db: AsyncSession, citizen: User) -> Issue:
    """시민이 보고한 공개 이슈를 생성합니다."""
    return await make_issue(db, citizen, tags=["road", "safety"])


def make_token(user: User) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return issue_access_token(user.id, user.role)


@pytest.fixture
def citizen_token(citizen: User) -> str:
    return make_token(citizen)


@pytest.fixture
def other_token(other_citizen: User) -> str:
    return make_token(other_citizen)


@pytest.fixture
def moderator_token(moderator: User) -> str:
    return make_token(moderator)


@pytest.fixture
def admin_token(admin_user: User) -> str:
    return make_token(admin_user)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
