"""FastAPI 의존성 주입 모듈 — 인증 및 권한 검사.

FastAPI dependency injection module — Authentication and authorization.
Provides reusable dependencies for extracting the current user from JWT
and enforcing role-based access control on API endpoints.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <token> header)
    2. HTTPBearer가 토큰을 추출 (HTTPBearer extracts the token)
    3. verify_access_token()이 서명, 만료, 타입을 검증하고 사용자 ID 반환
       (verify_access_token checks signature, expiry and type, returns the user id)
    4. 해당 ID로 DB에서 사용자를 조회 (User is fetched from the database)
    5. 사용자 활성 상태를 확인 (User active status is verified)

Public endpoints use ``get_optional_user``: no header means an anonymous
viewer, but a header that is present must still be valid.
"""

from typing import Annotated, Awaitable, Callable

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.enums import UserRole
from app.models.user import User
from app.repositories.user_repository import user_repository
from app.utils.exceptions import ForbiddenError, UnauthorizedError
from app.utils.jwt import verify_access_token

# HTTP Bearer 토큰 추출기 — auto_error=False: 누락 시 401 응답은 직접 생성
# (Missing credentials are turned into our own 401 below)
security: HTTPBearer = HTTPBearer(auto_error=False)


async def _authenticate(db: AsyncSession, token: str) -> User:
    """토큰 검증 후 사용자 조회 — Verify ``token`` and load its active user."""
    try:
        user_id = verify_access_token(token)
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid or expired token")

    user: User | None = await user_repository.get_by_id(db, user_id)
    if user is None or not user.is_active:
        raise UnauthorizedError("User not found or inactive")
    return user


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """JWT 토큰에서 현재 인증된 사용자를 추출합니다.

    Decode JWT from the Authorization header and return the authenticated user.

    Raises:
        UnauthorizedError(401): 토큰 누락/무효/만료, 사용자 없음 또는 비활성
                                (Missing, invalid or expired token; unknown or inactive user)
    """
    if credentials is None:
        raise UnauthorizedError("Authentication required")
    return await _authenticate(db, credentials.credentials)


async def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User | None:
    """선택적 인증 — None for anonymous requests, the user when a valid token is sent."""
    if credentials is None:
        return None
    return await _authenticate(db, credentials.credentials)


def require_role(*roles: UserRole) -> Callable[..., Awaitable[User]]:
    """역할 기반 권한 검사 의존성 팩토리.

    Dependency factory that only lets users holding one of ``roles`` through.

    Returns:
        FastAPI 의존성 함수 — 인증된 사용자 반환 또는 403 발생
        (FastAPI dependency function that returns User or raises 403)
    """
    allowed = {r.value for r in roles}

    async def _check(
        current_user: Annotated[User, Depends(get_current_user)],
    ) -> User:
        if current_user.role not in allowed:
            raise ForbiddenError("Insufficient permissions")
        return current_user
    return _check


# 편의 의존성 — Pre-configured role dependencies
require_admin = require_role(UserRole.ADMIN)
