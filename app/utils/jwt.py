"""액세스 토큰 검증 유틸리티.

Bearer token helpers. Tokens are issued by the external auth service and
only verified here; ``issue_access_token`` mints the same payload for
tests and local tooling.

Payload:
    {"sub": "<user uuid>", "role": "citizen", "exp": 1234567890, "type": "access"}

역할은 매 요청마다 DB에서 다시 조회합니다 (토큰의 role 값은 신뢰하지 않음).
The role claim is informational; the role is re-read from the database.
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt

from app.config import settings

ACCESS_TOKEN_TYPE: str = "access"


def issue_access_token(user_id: UUID, role: str, expires_in: timedelta | None = None) -> str:
    """액세스 토큰 발급 — Sign an access token for ``user_id``."""
    if expires_in is None:
        expires_in = timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": str(user_id),
        "role": role,
        "exp": datetime.now(timezone.utc) + expires_in,
        "type": ACCESS_TOKEN_TYPE,
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_access_token(token: str) -> UUID:
    """액세스 토큰 검증 후 사용자 ID 반환.

    Verify signature, expiry and token type, and return the ``sub`` claim
    as a UUID.

    Raises:
        jwt.InvalidTokenError: 서명/만료/타입/sub 오류 (bad signature, expired,
            not an access token, or a malformed subject)
    """
    payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise jwt.InvalidTokenError("not an access token")
    try:
        return UUID(str(payload["sub"]))
    except (KeyError, ValueError) as exc:
        raise jwt.InvalidTokenError("malformed subject") from exc
