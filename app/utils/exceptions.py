"""커스텀 HTTP 예외 클래스 및 전역 예외 핸들러 모듈.

Custom HTTP exception classes and global exception handlers.
Provides pre-configured HTTPException subclasses for common error patterns
and registers handlers that shape validation failures (400 with a
structured error list) and unhandled failures (500 with a generic message).

Usage:
    from app.utils.exceptions import NotFoundError, ForbiddenError
    raise NotFoundError("Issue not found")
    raise ForbiddenError("Not authorized to delete this issue")
"""

from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.utils.logging import get_logger

logger = get_logger(__name__)


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    404 Not Found exception.
    Raised when a requested resource (issue, user) does not exist.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource not found")
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ForbiddenError(HTTPException):
    """403 Forbidden 예외 — 권한 부족 시 사용.

    403 Forbidden exception.
    Raised when the authenticated user lacks the required role or ownership
    (e.g. a citizen deleting someone else's issue).

    Args:
        detail: 오류 메시지 (Error message, default: "Insufficient permissions")
    """

    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 인증 실패 시 사용.

    401 Unauthorized exception.
    Raised when authentication is missing, invalid, or expired.

    Args:
        detail: 오류 메시지 (Error message, default: "Authentication required")
    """

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 잘못된 요청 데이터 시 사용.

    400 Bad Request exception.
    Raised when the request data is invalid beyond what Pydantic validation catches
    (e.g. latitude without longitude).

    Args:
        detail: 오류 메시지 (Error message, default: "Bad request")
        field: 문제 필드 이름 (Offending field, reported in the error list)
    """

    def __init__(self, detail: str = "Bad request", field: str | None = None) -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
        self.field: str | None = field


def _format_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Pydantic 오류 → {field, message} 목록 변환.

    Flatten pydantic error dicts into ``{"field", "message"}`` entries.
    The location prefix ("body", "query", "path") is dropped.
    """
    formatted: list[dict[str, str]] = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        formatted.append({
            "field": ".".join(loc),
            "message": err.get("msg", "Invalid value"),
        })
    return formatted


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Validation failed", "errors": _format_validation_errors(exc.errors())},
    )


async def _bad_request_handler(request: Request, exc: BadRequestError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": "Validation failed",
            "errors": [{"field": exc.field or "", "message": str(exc.detail)}],
        },
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # 내부 정보는 서버 로그에만 기록 — Internal detail goes to the server log only
    logger.exception(
        "unhandled_error",
        method=request.method,
        path=request.url.path,
        error_type=type(exc).__name__,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """전역 예외 핸들러 등록 — Install the 400/500 response shapes on the app."""
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(BadRequestError, _bad_request_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
