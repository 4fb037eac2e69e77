"""페이지네이션 유틸리티 모듈.

Pagination utility module.
Provides the page-window math shared by every list endpoint, a generic
paginate function for SQLAlchemy async queries, and the response envelope
``{items, pagination: {currentPage, totalPages, totalItems, itemsPerPage}}``.
"""

import math
from typing import Any, Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession


def page_window(page: int, per_page: int) -> tuple[int, int]:
    """페이지 번호를 (offset, limit) 으로 변환합니다.

    Convert a 1-based page number into ``(skip, take)``.

    Args:
        page: 페이지 번호, 1부터 시작 (Page number, 1-indexed)
        per_page: 페이지당 항목 수 (Items per page, > 0)

    Returns:
        tuple[int, int]: (offset, limit) — offset = (page − 1) × per_page
    """
    if page < 1 or per_page < 1:
        raise ValueError("page and per_page must be positive")
    return (page - 1) * per_page, per_page


def total_pages(total: int, per_page: int) -> int:
    """전체 페이지 수 — ceil(total / per_page), 항목이 없으면 0."""
    if per_page < 1:
        raise ValueError("per_page must be positive")
    return math.ceil(total / per_page)


def build_page(items: list[Any], total: int, page: int, per_page: int) -> dict[str, Any]:
    """목록 응답 봉투 생성 — Build the list response envelope."""
    return {
        "items": items,
        "pagination": {
            "currentPage": page,
            "totalPages": total_pages(total, per_page),
            "totalItems": total,
            "itemsPerPage": per_page,
        },
    }


async def paginate(
    db: AsyncSession,
    query: Select[Any],
    page: int = 1,
    per_page: int = 20,
) -> tuple[Sequence[Any], int]:
    """SQLAlchemy 쿼리에 대한 페이지네이션을 수행합니다.

    Execute a paginated SQLAlchemy query, returning items and total count.
    Runs two queries: one for the total count (via subquery) and one for
    the actual page of results with OFFSET/LIMIT. The total reflects every
    filter on ``query``, so it always matches what the pages enumerate.

    Args:
        db: 비동기 DB 세션 (Async database session)
        query: SQLAlchemy Select 쿼리 (Base query to paginate, ordered)
        page: 요청 페이지 번호, 1부터 시작 (Page number, 1-indexed, default: 1)
        per_page: 페이지당 항목 수 (Items per page, default: 20)

    Returns:
        tuple[Sequence[Any], int]: (항목 목록, 전체 개수) 튜플
    """
    # 전체 개수 조회 — 정렬 제거 후 서브쿼리로 COUNT (Count total via unordered subquery)
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total: int = (await db.execute(count_query)).scalar() or 0

    offset, limit = page_window(page, per_page)
    result = await db.execute(query.offset(offset).limit(limit))
    items: Sequence[Any] = result.scalars().unique().all()

    return items, total
