"""공통 Pydantic 요청/응답 스키마 정의.

Common Pydantic request/response schema definitions.
The API speaks camelCase on the wire; ``CamelModel`` maps it onto
snake_case attributes and still accepts snake_case input.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase 별칭 베이스 모델 — Base model with camelCase aliases (snake_case also accepted)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PaginationMeta(BaseModel):
    """페이지네이션 메타데이터.

    Attributes:
        currentPage: 현재 페이지 번호, 1부터 (Current page, 1-indexed)
        totalPages: 전체 페이지 수 — ceil(totalItems / itemsPerPage)
        totalItems: 전체 항목 수 (Total matching items)
        itemsPerPage: 페이지당 항목 수 (Page size)
    """

    currentPage: int
    totalPages: int
    totalItems: int
    itemsPerPage: int


class PaginatedResponse(BaseModel):
    """페이지네이션 응답 봉투 — ``{items, pagination}``."""

    items: list[Any]
    pagination: PaginationMeta


class MessageResponse(BaseModel):
    """단순 메시지 응답 스키마 — Generic message response (e.g. after deletion)."""

    message: str
