"""공통 레포지토리 — 사용자/이슈 레포지토리의 부모 클래스.

Shared repository base for ``UserRepository`` and ``IssueRepository``:
lookup by primary key, paginated listing, insert, partial update and
filtered counting. Nothing here commits; the router owns the transaction.

Usage:
    class UserRepository(BaseRepository[User]):
        def __init__(self) -> None:
            super().__init__(User)
"""

from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Base
from app.utils.pagination import paginate

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """모델 하나에 대한 공통 쿼리 — Common queries bound to one ORM model."""

    def __init__(self, model: type[ModelType]) -> None:
        self.model: type[ModelType] = model

    async def get_by_id(self, db: AsyncSession, record_id: UUID) -> ModelType | None:
        """기본 키로 조회, 없으면 None."""
        result = await db.execute(select(self.model).where(self.model.id == record_id))
        return result.scalar_one_or_none()

    async def get_paginated(
        self,
        db: AsyncSession,
        query: Select,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[ModelType], int]:
        """정렬된 쿼리의 한 페이지와 전체 개수를 반환합니다.

        Run an already filtered and ordered ``query`` for one page.

        Returns:
            tuple[Sequence[ModelType], int]: (페이지 항목, 필터 적용 전체 개수)
                                             (Page items, filtered total)
        """
        return await paginate(db, query, page, per_page)

    async def create(self, db: AsyncSession, obj_data: dict[str, Any]) -> ModelType:
        """새 레코드 추가 후 flush — Insert and flush so defaults and the id are populated."""
        db_obj: ModelType = self.model(**obj_data)
        db.add(db_obj)
        await db.flush()
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        record_id: UUID,
        update_data: dict[str, Any],
    ) -> ModelType | None:
        """부분 수정 — Set the given columns on the record; None if it does not exist.

        Keys that are not attributes of the model are ignored.
        """
        db_obj: ModelType | None = await self.get_by_id(db, record_id)
        if db_obj is None:
            return None

        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        await db.flush()
        return db_obj

    async def count(self, db: AsyncSession, *criteria: Any) -> int:
        """조건을 모두 만족하는 행 수 — Rows matching every criterion (all rows if none)."""
        query: Select = select(func.count()).select_from(self.model)
        for criterion in criteria:
            query = query.where(criterion)
        return (await db.execute(query)).scalar() or 0
