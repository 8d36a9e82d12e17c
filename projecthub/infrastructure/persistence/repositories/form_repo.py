"""Form and form response repositories."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from projecthub.infrastructure.persistence.filters import FilterSpec
from projecthub.infrastructure.persistence.models.form import Form, FormResponse
from projecthub.infrastructure.persistence.repositories.base import BaseRepository


class FormRepository(BaseRepository[Form]):
    filter_spec = FilterSpec(
        exact=("workspace_id", "is_active"),
        search=("name", "description"),
        order_by=(("created_at", "desc"),),
    )

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Form)

    async def get_by_slug(self, workspace_id: int, slug: str) -> Form | None:
        result = await self.db.execute(
            select(Form).where(Form.workspace_id == workspace_id, Form.slug == slug)
        )
        return result.scalar_one_or_none()


class FormResponseRepository(BaseRepository[FormResponse]):
    filter_spec = FilterSpec(
        exact=("form_id", "user_id"),
        order_by=(("created_at", "desc"),),
    )

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, FormResponse)

    async def get_by_form(self, form_id: int) -> list[FormResponse]:
        result = await self.db.execute(
            select(FormResponse)
            .where(FormResponse.form_id == form_id)
            .order_by(FormResponse.created_at.desc(), FormResponse.id.desc())
        )
        return list(result.scalars().all())

    async def count_for_form(self, form_id: int) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(FormResponse).where(FormResponse.form_id == form_id)
        )
        return result.scalar_one()
