"""Wiki revision repository: append-only snapshots of a wiki."""

from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from projecthub.infrastructure.persistence.filters import FilterSpec
from projecthub.infrastructure.persistence.models.wiki import WikiRevision
from projecthub.infrastructure.persistence.repositories.base import BaseRepository


class WikiRevisionRepository(BaseRepository[WikiRevision]):
    """Revision rows, newest first."""

    filter_spec = FilterSpec(
        exact=("wiki_id", "user_id"),
        search=("title", "summary"),
        order_by=(("created_at", "desc"), ("id", "desc")),
    )

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, WikiRevision)

    async def add(
        self,
        wiki_id: int,
        title: str,
        content: str,
        summary: str | None,
        user_id: int | None = None,
    ) -> WikiRevision:
        return await self.create(
            {
                "wiki_id": wiki_id,
                "user_id": user_id,
                "title": title,
                "content": content,
                "summary": summary,
            }
        )

    async def list_for_wiki(self, wiki_id: int) -> list[WikiRevision]:
        result = await self.db.execute(
            select(WikiRevision)
            .where(WikiRevision.wiki_id == wiki_id)
            .order_by(WikiRevision.created_at.desc(), WikiRevision.id.desc())
        )
        return list(result.scalars().all())

    async def latest(self, wiki_id: int) -> WikiRevision | None:
        result = await self.db.execute(
            select(WikiRevision)
            .where(WikiRevision.wiki_id == wiki_id)
            .order_by(WikiRevision.created_at.desc(), WikiRevision.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def count_for_wiki(self, wiki_id: int) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(WikiRevision).where(WikiRevision.wiki_id == wiki_id)
        )
        return result.scalar_one()

    async def delete_all_but_latest(self, wiki_id: int, keep: int) -> int:
        """Delete revisions beyond the newest keep. Returns rows deleted."""
        keep_ids = (
            select(WikiRevision.id)
            .where(WikiRevision.wiki_id == wiki_id)
            .order_by(WikiRevision.created_at.desc(), WikiRevision.id.desc())
            .limit(keep)
        )
        kept = list((await self.db.execute(keep_ids)).scalars().all())
        stmt = delete(WikiRevision).where(WikiRevision.wiki_id == wiki_id)
        if kept:
            stmt = stmt.where(WikiRevision.id.not_in(kept))
        result = await self.db.execute(stmt)
        return result.rowcount or 0
