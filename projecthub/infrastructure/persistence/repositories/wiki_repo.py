"""Wiki repository: revisions on create/update, reparenting on delete, tree queries."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select, update as sa_update
from sqlalchemy.ext.asyncio import AsyncSession

from projecthub.application.services.wiki_revision_service import (
    DEFAULT_UPDATE_SUMMARY,
    INITIAL_SUMMARY,
    should_create_revision,
)
from projecthub.domain.exceptions import DomainInvariantException
from projecthub.infrastructure.persistence.database import atomic
from projecthub.infrastructure.persistence.filters import LIKE_ESCAPE, FilterSpec, contains_pattern
from projecthub.infrastructure.persistence.models.wiki import Wiki
from projecthub.infrastructure.persistence.repositories.base import BaseRepository
from projecthub.infrastructure.persistence.repositories.wiki_revision_repo import (
    WikiRevisionRepository,
)

logger = logging.getLogger(__name__)


class WikiRepository(BaseRepository[Wiki]):
    """Wiki repository. Writes that touch revisions or children run in atomic()."""

    filter_spec = FilterSpec(
        exact=("workspace_id", "parent_id", "is_published", "created_by_id"),
        search=("title", "content"),
        null_checks={"is_root": ("parent_id", False)},
        order_by=(("title", "asc"),),
    )

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Wiki)
        self.revisions = WikiRevisionRepository(db)

    async def create(self, data: dict[str, Any], user_id: int | None = None) -> Wiki:
        """Create the wiki and, when it has content, its initial revision."""
        async with atomic(self.db):
            wiki = await super().create(data)
            if wiki.content:
                await self.revisions.add(
                    wiki.id,
                    wiki.title,
                    wiki.content,
                    data.get("revision_summary") or INITIAL_SUMMARY,
                    user_id,
                )
        return wiki

    async def update(
        self,
        wiki: Wiki,
        data: dict[str, Any],
        user_id: int | None = None,
        force_revision: bool = False,
    ) -> Wiki:
        """Update the wiki; append a revision only if title or content changed.

        Raises:
            DomainInvariantException: If the new parent is the wiki itself or
                one of its descendants.
        """
        new_parent = data.get("parent_id")
        if new_parent is not None and new_parent != wiki.parent_id:
            await self.ensure_valid_parent(wiki, new_parent)
        old_title, old_content = wiki.title, wiki.content
        async with atomic(self.db):
            wiki = await super().update(wiki, data)
            if force_revision or should_create_revision(
                old_title, old_content, wiki.title, wiki.content
            ):
                revision = await self.revisions.add(
                    wiki.id,
                    wiki.title,
                    wiki.content,
                    data.get("revision_summary") or DEFAULT_UPDATE_SUMMARY,
                    user_id,
                )
                logger.info("Wiki %s changed; revision %s recorded", wiki.id, revision.id)
        return wiki

    async def delete(self, wiki: Wiki) -> bool:
        """Move children up to this wiki's parent, then delete it."""
        async with atomic(self.db):
            result = await self.db.execute(
                sa_update(Wiki)
                .where(Wiki.parent_id == wiki.id)
                .values(parent_id=wiki.parent_id)
                .execution_options(synchronize_session="fetch")
            )
            if result.rowcount:
                logger.info(
                    "Reparented %s children of wiki %s to %s",
                    result.rowcount,
                    wiki.id,
                    wiki.parent_id,
                )
            return await super().delete(wiki)

    async def ensure_valid_parent(self, wiki: Wiki, parent_id: int) -> None:
        if parent_id == wiki.id:
            raise DomainInvariantException(
                "A wiki cannot be its own parent.", "wiki_not_own_parent", wiki_id=wiki.id
            )
        if await self.is_descendant(parent_id, wiki.id):
            raise DomainInvariantException(
                "A wiki cannot be moved under one of its descendants.",
                "wiki_parent_cycle",
                wiki_id=wiki.id,
                parent_id=parent_id,
            )

    async def is_descendant(self, candidate_id: int, ancestor_id: int) -> bool:
        """True when ancestor_id appears on candidate_id's parent chain."""
        seen: set[int] = set()
        current: int | None = candidate_id
        while current is not None and current not in seen:
            seen.add(current)
            parent = (
                await self.db.execute(select(Wiki.parent_id).where(Wiki.id == current))
            ).scalar_one_or_none()
            if parent == ancestor_id:
                return True
            current = parent
        return False

    async def get_by_slug(self, workspace_id: int, slug: str) -> Wiki | None:
        result = await self.db.execute(
            select(Wiki).where(Wiki.workspace_id == workspace_id, Wiki.slug == slug)
        )
        return result.scalar_one_or_none()

    async def get_children(self, wiki: Wiki) -> list[Wiki]:
        result = await self.db.execute(
            select(Wiki).where(Wiki.parent_id == wiki.id).order_by(Wiki.title, Wiki.id)
        )
        return list(result.scalars().all())

    async def get_tree(self, workspace_id: int) -> list[dict[str, Any]]:
        """Return root wikis with nested children as {'wiki', 'children'} nodes."""
        result = await self.db.execute(
            select(Wiki).where(Wiki.workspace_id == workspace_id).order_by(Wiki.title, Wiki.id)
        )
        wikis = list(result.scalars().all())
        nodes = {w.id: {"wiki": w, "children": []} for w in wikis}
        roots: list[dict[str, Any]] = []
        for w in wikis:
            if w.parent_id is not None and w.parent_id in nodes:
                nodes[w.parent_id]["children"].append(nodes[w.id])
            else:
                roots.append(nodes[w.id])
        return roots

    async def get_published(self, workspace_id: int) -> list[Wiki]:
        result = await self.db.execute(
            select(Wiki)
            .where(Wiki.workspace_id == workspace_id, Wiki.is_published.is_(True))
            .order_by(Wiki.title, Wiki.id)
        )
        return list(result.scalars().all())

    async def search(self, workspace_id: int, term: str) -> list[Wiki]:
        pattern = contains_pattern(term)
        result = await self.db.execute(
            select(Wiki)
            .where(
                Wiki.workspace_id == workspace_id,
                Wiki.title.ilike(pattern, escape=LIKE_ESCAPE)
                | Wiki.content.ilike(pattern, escape=LIKE_ESCAPE),
            )
            .order_by(Wiki.title, Wiki.id)
        )
        return list(result.scalars().all())

    async def get_breadcrumb(self, wiki: Wiki) -> list[Wiki]:
        """Ancestors from the root down to and including wiki."""
        trail = [wiki]
        seen = {wiki.id}
        parent_id = wiki.parent_id
        while parent_id is not None and parent_id not in seen:
            parent = await self.get_by_id(parent_id)
            if parent is None:
                break
            trail.append(parent)
            seen.add(parent.id)
            parent_id = parent.parent_id
        return list(reversed(trail))

    async def toggle_publication(self, wiki: Wiki) -> Wiki:
        return await super().update(wiki, {"is_published": not wiki.is_published})
