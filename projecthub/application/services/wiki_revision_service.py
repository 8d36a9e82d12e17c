"""Wiki revision service: when to snapshot, restore, compare and prune revisions."""

from __future__ import annotations

import difflib
import logging
from typing import Any

from projecthub.domain.exceptions import DomainInvariantException

logger = logging.getLogger(__name__)

DEFAULT_UPDATE_SUMMARY = "Content updated"
INITIAL_SUMMARY = "Initial version"


def should_create_revision(
    old_title: str | None,
    old_content: str | None,
    new_title: str | None,
    new_content: str | None,
) -> bool:
    """True when the title changed or the content differs at all."""
    return (old_title or "") != (new_title or "") or (old_content or "") != (
        new_content or ""
    )


def compare_revisions(old: Any, new: Any) -> dict[str, Any]:
    """Summarize the difference between two revisions (old -> new)."""
    old_content = old.content or ""
    new_content = new.content or ""
    added: list[str] = []
    removed: list[str] = []
    for line in difflib.ndiff(old_content.splitlines(), new_content.splitlines()):
        if line.startswith("+ "):
            added.append(line[2:])
        elif line.startswith("- "):
            removed.append(line[2:])
    return {
        "title_changed": old.title != new.title,
        "content_changed": old_content != new_content,
        "character_diff": len(new_content) - len(old_content),
        "word_diff": len(new_content.split()) - len(old_content.split()),
        "added_lines": added,
        "removed_lines": removed,
    }


class WikiRevisionService:
    """Revision operations over a wiki repository and a revision repository."""

    def __init__(self, wiki_repo: Any, revision_repo: Any) -> None:
        self._wiki_repo = wiki_repo
        self._revision_repo = revision_repo

    should_create_revision = staticmethod(should_create_revision)
    compare_revisions = staticmethod(compare_revisions)

    async def create_revision(
        self, wiki: Any, summary: str | None = None, user_id: int | None = None
    ) -> Any:
        """Snapshot the wiki's current title and content."""
        revision = await self._revision_repo.add(
            wiki.id, wiki.title, wiki.content, summary or DEFAULT_UPDATE_SUMMARY, user_id
        )
        logger.info("Created revision %s for wiki %s", revision.id, wiki.id)
        return revision

    async def list_revisions(self, wiki: Any) -> list[Any]:
        return await self._revision_repo.list_for_wiki(wiki.id)

    async def get_revision(self, wiki: Any, revision_id: int) -> Any | None:
        revision = await self._revision_repo.get_by_id(revision_id)
        if revision is None or revision.wiki_id != wiki.id:
            return None
        return revision

    async def restore_to_revision(
        self, wiki: Any, revision: Any, user_id: int | None = None
    ) -> Any:
        """Copy a revision back onto the wiki, recording a new revision."""
        stamp = revision.created_at.strftime("%Y-%m-%d %H:%M:%S")
        return await self._wiki_repo.update(
            wiki,
            {
                "title": revision.title,
                "content": revision.content,
                "revision_summary": f"Restored to revision from {stamp}",
            },
            user_id=user_id,
            force_revision=True,
        )

    async def delete_revision(self, revision: Any) -> bool:
        """Delete one revision; the last remaining revision is kept."""
        if await self._revision_repo.count_for_wiki(revision.wiki_id) <= 1:
            raise DomainInvariantException(
                "Cannot delete the last revision of a wiki",
                "wiki_revision_required",
                wiki_id=revision.wiki_id,
            )
        return await self._revision_repo.delete(revision)

    async def cleanup_old_revisions(self, wiki: Any, keep: int) -> int:
        """Delete all but the newest keep revisions. Returns rows deleted."""
        deleted = await self._revision_repo.delete_all_but_latest(wiki.id, max(1, keep))
        if deleted:
            logger.info("Pruned %s old revisions of wiki %s", deleted, wiki.id)
        return deleted
