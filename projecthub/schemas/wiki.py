"""Wiki and revision API schemas."""

from typing import Any

from pydantic import BaseModel

from projecthub.schemas.common import ORMModel, Timestamped, metadata_field


class WikiResponse(Timestamped):
    workspace_id: int
    parent_id: int | None = None
    created_by_id: int | None = None
    title: str
    slug: str
    content: str
    is_published: bool
    metadata: dict[str, Any] | None = metadata_field()


class WikiTreeNode(ORMModel):
    wiki: WikiResponse
    children: list["WikiTreeNode"] = []


class WikiRevisionResponse(Timestamped):
    wiki_id: int
    user_id: int | None = None
    title: str
    content: str
    summary: str | None = None


class RevisionComparison(BaseModel):
    title_changed: bool
    content_changed: bool
    character_diff: int
    word_diff: int
    added_lines: list[str]
    removed_lines: list[str]


class CleanupResponse(BaseModel):
    deleted: int
