"""Wiki page requests."""

from __future__ import annotations

from projecthub.application.requests.base import ValidatedRequest
from projecthub.application.validation.rules import (
    Exists,
    IsType,
    Max,
    Nullable,
    Pattern,
    Required,
    Rule,
    Sometimes,
    Unique,
    is_empty,
)
from projecthub.shared.utils.text import slugify

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"

MESSAGES = {
    "workspace_id.required": "A workspace is required.",
    "workspace_id.exists": "The selected workspace does not exist.",
    "parent_id.exists": "The selected parent wiki does not exist.",
    "title.required": "A title is required.",
    "title.max": "The title may not be greater than 255 characters.",
    "slug.unique": "This slug is already taken in this workspace.",
    "slug.regex": "The slug format is invalid. Use lowercase letters, numbers, and hyphens only.",
    "content.required": "Content is required.",
    "parent_id.self": "A wiki cannot be its own parent.",
    "parent_id.cycle": "A wiki cannot be moved under one of its descendants.",
}


def _metadata_rules() -> dict[str, list[Rule]]:
    return {
        "metadata.tags": [Nullable(), IsType("array")],
        "metadata.tags.*": [IsType("string"), Max(50)],
        "metadata.description": [Nullable(), IsType("string"), Max(500)],
        "revision_summary": [Nullable(), IsType("string"), Max(255)],
    }


def _slug_rules(presence: Rule, ignore_id: int | None = None) -> list[Rule]:
    return [
        presence,
        IsType("string"),
        Max(255),
        Pattern(SLUG_PATTERN, message=MESSAGES["slug.regex"]),
        Unique(
            "wiki",
            "slug",
            scope=("workspace_id",),
            ignore_id=ignore_id,
            message=MESSAGES["slug.unique"],
        ),
    ]


class CreateWikiRequest(ValidatedRequest):
    def prepare(self) -> None:
        self.data.setdefault("is_published", False)
        title = self.data.get("title")
        if "slug" not in self.data and isinstance(title, str):
            self.data["slug"] = slugify(title)
        actor = self.context.actor
        if actor is not None:
            self.data["created_by_id"] = actor.user_id

    def rules(self) -> dict[str, list[Rule]]:
        return {
            "workspace_id": [
                Required(message=MESSAGES["workspace_id.required"]),
                IsType("integer"),
                Exists("workspace", message=MESSAGES["workspace_id.exists"]),
            ],
            "parent_id": [
                Nullable(),
                IsType("integer"),
                Exists("wiki", message=MESSAGES["parent_id.exists"]),
            ],
            "created_by_id": [Nullable(), IsType("integer"), Exists("app_user")],
            "title": [
                Required(message=MESSAGES["title.required"]),
                IsType("string"),
                Max(255, message=MESSAGES["title.max"]),
            ],
            "slug": _slug_rules(Nullable()),
            "content": [Required(message=MESSAGES["content.required"]), IsType("string")],
            "is_published": [Sometimes(), IsType("boolean")],
            "metadata": [Nullable(), IsType("object")],
            **_metadata_rules(),
        }


class UpdateWikiRequest(ValidatedRequest):
    """Moves are checked against the page tree: no self parent, no cycles."""

    def rules(self) -> dict[str, list[Rule]]:
        return {
            "parent_id": [
                Nullable(),
                IsType("integer"),
                Exists("wiki", message=MESSAGES["parent_id.exists"]),
            ],
            "title": [
                Sometimes(),
                Required(message=MESSAGES["title.required"]),
                IsType("string"),
                Max(255, message=MESSAGES["title.max"]),
            ],
            "slug": [
                Sometimes(),
                *_slug_rules(Required(), ignore_id=getattr(self.current, "id", None)),
            ],
            "content": [
                Sometimes(),
                Required(message=MESSAGES["content.required"]),
                IsType("string"),
            ],
            "is_published": [Sometimes(), IsType("boolean")],
            "metadata": [Sometimes(), Nullable(), IsType("object")],
            **_metadata_rules(),
        }

    async def after(self) -> None:
        parent_id = self.data.get("parent_id")
        wiki_id = getattr(self.current, "id", None)
        if wiki_id is None or is_empty(parent_id) or self.has_error("parent_id"):
            return
        if int(parent_id) == wiki_id:
            self.add_error("parent_id", MESSAGES["parent_id.self"])
            return
        wikis = self.context.wikis
        if wikis is not None and await wikis.is_descendant(int(parent_id), wiki_id):
            self.add_error("parent_id", MESSAGES["parent_id.cycle"])

