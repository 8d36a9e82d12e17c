"""Repository interfaces (ports) consumed by request validation.

Requests never open sessions; the composition root hands them objects
satisfying these protocols.
"""

from __future__ import annotations

from typing import Any, Protocol


class IFormLookup(Protocol):
    async def get_by_id(self, entity_id: int) -> Any | None:
        """Return the form (with .fields) or None."""


class ICustomFieldLookup(Protocol):
    async def get_by_id(self, entity_id: int) -> Any | None:
        """Return the custom field (type, options, is_required) or None."""


class ITimeLogLookup(Protocol):
    async def has_running_log(
        self, user_id: int, exclude_id: int | None = None, lock: bool = True
    ) -> bool:
        """True if the user has a log with ended_at NULL (other than exclude_id)."""


class IWikiLookup(Protocol):
    async def is_descendant(self, candidate_id: int, ancestor_id: int) -> bool:
        """True when ancestor_id is on candidate_id's parent chain."""


class IEntityResolver(Protocol):
    def is_known(self, tag: str) -> bool:
        """True if tag names a registered polymorphic entity type."""

    async def exists(self, tag: str, entity_id: int) -> bool:
        """True if the (tag, entity_id) row exists."""
