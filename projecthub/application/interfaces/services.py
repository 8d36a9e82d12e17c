"""Service interfaces (ports) for the application layer.

Protocols define contracts for collaborators the core only calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class Actor:
    """The user performing a request."""

    user_id: int
    is_admin: bool = False


class AuthorizationGate(Protocol):
    """Protocol for the allow/deny decision consulted before every write."""

    def can_perform(self, actor: Actor | None, operation: str, resource: Any) -> bool:
        """Return True if actor may perform operation on resource (instance or type name)."""
        ...

    def authorize(self, actor: Actor | None, operation: str, resource: Any) -> None:
        """Raise AuthorizationException if can_perform returns False."""
        ...

