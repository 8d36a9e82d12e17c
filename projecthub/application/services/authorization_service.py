"""Default authorization gate.

Creates and reads are open; changes to cost-bearing resources are admin-only.
"""

from __future__ import annotations

import logging
from typing import Any

from projecthub.application.interfaces.services import Actor
from projecthub.domain.exceptions import AuthorizationException

logger = logging.getLogger(__name__)

COST_BEARING_RESOURCES = frozenset(
    {"backup", "custom_field", "plan", "integration", "webhook_delivery"}
)
RESTRICTED_OPERATIONS = frozenset({"update", "delete"})


def resource_name(resource: Any) -> str:
    """Resource type name for a type string, model class or instance."""
    if isinstance(resource, str):
        return resource
    cls = resource if isinstance(resource, type) else type(resource)
    return getattr(cls, "__tablename__", cls.__name__.lower())


class PolicyGate:
    """Gate consulted by every write route before the repository runs."""

    def __init__(self, restricted: frozenset[str] = COST_BEARING_RESOURCES) -> None:
        self.restricted = restricted

    def can_perform(self, actor: Actor | None, operation: str, resource: Any) -> bool:
        if actor is None:
            return False
        if operation in RESTRICTED_OPERATIONS and resource_name(resource) in self.restricted:
            return actor.is_admin
        return True

    def authorize(self, actor: Actor | None, operation: str, resource: Any) -> None:
        """Raise AuthorizationException when the gate denies the operation."""
        name = resource_name(resource)
        if not self.can_perform(actor, operation, resource):
            logger.info(
                "Denied %s on %s for user %s",
                operation,
                name,
                actor.user_id if actor else None,
            )
            raise AuthorizationException(resource=name, action=operation)
