"""Custom field API schemas."""

from typing import Any

from projecthub.schemas.common import Timestamped


class CustomFieldResponse(Timestamped):
    workspace_id: int
    name: str
    key: str
    type: str
    applies_to: str
    description: str | None = None
    options: list[str] | None = None
    is_required: bool
    order: int


class CustomFieldValueResponse(Timestamped):
    custom_field_id: int
    entity_type: str
    entity_id: int
    value: Any = None
