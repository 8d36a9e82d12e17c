"""Form and form response API schemas."""

from typing import Any

from projecthub.schemas.common import Timestamped


class FormDefinitionResponse(Timestamped):
    """A form and its field definitions."""

    workspace_id: int
    name: str
    slug: str
    description: str | None = None
    fields: list[dict[str, Any]]
    settings: dict[str, Any] | None = None
    is_active: bool


class FormSubmissionResponse(Timestamped):
    form_id: int
    user_id: int | None = None
    data: dict[str, Any]
