"""Custom field definition and value requests."""

from __future__ import annotations

from typing import Any

from projecthub.application.requests.base import ValidatedRequest
from projecthub.application.validation.dynamic import custom_field_value_errors
from projecthub.application.validation.rules import (
    Distinct,
    Exists,
    In,
    IsType,
    Max,
    Min,
    Nullable,
    Pattern,
    Required,
    Rule,
    Sometimes,
    Unique,
    is_empty,
)
from projecthub.domain.enums import CustomFieldType
from projecthub.domain.exceptions import ResourceNotFoundException

KEY_PATTERN = r"^[a-z0-9_]+$"

MESSAGES = {
    "key.regex": "The key field must contain only lowercase letters, numbers, and underscores.",
    "key.unique": "A custom field with this key already exists for this workspace and entity type.",
    "options.*.distinct": "Options must be unique.",
    "options.required": "Options are required for select and multiselect fields.",
    "entity_type.known": "The selected entity type is invalid.",
}

OPTION_TYPES = (CustomFieldType.SELECT, CustomFieldType.MULTISELECT)


class _CustomFieldRequest(ValidatedRequest):
    def _key_rules(self, presence: Rule, ignore_id: Any = None) -> list[Rule]:
        return [
            presence,
            IsType("string"),
            Max(255),
            Pattern(KEY_PATTERN, message=MESSAGES["key.regex"]),
            Unique(
                "custom_field",
                "key",
                scope=("workspace_id", "applies_to"),
                ignore_id=ignore_id,
                message=MESSAGES["key.unique"],
            ),
        ]

    def _option_rules(self) -> dict[str, list[Rule]]:
        return {
            "options": [Nullable(), IsType("array")],
            "options.*": [
                IsType("string"),
                Distinct(message=MESSAGES["options.*.distinct"]),
            ],
            "is_required": [Sometimes(), IsType("boolean")],
            "order": [Sometimes(), IsType("integer"), Min(0)],
            "description": [Nullable(), IsType("string")],
        }

    async def after(self) -> None:
        if self.input("type") in OPTION_TYPES and is_empty(self.input("options")):
            self.add_error("options", MESSAGES["options.required"])


class CreateCustomFieldRequest(_CustomFieldRequest):
    def prepare(self) -> None:
        if self.data.get("type") in OPTION_TYPES and "options" not in self.data:
            self.data["options"] = []

    def rules(self) -> dict[str, list[Rule]]:
        return {
            "workspace_id": [Required(), IsType("integer"), Exists("workspace")],
            "name": [Required(), IsType("string"), Max(255)],
            "key": self._key_rules(Required()),
            "type": [Required(), In(CustomFieldType.values())],
            "applies_to": [Required(), IsType("string"), Max(255)],
            **self._option_rules(),
        }


class UpdateCustomFieldRequest(_CustomFieldRequest):
    """Scope (workspace, applies_to) is fixed once the field exists."""

    def rules(self) -> dict[str, list[Rule]]:
        return {
            "name": [Sometimes(), IsType("string"), Max(255)],
            "key": self._key_rules(Sometimes(), ignore_id=getattr(self.current, "id", None)),
            "type": [Sometimes(), In(CustomFieldType.values())],
            **self._option_rules(),
        }


class _CustomFieldValueRequest(ValidatedRequest):
    """The value rules come from the owning custom field's type."""

    def _field_id(self) -> Any:
        return self.input("custom_field_id")

    async def _load_field(self) -> Any:
        lookup = self.context.custom_fields
        field_id = self._field_id()
        if lookup is None or is_empty(field_id):
            return None
        try:
            field = await lookup.get_by_id(int(field_id))
        except (TypeError, ValueError):
            field = None
        if field is None:
            raise ResourceNotFoundException("CustomField", field_id)
        return field

    async def after(self) -> None:
        if self.has_error("custom_field_id"):
            return
        field = await self._load_field()
        if field is None or self.has_error("value"):
            return
        if not self.updating or "value" in self.data or field.is_required:
            for message in custom_field_value_errors(
                field.type, field.options, field.is_required, self.data.get("value")
            ):
                self.add_error("value", message)


class CreateCustomFieldValueRequest(_CustomFieldValueRequest):
    def rules(self) -> dict[str, list[Rule]]:
        return {
            "custom_field_id": [Required(), IsType("integer"), Exists("custom_field")],
            "entity_type": [Required(), IsType("string"), Max(255)],
            "entity_id": [Required(), IsType("integer")],
            "value": [Nullable()],
        }

    async def after(self) -> None:
        entity_type = self.data.get("entity_type")
        entities = self.context.entities
        if (
            entities is not None
            and isinstance(entity_type, str)
            and not self.has_error("entity_type")
            and not entities.is_known(entity_type)
        ):
            self.add_error("entity_type", MESSAGES["entity_type.known"])
        await super().after()


class UpdateCustomFieldValueRequest(_CustomFieldValueRequest):
    def rules(self) -> dict[str, list[Rule]]:
        return {"value": [Nullable()]}
