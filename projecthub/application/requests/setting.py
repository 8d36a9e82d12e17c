"""Setting requests: the stored value must parse as the declared type."""

from __future__ import annotations

import contextlib
import json
from typing import Any

from projecthub.application.requests.base import ValidatedRequest
from projecthub.application.validation.rules import (
    Exists,
    In,
    IsType,
    Max,
    Nullable,
    Pattern,
    Required,
    Rule,
    RuleContext,
    Sometimes,
    Unique,
    to_number,
)
from projecthub.domain.enums import SettingType

KEY_PATTERN = r"^[a-zA-Z0-9_.-]+$"

BOOLEAN_VALUES: tuple[Any, ...] = (True, False, "true", "false", "1", "0", 1, 0)

MESSAGES = {
    "workspace_id.exists": "The selected workspace does not exist.",
    "key.required": "The setting key is required.",
    "key.regex": "The setting key may only contain letters, numbers, dots, dashes, and underscores.",
    "key.unique": "A setting with this key already exists in the specified workspace.",
    "value.required": "The setting value is required.",
    "type.in": "The type must be one of: " + ", ".join(SettingType.values()),
    "value.json": "The value must be valid JSON when type is json.",
    "value.boolean": "The value must be a boolean when type is boolean.",
    "value.integer": "The value must be numeric when type is integer.",
}


def typed_value_error(setting_type: Any, value: Any) -> str | None:
    """Message when value cannot be stored as setting_type, else None."""
    if setting_type == SettingType.JSON and isinstance(value, str):
        try:
            json.loads(value)
        except ValueError:
            return MESSAGES["value.json"]
    if setting_type == SettingType.BOOLEAN and not any(
        value is v or (type(value) is type(v) and value == v) for v in BOOLEAN_VALUES
    ):
        return MESSAGES["value.boolean"]
    if setting_type == SettingType.INTEGER and to_number(value) is None:
        return MESSAGES["value.integer"]
    return None


class _RequiredValue(Required):
    """Required, but false, 0 and empty collections count as values."""

    def check(self, ctx: RuleContext) -> str | None:
        if ctx.value is None or (isinstance(ctx.value, str) and not ctx.value.strip()):
            return self._msg(f"The {ctx.attribute} field is required.")
        return None


class _SettingRequest(ValidatedRequest):
    async def after(self) -> None:
        if self.has_error("value") or self.has_error("type") or "value" not in self.data:
            return
        message = typed_value_error(self.input("type"), self.data["value"])
        if message:
            self.add_error("value", message)


class CreateSettingRequest(_SettingRequest):
    def prepare(self) -> None:
        self.data.setdefault("type", SettingType.STRING.value)
        self.data.setdefault("workspace_id", None)
        value = self.data.get("value")
        if self.data["type"] == SettingType.JSON and isinstance(value, str):
            # undecodable strings stay as-is and fail in after()
            with contextlib.suppress(ValueError):
                self.data["value"] = json.loads(value)

    def rules(self) -> dict[str, list[Rule]]:
        return {
            "workspace_id": [
                Nullable(),
                IsType("integer"),
                Exists("workspace", message=MESSAGES["workspace_id.exists"]),
            ],
            "key": [
                Required(message=MESSAGES["key.required"]),
                IsType("string"),
                Max(255),
                Pattern(KEY_PATTERN, message=MESSAGES["key.regex"]),
                Unique(
                    "setting",
                    "key",
                    scope=("workspace_id",),
                    message=MESSAGES["key.unique"],
                ),
            ],
            "value": [_RequiredValue(message=MESSAGES["value.required"])],
            "type": [Sometimes(), In(SettingType.values(), message=MESSAGES["type.in"])],
            "description": [Nullable(), IsType("string")],
        }


class UpdateSettingRequest(_SettingRequest):
    """Key and scope are fixed; value and type may change together."""

    def rules(self) -> dict[str, list[Rule]]:
        return {
            "value": [Sometimes(), _RequiredValue(message=MESSAGES["value.required"])],
            "type": [Sometimes(), In(SettingType.values(), message=MESSAGES["type.in"])],
            "description": [Nullable(), IsType("string")],
        }

    async def after(self) -> None:
        if "type" in self.data and "value" not in self.data and self.current is not None:
            message = typed_value_error(self.data["type"], self.current.value)
            if message:
                self.add_error("value", message)
            return
        await super().after()
