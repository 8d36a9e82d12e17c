"""Form definition and form response requests."""

from __future__ import annotations

from typing import Any

from projecthub.application.requests.base import ValidatedRequest
from projecthub.application.validation.dynamic import form_response_errors
from projecthub.application.validation.rules import (
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
from projecthub.domain.enums import FormFieldType
from projecthub.domain.exceptions import ResourceNotFoundException
from projecthub.shared.utils.text import slugify

SLUG_PATTERN = r"^[a-z0-9-]+$"

MESSAGES = {
    "slug.regex": "The slug may only contain lowercase letters, numbers, and hyphens.",
    "slug.unique": "A form with this slug already exists in the workspace.",
    "fields.min": "At least one field is required.",
    "fields.*.name.required": "Each field must have a name.",
    "fields.*.type.in": "Invalid field type selected.",
    "data.required": "Form data is required.",
}


class _FormRequest(ValidatedRequest):
    def _definition_rules(self, presence: Rule) -> dict[str, list[Rule]]:
        return {
            "name": [presence, IsType("string"), Max(255)],
            "slug": [
                presence,
                IsType("string"),
                Max(255),
                Pattern(SLUG_PATTERN, message=MESSAGES["slug.regex"]),
                Unique(
                    "form",
                    "slug",
                    scope=("workspace_id",),
                    ignore_id=getattr(self.current, "id", None),
                    message=MESSAGES["slug.unique"],
                ),
            ],
            "description": [Nullable(), IsType("string"), Max(1000)],
            "fields": [
                presence,
                IsType("array"),
                Min(1, message=MESSAGES["fields.min"]),
            ],
            "fields.*.name": [
                Required(message=MESSAGES["fields.*.name.required"]),
                IsType("string"),
                Max(255),
            ],
            "fields.*.type": [
                Required(),
                IsType("string"),
                In(FormFieldType.values(), message=MESSAGES["fields.*.type.in"]),
            ],
            "fields.*.label": [Required(), IsType("string"), Max(255)],
            "fields.*.required": [Sometimes(), IsType("boolean")],
            "fields.*.options": [Sometimes(), IsType("array")],
            "settings": [Nullable(), IsType("object")],
            "settings.allow_multiple_submissions": [Sometimes(), IsType("boolean")],
            "settings.require_authentication": [Sometimes(), IsType("boolean")],
            "settings.notification_email": [Nullable(), IsType("email")],
            "is_active": [Sometimes(), IsType("boolean")],
        }


class CreateFormRequest(_FormRequest):
    def prepare(self) -> None:
        name = self.data.get("name")
        if is_empty(self.data.get("slug")) and isinstance(name, str):
            self.data["slug"] = slugify(name)
        self.data.setdefault("is_active", True)

    def rules(self) -> dict[str, list[Rule]]:
        return {
            "workspace_id": [Required(), IsType("integer"), Exists("workspace")],
            **self._definition_rules(Required()),
        }


class UpdateFormRequest(_FormRequest):
    def rules(self) -> dict[str, list[Rule]]:
        return self._definition_rules(Sometimes())


class _FormResponseRequest(ValidatedRequest):
    """Response data is checked against the fields of the form it answers."""

    form: Any = None

    async def _load_form(self, form_id: Any) -> Any:
        lookup = self.context.forms
        if lookup is None or is_empty(form_id):
            return None
        try:
            form = await lookup.get_by_id(int(form_id))
        except (TypeError, ValueError):
            return None
        if form is None:
            raise ResourceNotFoundException("Form", form_id)
        return form

    async def after(self) -> None:
        data = self.data.get("data")
        if self.form is None or self.has_error("data") or not isinstance(data, dict):
            return
        for path, messages in form_response_errors(self.form.fields, data).items():
            for message in messages:
                self.add_error(path, message)


class CreateFormResponseRequest(_FormResponseRequest):
    def prepare(self) -> None:
        actor = self.context.actor
        if actor is not None and "user_id" not in self.data:
            self.data["user_id"] = actor.user_id

    async def build_rules(self) -> dict[str, list[Rule]]:
        self.form = await self._load_form(self.data.get("form_id"))
        return {
            "form_id": [Required(), IsType("integer"), Exists("form")],
            "user_id": [Nullable(), IsType("integer"), Exists("app_user")],
            "data": [
                Required(message=MESSAGES["data.required"]),
                IsType("object"),
            ],
        }


class UpdateFormResponseRequest(_FormResponseRequest):
    """The form is fixed; data, when given, is checked like on create."""

    async def build_rules(self) -> dict[str, list[Rule]]:
        if "data" in self.data:
            self.form = await self._load_form(getattr(self.current, "form_id", None))
        return {
            "data": [
                Sometimes(),
                Required(message=MESSAGES["data.required"]),
                IsType("object"),
            ],
        }
