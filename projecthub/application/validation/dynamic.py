"""JSON Schemas derived at request time from a parent record.

A form's field list defines what its responses may contain, and a custom
field's type defines what its values may be. Both are turned into a JSON
Schema and checked with jsonschema; errors are mapped back to request paths
(data.<name> for form responses, value for custom field values) with the
messages the rest of the request layer uses. The caller loads the parent
record first.
"""

from __future__ import annotations

import json
from typing import Any

from jsonschema import Draft202012Validator, FormatChecker, validators
from jsonschema.exceptions import ValidationError as SchemaError

from projecthub.application.validation.rules import (
    is_empty,
    is_valid_email,
    is_valid_url,
    to_number,
)
from projecthub.domain.enums import CustomFieldType, FormFieldType
from projecthub.shared.utils.datetime import parse_datetime

CHECKBOX_VALUES: tuple[Any, ...] = (True, False, "true", "false", "1", "0", 1, 0)

TEXT_MAX_LENGTH = 1000
FILE_MAX_KILOBYTES = 10240

FORMAT_CHECKER = FormatChecker(formats=())


@FORMAT_CHECKER.checks("email")
def _check_email(instance: Any) -> bool:
    return is_valid_email(instance)


@FORMAT_CHECKER.checks("url")
def _check_url(instance: Any) -> bool:
    return is_valid_url(instance)


@FORMAT_CHECKER.checks("date")
def _check_date(instance: Any) -> bool:
    return parse_datetime(instance) is not None


@FORMAT_CHECKER.checks("numeric")
def _check_numeric(instance: Any) -> bool:
    return to_number(instance) is not None


@FORMAT_CHECKER.checks("checkbox")
def _check_checkbox(instance: Any) -> bool:
    # Strict membership: 2, "yes" and 1.0 are rejected.
    return any(
        instance is v or (type(instance) is type(v) and instance == v) for v in CHECKBOX_VALUES
    )


@FORMAT_CHECKER.checks("file")
def _check_file(instance: Any) -> bool:
    return isinstance(file_size(instance), int)


def file_size(value: Any) -> Any:
    """Byte size of an uploaded file or {"size": ...} map; None otherwise."""
    return value.get("size") if isinstance(value, dict) else getattr(value, "size", None)


def _max_kilobytes(validator: Any, limit: int, instance: Any, schema: dict[str, Any]):
    size = file_size(instance)
    if isinstance(size, int) and size / 1024 > limit:
        yield SchemaError(f"{size} bytes is larger than {limit} kilobytes")


FieldValidator = validators.extend(Draft202012Validator, {"maxKilobytes": _max_kilobytes})


def _iter_errors(schema: dict[str, Any], instance: Any) -> list[SchemaError]:
    return list(FieldValidator(schema, format_checker=FORMAT_CHECKER).iter_errors(instance))


def _enum(options: list[Any] | None) -> list[Any]:
    # Non-string options also match their string form ("1" for 1).
    options = list(options or [])
    return options + [str(o) for o in options if not isinstance(o, (str, bool))]


# Form responses

_FORM_TYPE_MESSAGES = {
    FormFieldType.TEXT.value: "The {attribute} field must be a string.",
    FormFieldType.TEXTAREA.value: "The {attribute} field must be a string.",
    FormFieldType.EMAIL.value: "The {attribute} field must be a valid email address.",
    FormFieldType.NUMBER.value: "The {attribute} field must be a number.",
    FormFieldType.CHECKBOX.value: "The {attribute} field must be an array.",
    FormFieldType.FILE.value: "The {attribute} field must be a file.",
}

_FORM_MESSAGES = {
    "required": "The {attribute} field is required.",
    "maxLength": "The {attribute} field must not be greater than {limit} characters.",
    "maxKilobytes": "The {attribute} field must not be greater than {limit} kilobytes.",
    "enum": "The selected {attribute} is invalid.",
}


def _form_field_schema(definition: dict[str, Any]) -> dict[str, Any]:
    field_type = definition.get("type")
    if field_type in (FormFieldType.TEXT, FormFieldType.TEXTAREA):
        return {"type": "string", "maxLength": TEXT_MAX_LENGTH}
    if field_type == FormFieldType.EMAIL:
        return {"type": "string", "format": "email"}
    if field_type == FormFieldType.NUMBER:
        return {"type": ["number", "string"], "format": "numeric"}
    if field_type in (FormFieldType.SELECT, FormFieldType.RADIO):
        return {"enum": _enum(definition.get("options"))}
    if field_type == FormFieldType.CHECKBOX:
        return {"type": "array"}
    if field_type == FormFieldType.FILE:
        return {"format": "file", "maxKilobytes": FILE_MAX_KILOBYTES}
    return {}


def _named_fields(fields: list[dict[str, Any]] | None) -> list[dict[str, Any]]:
    return [d for d in fields or [] if isinstance(d, dict) and d.get("name")]


def form_response_schema(fields: list[dict[str, Any]] | None) -> dict[str, Any]:
    """JSON Schema for a response's data object.

    Create and update use the same schema: fields that are not required are
    optional either way, and required fields stay required.
    """
    named = _named_fields(fields)
    return {
        "type": "object",
        "properties": {d["name"]: _form_field_schema(d) for d in named},
        "required": [d["name"] for d in named if d.get("required")],
    }


def form_response_errors(
    fields: list[dict[str, Any]] | None, data: dict[str, Any]
) -> dict[str, list[str]]:
    """Errors for data under the form's fields, keyed data.<name> in field order.

    Empty values count as missing for required fields; optional fields accept
    null and blank strings.
    """
    named = _named_fields(fields)
    by_name = {d["name"]: d for d in named}
    instance = {}
    for key, value in data.items():
        definition = by_name.get(key)
        if definition is not None and definition.get("required") and is_empty(value):
            continue
        if definition is not None and (
            value is None or (isinstance(value, str) and not value.strip())
        ):
            continue
        instance[key] = value

    failed: dict[str, SchemaError] = {}
    for error in _iter_errors(form_response_schema(named), instance):
        if error.validator == "required":
            for name in error.validator_value:
                if name not in instance:
                    failed.setdefault(name, error)
        elif error.absolute_path:
            failed.setdefault(str(error.absolute_path[0]), error)

    errors: dict[str, list[str]] = {}
    for definition in named:
        name = definition["name"]
        if name not in failed:
            continue
        error = failed[name]
        attribute = f"data.{name}".replace("_", " ")
        if error.validator in ("type", "format"):
            field_type = getattr(definition.get("type"), "value", definition.get("type"))
            template = _FORM_TYPE_MESSAGES.get(field_type, _FORM_MESSAGES["enum"])
        else:
            template = _FORM_MESSAGES.get(str(error.validator), _FORM_MESSAGES["enum"])
        errors[f"data.{name}"] = [
            template.format(attribute=attribute, limit=error.validator_value)
        ]
    return errors


# Custom field values

_VALUE_MESSAGES = {
    CustomFieldType.EMAIL.value: "The value must be a valid email address.",
    CustomFieldType.URL.value: "The value must be a valid URL.",
    CustomFieldType.NUMBER.value: "The value must be a number.",
    CustomFieldType.DATE.value: "The value must be a valid date.",
    CustomFieldType.SELECT.value: "The selected value is invalid.",
    CustomFieldType.MULTISELECT.value: "The value must be an array.",
    CustomFieldType.CHECKBOX.value: "The value must be a boolean.",
}


def custom_field_value_schema(
    field_type: str, options: list[Any] | None, is_required: bool
) -> dict[str, Any]:
    """JSON Schema for {"value": ...} under a custom field of field_type."""
    if field_type == CustomFieldType.EMAIL:
        value_schema: dict[str, Any] = {"type": "string", "format": "email"}
    elif field_type == CustomFieldType.URL:
        value_schema = {"type": "string", "format": "url"}
    elif field_type == CustomFieldType.NUMBER:
        value_schema = {"type": ["number", "string"], "format": "numeric"}
    elif field_type == CustomFieldType.DATE:
        value_schema = {"type": "string", "format": "date"}
    elif field_type == CustomFieldType.SELECT:
        value_schema = {"enum": _enum(options)}
    elif field_type == CustomFieldType.MULTISELECT:
        value_schema = {"type": "array", "items": {"enum": _enum(options)}}
    elif field_type == CustomFieldType.CHECKBOX:
        value_schema = {"format": "checkbox"}
    else:
        value_schema = {}
    return {
        "type": "object",
        "properties": {"value": value_schema},
        "required": ["value"] if is_required else [],
    }


def decode_multiselect(value: Any) -> Any:
    """A JSON string holding a list decodes to the list; anything else is returned as-is."""
    if isinstance(value, str):
        try:
            decoded = json.loads(value)
        except ValueError:
            return value
        if isinstance(decoded, list):
            return decoded
    return value


def custom_field_value_errors(
    field_type: str,
    options: list[Any] | None,
    is_required: bool,
    value: Any,
) -> list[str]:
    """Messages for value under a custom field of field_type (empty when valid)."""
    instance: dict[str, Any] = {}
    if value is not None and value != "":
        if field_type == CustomFieldType.MULTISELECT:
            value = decode_multiselect(value)
        instance["value"] = value

    schema = custom_field_value_schema(field_type, options, is_required)
    for error in _iter_errors(schema, instance):
        if error.validator == "required":
            return ["This field is required."]
        if field_type == CustomFieldType.MULTISELECT and len(error.absolute_path) > 1:
            return [f"The value '{error.instance}' is not a valid option."]
        key = getattr(field_type, "value", field_type)
        return [_VALUE_MESSAGES.get(key, "The value is invalid.")]
    return []
