"""Tests for schemas derived from form definitions and custom field types."""

import pytest

from projecthub.application.validation import (
    custom_field_value_errors,
    custom_field_value_schema,
    form_response_errors,
    form_response_schema,
)

FIELDS = [
    {"name": "email", "label": "Email", "type": "email", "required": True},
    {"name": "age", "label": "Age", "type": "number"},
    {"name": "size", "label": "Size", "type": "select", "options": ["S", "M", "L"]},
    {"name": "tags", "label": "Tags", "type": "checkbox"},
]


class TestFormResponseErrors:
    """A form's field list becomes a JSON Schema for the data object."""

    def test_schema_lists_named_fields(self) -> None:
        schema = form_response_schema(FIELDS + [{"type": "text"}])
        assert set(schema["properties"]) == {"email", "age", "size", "tags"}
        assert schema["required"] == ["email"]
        assert schema["properties"]["size"] == {"enum": ["S", "M", "L"]}

    def test_valid_response(self) -> None:
        data = {"email": "a@example.com", "age": "42", "size": "M", "tags": ["x"]}
        assert form_response_errors(FIELDS, data) == {}

    def test_invalid_response(self) -> None:
        data = {"age": "old", "size": "XL", "tags": "x"}
        assert form_response_errors(FIELDS, data) == {
            "data.email": ["The data.email field is required."],
            "data.age": ["The data.age field must be a number."],
            "data.size": ["The selected data.size is invalid."],
            "data.tags": ["The data.tags field must be an array."],
        }

    def test_blank_required_value_counts_as_missing(self) -> None:
        errors = form_response_errors(FIELDS, {"email": "  ", "age": None})
        assert errors == {"data.email": ["The data.email field is required."]}

    def test_text_length_and_email_format(self) -> None:
        fields = [
            {"name": "bio", "label": "Bio", "type": "textarea"},
            {"name": "contact", "label": "Contact", "type": "email"},
        ]
        errors = form_response_errors(fields, {"bio": "x" * 1001, "contact": "nope"})
        assert errors == {
            "data.bio": ["The data.bio field must not be greater than 1000 characters."],
            "data.contact": ["The data.contact field must be a valid email address."],
        }

    def test_file_size_limit(self) -> None:
        fields = [{"name": "cv", "label": "CV", "type": "file"}]
        assert form_response_errors(fields, {"cv": {"size": 2048}}) == {}
        assert form_response_errors(fields, {"cv": {"size": 11 * 1024 * 1024}}) == {
            "data.cv": ["The data.cv field must not be greater than 10240 kilobytes."]
        }


class TestCustomFieldValueErrors:
    """Values are checked against the custom field's type and options."""

    def test_schema_marks_required_value(self) -> None:
        schema = custom_field_value_schema("email", None, True)
        assert schema["required"] == ["value"]
        assert schema["properties"]["value"] == {"type": "string", "format": "email"}

    def test_select_rejects_unknown_option(self) -> None:
        assert custom_field_value_errors("select", ["Low", "High"], False, "Medium") == [
            "The selected value is invalid."
        ]

    def test_select_accepts_option(self) -> None:
        assert custom_field_value_errors("select", ["Low", "High"], False, "High") == []

    def test_required_empty(self) -> None:
        assert custom_field_value_errors("text", None, True, "") == ["This field is required."]

    def test_optional_empty(self) -> None:
        assert custom_field_value_errors("number", None, False, None) == []

    def test_multiselect_json_string(self) -> None:
        assert custom_field_value_errors("multiselect", ["a", "b"], False, '["a", "b"]') == []
        assert custom_field_value_errors("multiselect", ["a"], False, ["a", "z"]) == [
            "The value 'z' is not a valid option."
        ]
        assert custom_field_value_errors("multiselect", ["a"], False, "a") == [
            "The value must be an array."
        ]

    @pytest.mark.parametrize("value", [True, False, "true", "0", 1, 0])
    def test_checkbox_accepts_boolean_like(self, value) -> None:
        assert custom_field_value_errors("checkbox", None, False, value) == []

    @pytest.mark.parametrize("value", [2, "yes", 1.0])
    def test_checkbox_rejects_other_values(self, value) -> None:
        assert custom_field_value_errors("checkbox", None, False, value) == [
            "The value must be a boolean."
        ]

    def test_typed_values(self) -> None:
        assert custom_field_value_errors("email", None, False, "nope") == [
            "The value must be a valid email address."
        ]
        assert custom_field_value_errors("url", None, False, "https://example.com") == []
        assert custom_field_value_errors("date", None, False, "2026-02-30") == [
            "The value must be a valid date."
        ]
