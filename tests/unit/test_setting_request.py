"""Tests for typed setting values."""

import pytest

from projecthub.application.requests import CreateSettingRequest
from projecthub.application.requests.setting import typed_value_error
from projecthub.domain.exceptions import RequestValidationException


class TestTypedValueError:
    def test_json(self) -> None:
        assert typed_value_error("json", '{"a": 1}') is None
        assert typed_value_error("json", "{bad") == "The value must be valid JSON when type is json."

    def test_boolean(self) -> None:
        assert typed_value_error("boolean", "true") is None
        assert typed_value_error("boolean", False) is None
        assert (
            typed_value_error("boolean", "yes")
            == "The value must be a boolean when type is boolean."
        )

    def test_integer(self) -> None:
        assert typed_value_error("integer", "12") is None
        assert typed_value_error("integer", "twelve") == (
            "The value must be numeric when type is integer."
        )

    def test_string_accepts_anything(self) -> None:
        assert typed_value_error("string", 5) is None


class TestCreateSettingRequest:
    async def test_defaults(self) -> None:
        validated = await CreateSettingRequest({"key": "ui.theme", "value": "dark"}).validate()
        assert validated == {
            "key": "ui.theme",
            "value": "dark",
            "type": "string",
            "workspace_id": None,
        }

    async def test_false_is_a_value(self) -> None:
        validated = await CreateSettingRequest(
            {"key": "beta", "value": False, "type": "boolean"}
        ).validate()
        assert validated["value"] is False

    async def test_json_string_is_decoded(self) -> None:
        validated = await CreateSettingRequest(
            {"key": "limits", "value": '{"max": 3}', "type": "json"}
        ).validate()
        assert validated["value"] == {"max": 3}

    async def test_bad_key(self) -> None:
        with pytest.raises(RequestValidationException) as exc:
            await CreateSettingRequest({"key": "has space", "value": "x"}).validate()
        assert exc.value.errors == {
            "key": [
                "The setting key may only contain letters, numbers, dots, dashes, and underscores."
            ]
        }

    async def test_bad_integer(self) -> None:
        with pytest.raises(RequestValidationException) as exc:
            await CreateSettingRequest({"key": "n", "value": "x", "type": "integer"}).validate()
        assert exc.value.errors == {"value": ["The value must be numeric when type is integer."]}
