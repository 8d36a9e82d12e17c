"""Custom field definitions and values: key scope and type-driven value rules."""

import pytest

from projecthub.application.requests import (
    CreateCustomFieldRequest,
    CreateCustomFieldValueRequest,
    UpdateCustomFieldValueRequest,
)
from projecthub.domain.exceptions import RequestValidationException, ResourceNotFoundException
from projecthub.infrastructure.persistence.repositories import CustomFieldValueRepository

KEY_TAKEN = "A custom field with this key already exists for this workspace and entity type."


def _definition(workspace_id: int, applies_to: str = "tasks", **extra) -> dict:
    return {
        "workspace_id": workspace_id,
        "name": "Severity",
        "key": "severity",
        "type": "text",
        "applies_to": applies_to,
        **extra,
    }


@pytest.mark.requires_db
async def test_key_unique_within_workspace_and_entity_type(seed, make_context) -> None:
    """A key may repeat across entity types and workspaces, not within one scope."""
    ws, other_ws = await seed.workspace(), await seed.workspace()
    await seed.custom_field(ws, key="severity", applies_to="tasks")
    context = make_context()

    with pytest.raises(RequestValidationException) as exc:
        await CreateCustomFieldRequest(_definition(ws.id), context).validate()
    assert exc.value.errors == {"key": [KEY_TAKEN]}

    assert (await CreateCustomFieldRequest(_definition(ws.id, "projects"), context).validate())[
        "key"
    ] == "severity"
    assert (await CreateCustomFieldRequest(_definition(other_ws.id), context).validate())[
        "applies_to"
    ] == "tasks"


@pytest.mark.requires_db
async def test_select_field_requires_options(seed, make_context) -> None:
    ws = await seed.workspace()
    with pytest.raises(RequestValidationException) as exc:
        await CreateCustomFieldRequest(_definition(ws.id, type="select"), make_context()).validate()
    assert exc.value.errors == {"options": ["Options are required for select and multiselect fields."]}


@pytest.mark.requires_db
async def test_duplicate_options_rejected(seed, make_context) -> None:
    ws = await seed.workspace()
    data = _definition(ws.id, type="select", options=["Low", "Low"])
    with pytest.raises(RequestValidationException) as exc:
        await CreateCustomFieldRequest(data, make_context()).validate()
    assert exc.value.errors == {
        "options.0": ["Options must be unique."],
        "options.1": ["Options must be unique."],
    }


@pytest.mark.requires_db
async def test_select_value_must_be_an_option(seed, make_context, db_session) -> None:
    """Priority field with Low/High: Medium is rejected, High is stored."""
    ws = await seed.workspace()
    field = await seed.custom_field(ws, key="priority", type="select", options=["Low", "High"])
    context = make_context()
    body = {"custom_field_id": field.id, "entity_type": "tasks", "entity_id": 42}

    with pytest.raises(RequestValidationException) as exc:
        await CreateCustomFieldValueRequest({**body, "value": "Medium"}, context).validate()
    assert exc.value.errors == {"value": ["The selected value is invalid."]}

    validated = await CreateCustomFieldValueRequest({**body, "value": "High"}, context).validate()
    repo = CustomFieldValueRepository(db_session)
    stored = await repo.set_value(
        validated["custom_field_id"], validated["entity_type"], validated["entity_id"], "High"
    )
    assert stored.value == "High"

    again = await repo.set_value(field.id, "tasks", 42, "Low")
    assert again.id == stored.id
    assert again.value == "Low"
    assert len(await repo.get_for_entity("tasks", 42)) == 1


@pytest.mark.requires_db
async def test_value_entity_type_must_be_registered(seed, make_context) -> None:
    ws = await seed.workspace()
    field = await seed.custom_field(ws)
    data = {"custom_field_id": field.id, "entity_type": "widgets", "entity_id": 1, "value": "x"}
    with pytest.raises(RequestValidationException) as exc:
        await CreateCustomFieldValueRequest(data, make_context()).validate()
    assert exc.value.errors == {"entity_type": ["The selected entity type is invalid."]}


@pytest.mark.requires_db
async def test_value_for_unknown_field(make_context) -> None:
    data = {"custom_field_id": 999, "entity_type": "tasks", "entity_id": 1, "value": "x"}
    with pytest.raises(RequestValidationException) as exc:
        await CreateCustomFieldValueRequest(data, make_context()).validate()
    assert exc.value.errors == {"custom_field_id": ["The selected custom field id is invalid."]}


@pytest.mark.requires_db
async def test_update_value_uses_stored_field(seed, make_context, db_session) -> None:
    ws = await seed.workspace()
    field = await seed.custom_field(ws, type="number")
    stored = await CustomFieldValueRepository(db_session).set_value(field.id, "tasks", 1, 5)

    with pytest.raises(RequestValidationException) as exc:
        await UpdateCustomFieldValueRequest({"value": "many"}, make_context(), stored).validate()
    assert exc.value.errors == {"value": ["The value must be a number."]}
    assert await UpdateCustomFieldValueRequest({"value": "7"}, make_context(), stored).validate() == {
        "value": "7"
    }


@pytest.mark.requires_db
async def test_update_without_value_for_required_field(seed, make_context, db_session) -> None:
    """Required fields stay required on update, even when value is omitted."""
    ws = await seed.workspace()
    field = await seed.custom_field(ws, type="text", is_required=True)
    stored = await CustomFieldValueRepository(db_session).set_value(field.id, "tasks", 1, "kept")

    with pytest.raises(RequestValidationException) as exc:
        await UpdateCustomFieldValueRequest({}, make_context(), stored).validate()
    assert exc.value.errors == {"value": ["This field is required."]}


@pytest.mark.requires_db
async def test_update_without_value_for_optional_field(seed, make_context, db_session) -> None:
    ws = await seed.workspace()
    field = await seed.custom_field(ws, type="number")
    stored = await CustomFieldValueRepository(db_session).set_value(field.id, "tasks", 1, 3)

    assert await UpdateCustomFieldValueRequest({}, make_context(), stored).validate() == {}


@pytest.mark.requires_db
async def test_update_value_for_deleted_field(make_context) -> None:
    """A value whose field row is gone cannot be revalidated."""

    class Orphan:
        custom_field_id = 12345

    with pytest.raises(ResourceNotFoundException):
        await UpdateCustomFieldValueRequest({"value": 1}, make_context(), Orphan()).validate()
