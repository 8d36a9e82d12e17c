"""Form responses validated against the stored form definition."""

import pytest

from projecthub.application.requests.form import (
    CreateFormResponseRequest,
    UpdateFormResponseRequest,
)
from projecthub.domain.exceptions import RequestValidationException, ResourceNotFoundException
from projecthub.infrastructure.persistence.repositories import FormResponseRepository

FIELDS = [
    {"name": "email", "label": "Email", "type": "email", "required": True},
    {"name": "team_size", "label": "Team size", "type": "number"},
    {"name": "plan", "label": "Plan", "type": "radio", "options": ["free", "pro"]},
]


@pytest.mark.requires_db
async def test_create_response_checks_form_fields(seed, make_context) -> None:
    ws = await seed.workspace()
    form = await seed.form(ws, fields=FIELDS)

    with pytest.raises(RequestValidationException) as exc:
        await CreateFormResponseRequest(
            {"form_id": form.id, "data": {"team_size": "many", "plan": "gold"}}, make_context()
        ).validate()

    assert exc.value.errors == {
        "data.email": ["The data.email field is required."],
        "data.team_size": ["The data.team size field must be a number."],
        "data.plan": ["The selected data.plan is invalid."],
    }


@pytest.mark.requires_db
async def test_create_response_passes_and_sets_actor(seed, make_context) -> None:
    ws = await seed.workspace()
    user = await seed.user()
    form = await seed.form(ws, fields=FIELDS)
    data = {"form_id": form.id, "data": {"email": "ana@example.com", "plan": "pro"}}

    validated = await CreateFormResponseRequest(data, make_context(user)).validate()

    assert validated == {
        "form_id": form.id,
        "user_id": user.id,
        "data": {"email": "ana@example.com", "plan": "pro"},
    }


@pytest.mark.requires_db
async def test_create_response_for_missing_form(make_context) -> None:
    with pytest.raises(ResourceNotFoundException):
        await CreateFormResponseRequest(
            {"form_id": 4040, "data": {"email": "ana@example.com"}}, make_context()
        ).validate()


@pytest.mark.requires_db
async def test_update_keeps_required_fields_required(seed, make_context, db_session) -> None:
    ws = await seed.workspace()
    form = await seed.form(ws, fields=FIELDS)
    stored = await FormResponseRepository(db_session).create(
        {"form_id": form.id, "data": {"email": "ana@example.com"}}
    )

    with pytest.raises(RequestValidationException) as exc:
        await UpdateFormResponseRequest(
            {"data": {"plan": "free"}}, make_context(), current=stored
        ).validate()
    assert exc.value.errors == {"data.email": ["The data.email field is required."]}

    validated = await UpdateFormResponseRequest(
        {"data": {"email": "bo@example.com", "plan": "free"}}, make_context(), current=stored
    ).validate()
    assert validated == {"data": {"email": "bo@example.com", "plan": "free"}}


@pytest.mark.requires_db
async def test_update_without_data_skips_field_checks(seed, make_context, db_session) -> None:
    ws = await seed.workspace()
    form = await seed.form(ws, fields=FIELDS)
    stored = await FormResponseRepository(db_session).create(
        {"form_id": form.id, "data": {"email": "ana@example.com"}}
    )

    assert await UpdateFormResponseRequest({}, make_context(), current=stored).validate() == {}
