"""Custom field API: workspace field definitions and per-entity values."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Query, Request

from projecthub.api.v1.dependencies import (
    CurrentActor,
    CustomFields,
    CustomFieldValues,
    Gate,
    Listing,
    Validation,
)
from projecthub.api.v1.endpoints.common import load_or_404
from projecthub.application.requests import (
    CreateCustomFieldRequest,
    CreateCustomFieldValueRequest,
    UpdateCustomFieldRequest,
    UpdateCustomFieldValueRequest,
)
from projecthub.core.limiter import limit_writes
from projecthub.schemas.common import DeletedResponse, PageResponse
from projecthub.schemas.custom_field import CustomFieldResponse, CustomFieldValueResponse

router = APIRouter()
values_router = APIRouter()


@router.get("", response_model=PageResponse[CustomFieldResponse])
async def list_custom_fields(listing: Listing, repo: CustomFields):
    page = await repo.list(listing.filters, per_page=listing.per_page, page=listing.page)
    return PageResponse.from_page(page, CustomFieldResponse)


@router.get("/for-entity-type", response_model=list[CustomFieldResponse])
async def fields_for_entity_type(
    workspace_id: Annotated[int, Query()],
    applies_to: Annotated[str, Query()],
    repo: CustomFields,
):
    fields = await repo.get_for_entity_type(workspace_id, applies_to)
    return [CustomFieldResponse.model_validate(f) for f in fields]


@router.post("", response_model=CustomFieldResponse, status_code=201)
@limit_writes
async def create_custom_field(
    request: Request,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: CustomFields,
):
    data = await CreateCustomFieldRequest(body, context).validate()
    gate.authorize(actor, "create", "custom_field")
    return CustomFieldResponse.model_validate(await repo.create(data))


@router.get("/{field_id}", response_model=CustomFieldResponse)
async def get_custom_field(field_id: int, repo: CustomFields):
    return CustomFieldResponse.model_validate(await load_or_404(repo, field_id, "CustomField"))


@router.patch("/{field_id}", response_model=CustomFieldResponse)
@limit_writes
async def update_custom_field(
    request: Request,
    field_id: int,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: CustomFields,
):
    """Admin only under the default gate."""
    field = await load_or_404(repo, field_id, "CustomField")
    data = await UpdateCustomFieldRequest(body, context, current=field).validate()
    gate.authorize(actor, "update", field)
    return CustomFieldResponse.model_validate(await repo.update(field, data))


@router.delete("/{field_id}", response_model=DeletedResponse)
@limit_writes
async def delete_custom_field(
    request: Request, field_id: int, actor: CurrentActor, gate: Gate, repo: CustomFields
):
    field = await load_or_404(repo, field_id, "CustomField")
    gate.authorize(actor, "delete", field)
    return DeletedResponse(deleted=await repo.delete(field))


@values_router.get("", response_model=PageResponse[CustomFieldValueResponse])
async def list_values(listing: Listing, repo: CustomFieldValues):
    page = await repo.list(listing.filters, per_page=listing.per_page, page=listing.page)
    return PageResponse.from_page(page, CustomFieldValueResponse)


@values_router.get(
    "/entity/{entity_type}/{entity_id}", response_model=list[CustomFieldValueResponse]
)
async def values_for_entity(entity_type: str, entity_id: int, repo: CustomFieldValues):
    values = await repo.get_for_entity(entity_type, entity_id)
    return [CustomFieldValueResponse.model_validate(v) for v in values]


@values_router.post("", response_model=CustomFieldValueResponse, status_code=201)
@limit_writes
async def set_value(
    request: Request,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: CustomFieldValues,
):
    """Store the value for (field, entity), replacing any existing one.

    The value is checked against the field's type, options and required flag.
    """
    data = await CreateCustomFieldValueRequest(body, context).validate()
    gate.authorize(actor, "create", "custom_field_value")
    stored = await repo.set_value(
        data["custom_field_id"], data["entity_type"], data["entity_id"], data.get("value")
    )
    return CustomFieldValueResponse.model_validate(stored)


@values_router.get("/{value_id}", response_model=CustomFieldValueResponse)
async def get_value(value_id: int, repo: CustomFieldValues):
    return CustomFieldValueResponse.model_validate(
        await load_or_404(repo, value_id, "CustomFieldValue")
    )


@values_router.patch("/{value_id}", response_model=CustomFieldValueResponse)
@limit_writes
async def update_value(
    request: Request,
    value_id: int,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: CustomFieldValues,
):
    stored = await load_or_404(repo, value_id, "CustomFieldValue")
    data = await UpdateCustomFieldValueRequest(body, context, current=stored).validate()
    gate.authorize(actor, "update", stored)
    return CustomFieldValueResponse.model_validate(await repo.update(stored, data))


@values_router.delete("/{value_id}", response_model=DeletedResponse)
@limit_writes
async def delete_value(
    request: Request, value_id: int, actor: CurrentActor, gate: Gate, repo: CustomFieldValues
):
    stored = await load_or_404(repo, value_id, "CustomFieldValue")
    gate.authorize(actor, "delete", stored)
    return DeletedResponse(deleted=await repo.delete(stored))
