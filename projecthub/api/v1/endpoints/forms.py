"""Form API: form definitions and the responses submitted against them.

Responses are validated against the rules compiled from their form's field
definitions at request time.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Request

from projecthub.api.v1.dependencies import (
    CurrentActor,
    FormResponses,
    Forms,
    Gate,
    Listing,
    Validation,
)
from projecthub.api.v1.endpoints.common import load_or_404
from projecthub.application.requests import (
    CreateFormRequest,
    CreateFormResponseRequest,
    UpdateFormRequest,
    UpdateFormResponseRequest,
)
from projecthub.core.limiter import limit_writes
from projecthub.schemas.common import DeletedResponse, PageResponse
from projecthub.schemas.form import FormDefinitionResponse, FormSubmissionResponse

router = APIRouter()
responses_router = APIRouter()


@router.get("", response_model=PageResponse[FormDefinitionResponse])
async def list_forms(listing: Listing, repo: Forms):
    page = await repo.list(listing.filters, per_page=listing.per_page, page=listing.page)
    return PageResponse.from_page(page, FormDefinitionResponse)


@router.post("", response_model=FormDefinitionResponse, status_code=201)
@limit_writes
async def create_form(
    request: Request,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: Forms,
):
    """Create a form; the slug is derived from the name when omitted."""
    data = await CreateFormRequest(body, context).validate()
    gate.authorize(actor, "create", "form")
    return FormDefinitionResponse.model_validate(await repo.create(data))


@router.get("/{form_id}", response_model=FormDefinitionResponse)
async def get_form(form_id: int, repo: Forms):
    return FormDefinitionResponse.model_validate(await load_or_404(repo, form_id, "Form"))


@router.patch("/{form_id}", response_model=FormDefinitionResponse)
@limit_writes
async def update_form(
    request: Request,
    form_id: int,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: Forms,
):
    form = await load_or_404(repo, form_id, "Form")
    data = await UpdateFormRequest(body, context, current=form).validate()
    gate.authorize(actor, "update", form)
    return FormDefinitionResponse.model_validate(await repo.update(form, data))


@router.delete("/{form_id}", response_model=DeletedResponse)
@limit_writes
async def delete_form(
    request: Request, form_id: int, actor: CurrentActor, gate: Gate, repo: Forms
):
    form = await load_or_404(repo, form_id, "Form")
    gate.authorize(actor, "delete", form)
    return DeletedResponse(deleted=await repo.delete(form))


@router.get("/{form_id}/responses", response_model=list[FormSubmissionResponse])
async def list_form_responses(form_id: int, forms: Forms, responses: FormResponses):
    form = await load_or_404(forms, form_id, "Form")
    return [FormSubmissionResponse.model_validate(r) for r in await responses.get_by_form(form.id)]


@router.post("/{form_id}/responses", response_model=FormSubmissionResponse, status_code=201)
@limit_writes
async def submit_form_response(
    request: Request,
    form_id: int,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    responses: FormResponses,
):
    """Submit a response; data is checked against the form's field definitions."""
    data = await CreateFormResponseRequest({**body, "form_id": form_id}, context).validate()
    gate.authorize(actor, "create", "form_response")
    return FormSubmissionResponse.model_validate(await responses.create(data))


@responses_router.get("", response_model=PageResponse[FormSubmissionResponse])
async def list_responses(listing: Listing, repo: FormResponses):
    page = await repo.list(listing.filters, per_page=listing.per_page, page=listing.page)
    return PageResponse.from_page(page, FormSubmissionResponse)


@responses_router.get("/{response_id}", response_model=FormSubmissionResponse)
async def get_response(response_id: int, repo: FormResponses):
    return FormSubmissionResponse.model_validate(
        await load_or_404(repo, response_id, "FormResponse")
    )


@responses_router.patch("/{response_id}", response_model=FormSubmissionResponse)
@limit_writes
async def update_response(
    request: Request,
    response_id: int,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: FormResponses,
):
    submission = await load_or_404(repo, response_id, "FormResponse")
    data = await UpdateFormResponseRequest(body, context, current=submission).validate()
    gate.authorize(actor, "update", submission)
    return FormSubmissionResponse.model_validate(await repo.update(submission, data))


@responses_router.delete("/{response_id}", response_model=DeletedResponse)
@limit_writes
async def delete_response(
    request: Request, response_id: int, actor: CurrentActor, gate: Gate, repo: FormResponses
):
    submission = await load_or_404(repo, response_id, "FormResponse")
    gate.authorize(actor, "delete", submission)
    return DeletedResponse(deleted=await repo.delete(submission))
