"""Recurring task API: schedules, due listing, instance generation and advancing."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Request

from projecthub.api.v1.dependencies import (
    CurrentActor,
    Gate,
    Listing,
    RecurringTasks,
    Validation,
)
from projecthub.api.v1.endpoints.common import load_or_404
from projecthub.application.requests import (
    CreateRecurringTaskRequest,
    UpdateRecurringTaskRequest,
)
from projecthub.core.limiter import limit_writes
from projecthub.schemas.common import DeletedResponse, PageResponse
from projecthub.schemas.task import RecurringTaskResponse, RecurringTaskStats, TaskResponse

router = APIRouter()


@router.get("", response_model=PageResponse[RecurringTaskResponse])
async def list_recurring_tasks(listing: Listing, repo: RecurringTasks):
    """List schedules. Filters: task_id, frequency, is_active, is_due."""
    page = await repo.list(listing.filters, per_page=listing.per_page, page=listing.page)
    return PageResponse.from_page(page, RecurringTaskResponse)


@router.get("/due", response_model=list[RecurringTaskResponse])
async def list_due(repo: RecurringTasks):
    """Active schedules whose next_due_date is today or earlier."""
    return [RecurringTaskResponse.model_validate(r) for r in await repo.get_due()]


@router.get("/stats", response_model=RecurringTaskStats)
async def stats(repo: RecurringTasks):
    return RecurringTaskStats(
        total=await repo.get_total_count(),
        active=await repo.get_active_count(),
        due=await repo.get_due_count(),
        by_frequency=await repo.get_count_by_frequency(),
    )


@router.post("", response_model=RecurringTaskResponse, status_code=201)
@limit_writes
async def create_recurring_task(
    request: Request,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: RecurringTasks,
):
    data = await CreateRecurringTaskRequest(body, context).validate()
    gate.authorize(actor, "create", "recurring_task")
    return RecurringTaskResponse.model_validate(await repo.create(data))


@router.get("/{recurring_id}", response_model=RecurringTaskResponse)
async def get_recurring_task(recurring_id: int, repo: RecurringTasks):
    return RecurringTaskResponse.model_validate(
        await load_or_404(repo, recurring_id, "RecurringTask")
    )


@router.patch("/{recurring_id}", response_model=RecurringTaskResponse)
@limit_writes
async def update_recurring_task(
    request: Request,
    recurring_id: int,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: RecurringTasks,
):
    recurring = await load_or_404(repo, recurring_id, "RecurringTask")
    data = await UpdateRecurringTaskRequest(body, context, current=recurring).validate()
    gate.authorize(actor, "update", recurring)
    return RecurringTaskResponse.model_validate(await repo.update(recurring, data))


@router.post("/{recurring_id}/advance", response_model=RecurringTaskResponse)
@limit_writes
async def advance_recurring_task(
    request: Request,
    recurring_id: int,
    actor: CurrentActor,
    gate: Gate,
    repo: RecurringTasks,
):
    """Move the schedule one period forward (called by the external job runner)."""
    recurring = await load_or_404(repo, recurring_id, "RecurringTask")
    gate.authorize(actor, "update", recurring)
    return RecurringTaskResponse.model_validate(await repo.advance(recurring))


@router.post("/{recurring_id}/generate", response_model=TaskResponse, status_code=201)
@limit_writes
async def generate_task_instance(
    request: Request,
    recurring_id: int,
    actor: CurrentActor,
    gate: Gate,
    repo: RecurringTasks,
):
    """Create the task due on next_due_date and advance the schedule."""
    recurring = await load_or_404(repo, recurring_id, "RecurringTask")
    gate.authorize(actor, "create", "task")
    return TaskResponse.model_validate(await repo.generate_instance(recurring))


@router.post("/{recurring_id}/activate", response_model=RecurringTaskResponse)
@limit_writes
async def activate_recurring_task(
    request: Request,
    recurring_id: int,
    actor: CurrentActor,
    gate: Gate,
    repo: RecurringTasks,
):
    recurring = await load_or_404(repo, recurring_id, "RecurringTask")
    gate.authorize(actor, "update", recurring)
    return RecurringTaskResponse.model_validate(await repo.activate(recurring))


@router.post("/{recurring_id}/deactivate", response_model=RecurringTaskResponse)
@limit_writes
async def deactivate_recurring_task(
    request: Request,
    recurring_id: int,
    actor: CurrentActor,
    gate: Gate,
    repo: RecurringTasks,
):
    recurring = await load_or_404(repo, recurring_id, "RecurringTask")
    gate.authorize(actor, "update", recurring)
    return RecurringTaskResponse.model_validate(await repo.deactivate(recurring))


@router.delete("/{recurring_id}", response_model=DeletedResponse)
@limit_writes
async def delete_recurring_task(
    request: Request,
    recurring_id: int,
    actor: CurrentActor,
    gate: Gate,
    repo: RecurringTasks,
):
    recurring = await load_or_404(repo, recurring_id, "RecurringTask")
    gate.authorize(actor, "delete", recurring)
    return DeletedResponse(deleted=await repo.delete(recurring))
