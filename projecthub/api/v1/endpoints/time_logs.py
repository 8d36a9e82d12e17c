"""Time log API: timers and manual entries; at most one running timer per user."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Request

from projecthub.api.v1.dependencies import CurrentActor, Gate, Listing, TimeLogs, Validation
from projecthub.api.v1.endpoints.common import load_or_404
from projecthub.application.requests import CreateTimeLogRequest, UpdateTimeLogRequest
from projecthub.core.limiter import limit_writes
from projecthub.domain.exceptions import DomainInvariantException
from projecthub.schemas.common import DeletedResponse, PageResponse
from projecthub.schemas.time_log import StopTimeLogRequest, TaskTimeTotal, TimeLogResponse

router = APIRouter()


@router.get("", response_model=PageResponse[TimeLogResponse])
async def list_time_logs(listing: Listing, repo: TimeLogs):
    """List logs. Filters: user_id, task_id, is_billable, is_running, date_from, date_to."""
    page = await repo.list(listing.filters, per_page=listing.per_page, page=listing.page)
    return PageResponse.from_page(page, TimeLogResponse)


@router.get("/running", response_model=TimeLogResponse | None)
async def running_log(actor: CurrentActor, repo: TimeLogs):
    """The acting user's running log, or null."""
    log = await repo.find_running_for_user(actor.user_id)
    return TimeLogResponse.model_validate(log) if log else None


@router.get("/tasks/{task_id}/total", response_model=TaskTimeTotal)
async def task_total(task_id: int, repo: TimeLogs):
    return TaskTimeTotal(task_id=task_id, minutes=await repo.total_minutes(task_id))


@router.post("", response_model=TimeLogResponse, status_code=201)
@limit_writes
async def create_time_log(
    request: Request,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: TimeLogs,
):
    """Start a timer (no ended_at) or record a finished entry."""
    data = await CreateTimeLogRequest(body, context).validate()
    gate.authorize(actor, "create", "time_log")
    return TimeLogResponse.model_validate(await repo.create(data))


@router.get("/{log_id}", response_model=TimeLogResponse)
async def get_time_log(log_id: int, repo: TimeLogs):
    return TimeLogResponse.model_validate(await load_or_404(repo, log_id, "TimeLog"))


@router.patch("/{log_id}", response_model=TimeLogResponse)
@limit_writes
async def update_time_log(
    request: Request,
    log_id: int,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: TimeLogs,
):
    log = await load_or_404(repo, log_id, "TimeLog")
    data = await UpdateTimeLogRequest(body, context, current=log).validate()
    gate.authorize(actor, "update", log)
    return TimeLogResponse.model_validate(await repo.update(log, data))


@router.post("/{log_id}/stop", response_model=TimeLogResponse)
@limit_writes
async def stop_time_log(
    request: Request,
    log_id: int,
    actor: CurrentActor,
    gate: Gate,
    repo: TimeLogs,
    body: StopTimeLogRequest | None = None,
):
    """Stop a running log; duration is computed in whole minutes."""
    log = await load_or_404(repo, log_id, "TimeLog")
    gate.authorize(actor, "update", log)
    if log.ended_at is not None:
        raise DomainInvariantException(
            "Time log is already stopped", "time_log_running", time_log_id=log.id
        )
    return TimeLogResponse.model_validate(
        await repo.stop(log, body.ended_at if body else None)
    )


@router.delete("/{log_id}", response_model=DeletedResponse)
@limit_writes
async def delete_time_log(
    request: Request, log_id: int, actor: CurrentActor, gate: Gate, repo: TimeLogs
):
    log = await load_or_404(repo, log_id, "TimeLog")
    gate.authorize(actor, "delete", log)
    return DeletedResponse(deleted=await repo.delete(log))
