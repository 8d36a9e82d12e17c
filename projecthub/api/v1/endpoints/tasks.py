"""Task API: CRUD plus milestone and dependency relations."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Request

from projecthub.api.v1.dependencies import CurrentActor, Gate, Listing, Tasks, Validation
from projecthub.api.v1.endpoints.common import load_or_404
from projecthub.application.requests import CreateTaskRequest, UpdateTaskRequest
from projecthub.core.limiter import limit_writes
from projecthub.schemas.common import DeletedResponse, PageResponse
from projecthub.schemas.task import TaskDependency, TaskDetailResponse, TaskResponse

router = APIRouter()


async def _detail(repo: Tasks, task) -> TaskDetailResponse:
    response = TaskDetailResponse.model_validate(task)
    response.milestone_ids = await repo.get_milestone_ids(task)
    response.dependencies = [
        TaskDependency(dependency_id=dep_id, type=dep_type)
        for dep_id, dep_type in await repo.get_dependencies(task)
    ]
    return response


@router.get("", response_model=PageResponse[TaskResponse])
async def list_tasks(listing: Listing, repo: Tasks):
    """List tasks. Filters: workspace_id, project_id, status_id, assignee_id, search, ..."""
    page = await repo.list(listing.filters, per_page=listing.per_page, page=listing.page)
    return PageResponse.from_page(page, TaskResponse)


@router.post("", response_model=TaskDetailResponse, status_code=201)
@limit_writes
async def create_task(
    request: Request,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: Tasks,
):
    data = await CreateTaskRequest(body, context).validate()
    gate.authorize(actor, "create", "task")
    task = await repo.create(data)
    return await _detail(repo, task)


@router.get("/{task_id}", response_model=TaskDetailResponse)
async def get_task(task_id: int, repo: Tasks):
    task = await load_or_404(repo, task_id, "Task")
    return await _detail(repo, task)


@router.patch("/{task_id}", response_model=TaskDetailResponse)
@limit_writes
async def update_task(
    request: Request,
    task_id: int,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: Tasks,
):
    """Partial update. milestone_ids / dependency_ids, when sent, replace the stored sets."""
    task = await load_or_404(repo, task_id, "Task")
    data = await UpdateTaskRequest(body, context, current=task).validate()
    gate.authorize(actor, "update", task)
    task = await repo.update(task, data)
    return await _detail(repo, task)


@router.delete("/{task_id}", response_model=DeletedResponse)
@limit_writes
async def delete_task(
    request: Request, task_id: int, actor: CurrentActor, gate: Gate, repo: Tasks
):
    task = await load_or_404(repo, task_id, "Task")
    gate.authorize(actor, "delete", task)
    return DeletedResponse(deleted=await repo.delete(task))
