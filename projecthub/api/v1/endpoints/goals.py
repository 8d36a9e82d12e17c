"""Goal API."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Query, Request

from projecthub.api.v1.dependencies import CurrentActor, Gate, Goals, Listing, Validation
from projecthub.api.v1.endpoints.common import load_or_404
from projecthub.application.requests import CreateGoalRequest, UpdateGoalRequest
from projecthub.core.limiter import limit_writes
from projecthub.schemas.common import DeletedResponse, PageResponse
from projecthub.schemas.goal import GoalProgressRequest, GoalResponse

router = APIRouter()


@router.get("", response_model=PageResponse[GoalResponse])
async def list_goals(listing: Listing, repo: Goals):
    page = await repo.list(listing.filters, per_page=listing.per_page, page=listing.page)
    return PageResponse.from_page(page, GoalResponse)


@router.get("/active", response_model=list[GoalResponse])
async def active_goals(workspace_id: Annotated[int, Query()], repo: Goals):
    return [GoalResponse.model_validate(g) for g in await repo.get_active(workspace_id)]


@router.post("", response_model=GoalResponse, status_code=201)
@limit_writes
async def create_goal(
    request: Request,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: Goals,
):
    data = await CreateGoalRequest(body, context).validate()
    gate.authorize(actor, "create", "goal")
    return GoalResponse.model_validate(await repo.create(data))


@router.get("/{goal_id}", response_model=GoalResponse)
async def get_goal(goal_id: int, repo: Goals):
    return GoalResponse.model_validate(await load_or_404(repo, goal_id, "Goal"))


@router.patch("/{goal_id}", response_model=GoalResponse)
@limit_writes
async def update_goal(
    request: Request,
    goal_id: int,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: Goals,
):
    goal = await load_or_404(repo, goal_id, "Goal")
    data = await UpdateGoalRequest(body, context, current=goal).validate()
    gate.authorize(actor, "update", goal)
    return GoalResponse.model_validate(await repo.update(goal, data))


@router.post("/{goal_id}/progress", response_model=GoalResponse)
@limit_writes
async def update_progress(
    request: Request,
    goal_id: int,
    body: GoalProgressRequest,
    actor: CurrentActor,
    gate: Gate,
    repo: Goals,
):
    """Set progress; an active goal reaching 100 is completed."""
    goal = await load_or_404(repo, goal_id, "Goal")
    gate.authorize(actor, "update", goal)
    return GoalResponse.model_validate(await repo.update_progress(goal, body.progress))


@router.delete("/{goal_id}", response_model=DeletedResponse)
@limit_writes
async def delete_goal(
    request: Request, goal_id: int, actor: CurrentActor, gate: Gate, repo: Goals
):
    goal = await load_or_404(repo, goal_id, "Goal")
    gate.authorize(actor, "delete", goal)
    return DeletedResponse(deleted=await repo.delete(goal))
