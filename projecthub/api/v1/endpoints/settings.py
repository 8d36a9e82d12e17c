"""Settings API: global and workspace-scoped typed key/value settings.

Lookups by key fall back from the workspace scope to the global one.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Query, Request

from projecthub.api.v1.dependencies import CurrentActor, Gate, Listing, Settings, Validation
from projecthub.api.v1.endpoints.common import load_or_404
from projecthub.application.requests import CreateSettingRequest, UpdateSettingRequest
from projecthub.core.limiter import limit_writes
from projecthub.domain.exceptions import ResourceNotFoundException
from projecthub.schemas.common import DeletedResponse, PageResponse
from projecthub.schemas.setting import SettingResponse, SettingValueResponse

router = APIRouter()


@router.get("", response_model=PageResponse[SettingResponse])
async def list_settings(listing: Listing, repo: Settings):
    page = await repo.list(listing.filters, per_page=listing.per_page, page=listing.page)
    return PageResponse.from_page(page, SettingResponse)


@router.get("/global", response_model=list[SettingResponse])
async def global_settings(repo: Settings):
    return [SettingResponse.model_validate(s) for s in await repo.get_global()]


@router.get("/workspace/{workspace_id}", response_model=list[SettingResponse])
async def workspace_settings(workspace_id: int, repo: Settings):
    return [SettingResponse.model_validate(s) for s in await repo.get_for_workspace(workspace_id)]


@router.get("/key/{key}", response_model=SettingResponse)
async def setting_by_key(
    key: str,
    repo: Settings,
    workspace_id: Annotated[int | None, Query()] = None,
):
    """The workspace setting for key, else the global one."""
    setting = await repo.get(key, workspace_id)
    if setting is None:
        raise ResourceNotFoundException("Setting", key)
    return SettingResponse.model_validate(setting)


@router.get("/key/{key}/value", response_model=SettingValueResponse)
async def setting_value(
    key: str,
    repo: Settings,
    workspace_id: Annotated[int | None, Query()] = None,
):
    """Typed value with workspace-to-global fallback; null when unset."""
    value = await repo.get_value(key, workspace_id)
    return SettingValueResponse(key=key, workspace_id=workspace_id, value=value)


@router.post("", response_model=SettingResponse, status_code=201)
@limit_writes
async def create_setting(
    request: Request,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: Settings,
):
    data = await CreateSettingRequest(body, context).validate()
    gate.authorize(actor, "create", "setting")
    return SettingResponse.model_validate(await repo.create(data))


@router.get("/{setting_id}", response_model=SettingResponse)
async def get_setting(setting_id: int, repo: Settings):
    return SettingResponse.model_validate(await load_or_404(repo, setting_id, "Setting"))


@router.patch("/{setting_id}", response_model=SettingResponse)
@limit_writes
async def update_setting(
    request: Request,
    setting_id: int,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: Settings,
):
    setting = await load_or_404(repo, setting_id, "Setting")
    data = await UpdateSettingRequest(body, context, current=setting).validate()
    gate.authorize(actor, "update", setting)
    return SettingResponse.model_validate(await repo.update(setting, data))


@router.delete("/{setting_id}", response_model=DeletedResponse)
@limit_writes
async def delete_setting(
    request: Request, setting_id: int, actor: CurrentActor, gate: Gate, repo: Settings
):
    setting = await load_or_404(repo, setting_id, "Setting")
    gate.authorize(actor, "delete", setting)
    return DeletedResponse(deleted=await repo.delete(setting))
