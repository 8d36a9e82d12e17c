"""Calendar event API: events and their participants."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Request

from projecthub.api.v1.dependencies import CurrentActor, Events, Gate, Listing, Validation
from projecthub.api.v1.endpoints.common import load_or_404
from projecthub.application.requests import (
    AddParticipantRequest,
    CreateEventRequest,
    ParticipantStatusRequest,
    UpdateEventRequest,
)
from projecthub.core.limiter import limit_writes
from projecthub.domain.exceptions import DomainInvariantException, ResourceNotFoundException
from projecthub.schemas.common import DeletedResponse, PageResponse
from projecthub.schemas.event import EventDetailResponse, EventParticipant, EventResponse

router = APIRouter()


async def _detail(repo: Events, event) -> EventDetailResponse:
    response = EventDetailResponse.model_validate(event)
    response.participants = [
        EventParticipant(**p) for p in await repo.get_participants(event)
    ]
    return response


@router.get("", response_model=PageResponse[EventResponse])
async def list_events(listing: Listing, repo: Events):
    page = await repo.list(listing.filters, per_page=listing.per_page, page=listing.page)
    return PageResponse.from_page(page, EventResponse)


@router.post("", response_model=EventDetailResponse, status_code=201)
@limit_writes
async def create_event(
    request: Request,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: Events,
):
    """Create an event; participants (user ids) are invited as pending."""
    data = await CreateEventRequest(body, context).validate()
    gate.authorize(actor, "create", "event")
    return await _detail(repo, await repo.create(data))


@router.get("/{event_id}", response_model=EventDetailResponse)
async def get_event(event_id: int, repo: Events):
    return await _detail(repo, await load_or_404(repo, event_id, "Event"))


@router.patch("/{event_id}", response_model=EventDetailResponse)
@limit_writes
async def update_event(
    request: Request,
    event_id: int,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: Events,
):
    event = await load_or_404(repo, event_id, "Event")
    data = await UpdateEventRequest(body, context, current=event).validate()
    gate.authorize(actor, "update", event)
    return await _detail(repo, await repo.update(event, data))


@router.delete("/{event_id}", response_model=DeletedResponse)
@limit_writes
async def delete_event(
    request: Request, event_id: int, actor: CurrentActor, gate: Gate, repo: Events
):
    event = await load_or_404(repo, event_id, "Event")
    gate.authorize(actor, "delete", event)
    return DeletedResponse(deleted=await repo.delete(event))


@router.post("/{event_id}/participants", response_model=EventDetailResponse, status_code=201)
@limit_writes
async def add_participant(
    request: Request,
    event_id: int,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: Events,
):
    event = await load_or_404(repo, event_id, "Event")
    data = await AddParticipantRequest(body, context).validate()
    gate.authorize(actor, "update", event)
    if not await repo.add_participant(event, data["user_id"], data["status"]):
        raise DomainInvariantException(
            "User is already a participant of this event",
            "event_participant_unique",
            event_id=event.id,
            user_id=data["user_id"],
        )
    return await _detail(repo, event)


@router.patch("/{event_id}/participants/{user_id}", response_model=EventDetailResponse)
@limit_writes
async def update_participant_status(
    request: Request,
    event_id: int,
    user_id: int,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: Events,
):
    event = await load_or_404(repo, event_id, "Event")
    data = await ParticipantStatusRequest(body, context).validate()
    gate.authorize(actor, "update", event)
    if not await repo.update_participant_status(event, user_id, data["status"]):
        raise ResourceNotFoundException("EventParticipant", user_id)
    return await _detail(repo, event)


@router.delete("/{event_id}/participants/{user_id}", response_model=EventDetailResponse)
@limit_writes
async def remove_participant(
    request: Request,
    event_id: int,
    user_id: int,
    actor: CurrentActor,
    gate: Gate,
    repo: Events,
):
    event = await load_or_404(repo, event_id, "Event")
    gate.authorize(actor, "update", event)
    if not await repo.remove_participant(event, user_id):
        raise ResourceNotFoundException("EventParticipant", user_id)
    return await _detail(repo, event)
