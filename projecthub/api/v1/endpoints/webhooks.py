"""Webhook API: subscriptions and their delivery records.

Sending requests is out of process; these routes record outcomes and expose
the retry queue to the sender.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Query, Request

from projecthub.api.v1.dependencies import (
    CurrentActor,
    Gate,
    Listing,
    Validation,
    WebhookDeliveries,
    Webhooks,
)
from projecthub.api.v1.endpoints.common import load_or_404
from projecthub.application.requests import (
    CreateWebhookDeliveryRequest,
    CreateWebhookRequest,
    UpdateWebhookDeliveryRequest,
    UpdateWebhookRequest,
)
from projecthub.core.limiter import limit_writes
from projecthub.schemas.common import DeletedResponse, PageResponse
from projecthub.schemas.webhook import (
    DeliveryOutcome,
    WebhookDeliveryResponse,
    WebhookResponse,
)

router = APIRouter()
deliveries_router = APIRouter()


@router.get("", response_model=PageResponse[WebhookResponse])
async def list_webhooks(listing: Listing, repo: Webhooks):
    """List webhooks. The event filter matches membership in the events list."""
    page = await repo.list(listing.filters, per_page=listing.per_page, page=listing.page)
    return PageResponse.from_page(page, WebhookResponse)


@router.get("/active", response_model=list[WebhookResponse])
async def active_for_event(
    workspace_id: Annotated[int, Query()], event: Annotated[str, Query()], repo: Webhooks
):
    hooks = await repo.get_active_for_event(workspace_id, event)
    return [WebhookResponse.model_validate(h) for h in hooks]


@router.post("", response_model=WebhookResponse, status_code=201)
@limit_writes
async def create_webhook(
    request: Request,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: Webhooks,
):
    data = await CreateWebhookRequest(body, context).validate()
    gate.authorize(actor, "create", "webhook")
    return WebhookResponse.model_validate(await repo.create(data))


@router.get("/{webhook_id}", response_model=WebhookResponse)
async def get_webhook(webhook_id: int, repo: Webhooks):
    return WebhookResponse.model_validate(await load_or_404(repo, webhook_id, "Webhook"))


@router.patch("/{webhook_id}", response_model=WebhookResponse)
@limit_writes
async def update_webhook(
    request: Request,
    webhook_id: int,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: Webhooks,
):
    hook = await load_or_404(repo, webhook_id, "Webhook")
    data = await UpdateWebhookRequest(body, context, current=hook).validate()
    gate.authorize(actor, "update", hook)
    return WebhookResponse.model_validate(await repo.update(hook, data))


@router.delete("/{webhook_id}", response_model=DeletedResponse)
@limit_writes
async def delete_webhook(
    request: Request, webhook_id: int, actor: CurrentActor, gate: Gate, repo: Webhooks
):
    hook = await load_or_404(repo, webhook_id, "Webhook")
    gate.authorize(actor, "delete", hook)
    return DeletedResponse(deleted=await repo.delete(hook))


@router.get("/{webhook_id}/deliveries", response_model=list[WebhookDeliveryResponse])
async def deliveries_for_webhook(
    webhook_id: int, hooks: Webhooks, deliveries: WebhookDeliveries
):
    hook = await load_or_404(hooks, webhook_id, "Webhook")
    return [
        WebhookDeliveryResponse.model_validate(d) for d in await deliveries.get_by_webhook(hook.id)
    ]


@deliveries_router.get("", response_model=PageResponse[WebhookDeliveryResponse])
async def list_deliveries(listing: Listing, repo: WebhookDeliveries):
    page = await repo.list(listing.filters, per_page=listing.per_page, page=listing.page)
    return PageResponse.from_page(page, WebhookDeliveryResponse)


@deliveries_router.get("/retry-queue", response_model=list[WebhookDeliveryResponse])
async def retry_queue(repo: WebhookDeliveries):
    """Failed deliveries whose next attempt is due and that have attempts left."""
    return [
        WebhookDeliveryResponse.model_validate(d) for d in await repo.get_failed_ready_for_retry()
    ]


@deliveries_router.post("", response_model=WebhookDeliveryResponse, status_code=201)
@limit_writes
async def create_delivery(
    request: Request,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: WebhookDeliveries,
):
    data = await CreateWebhookDeliveryRequest(body, context).validate()
    gate.authorize(actor, "create", "webhook_delivery")
    return WebhookDeliveryResponse.model_validate(await repo.create(data))


@deliveries_router.get("/{delivery_id}", response_model=WebhookDeliveryResponse)
async def get_delivery(delivery_id: int, repo: WebhookDeliveries):
    return WebhookDeliveryResponse.model_validate(
        await load_or_404(repo, delivery_id, "WebhookDelivery")
    )


@deliveries_router.patch("/{delivery_id}", response_model=WebhookDeliveryResponse)
@limit_writes
async def update_delivery(
    request: Request,
    delivery_id: int,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: WebhookDeliveries,
):
    """Admin only under the default gate."""
    delivery = await load_or_404(repo, delivery_id, "WebhookDelivery")
    data = await UpdateWebhookDeliveryRequest(body, context, current=delivery).validate()
    gate.authorize(actor, "update", delivery)
    return WebhookDeliveryResponse.model_validate(await repo.update(delivery, data))


@deliveries_router.post("/{delivery_id}/delivered", response_model=WebhookDeliveryResponse)
@limit_writes
async def mark_delivered(
    request: Request,
    delivery_id: int,
    outcome: DeliveryOutcome,
    actor: CurrentActor,
    gate: Gate,
    repo: WebhookDeliveries,
):
    delivery = await load_or_404(repo, delivery_id, "WebhookDelivery")
    gate.authorize(actor, "update", delivery)
    updated = await repo.mark_as_delivered(
        delivery, outcome.response_code or 200, outcome.response_body
    )
    return WebhookDeliveryResponse.model_validate(updated)


@deliveries_router.post("/{delivery_id}/failed", response_model=WebhookDeliveryResponse)
@limit_writes
async def mark_failed(
    request: Request,
    delivery_id: int,
    outcome: DeliveryOutcome,
    actor: CurrentActor,
    gate: Gate,
    repo: WebhookDeliveries,
):
    """Record a failed attempt and schedule the next one with exponential backoff."""
    delivery = await load_or_404(repo, delivery_id, "WebhookDelivery")
    gate.authorize(actor, "update", delivery)
    delivery = await repo.mark_as_failed(delivery, outcome.response_code, outcome.response_body)
    return WebhookDeliveryResponse.model_validate(await repo.increment_attempts(delivery))


@deliveries_router.delete("/{delivery_id}", response_model=DeletedResponse)
@limit_writes
async def delete_delivery(
    request: Request,
    delivery_id: int,
    actor: CurrentActor,
    gate: Gate,
    repo: WebhookDeliveries,
):
    delivery = await load_or_404(repo, delivery_id, "WebhookDelivery")
    gate.authorize(actor, "delete", delivery)
    return DeletedResponse(deleted=await repo.delete(delivery))
