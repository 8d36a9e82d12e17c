"""Webhook API schemas. Secrets are write-only."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from projecthub.schemas.common import Timestamped


class WebhookResponse(Timestamped):
    workspace_id: int
    name: str
    url: str
    events: list[str]
    is_active: bool
    retry_count: int


class WebhookDeliveryResponse(Timestamped):
    webhook_id: int
    event: str
    payload: dict[str, Any] | list[Any]
    response_code: int | None = None
    response_body: str | None = None
    status: str
    attempts: int
    next_attempt_at: datetime | None = None


class DeliveryOutcome(BaseModel):
    """Result of one delivery attempt reported by the sender."""

    response_code: int | None = Field(default=None, ge=100, le=599)
    response_body: str | None = None
