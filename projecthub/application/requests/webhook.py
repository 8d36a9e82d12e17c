"""Webhook and webhook delivery requests."""

from __future__ import annotations

from projecthub.application.requests.base import ValidatedRequest
from projecthub.application.validation.rules import (
    After,
    Exists,
    In,
    IsType,
    Max,
    Min,
    Nullable,
    Required,
    Rule,
    RuleContext,
    Sometimes,
)
from projecthub.domain.enums import DeliveryStatus, WebhookEvent

MESSAGES = {
    "workspace_id.required": "A workspace must be selected.",
    "workspace_id.exists": "The selected workspace does not exist.",
    "events.required": "At least one event must be selected.",
    "events.min": "At least one event must be selected.",
    "events.*.in": "Invalid event type selected.",
    "retry_count.max": "Retry count cannot exceed 10.",
    "webhook_id.required": "The webhook ID is required.",
    "webhook_id.exists": "The selected webhook does not exist.",
    "event.required": "The event name is required.",
    "payload.required": "The payload is required.",
    "payload.array": "The payload must be a valid JSON object.",
    "response_code": "Response code must be a valid HTTP status code.",
    "status.in": "The status must be one of: " + ", ".join(DeliveryStatus.values()),
    "attempts.max": "Maximum number of attempts is 10.",
    "next_attempt_at.after": "Next attempt time must be in the future.",
}


def _webhook_rules(presence: Rule) -> dict[str, list[Rule]]:
    return {
        "name": [presence, IsType("string"), Max(255)],
        "url": [presence, IsType("url"), Max(2048)],
        "events": [
            presence,
            Required(message=MESSAGES["events.required"]),
            IsType("array"),
            Min(1, message=MESSAGES["events.min"]),
        ],
        "events.*": [IsType("string"), In(WebhookEvent.values(), message=MESSAGES["events.*.in"])],
        "secret": [Nullable(), IsType("string"), Max(255)],
        "is_active": [Sometimes(), IsType("boolean")],
        "retry_count": [
            Sometimes(),
            IsType("integer"),
            Min(0),
            Max(10, message=MESSAGES["retry_count.max"]),
        ],
    }


class CreateWebhookRequest(ValidatedRequest):
    def rules(self) -> dict[str, list[Rule]]:
        return {
            "workspace_id": [
                Required(message=MESSAGES["workspace_id.required"]),
                IsType("integer"),
                Exists("workspace", message=MESSAGES["workspace_id.exists"]),
            ],
            **_webhook_rules(Required()),
        }


class UpdateWebhookRequest(ValidatedRequest):
    def rules(self) -> dict[str, list[Rule]]:
        return _webhook_rules(Sometimes())


class _JsonDocument(Rule):
    """JSON object or array."""

    def check(self, ctx: RuleContext) -> str | None:
        if isinstance(ctx.value, (dict, list)):
            return None
        return self._msg(f"The {ctx.attribute} field must be an array.")


def _delivery_rules() -> dict[str, list[Rule]]:
    return {
        "response_code": [
            Nullable(),
            IsType("integer"),
            Min(100, message=MESSAGES["response_code"]),
            Max(599, message=MESSAGES["response_code"]),
        ],
        "response_body": [Nullable(), IsType("string")],
        "status": [Sometimes(), In(DeliveryStatus.values(), message=MESSAGES["status.in"])],
        "attempts": [
            Sometimes(),
            IsType("integer"),
            Min(0),
            Max(10, message=MESSAGES["attempts.max"]),
        ],
    }


class CreateWebhookDeliveryRequest(ValidatedRequest):
    def prepare(self) -> None:
        self.data.setdefault("status", DeliveryStatus.PENDING.value)
        self.data.setdefault("attempts", 0)

    def rules(self) -> dict[str, list[Rule]]:
        return {
            "webhook_id": [
                Required(message=MESSAGES["webhook_id.required"]),
                IsType("integer"),
                Exists("webhook", message=MESSAGES["webhook_id.exists"]),
            ],
            "event": [
                Required(message=MESSAGES["event.required"]),
                IsType("string"),
                Max(255),
            ],
            "payload": [
                Required(message=MESSAGES["payload.required"]),
                _JsonDocument(message=MESSAGES["payload.array"]),
            ],
            "next_attempt_at": [
                Nullable(),
                IsType("date"),
                After("now", message=MESSAGES["next_attempt_at.after"]),
            ],
            **_delivery_rules(),
        }


class UpdateWebhookDeliveryRequest(ValidatedRequest):
    def rules(self) -> dict[str, list[Rule]]:
        return {
            "webhook_id": [
                Sometimes(),
                Required(),
                IsType("integer"),
                Exists("webhook", message=MESSAGES["webhook_id.exists"]),
            ],
            "event": [
                Sometimes(),
                Required(message=MESSAGES["event.required"]),
                IsType("string"),
                Max(255),
            ],
            "payload": [
                Sometimes(),
                Required(message=MESSAGES["payload.required"]),
                _JsonDocument(message=MESSAGES["payload.array"]),
            ],
            "next_attempt_at": [Sometimes(), Nullable(), IsType("date")],
            **_delivery_rules(),
        }
