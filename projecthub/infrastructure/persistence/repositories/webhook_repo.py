"""Webhook and webhook delivery repositories."""

from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy import String, cast, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from projecthub.core.config import get_settings
from projecthub.domain.enums import DeliveryStatus
from projecthub.infrastructure.persistence.filters import (
    LIKE_ESCAPE,
    FilterSpec,
    json_member_pattern,
)
from projecthub.infrastructure.persistence.models.webhook import Webhook, WebhookDelivery
from projecthub.infrastructure.persistence.repositories.base import BaseRepository
from projecthub.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class WebhookRepository(BaseRepository[Webhook]):
    """Webhook subscriptions. The 'event' filter matches inside the JSON events list."""

    filter_spec = FilterSpec(
        exact=("workspace_id", "is_active"),
        search=("name", "url"),
        json_contains={"event": "events"},
        order_by=(("created_at", "desc"),),
    )

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Webhook)

    async def get_active_for_event(self, workspace_id: int, event: str) -> list[Webhook]:
        result = await self.db.execute(
            select(Webhook).where(
                Webhook.workspace_id == workspace_id,
                Webhook.is_active.is_(True),
                cast(Webhook.events, String).like(json_member_pattern(event), escape=LIKE_ESCAPE),
            )
        )
        # Substring match is a prefilter; confirm exact membership.
        return [w for w in result.scalars().all() if event in (w.events or [])]


class WebhookDeliveryRepository(BaseRepository[WebhookDelivery]):
    """Delivery records. Retry scheduling is recorded here and executed elsewhere."""

    filter_spec = FilterSpec(
        exact=("webhook_id", "status"),
        like={"event": "event"},
        order_by=(("created_at", "desc"),),
    )

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, WebhookDelivery)

    async def mark_as_delivered(
        self, delivery: WebhookDelivery, response_code: int, response_body: str | None = None
    ) -> WebhookDelivery:
        return await self.update(
            delivery,
            {
                "status": DeliveryStatus.DELIVERED.value,
                "response_code": response_code,
                "response_body": response_body,
                "next_attempt_at": None,
            },
        )

    async def mark_as_failed(
        self,
        delivery: WebhookDelivery,
        response_code: int | None = None,
        response_body: str | None = None,
    ) -> WebhookDelivery:
        """Mark failed and schedule the next attempt at now + 2^attempts minutes.

        attempts is read as stored; incrementing it is increment_attempts().
        """
        backoff = timedelta(minutes=2**delivery.attempts)
        next_attempt_at = utc_now() + backoff
        logger.warning(
            "Webhook delivery %s failed (code=%s, attempts=%s); next attempt at %s",
            delivery.id,
            response_code,
            delivery.attempts,
            next_attempt_at.isoformat(),
        )
        return await self.update(
            delivery,
            {
                "status": DeliveryStatus.FAILED.value,
                "response_code": response_code,
                "response_body": response_body,
                "next_attempt_at": next_attempt_at,
            },
        )

    async def increment_attempts(self, delivery: WebhookDelivery) -> WebhookDelivery:
        return await self.update(delivery, {"attempts": delivery.attempts + 1})

    async def get_failed_ready_for_retry(self) -> list[WebhookDelivery]:
        """Failed deliveries due for retry (next_attempt_at unset or past, attempts below max)."""
        max_attempts = get_settings().webhook_max_attempts
        result = await self.db.execute(
            select(WebhookDelivery)
            .where(
                WebhookDelivery.status == DeliveryStatus.FAILED.value,
                or_(
                    WebhookDelivery.next_attempt_at.is_(None),
                    WebhookDelivery.next_attempt_at <= utc_now(),
                ),
                WebhookDelivery.attempts < max_attempts,
            )
            .order_by(WebhookDelivery.next_attempt_at, WebhookDelivery.id)
        )
        return list(result.scalars().all())

    async def get_by_webhook(self, webhook_id: int) -> list[WebhookDelivery]:
        result = await self.db.execute(
            select(WebhookDelivery)
            .where(WebhookDelivery.webhook_id == webhook_id)
            .order_by(WebhookDelivery.created_at.desc(), WebhookDelivery.id.desc())
        )
        return list(result.scalars().all())

    async def get_by_status(self, status: str) -> list[WebhookDelivery]:
        result = await self.db.execute(
            select(WebhookDelivery)
            .where(WebhookDelivery.status == status)
            .order_by(WebhookDelivery.created_at.desc(), WebhookDelivery.id.desc())
        )
        return list(result.scalars().all())