"""Webhook deliveries: retry backoff and the retry queue."""

from datetime import timedelta

import pytest

from projecthub.infrastructure.persistence.repositories import (
    WebhookDeliveryRepository,
    WebhookRepository,
)
from projecthub.shared.utils.datetime import ensure_utc, utc_now


@pytest.mark.requires_db
async def test_failure_backoff_doubles_per_attempt(seed, db_session) -> None:
    """With three attempts made, the next try is eight minutes out."""
    ws = await seed.workspace()
    hook = await seed.webhook(ws)
    delivery = await seed.delivery(hook, attempts=3)
    repo = WebhookDeliveryRepository(db_session)

    before = utc_now()
    failed = await repo.mark_as_failed(delivery, 500, "boom")
    after = utc_now()

    assert failed.status == "failed"
    assert failed.attempts == 3
    next_at = ensure_utc(failed.next_attempt_at)
    assert before + timedelta(minutes=8) - timedelta(seconds=1) <= next_at
    assert next_at <= after + timedelta(minutes=8) + timedelta(seconds=1)

    bumped = await repo.increment_attempts(failed)
    assert bumped.attempts == 4


@pytest.mark.requires_db
async def test_retry_queue(seed, db_session) -> None:
    """Due failures below the attempt cap are returned; the rest are not."""
    ws = await seed.workspace()
    hook = await seed.webhook(ws)
    past = utc_now() - timedelta(minutes=1)
    due = await seed.delivery(hook, status="failed", attempts=2, next_attempt_at=past)
    never_scheduled = await seed.delivery(hook, status="failed", attempts=0)
    await seed.delivery(hook, status="failed", attempts=5, next_attempt_at=past)
    await seed.delivery(
        hook, status="failed", attempts=1, next_attempt_at=utc_now() + timedelta(hours=1)
    )
    await seed.delivery(hook, status="pending")
    await seed.delivery(hook, status="delivered", attempts=1)

    ready = await WebhookDeliveryRepository(db_session).get_failed_ready_for_retry()

    assert {d.id for d in ready} == {due.id, never_scheduled.id}


@pytest.mark.requires_db
async def test_mark_delivered_clears_schedule(seed, db_session) -> None:
    ws = await seed.workspace()
    hook = await seed.webhook(ws)
    delivery = await seed.delivery(hook, status="failed", next_attempt_at=utc_now())

    done = await WebhookDeliveryRepository(db_session).mark_as_delivered(delivery, 204)

    assert done.status == "delivered"
    assert done.response_code == 204
    assert done.next_attempt_at is None


@pytest.mark.requires_db
async def test_active_webhooks_for_event(seed, db_session) -> None:
    ws = await seed.workspace()
    subscribed = await seed.webhook(ws, events=["task.created", "task.updated"])
    await seed.webhook(ws, events=["task.deleted"])
    await seed.webhook(ws, events=["task.created"], is_active=False)

    found = await WebhookRepository(db_session).get_active_for_event(ws.id, "task.updated")

    assert [w.id for w in found] == [subscribed.id]
