"""Recurring task repository: due polling, instance generation and schedule edits."""

from datetime import date, timedelta

import pytest

from projecthub.domain.exceptions import DomainInvariantException
from projecthub.infrastructure.persistence.repositories import RecurringTaskRepository
from projecthub.shared.utils.datetime import utc_today


async def _schedule(seed, ws, user, **values):
    task = await seed.task(ws, user)
    return await seed.recurring(task, **values)


@pytest.mark.requires_db
async def test_get_due_returns_active_schedules_due_today_or_earlier(seed, db_session) -> None:
    ws = await seed.workspace()
    user = await seed.user()
    today = utc_today()
    overdue = await _schedule(seed, ws, user, next_due_date=today - timedelta(days=3))
    due_today = await _schedule(seed, ws, user, next_due_date=today)
    await _schedule(seed, ws, user, next_due_date=today + timedelta(days=1))
    await _schedule(seed, ws, user, next_due_date=today - timedelta(days=1), is_active=False)
    repo = RecurringTaskRepository(db_session)

    due = await repo.get_due()

    assert [r.id for r in due] == [overdue.id, due_today.id]
    assert await repo.get_due_count() == 2
    assert await repo.get_active_count() == 3
    assert await repo.get_total_count() == 4


@pytest.mark.requires_db
async def test_generate_instance_copies_template_and_advances(seed, db_session) -> None:
    ws = await seed.workspace()
    user = await seed.user()
    template = await seed.task(ws, user, title="Weekly report", priority="high", story_points=3)
    recurring = await seed.recurring(
        template, frequency="weekly", next_due_date=date(2026, 3, 2)
    )
    repo = RecurringTaskRepository(db_session)

    instance = await repo.generate_instance(recurring)

    assert instance.id != template.id
    assert instance.title == "Weekly report"
    assert instance.priority == "high"
    assert instance.story_points == 3
    assert instance.workspace_id == ws.id
    assert instance.due_date == date(2026, 3, 2)
    assert instance.metadata_ == {"recurring_task_id": recurring.id}
    assert recurring.next_due_date == date(2026, 3, 9)
    assert recurring.last_generated_at is not None


@pytest.mark.requires_db
async def test_generate_instance_on_last_period_deactivates(seed, db_session) -> None:
    ws = await seed.workspace()
    user = await seed.user()
    recurring = await _schedule(
        seed, ws, user, next_due_date=date(2026, 3, 2), end_date=date(2026, 3, 2)
    )
    repo = RecurringTaskRepository(db_session)

    await repo.generate_instance(recurring)

    assert recurring.is_active is False
    with pytest.raises(DomainInvariantException) as exc:
        await repo.generate_instance(recurring)
    assert exc.value.details["invariant"] == "recurring_task_active"


@pytest.mark.requires_db
async def test_frequency_change_recomputes_next_due_date(seed, db_session) -> None:
    ws = await seed.workspace()
    user = await seed.user()
    recurring = await _schedule(seed, ws, user, next_due_date=date(2026, 1, 5))
    repo = RecurringTaskRepository(db_session)

    await repo.update(recurring, {"frequency": "weekly"})
    assert recurring.next_due_date == date(2026, 1, 12)

    await repo.update(recurring, {"interval": 2})
    assert recurring.next_due_date == date(2026, 1, 26)

    await repo.update(recurring, {"frequency": "weekly", "interval": 2})
    assert recurring.next_due_date == date(2026, 1, 26)

    await repo.update(recurring, {"frequency": "monthly", "next_due_date": date(2026, 2, 1)})
    assert recurring.next_due_date == date(2026, 2, 1)


@pytest.mark.requires_db
async def test_activate_and_deactivate(seed, db_session) -> None:
    ws = await seed.workspace()
    user = await seed.user()
    recurring = await _schedule(seed, ws, user, next_due_date=utc_today())
    repo = RecurringTaskRepository(db_session)

    await repo.deactivate(recurring)
    assert recurring.is_active is False
    assert await repo.get_due() == []

    await repo.activate(recurring)
    assert recurring.is_active is True
    assert [r.id for r in await repo.get_due()] == [recurring.id]


@pytest.mark.requires_db
async def test_count_by_frequency_counts_active_schedules(seed, db_session) -> None:
    ws = await seed.workspace()
    user = await seed.user()
    await _schedule(seed, ws, user, frequency="daily")
    await _schedule(seed, ws, user, frequency="daily")
    await _schedule(seed, ws, user, frequency="monthly", day_of_month=1)
    await _schedule(seed, ws, user, frequency="weekly", is_active=False)

    counts = await RecurringTaskRepository(db_session).get_count_by_frequency()

    assert counts == {"daily": 2, "monthly": 1}
