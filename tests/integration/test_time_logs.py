"""Time logs: one running timer per user."""

from datetime import UTC, datetime, timedelta

import pytest

from projecthub.application.requests import CreateTimeLogRequest, UpdateTimeLogRequest
from projecthub.domain.exceptions import RequestValidationException
from projecthub.infrastructure.persistence.repositories import TimeLogRepository
from projecthub.shared.utils.datetime import ensure_utc, utc_now

RUNNING = "User already has a running time log. Please stop it first."


async def _user_with_task(seed):
    ws = await seed.workspace()
    user = await seed.user()
    task = await seed.task(ws, user)
    return ws, user, task


@pytest.mark.requires_db
async def test_second_running_log_rejected(seed, make_context) -> None:
    ws, user, task = await _user_with_task(seed)
    await seed.time_log(ws, user, task)
    data = {
        "workspace_id": ws.id,
        "user_id": user.id,
        "task_id": task.id,
        "started_at": (utc_now() - timedelta(minutes=5)).isoformat(),
    }
    with pytest.raises(RequestValidationException) as exc:
        await CreateTimeLogRequest(data, make_context()).validate()
    assert exc.value.errors == {"user_id": [RUNNING]}


@pytest.mark.requires_db
async def test_completed_log_allowed_while_running(seed, make_context) -> None:
    """A log created with ended_at never counts as running."""
    ws, user, task = await _user_with_task(seed)
    await seed.time_log(ws, user, task)
    start = utc_now() - timedelta(hours=2)
    data = {
        "workspace_id": ws.id,
        "user_id": user.id,
        "task_id": task.id,
        "started_at": start.isoformat(),
        "ended_at": (start + timedelta(minutes=30)).isoformat(),
    }
    validated = await CreateTimeLogRequest(data, make_context()).validate()
    assert validated["is_billable"] is False


@pytest.mark.requires_db
async def test_other_users_timer_does_not_block(seed, make_context) -> None:
    ws, user, task = await _user_with_task(seed)
    other = await seed.user()
    await seed.time_log(ws, other, task)
    data = {
        "workspace_id": ws.id,
        "user_id": user.id,
        "task_id": task.id,
        "started_at": utc_now().isoformat(),
    }
    assert (await CreateTimeLogRequest(data, make_context()).validate())["user_id"] == user.id


@pytest.mark.requires_db
async def test_reopening_a_stopped_log_is_checked(seed, make_context) -> None:
    ws, user, task = await _user_with_task(seed)
    await seed.time_log(ws, user, task)
    stopped = await seed.time_log(
        ws,
        user,
        task,
        started_at=datetime(2026, 1, 4, 9, 0, tzinfo=UTC),
        ended_at=datetime(2026, 1, 4, 10, 0, tzinfo=UTC),
        duration=60,
    )
    with pytest.raises(RequestValidationException) as exc:
        await UpdateTimeLogRequest({"ended_at": None}, make_context(), stopped).validate()
    assert exc.value.errors == {"user_id": [RUNNING]}


@pytest.mark.requires_db
async def test_billable_requires_rate(seed, make_context) -> None:
    ws, user, task = await _user_with_task(seed)
    data = {
        "workspace_id": ws.id,
        "user_id": user.id,
        "task_id": task.id,
        "started_at": utc_now().isoformat(),
        "is_billable": True,
    }
    with pytest.raises(RequestValidationException) as exc:
        await CreateTimeLogRequest(data, make_context()).validate()
    assert exc.value.errors == {"hourly_rate": ["Hourly rate is required for billable time logs."]}


@pytest.mark.requires_db
async def test_stop_computes_duration(seed, db_session) -> None:
    ws, user, task = await _user_with_task(seed)
    log = await seed.time_log(ws, user, task, started_at=datetime(2026, 1, 5, 9, 0, tzinfo=UTC))
    repo = TimeLogRepository(db_session)
    assert await repo.has_running_log(user.id) is True

    stopped = await repo.stop(log, ended_at=datetime(2026, 1, 5, 9, 30, 20, tzinfo=UTC))
    assert stopped.duration == 31
    assert ensure_utc(stopped.ended_at) == datetime(2026, 1, 5, 9, 30, 20, tzinfo=UTC)
    assert await repo.has_running_log(user.id) is False
    assert await repo.total_minutes(task.id) == 31
