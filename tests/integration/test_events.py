"""Events: participant rows managed alongside the event."""

from datetime import UTC, datetime

import pytest

from projecthub.infrastructure.persistence.repositories import EventRepository


@pytest.mark.requires_db
async def test_participants_created_and_replaced(seed, db_session) -> None:
    ws = await seed.workspace()
    a, b, c = await seed.user(), await seed.user(), await seed.user()
    repo = EventRepository(db_session)
    event = await repo.create(
        {
            "workspace_id": ws.id,
            "title": "Planning",
            "start_date": "2026-11-02T10:00:00Z",
            "participants": [a.id, b.id, a.id],
        }
    )
    assert [p["user_id"] for p in await repo.get_participants(event)] == [a.id, b.id]
    assert event.start_date.replace(tzinfo=UTC) == datetime(2026, 11, 2, 10, 0, tzinfo=UTC)

    await repo.update(event, {"participants": [b.id, c.id]})
    assert [p["user_id"] for p in await repo.get_participants(event)] == [b.id, c.id]


@pytest.mark.requires_db
async def test_participant_status(seed, db_session) -> None:
    ws = await seed.workspace()
    user = await seed.user()
    repo = EventRepository(db_session)
    event = await repo.create(
        {"workspace_id": ws.id, "title": "Demo", "start_date": "2026-11-02T10:00:00Z"}
    )

    assert await repo.add_participant(event, user.id) is True
    assert await repo.add_participant(event, user.id) is False
    assert await repo.update_participant_status(event, user.id, "accepted") is True
    assert await repo.get_participants(event) == [{"user_id": user.id, "status": "accepted"}]
    assert await repo.remove_participant(event, user.id) is True
    assert await repo.update_participant_status(event, user.id, "declined") is False
