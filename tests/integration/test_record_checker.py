"""SqlRecordChecker: exists and unique probes used by validation rules."""

import pytest

from projecthub.infrastructure.persistence.record_checker import SqlRecordChecker


@pytest.mark.requires_db
async def test_exists(seed, db_session) -> None:
    ws = await seed.workspace()
    checker = SqlRecordChecker(db_session)

    assert await checker.exists("workspace", "id", ws.id) is True
    assert await checker.exists("workspace", "id", str(ws.id)) is True
    assert await checker.exists("workspace", "id", ws.id + 100) is False
    assert await checker.exists("workspace", "id", "abc") is False
    assert await checker.exists("workspace", "slug", ws.slug, {"id": ws.id}) is True


@pytest.mark.requires_db
async def test_unique_with_scope_and_ignore(seed, db_session) -> None:
    ws = await seed.workspace()
    field = await seed.custom_field(ws, key="severity", applies_to="tasks")
    checker = SqlRecordChecker(db_session)
    scope = {"workspace_id": ws.id, "applies_to": "tasks"}

    assert await checker.is_unique("custom_field", "key", "severity", scope) is False
    assert await checker.is_unique("custom_field", "key", "severity", scope, field.id) is True
    assert (
        await checker.is_unique(
            "custom_field", "key", "severity", {**scope, "applies_to": "projects"}
        )
        is True
    )


@pytest.mark.requires_db
async def test_null_scope_matches_global_rows(seed, db_session) -> None:
    from projecthub.infrastructure.persistence.repositories import SettingRepository

    await SettingRepository(db_session).set_value("ui.theme", "light")
    checker = SqlRecordChecker(db_session)

    assert await checker.is_unique("setting", "key", "ui.theme", {"workspace_id": None}) is False
    assert await checker.is_unique("setting", "key", "ui.theme", {"workspace_id": 1}) is True


@pytest.mark.requires_db
async def test_unknown_table(db_session) -> None:
    with pytest.raises(ValueError):
        await SqlRecordChecker(db_session).exists("nope", "id", 1)
