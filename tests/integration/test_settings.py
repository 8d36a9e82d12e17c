"""Settings: workspace-over-global lookup and typed storage."""

import pytest

from projecthub.infrastructure.persistence.repositories import SettingRepository


@pytest.mark.requires_db
async def test_workspace_value_overrides_global(seed, db_session) -> None:
    ws, other_ws = await seed.workspace(), await seed.workspace()
    repo = SettingRepository(db_session)
    await repo.set_value("ui.theme", "light")
    await repo.set_value("ui.theme", "dark", workspace_id=ws.id)

    assert await repo.get_value("ui.theme", ws.id) == "dark"
    assert await repo.get_value("ui.theme", other_ws.id) == "light"
    assert await repo.get_value("ui.theme") == "light"
    assert await repo.get_value("missing", ws.id, default="x") == "x"


@pytest.mark.requires_db
async def test_typed_values_round_trip(seed, db_session) -> None:
    repo = SettingRepository(db_session)
    await repo.set_value("beta", True, setting_type="boolean")
    await repo.set_value("max_items", 25, setting_type="integer")
    await repo.set_value("limits", {"a": [1, 2]}, setting_type="json")

    assert await repo.get_value("beta") is True
    assert await repo.get_value("max_items") == 25
    assert await repo.get_value("limits") == {"a": [1, 2]}
    assert (await repo.find_by_key("beta")).value == "1"


@pytest.mark.requires_db
async def test_set_value_overwrites_in_scope(seed, db_session) -> None:
    ws = await seed.workspace()
    repo = SettingRepository(db_session)
    first = await repo.set_value("limit", 1, workspace_id=ws.id, setting_type="integer")
    second = await repo.set_value("limit", 2, workspace_id=ws.id)

    assert second.id == first.id
    assert second.type == "integer"
    assert await repo.get_value("limit", ws.id) == 2
    assert [s.key for s in await repo.get_for_workspace(ws.id)] == ["limit"]
    assert await repo.get_global() == []
