"""Setting repository: workspace settings with global (NULL workspace) fallback."""

from __future__ import annotations

import json
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from projecthub.domain.enums import SettingType
from projecthub.infrastructure.persistence.filters import FilterSpec, coerce_bool
from projecthub.infrastructure.persistence.models.setting import Setting
from projecthub.infrastructure.persistence.repositories.base import BaseRepository


def encode_setting_value(value: Any, setting_type: str) -> str | None:
    """Serialize a Python value to the stored text form for setting_type."""
    if value is None:
        return None
    if setting_type == SettingType.JSON:
        return value if isinstance(value, str) else json.dumps(value)
    if setting_type == SettingType.BOOLEAN:
        flag = coerce_bool(value)
        return "1" if flag else "0"
    return str(value)


class SettingRepository(BaseRepository[Setting]):
    """Settings keyed by (workspace_id, key); workspace_id NULL is global."""

    filter_spec = FilterSpec(
        exact=("workspace_id", "type"),
        like={"key": "key"},
        order_by=(("key", "asc"),),
    )

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Setting)

    def _extra_predicates(self, filters: dict[str, Any]) -> list[ColumnElement[bool]]:
        is_global = coerce_bool(filters.get("global"))
        if is_global is None:
            return []
        return [Setting.workspace_id.is_(None) if is_global else Setting.workspace_id.is_not(None)]

    async def create(self, data: dict[str, Any]) -> Setting:
        setting_type = data.get("type") or SettingType.STRING.value
        values = {**data, "type": setting_type}
        if "value" in data:
            values["value"] = encode_setting_value(data["value"], setting_type)
        return await super().create(values)

    async def update(self, setting: Setting, data: dict[str, Any]) -> Setting:
        values = dict(data)
        if "value" in data:
            values["value"] = encode_setting_value(
                data["value"], data.get("type") or setting.type
            )
        return await super().update(setting, values)

    async def find_by_key(self, key: str, workspace_id: int | None = None) -> Setting | None:
        """Exact lookup in one scope (workspace_id None means the global scope)."""
        scope = (
            Setting.workspace_id.is_(None)
            if workspace_id is None
            else Setting.workspace_id == workspace_id
        )
        result = await self.db.execute(select(Setting).where(Setting.key == key, scope))
        return result.scalar_one_or_none()

    async def get(self, key: str, workspace_id: int | None = None) -> Setting | None:
        """Workspace setting if present, else the global one."""
        if workspace_id is not None:
            found = await self.find_by_key(key, workspace_id)
            if found is not None:
                return found
        return await self.find_by_key(key, None)

    async def get_value(
        self, key: str, workspace_id: int | None = None, default: Any = None
    ) -> Any:
        setting = await self.get(key, workspace_id)
        if setting is None or setting.value is None:
            return default
        return setting.typed_value

    async def set_value(
        self,
        key: str,
        value: Any,
        workspace_id: int | None = None,
        setting_type: str | None = None,
    ) -> Setting:
        """Create or overwrite the setting in exactly the given scope."""
        existing = await self.find_by_key(key, workspace_id)
        resolved_type = setting_type or (existing.type if existing else SettingType.STRING.value)
        if existing is not None:
            return await self.update(existing, {"value": value, "type": resolved_type})
        return await self.create(
            {"workspace_id": workspace_id, "key": key, "value": value, "type": resolved_type}
        )

    async def get_global(self) -> list[Setting]:
        result = await self.db.execute(
            select(Setting).where(Setting.workspace_id.is_(None)).order_by(Setting.key)
        )
        return list(result.scalars().all())

    async def get_for_workspace(self, workspace_id: int) -> list[Setting]:
        result = await self.db.execute(
            select(Setting).where(Setting.workspace_id == workspace_id).order_by(Setting.key)
        )
        return list(result.scalars().all())

    async def exists(self, key: str, workspace_id: int | None = None) -> bool:
        return await self.find_by_key(key, workspace_id) is not None
