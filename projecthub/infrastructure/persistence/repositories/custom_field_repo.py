"""Custom field definitions and their polymorphic values."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from projecthub.infrastructure.persistence.filters import FilterSpec
from projecthub.infrastructure.persistence.models.custom_field import (
    CustomField,
    CustomFieldValue,
)
from projecthub.infrastructure.persistence.repositories.base import BaseRepository


class CustomFieldRepository(BaseRepository[CustomField]):
    """Custom field definitions, ordered by their order column."""

    filter_spec = FilterSpec(
        exact=("workspace_id", "type", "applies_to", "is_required"),
        search=("name", "key"),
        order_by=(("order", "asc"), ("created_at", "desc")),
    )

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, CustomField)

    async def get_by_key(
        self, workspace_id: int, applies_to: str, key: str
    ) -> CustomField | None:
        result = await self.db.execute(
            select(CustomField).where(
                CustomField.workspace_id == workspace_id,
                CustomField.applies_to == applies_to,
                CustomField.key == key,
            )
        )
        return result.scalar_one_or_none()

    async def get_for_entity_type(self, workspace_id: int, applies_to: str) -> list[CustomField]:
        result = await self.db.execute(
            select(CustomField)
            .where(CustomField.workspace_id == workspace_id, CustomField.applies_to == applies_to)
            .order_by(CustomField.order, CustomField.id)
        )
        return list(result.scalars().all())


class CustomFieldValueRepository(BaseRepository[CustomFieldValue]):
    """Values attached to (entity_type, entity_id)."""

    filter_spec = FilterSpec(
        exact=("custom_field_id", "entity_type", "entity_id"),
        order_by=(("created_at", "desc"),),
    )

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, CustomFieldValue)

    async def get_for_entity(self, entity_type: str, entity_id: int) -> list[CustomFieldValue]:
        result = await self.db.execute(
            select(CustomFieldValue)
            .where(
                CustomFieldValue.entity_type == entity_type,
                CustomFieldValue.entity_id == entity_id,
            )
            .order_by(CustomFieldValue.custom_field_id)
        )
        return list(result.scalars().all())

    async def get_value(
        self, custom_field_id: int, entity_type: str, entity_id: int
    ) -> CustomFieldValue | None:
        result = await self.db.execute(
            select(CustomFieldValue).where(
                CustomFieldValue.custom_field_id == custom_field_id,
                CustomFieldValue.entity_type == entity_type,
                CustomFieldValue.entity_id == entity_id,
            )
        )
        return result.scalar_one_or_none()

    async def set_value(
        self, custom_field_id: int, entity_type: str, entity_id: int, value: Any
    ) -> CustomFieldValue:
        """Insert or overwrite the value for (field, entity)."""
        existing = await self.get_value(custom_field_id, entity_type, entity_id)
        if existing is not None:
            return await self.update(existing, {"value": value})
        return await self.create(
            {
                "custom_field_id": custom_field_id,
                "entity_type": entity_type,
                "entity_id": entity_id,
                "value": value,
            }
        )
