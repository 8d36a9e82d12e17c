"""Base repository: filtered listing, generic CRUD and lifecycle hooks."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from sqlalchemy import Select, inspect as sa_inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from projecthub.application.dtos.pagination import Page
from projecthub.infrastructure.persistence.database import Base
from projecthub.infrastructure.persistence.filters import (
    FilterSpec,
    apply_ordering,
    coerce_for_column,
    compile_filters,
    paginate,
)

# Managed by the database; never taken from input maps.
_PROTECTED_COLUMNS = frozenset({"id", "created_at", "updated_at"})

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with list, get_by_id, create, update, delete and hooks.

    Subclasses set filter_spec, add entity-specific predicates through
    _extra_predicates, and override _on_after_create, _on_after_update and
    _on_before_delete for cascades. Input maps are filtered down to the
    model's columns, so relation inputs never reach the table row.
    """

    filter_spec: FilterSpec = FilterSpec()

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    def _column_keys(self) -> dict[str, str]:
        """Map input names (column names) to mapped attribute keys."""
        mapper = sa_inspect(self.model)
        keys: dict[str, str] = {}
        for attr in mapper.column_attrs:
            column_name = attr.columns[0].name
            if column_name in _PROTECTED_COLUMNS:
                continue
            keys[column_name] = attr.key
            keys[attr.key] = attr.key
        return keys

    def _column_values(self, data: dict[str, Any]) -> dict[str, Any]:
        """Keep only keys that are writable columns of the model, typed for the column."""
        keys = self._column_keys()
        columns = sa_inspect(self.model).column_attrs
        values: dict[str, Any] = {}
        for name, value in data.items():
            if name not in keys:
                continue
            attr_key = keys[name]
            values[attr_key] = coerce_for_column(columns[attr_key].columns[0], value)
        return values

    def _base_query(self) -> Select:
        return select(self.model)

    def _extra_predicates(self, filters: dict[str, Any]) -> list[ColumnElement[bool]]:
        """Override for filters the declarative FilterSpec cannot express."""
        return []

    async def list(
        self,
        filters: dict[str, Any] | None = None,
        per_page: int | None = None,
        page: int = 1,
    ) -> Page:
        """Return one page of records matching filters, in the default order."""
        filters = filters or {}
        stmt = self._base_query().where(
            *compile_filters(self.model, self.filter_spec, filters),
            *self._extra_predicates(filters),
        )
        stmt = apply_ordering(stmt, self.model, self.filter_spec.order_by)
        return await paginate(self.db, stmt, page=page, per_page=per_page)

    async def get_by_id(self, entity_id: int) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def create(self, data: dict[str, Any]) -> ModelType:
        """Persist a new record from data and run _on_after_create hook."""
        obj = self.model(**self._column_values(data))
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_create(obj, data)
        return obj

    async def update(self, obj: ModelType, data: dict[str, Any]) -> ModelType:
        """Apply column values from data to obj and run _on_after_update hook."""
        for key, value in self._column_values(data).items():
            setattr(obj, key, value)
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_update(obj, data)
        return obj

    async def delete(self, obj: ModelType) -> bool:
        """Run _on_before_delete hook then delete the record."""
        await self._on_before_delete(obj)
        await self.db.delete(obj)
        await self.db.flush()
        return True

    async def _on_after_create(self, obj: ModelType, data: dict[str, Any]) -> None:
        """Override in subclasses to attach relations or emit events."""

    async def _on_after_update(self, obj: ModelType, data: dict[str, Any]) -> None:
        """Override in subclasses to sync relations or emit events."""

    async def _on_before_delete(self, obj: ModelType) -> None:
        """Override in subclasses to clean up dependants."""
