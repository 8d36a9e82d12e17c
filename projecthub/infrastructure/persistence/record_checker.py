"""SQL-backed RecordChecker for the exists and unique validation rules."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Integer, Table, exists, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from projecthub.infrastructure.persistence import models  # noqa: F401
from projecthub.infrastructure.persistence.database import Base


class _Uncomparable(Exception):
    """Value cannot be compared with the column (e.g. 'abc' against an int id)."""


def _coerce(table: Table, column: str, value: Any) -> Any:
    col = table.c[column]
    if value is None or not isinstance(col.type, Integer):
        return value
    if isinstance(value, bool):
        raise _Uncomparable(column)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise _Uncomparable(column) from exc


def _equals(table: Table, column: str, value: Any) -> ColumnElement[bool]:
    coerced = _coerce(table, column, value)
    if coerced is None:
        return table.c[column].is_(None)
    return table.c[column] == coerced


class SqlRecordChecker:
    """Runs existence and uniqueness queries on the request session.

    Table names are the physical names registered on Base.metadata.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    def _table(self, name: str) -> Table:
        try:
            return Base.metadata.tables[name]
        except KeyError as exc:
            raise ValueError(f"Unknown table for validation rule: {name}") from exc

    async def exists(
        self, table: str, column: str, value: Any, where: dict[str, Any] | None = None
    ) -> bool:
        target = self._table(table)
        try:
            conditions = [_equals(target, column, value)]
            conditions += [_equals(target, k, v) for k, v in (where or {}).items()]
        except _Uncomparable:
            return False
        result = await self.db.execute(select(exists().where(*conditions)))
        return bool(result.scalar())

    async def is_unique(
        self,
        table: str,
        column: str,
        value: Any,
        scope: dict[str, Any] | None = None,
        ignore_id: Any = None,
    ) -> bool:
        target = self._table(table)
        try:
            conditions = [_equals(target, column, value)]
            # A None scope value matches NULL (global settings share one scope).
            conditions += [_equals(target, k, v) for k, v in (scope or {}).items()]
        except _Uncomparable:
            return True
        if ignore_id is not None:
            conditions.append(target.c.id != ignore_id)
        result = await self.db.execute(select(exists().where(*conditions)))
        return not result.scalar()
