"""Filter compiler: flat filter maps to SQLAlchemy predicates, plus pagination.

Each repository declares a FilterSpec describing which filter keys it
understands. compile_filters() turns a request's filter map into a list of
predicates (combined with AND); paginate() runs the statement with
offset/limit and a total count. Nothing here writes to the database.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import Boolean, Date, Select, String, cast, false, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from projecthub.application.dtos.pagination import Page
from projecthub.core.config import get_settings
from projecthub.shared.utils.datetime import is_date_only, parse_date, parse_datetime

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})
_FALSE_STRINGS = frozenset({"0", "false", "no", "off"})

RANGE_OPERATORS = ("lt", "lte", "gt", "gte")

LIKE_ESCAPE = "\\"


@dataclass(frozen=True)
class FilterSpec:
    """Declarative description of an entity's filterable query space.

    Attributes:
        exact: Filter keys matched by equality against the column of the same name.
        search: Text columns searched (OR, case-insensitive substring) by 'search'.
        date_column: Column compared by 'date_from' / 'date_to' (inclusive).
        null_checks: Filter key -> (column, True when "true" means IS NOT NULL).
        json_contains: Filter key -> JSON list column that must contain the value.
        like: Filter key -> column matched by case-insensitive substring.
        ranges: Filter key -> (column, operator) with operator in lt/lte/gt/gte.
        order_by: Default ordering as (column, 'asc' | 'desc') pairs.
    """

    exact: tuple[str, ...] = ()
    search: tuple[str, ...] = ()
    date_column: str | None = "created_at"
    null_checks: dict[str, tuple[str, bool]] = field(default_factory=dict)
    json_contains: dict[str, str] = field(default_factory=dict)
    like: dict[str, str] = field(default_factory=dict)
    ranges: dict[str, tuple[str, str]] = field(default_factory=dict)
    order_by: tuple[tuple[str, str], ...] = (("created_at", "desc"),)


def coerce_bool(value: Any) -> bool | None:
    """Interpret query-string booleans. Returns None when not boolean-like."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    return None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def coerce_for_column(column: Any, value: Any) -> Any:
    """Convert a raw input value to the column's Python type where needed.

    Used for filter values and for writes, so ISO strings reach Date and
    DateTime columns as date/datetime objects.
    """
    col_type = column.type
    if isinstance(col_type, Boolean):
        coerced = coerce_bool(value)
        return value if coerced is None else coerced
    if isinstance(col_type, Date):
        parsed = parse_date(value)
        return value if parsed is None else parsed
    try:
        python_type = col_type.python_type
    except NotImplementedError:
        return value
    if python_type is int and isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    if python_type is datetime:
        parsed_dt = parse_datetime(value)
        return value if parsed_dt is None else parsed_dt
    if python_type is Decimal and isinstance(value, (str, int, float)):
        try:
            return Decimal(str(value))
        except InvalidOperation:
            return value
    return value


def escape_like(value: Any) -> str:
    """Escape LIKE wildcards so value matches literally (use with escape=LIKE_ESCAPE)."""
    return (
        str(value)
        .replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def contains_pattern(term: Any) -> str:
    """Substring LIKE pattern for a user-supplied term."""
    return f"%{escape_like(str(term).strip())}%"


def json_member_pattern(value: Any) -> str:
    """LIKE pattern matching a string element of a JSON list stored as text."""
    return f'%"{escape_like(value)}"%'


def _typed_filter_value(column: Any, value: Any) -> tuple[bool, Any]:
    """Coerce a filter value for column; (False, value) when it cannot hold it."""
    coerced = coerce_for_column(column, value)
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return True, coerced
    if python_type is int and isinstance(coerced, bool):
        return False, value
    if python_type in (int, bool, Decimal, datetime) or isinstance(column.type, Date):
        return isinstance(coerced, python_type), coerced
    return True, coerced


def _bound(column: Any, value: Any, *, upper: bool) -> tuple[Any, bool] | None:
    """Return (comparison value, strict) for a date range bound.

    Date-only strings against a datetime column cover the whole day: the
    upper bound becomes "< next midnight".
    """
    if isinstance(column.type, Date):
        parsed = parse_date(value)
        return None if parsed is None else (parsed, False)
    parsed_dt = parse_datetime(value)
    if parsed_dt is None:
        return None
    if upper and is_date_only(value):
        return parsed_dt + timedelta(days=1), True
    return parsed_dt, False


def _range_predicate(column: Any, operator: str, value: Any) -> ColumnElement[bool] | None:
    if isinstance(column.type, Date):
        target: Any = parse_date(value)
    else:
        target = parse_datetime(value)
        if target is not None and operator in ("lte", "gt") and is_date_only(value):
            # Whole day: "<= 2024-05-01" includes the entire day.
            target = target + timedelta(days=1)
            operator = "lt" if operator == "lte" else "gte"
    if target is None:
        return None
    if operator == "lt":
        return column < target
    if operator == "lte":
        return column <= target
    if operator == "gt":
        return column > target
    return column >= target


def compile_filters(
    model: Any, spec: FilterSpec, filters: dict[str, Any] | None
) -> list[ColumnElement[bool]]:
    """Translate a filter map into predicates for model.

    Unknown keys are ignored, as are None and empty-string values.
    """
    predicates: list[ColumnElement[bool]] = []
    if not filters:
        return predicates

    for key in spec.exact:
        value = filters.get(key)
        if _is_blank(value):
            continue
        column = getattr(model, key)
        # Values the column cannot hold (workspace_id=abc) match no rows.
        if isinstance(value, (list, tuple, set)):
            typed = [_typed_filter_value(column, v) for v in value if not _is_blank(v)]
            values = [v for ok, v in typed if ok]
            if values:
                predicates.append(column.in_(values))
            elif typed:
                predicates.append(false())
            continue
        ok, typed_value = _typed_filter_value(column, value)
        predicates.append(column == typed_value if ok else false())

    term = filters.get("search")
    if spec.search and not _is_blank(term):
        pattern = contains_pattern(term)
        predicates.append(
            or_(*(getattr(model, c).ilike(pattern, escape=LIKE_ESCAPE) for c in spec.search))
        )

    if spec.date_column:
        column = getattr(model, spec.date_column)
        lower = filters.get("date_from")
        if not _is_blank(lower):
            bound = _bound(column, lower, upper=False)
            if bound is not None:
                predicates.append(column >= bound[0])
        upper = filters.get("date_to")
        if not _is_blank(upper):
            bound = _bound(column, upper, upper=True)
            if bound is not None:
                predicates.append(column < bound[0] if bound[1] else column <= bound[0])

    for key, (column_name, true_means_present) in spec.null_checks.items():
        flag = coerce_bool(filters.get(key))
        if flag is None:
            continue
        column = getattr(model, column_name)
        present = flag if true_means_present else not flag
        predicates.append(column.is_not(None) if present else column.is_(None))

    for key, column_name in spec.json_contains.items():
        value = filters.get(key)
        if _is_blank(value):
            continue
        column = getattr(model, column_name)
        predicates.append(
            cast(column, String).like(json_member_pattern(value), escape=LIKE_ESCAPE)
        )

    for key, column_name in spec.like.items():
        value = filters.get(key)
        if _is_blank(value):
            continue
        predicates.append(
            getattr(model, column_name).ilike(contains_pattern(value), escape=LIKE_ESCAPE)
        )

    for key, (column_name, operator) in spec.ranges.items():
        value = filters.get(key)
        if _is_blank(value) or operator not in RANGE_OPERATORS:
            continue
        predicate = _range_predicate(getattr(model, column_name), operator, value)
        if predicate is not None:
            predicates.append(predicate)

    return predicates


def apply_ordering(stmt: Select, model: Any, order_by: tuple[tuple[str, str], ...]) -> Select:
    """Append ORDER BY clauses; id is the final tiebreaker for stable pages."""
    clauses = []
    for column_name, direction in order_by:
        column = getattr(model, column_name)
        clauses.append(column.desc() if direction == "desc" else column.asc())
    if not any(name == "id" for name, _ in order_by):
        descending = bool(order_by) and order_by[-1][1] == "desc"
        clauses.append(model.id.desc() if descending else model.id.asc())
    return stmt.order_by(*clauses)


def clamp_per_page(per_page: int | None) -> int:
    """Default and clamp a requested page size."""
    settings = get_settings()
    if per_page is None or per_page < 1:
        return settings.default_per_page
    return min(per_page, settings.max_per_page)


async def paginate(
    session: AsyncSession, stmt: Select, page: int = 1, per_page: int | None = None
) -> Page:
    """Run stmt for one page and count the full result set."""
    size = clamp_per_page(per_page)
    current = max(1, page)
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = (await session.execute(count_stmt)).scalar_one()
    result = await session.execute(stmt.offset((current - 1) * size).limit(size))
    return Page(items=list(result.scalars().all()), total=total, page=current, per_page=size)
