"""Tests for the filter compiler and value coercion."""

from datetime import date, datetime
from decimal import Decimal

import pytest
from sqlalchemy import false

from projecthub.infrastructure.persistence.filters import (
    FilterSpec,
    clamp_per_page,
    coerce_bool,
    coerce_for_column,
    compile_filters,
    contains_pattern,
    escape_like,
    json_member_pattern,
)
from projecthub.infrastructure.persistence.models import Task, TimeLog


class TestCoerceBool:
    @pytest.mark.parametrize("raw", ["1", "true", "YES", "on", True, 1])
    def test_true(self, raw) -> None:
        assert coerce_bool(raw) is True

    @pytest.mark.parametrize("raw", ["0", "false", "No", "off", False, 0])
    def test_false(self, raw) -> None:
        assert coerce_bool(raw) is False

    def test_not_boolean_like(self) -> None:
        assert coerce_bool("maybe") is None
        assert coerce_bool(None) is None


class TestCoerceForColumn:
    """Raw strings become the column's Python type."""

    def test_boolean(self) -> None:
        assert coerce_for_column(Task.__table__.c.is_recurring, "true") is True

    def test_date(self) -> None:
        assert coerce_for_column(Task.__table__.c.due_date, "2026-03-01") == date(2026, 3, 1)

    def test_integer(self) -> None:
        assert coerce_for_column(Task.__table__.c.estimated_hours, "5") == 5

    def test_datetime(self) -> None:
        value = coerce_for_column(TimeLog.__table__.c.started_at, "2026-03-01T10:00:00Z")
        assert isinstance(value, datetime)
        assert value.hour == 10

    def test_decimal(self) -> None:
        assert coerce_for_column(TimeLog.__table__.c.hourly_rate, "12.50") == Decimal("12.50")

    def test_unparseable_is_returned_unchanged(self) -> None:
        assert coerce_for_column(Task.__table__.c.due_date, "soon") == "soon"


class TestCompileFilters:
    SPEC = FilterSpec(
        exact=("priority", "project_id"),
        search=("title", "description"),
        null_checks={"has_due_date": ("due_date", True)},
        ranges={"due_before": ("due_date", "lt")},
    )

    def test_empty_filters(self) -> None:
        assert compile_filters(Task, self.SPEC, None) == []
        assert compile_filters(Task, self.SPEC, {}) == []

    def test_unknown_and_blank_keys_ignored(self) -> None:
        filters = {"nope": "x", "priority": "", "project_id": None, "search": "  "}
        assert compile_filters(Task, self.SPEC, filters) == []

    def test_one_predicate_per_recognized_key(self) -> None:
        filters = {
            "priority": "high",
            "project_id": "3",
            "search": "login",
            "has_due_date": "true",
            "due_before": "2026-05-01",
            "date_from": "2026-01-01",
        }
        assert len(compile_filters(Task, self.SPEC, filters)) == 6

    def test_list_value_becomes_in(self) -> None:
        (predicate,) = compile_filters(Task, self.SPEC, {"priority": ["low", "high"]})
        assert "IN" in str(predicate)

    def test_unparseable_range_ignored(self) -> None:
        assert compile_filters(Task, self.SPEC, {"due_before": "whenever"}) == []

    def test_null_check_direction(self) -> None:
        (present,) = compile_filters(Task, self.SPEC, {"has_due_date": "yes"})
        (absent,) = compile_filters(Task, self.SPEC, {"has_due_date": "no"})
        assert "IS NOT NULL" in str(present)
        assert "IS NULL" in str(absent) and "NOT" not in str(absent)

    def test_uncoercible_id_matches_nothing(self) -> None:
        (predicate,) = compile_filters(Task, self.SPEC, {"project_id": "abc"})
        assert predicate is false()

    def test_boolean_is_not_an_id(self) -> None:
        (predicate,) = compile_filters(Task, self.SPEC, {"project_id": True})
        assert predicate is false()

    def test_list_keeps_only_valid_ids(self) -> None:
        (predicate,) = compile_filters(Task, self.SPEC, {"project_id": ["3", "x"]})
        assert "IN" in str(predicate)
        (predicate,) = compile_filters(Task, self.SPEC, {"project_id": ["x", "y"]})
        assert predicate is false()

    def test_search_pattern_is_escaped(self) -> None:
        (predicate,) = compile_filters(Task, self.SPEC, {"search": "50%_off"})
        assert set(predicate.compile().params.values()) == {"%50\\%\\_off%"}


class TestLikePatterns:
    def test_escape_like(self) -> None:
        assert escape_like("a%b_c\\d") == "a\\%b\\_c\\\\d"

    def test_contains_pattern_strips_and_escapes(self) -> None:
        assert contains_pattern("  50%  ") == "%50\\%%"

    def test_json_member_pattern(self) -> None:
        assert json_member_pattern("task_created") == '%"task\\_created"%'


def test_clamp_per_page() -> None:
    assert clamp_per_page(None) == 15
    assert clamp_per_page(0) == 15
    assert clamp_per_page(20) == 20
    assert clamp_per_page(10_000) == 100
