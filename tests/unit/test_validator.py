"""Tests for RuleValidator: presence handling, wildcards and first-failure reporting."""

from projecthub.application.validation import (
    Distinct,
    In,
    IsType,
    Max,
    Min,
    Nullable,
    Required,
    RequiredIf,
    RuleValidator,
    Sometimes,
    expand_path,
)


class TestExpandPath:
    """Wildcards expand over list items; plain segments always yield a path."""

    def test_plain_path_for_missing_key(self) -> None:
        assert expand_path({}, "title") == ["title"]

    def test_wildcard_over_list(self) -> None:
        data = {"fields": [{"name": "a"}, {"name": "b"}]}
        assert expand_path(data, "fields.*.name") == ["fields.0.name", "fields.1.name"]

    def test_wildcard_over_scalar_is_empty(self) -> None:
        assert expand_path({"fields": "x"}, "fields.*.name") == []


class TestPresence:
    """Required, Sometimes and Nullable decide whether other rules run."""

    async def test_required_missing(self) -> None:
        errors = await RuleValidator().validate({}, {"title": [Required(), IsType("string")]})
        assert errors == {"title": ["The title field is required."]}

    async def test_blank_string_counts_as_missing(self) -> None:
        errors = await RuleValidator().validate({"title": "   "}, {"title": [Required()]})
        assert errors == {"title": ["The title field is required."]}

    async def test_sometimes_skips_absent(self) -> None:
        errors = await RuleValidator().validate({}, {"title": [Sometimes(), Required()]})
        assert errors == {}

    async def test_sometimes_still_checks_present(self) -> None:
        errors = await RuleValidator().validate({"title": ""}, {"title": [Sometimes(), Required()]})
        assert errors == {"title": ["The title field is required."]}

    async def test_nullable_allows_null(self) -> None:
        errors = await RuleValidator().validate(
            {"due_date": None}, {"due_date": [Nullable(), IsType("date")]}
        )
        assert errors == {}

    async def test_absent_optional_field_is_valid(self) -> None:
        errors = await RuleValidator().validate({}, {"story_points": [IsType("integer")]})
        assert errors == {}


class TestRules:
    """Messages use the attribute name with underscores replaced by spaces."""

    async def test_first_failure_only(self) -> None:
        errors = await RuleValidator().validate(
            {"estimated_hours": "abc"},
            {"estimated_hours": [IsType("integer"), Min(0)]},
        )
        assert errors == {"estimated_hours": ["The estimated hours field must be an integer."]}

    async def test_in_accepts_enum_members_and_strings(self) -> None:
        rules = {"priority": [In(["low", "high"])]}
        assert await RuleValidator().validate({"priority": "low"}, rules) == {}
        errors = await RuleValidator().validate({"priority": "urgent"}, rules)
        assert errors == {"priority": ["The selected priority is invalid."]}

    async def test_max_string_length(self) -> None:
        errors = await RuleValidator().validate({"name": "abcdef"}, {"name": [Max(5)]})
        assert errors == {"name": ["The name field must not be greater than 5 characters."]}

    async def test_min_numeric_with_integer_type(self) -> None:
        errors = await RuleValidator().validate(
            {"interval": 0}, {"interval": [IsType("integer"), Min(1)]}
        )
        assert errors == {"interval": ["The interval field must be at least 1."]}

    async def test_required_if(self) -> None:
        rules = {"day_of_month": [Nullable(), RequiredIf("frequency", "monthly")]}
        errors = await RuleValidator().validate({"frequency": "monthly"}, rules)
        assert errors == {
            "day_of_month": ["The day of month field is required when frequency is monthly."]
        }
        assert await RuleValidator().validate({"frequency": "daily"}, rules) == {}

    async def test_wildcard_errors_use_concrete_paths(self) -> None:
        data = {"fields": [{"name": "a"}, {}]}
        errors = await RuleValidator().validate(data, {"fields.*.name": [Required()]})
        assert errors == {"fields.1.name": ["The fields.1.name field is required."]}

    async def test_distinct_among_siblings(self) -> None:
        errors = await RuleValidator().validate(
            {"user_ids": [1, 2, 1]}, {"user_ids.*": [Distinct()]}
        )
        assert set(errors) == {"user_ids.0", "user_ids.2"}

    async def test_database_rules_pass_without_checker(self) -> None:
        from projecthub.application.validation import Exists, Unique

        errors = await RuleValidator().validate(
            {"task_id": 99}, {"task_id": [Exists("task"), Unique("recurring_task", "task_id")]}
        )
        assert errors == {}
