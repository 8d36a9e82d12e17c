"""Tests for recurring schedule arithmetic and the recurring task request."""

from datetime import date

import pytest

from projecthub.application.requests import CreateRecurringTaskRequest, UpdateRecurringTaskRequest
from projecthub.application.services.recurrence import add_months, calculate_next_due_date
from projecthub.domain.exceptions import RequestValidationException


class TestAddMonths:
    """Month shifts clamp the day to the target month."""

    def test_clamps_to_february(self) -> None:
        assert add_months(date(2027, 1, 31), 1) == date(2027, 2, 28)

    def test_leap_year(self) -> None:
        assert add_months(date(2028, 1, 31), 1) == date(2028, 2, 29)

    def test_crosses_year(self) -> None:
        assert add_months(date(2026, 11, 15), 3) == date(2027, 2, 15)


class TestCalculateNextDueDate:
    def test_daily_and_weekly(self) -> None:
        assert calculate_next_due_date("daily", 3, date(2027, 1, 30)) == date(2027, 2, 2)
        assert calculate_next_due_date("weekly", 2, date(2027, 1, 1)) == date(2027, 1, 15)

    def test_monthly_lands_on_day_of_month(self) -> None:
        assert calculate_next_due_date("monthly", 1, date(2027, 1, 10), 31) == date(2027, 2, 28)
        assert calculate_next_due_date("monthly", 1, date(2027, 2, 28), 31) == date(2027, 3, 31)

    def test_yearly(self) -> None:
        assert calculate_next_due_date("yearly", 1, date(2028, 2, 29)) == date(2029, 2, 28)

    def test_interval_below_one_is_one(self) -> None:
        assert calculate_next_due_date("daily", 0, date(2027, 1, 1)) == date(2027, 1, 2)

    def test_unknown_frequency(self) -> None:
        with pytest.raises(ValueError):
            calculate_next_due_date("hourly", 1, date(2027, 1, 1))


def _monthly(next_due_date: str, day_of_month: int) -> dict:
    return {
        "task_id": 1,
        "frequency": "monthly",
        "day_of_month": day_of_month,
        "next_due_date": next_due_date,
    }


class TestRecurringTaskRequest:
    """day_of_month is checked against the month of next_due_date."""

    async def test_day_exceeds_short_month(self) -> None:
        with pytest.raises(RequestValidationException) as exc:
            await CreateRecurringTaskRequest(_monthly("2027-02-10", 30)).validate()
        assert exc.value.errors == {
            "day_of_month": ["Day of month cannot exceed 28 for the selected month."]
        }

    async def test_day_fits_long_month(self) -> None:
        validated = await CreateRecurringTaskRequest(_monthly("2027-03-10", 31)).validate()
        assert validated["day_of_month"] == 31
        assert validated["interval"] == 1
        assert validated["is_active"] is True

    async def test_monthly_requires_day(self) -> None:
        data = _monthly("2027-03-10", 1)
        del data["day_of_month"]
        with pytest.raises(RequestValidationException) as exc:
            await CreateRecurringTaskRequest(data).validate()
        assert exc.value.errors == {
            "day_of_month": ["Day of month is required for monthly recurring tasks."]
        }

    async def test_weekly_duplicate_days(self) -> None:
        data = {
            "task_id": 1,
            "frequency": "weekly",
            "days_of_week": [1, 3, 1],
            "next_due_date": "2027-03-10",
        }
        with pytest.raises(RequestValidationException) as exc:
            await CreateRecurringTaskRequest(data).validate()
        assert exc.value.errors == {"days_of_week": ["Duplicate days of week are not allowed."]}

    async def test_day_of_week_range(self) -> None:
        data = {
            "task_id": 1,
            "frequency": "weekly",
            "days_of_week": [0],
            "next_due_date": "2027-03-10",
        }
        with pytest.raises(RequestValidationException) as exc:
            await CreateRecurringTaskRequest(data).validate()
        assert exc.value.errors == {
            "days_of_week.0": ["Day of week must be between 1 (Monday) and 7 (Sunday)."]
        }

    async def test_past_due_date(self) -> None:
        data = _monthly("2020-01-10", 10)
        with pytest.raises(RequestValidationException) as exc:
            await CreateRecurringTaskRequest(data).validate()
        assert exc.value.errors == {"next_due_date": ["Next due date cannot be in the past."]}

    async def test_end_date_after_next_due(self) -> None:
        data = {**_monthly("2027-03-10", 10), "end_date": "2027-03-01"}
        with pytest.raises(RequestValidationException) as exc:
            await CreateRecurringTaskRequest(data).validate()
        assert exc.value.errors == {"end_date": ["End date must be after the next due date."]}

    async def test_update_checks_against_stored_schedule(self) -> None:
        class Stored:
            id = 7
            task_id = 1
            frequency = "monthly"
            interval = 1
            day_of_month = 15
            next_due_date = date(2027, 2, 15)

        with pytest.raises(RequestValidationException) as exc:
            await UpdateRecurringTaskRequest({"day_of_month": 31}, current=Stored()).validate()
        assert exc.value.errors == {
            "day_of_month": ["Day of month cannot exceed 28 for the selected month."]
        }
