"""Recurring task requests: frequency-dependent day rules and date bounds."""

from __future__ import annotations

from typing import Any

from projecthub.application.requests.base import ValidatedRequest
from projecthub.application.validation.rules import (
    After,
    AfterOrEqual,
    Between,
    Exists,
    In,
    IsType,
    Max,
    Min,
    Nullable,
    Required,
    RequiredIf,
    Rule,
    Sometimes,
    Unique,
    to_number,
)
from projecthub.domain.enums import Frequency
from projecthub.shared.utils.datetime import days_in_month, parse_date

MESSAGES = {
    "task_id.exists": "The selected task does not exist.",
    "task_id.unique": "This task already has a recurring configuration.",
    "frequency.in": "Invalid frequency. Must be daily, weekly, monthly, or yearly.",
    "days_of_week.required_if": "Days of week are required for weekly recurring tasks.",
    "days_of_week.*.between": "Day of week must be between 1 (Monday) and 7 (Sunday).",
    "day_of_month.required_if": "Day of month is required for monthly recurring tasks.",
    "day_of_month.between": "Day of month must be between 1 and 31.",
    "next_due_date.after_or_equal": "Next due date cannot be in the past.",
    "end_date.after": "End date must be after the next due date.",
    "interval.max": "Interval cannot exceed 365.",
}


class _RecurringTaskRequest(ValidatedRequest):
    def _day_rules(self, presence: Rule) -> dict[str, list[Rule]]:
        return {
            "frequency": [presence, In(Frequency.values(), message=MESSAGES["frequency.in"])],
            "interval": [
                presence,
                IsType("integer"),
                Min(1),
                Max(365, message=MESSAGES["interval.max"]),
            ],
            "days_of_week": [
                Nullable(),
                IsType("array"),
                RequiredIf(
                    "frequency",
                    Frequency.WEEKLY,
                    message=MESSAGES["days_of_week.required_if"],
                ),
            ],
            "days_of_week.*": [
                IsType("integer"),
                Between(1, 7, message=MESSAGES["days_of_week.*.between"]),
            ],
            "day_of_month": [
                Nullable(),
                IsType("integer"),
                Between(1, 31, message=MESSAGES["day_of_month.between"]),
                RequiredIf(
                    "frequency",
                    Frequency.MONTHLY,
                    message=MESSAGES["day_of_month.required_if"],
                ),
            ],
            "end_date": [
                Nullable(),
                IsType("date"),
                After("next_due_date", message=MESSAGES["end_date.after"]),
            ],
            "is_active": [Sometimes(), IsType("boolean")],
        }

    async def after(self) -> None:
        frequency = self.input("frequency")
        days: Any = self.data.get("days_of_week")
        if (
            frequency == Frequency.WEEKLY
            and isinstance(days, list)
            and days
            and not self.has_error("days_of_week")
            and len({str(d) for d in days}) != len(days)
        ):
            self.add_error("days_of_week", "Duplicate days of week are not allowed.")

        day_of_month = to_number(self.input("day_of_month"))
        next_due = parse_date(self.input("next_due_date"))
        if (
            frequency == Frequency.MONTHLY
            and day_of_month is not None
            and next_due is not None
            and not self.has_error("day_of_month")
        ):
            max_day = days_in_month(next_due.year, next_due.month)
            if day_of_month > max_day:
                self.add_error(
                    "day_of_month",
                    f"Day of month cannot exceed {max_day} for the selected month.",
                )


class CreateRecurringTaskRequest(_RecurringTaskRequest):
    def prepare(self) -> None:
        self.data.setdefault("interval", 1)
        self.data.setdefault("is_active", True)

    def rules(self) -> dict[str, list[Rule]]:
        return {
            "task_id": [
                Required(),
                IsType("integer"),
                Exists("task", message=MESSAGES["task_id.exists"]),
                Unique("recurring_task", "task_id", message=MESSAGES["task_id.unique"]),
            ],
            "next_due_date": [
                Required(),
                IsType("date"),
                AfterOrEqual("today", message=MESSAGES["next_due_date.after_or_equal"]),
            ],
            **self._day_rules(Required()),
        }


class UpdateRecurringTaskRequest(_RecurringTaskRequest):
    def rules(self) -> dict[str, list[Rule]]:
        return {
            "task_id": [
                Sometimes(),
                IsType("integer"),
                Exists("task", message=MESSAGES["task_id.exists"]),
                Unique(
                    "recurring_task",
                    "task_id",
                    ignore_id=getattr(self.current, "id", None),
                    message=MESSAGES["task_id.unique"],
                ),
            ],
            "next_due_date": [
                Sometimes(),
                IsType("date"),
                AfterOrEqual("today", message=MESSAGES["next_due_date.after_or_equal"]),
            ],
            **self._day_rules(Sometimes()),
        }
