"""Time log requests.

A user may have at most one running log (ended_at NULL). The running check
goes through ValidationContext.time_logs so the lookup can take a row lock
inside the caller's transaction.
"""

from __future__ import annotations

from projecthub.application.requests.base import ValidatedRequest
from projecthub.application.validation.rules import (
    After,
    BeforeOrEqual,
    Between,
    Exists,
    IsType,
    Max,
    Nullable,
    Pattern,
    Required,
    Rule,
    Sometimes,
    is_empty,
    to_number,
)

MESSAGES = {
    "started_at.before_or_equal": "Start time cannot be in the future.",
    "ended_at.after": "End time must be after start time.",
    "ended_at.before_or_equal": "End time cannot be in the future.",
    "duration.between": "Duration cannot exceed 24 hours (1440 minutes).",
    "hourly_rate.regex": "Hourly rate must have at most 2 decimal places.",
    "running": "User already has a running time log. Please stop it first.",
    "hourly_rate.required": "Hourly rate is required for billable time logs.",
}

RATE_PATTERN = r"^\d+(\.\d{1,2})?$"


def _truthy(value: object) -> bool:
    return value in (True, 1, "1", "true")


class _TimeLogRequest(ValidatedRequest):
    def _shared_rules(self) -> dict[str, list[Rule]]:
        return {
            "ended_at": [
                Nullable(),
                IsType("date"),
                After("started_at", message=MESSAGES["ended_at.after"]),
                BeforeOrEqual("now", message=MESSAGES["ended_at.before_or_equal"]),
            ],
            "duration": [
                Nullable(),
                IsType("integer"),
                Between(1, 1440, message=MESSAGES["duration.between"]),
            ],
            "description": [Nullable(), IsType("string"), Max(1000)],
            "is_billable": [Sometimes(), IsType("boolean")],
            "hourly_rate": [
                Nullable(),
                IsType("numeric"),
                Between(0, "9999.99"),
                Pattern(RATE_PATTERN, message=MESSAGES["hourly_rate.regex"]),
            ],
        }

    def _check_billable_rate(self) -> None:
        if self.has_error("hourly_rate"):
            return
        if _truthy(self.input("is_billable")) and to_number(self.input("hourly_rate")) is None:
            self.add_error("hourly_rate", MESSAGES["hourly_rate.required"])


class CreateTimeLogRequest(_TimeLogRequest):
    def prepare(self) -> None:
        self.data.setdefault("is_billable", False)

    def rules(self) -> dict[str, list[Rule]]:
        return {
            "workspace_id": [Sometimes(), IsType("integer"), Exists("workspace")],
            "user_id": [Required(), IsType("integer"), Exists("app_user")],
            "task_id": [Required(), IsType("integer"), Exists("task")],
            "started_at": [
                Required(),
                IsType("date"),
                BeforeOrEqual("now", message=MESSAGES["started_at.before_or_equal"]),
            ],
            **self._shared_rules(),
        }

    async def after(self) -> None:
        lookup = self.context.time_logs
        user_id = self.data.get("user_id")
        if (
            lookup is not None
            and not self.has_error("user_id")
            and not is_empty(user_id)
            and is_empty(self.data.get("ended_at"))
            and await lookup.has_running_log(int(user_id))
        ):
            self.add_error("user_id", MESSAGES["running"])
        self._check_billable_rate()


class UpdateTimeLogRequest(_TimeLogRequest):
    def rules(self) -> dict[str, list[Rule]]:
        return {
            "user_id": [Sometimes(), IsType("integer"), Exists("app_user")],
            "task_id": [Sometimes(), IsType("integer"), Exists("task")],
            "started_at": [
                Sometimes(),
                IsType("date"),
                BeforeOrEqual("now", message=MESSAGES["started_at.before_or_equal"]),
            ],
            **self._shared_rules(),
        }

    async def after(self) -> None:
        lookup = self.context.time_logs
        # Reopening a stopped log (or moving it to another user) must not
        # produce a second running log for that user.
        reopens = "ended_at" in self.data and is_empty(self.data["ended_at"])
        still_running = self.current is not None and self.current.ended_at is None
        moves_user = "user_id" in self.data and still_running
        user_id = self.input("user_id")
        if (
            lookup is not None
            and (reopens or moves_user)
            and not self.has_error("user_id")
            and not is_empty(user_id)
            and await lookup.has_running_log(
                int(user_id), exclude_id=getattr(self.current, "id", None)
            )
        ):
            self.add_error("user_id", MESSAGES["running"])
        self._check_billable_rate()
