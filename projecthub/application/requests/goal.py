"""Goal requests."""

from __future__ import annotations

from projecthub.application.requests.base import ValidatedRequest
from projecthub.application.validation.rules import (
    AfterOrEqual,
    Exists,
    In,
    IsType,
    Max,
    Min,
    Nullable,
    Required,
    Rule,
    Sometimes,
)
from projecthub.domain.enums import GoalStatus

MESSAGES = {
    "workspace_id.required": "A workspace is required for the goal.",
    "workspace_id.exists": "The selected workspace does not exist.",
    "owner_id.required": "An owner is required for the goal.",
    "owner_id.exists": "The selected owner does not exist.",
    "name.required": "The goal name is required.",
    "name.max": "The goal name may not be greater than 255 characters.",
    "start_date.after_or_equal": "The start date must be today or later.",
    "end_date.after_or_equal": "The end date must be after or equal to the start date.",
    "progress.min": "Progress cannot be less than 0%.",
    "progress.max": "Progress cannot be more than 100%.",
    "status.completed": "Cannot change status of a completed goal.",
}


def _shared_rules() -> dict[str, list[Rule]]:
    return {
        "description": [Nullable(), IsType("string")],
        "status": [Sometimes(), IsType("string"), In(GoalStatus.values())],
        "end_date": [
            Nullable(),
            IsType("date"),
            AfterOrEqual("start_date", message=MESSAGES["end_date.after_or_equal"]),
        ],
        "progress": [
            Sometimes(),
            IsType("integer"),
            Min(0, message=MESSAGES["progress.min"]),
            Max(100, message=MESSAGES["progress.max"]),
        ],
        "metadata": [Nullable(), IsType("object")],
    }


class CreateGoalRequest(ValidatedRequest):
    def prepare(self) -> None:
        actor = self.context.actor
        if actor is not None and "owner_id" not in self.data:
            self.data["owner_id"] = actor.user_id
        self.data.setdefault("status", GoalStatus.DRAFT.value)
        self.data.setdefault("progress", 0)

    def rules(self) -> dict[str, list[Rule]]:
        return {
            "workspace_id": [
                Required(message=MESSAGES["workspace_id.required"]),
                IsType("integer"),
                Exists("workspace", message=MESSAGES["workspace_id.exists"]),
            ],
            "owner_id": [
                Required(message=MESSAGES["owner_id.required"]),
                IsType("integer"),
                Exists("app_user", message=MESSAGES["owner_id.exists"]),
            ],
            "name": [
                Required(message=MESSAGES["name.required"]),
                IsType("string"),
                Max(255, message=MESSAGES["name.max"]),
            ],
            "start_date": [
                Nullable(),
                IsType("date"),
                AfterOrEqual("today", message=MESSAGES["start_date.after_or_equal"]),
            ],
            **_shared_rules(),
        }


class UpdateGoalRequest(ValidatedRequest):
    """A completed goal keeps its status."""

    def rules(self) -> dict[str, list[Rule]]:
        return {
            "workspace_id": [
                Sometimes(),
                IsType("integer"),
                Exists("workspace", message=MESSAGES["workspace_id.exists"]),
            ],
            "owner_id": [
                Sometimes(),
                IsType("integer"),
                Exists("app_user", message=MESSAGES["owner_id.exists"]),
            ],
            "name": [Sometimes(), IsType("string"), Max(255, message=MESSAGES["name.max"])],
            "start_date": [Nullable(), IsType("date")],
            **_shared_rules(),
        }

    async def after(self) -> None:
        if (
            getattr(self.current, "status", None) == GoalStatus.COMPLETED
            and "status" in self.data
            and self.data["status"] != GoalStatus.COMPLETED
        ):
            self.add_error("status", MESSAGES["status.completed"])
