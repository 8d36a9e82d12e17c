"""Task requests."""

from __future__ import annotations

from projecthub.application.requests.base import ValidatedRequest
from projecthub.application.validation.rules import (
    Distinct,
    Exists,
    In,
    IsType,
    Max,
    Min,
    Nullable,
    Required,
    Rule,
    Sometimes,
    is_empty,
)
from projecthub.domain.enums import DependencyType, TaskPriority, TaskType


class _TaskRequest(ValidatedRequest):
    def _common_rules(self) -> dict[str, list[Rule]]:
        return {
            "project_id": [Nullable(), IsType("integer"), Exists("project")],
            "status_id": [Nullable(), IsType("integer"), Exists("status")],
            "assignee_id": [Nullable(), IsType("integer"), Exists("app_user")],
            "parent_id": [Nullable(), IsType("integer"), Exists("task")],
            "description": [Nullable(), IsType("string")],
            "due_date": [Nullable(), IsType("date")],
            "start_date": [Nullable(), IsType("date")],
            "estimated_hours": [Nullable(), IsType("integer"), Min(0)],
            "actual_hours": [Nullable(), IsType("integer"), Min(0)],
            "story_points": [Nullable(), IsType("integer"), Min(0)],
            "metadata": [Nullable(), IsType("object")],
            "milestone_ids": [Nullable(), IsType("array")],
            "milestone_ids.*": [IsType("integer"), Distinct(), Exists("milestone")],
            "dependency_ids": [Nullable(), IsType("array")],
            "dependency_ids.*": [IsType("integer"), Distinct(), Exists("task")],
            "dependency_types": [Nullable(), IsType("array")],
            "dependency_types.*": [In(DependencyType.values())],
        }

    async def after(self) -> None:
        task_id = getattr(self.current, "id", None)
        if task_id is None:
            return
        parent_id = self.data.get("parent_id")
        if not self.has_error("parent_id") and not is_empty(parent_id):
            if int(parent_id) == task_id:
                self.add_error("parent_id", "A task cannot be its own parent.")
        dependency_ids = self.data.get("dependency_ids")
        if isinstance(dependency_ids, list) and not any(
            path.startswith("dependency_ids") for path in self.errors
        ):
            if task_id in [int(d) for d in dependency_ids]:
                self.add_error("dependency_ids", "A task cannot depend on itself.")


class CreateTaskRequest(_TaskRequest):
    def prepare(self) -> None:
        actor = self.context.actor
        if actor is not None and not self.data.get("reporter_id"):
            self.data["reporter_id"] = actor.user_id
        self.data.setdefault("priority", TaskPriority.MEDIUM.value)
        self.data.setdefault("type", TaskType.TASK.value)

    def rules(self) -> dict[str, list[Rule]]:
        return {
            "workspace_id": [Required(), IsType("integer"), Exists("workspace")],
            "reporter_id": [Required(), IsType("integer"), Exists("app_user")],
            "title": [Required(), IsType("string"), Max(255)],
            "priority": [Required(), In(TaskPriority.values())],
            "type": [Required(), In(TaskType.values())],
            "order": [Sometimes(), IsType("integer"), Min(0)],
            "is_recurring": [Sometimes(), IsType("boolean")],
            **self._common_rules(),
        }


class UpdateTaskRequest(_TaskRequest):
    def rules(self) -> dict[str, list[Rule]]:
        return {
            "workspace_id": [Sometimes(), IsType("integer"), Exists("workspace")],
            "reporter_id": [Sometimes(), IsType("integer"), Exists("app_user")],
            "title": [Sometimes(), IsType("string"), Max(255)],
            "priority": [Sometimes(), In(TaskPriority.values())],
            "type": [Sometimes(), In(TaskType.values())],
            "order": [Sometimes(), IsType("integer"), Min(0)],
            "is_recurring": [Sometimes(), IsType("boolean")],
            **self._common_rules(),
        }
