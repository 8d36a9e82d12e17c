"""Task and recurring task API schemas."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel

from projecthub.schemas.common import Timestamped, metadata_field


class TaskDependency(BaseModel):
    dependency_id: int
    type: str


class TaskResponse(Timestamped):
    workspace_id: int
    project_id: int | None = None
    status_id: int | None = None
    assignee_id: int | None = None
    reporter_id: int
    parent_id: int | None = None
    title: str
    description: str | None = None
    priority: str
    type: str
    due_date: date | None = None
    start_date: date | None = None
    estimated_hours: int | None = None
    actual_hours: int | None = None
    story_points: int | None = None
    order: int
    is_recurring: bool
    metadata: dict[str, Any] | None = metadata_field()


class TaskDetailResponse(TaskResponse):
    """Task with its milestone ids and dependency edges."""

    milestone_ids: list[int] = []
    dependencies: list[TaskDependency] = []


class RecurringTaskResponse(Timestamped):
    task_id: int
    frequency: str
    interval: int
    days_of_week: list[int] | None = None
    day_of_month: int | None = None
    next_due_date: date
    end_date: date | None = None
    is_active: bool
    last_generated_at: datetime | None = None


class RecurringTaskStats(BaseModel):
    total: int
    active: int
    due: int
    by_frequency: dict[str, int]
