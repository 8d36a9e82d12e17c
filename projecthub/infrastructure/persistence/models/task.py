"""Task ORM model, its join tables, and the recurring-task configuration."""

from datetime import date, datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from projecthub.infrastructure.persistence.database import Base
from projecthub.infrastructure.persistence.models.mixins import (
    GlobalModel,
    WorkspaceScopedModel,
)

task_milestone = Table(
    "task_milestone",
    Base.metadata,
    Column("task_id", Integer, ForeignKey("task.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "milestone_id",
        Integer,
        ForeignKey("milestone.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)

task_dependency = Table(
    "task_dependency",
    Base.metadata,
    Column("task_id", Integer, ForeignKey("task.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "dependency_id",
        Integer,
        ForeignKey("task.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("type", String(32), nullable=False, default="blocks"),
    CheckConstraint("task_id <> dependency_id", name="ck_task_dependency_not_self"),
)


class Task(WorkspaceScopedModel, Base):
    """Work item; parent_id enables subtasks. Table: task."""

    __tablename__ = "task"

    project_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("project.id", ondelete="CASCADE"), nullable=True, index=True
    )
    status_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("status.id", ondelete="SET NULL"), nullable=True, index=True
    )
    assignee_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True, index=True
    )
    reporter_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False
    )
    parent_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("task.id", ondelete="CASCADE"), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    priority: Mapped[str] = mapped_column(String(16), nullable=False, default="medium")
    type: Mapped[str] = mapped_column(String(16), nullable=False, default="task")
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    estimated_hours: Mapped[int | None] = mapped_column(Integer, nullable=True)
    actual_hours: Mapped[int | None] = mapped_column(Integer, nullable=True)
    story_points: Mapped[int | None] = mapped_column(Integer, nullable=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_recurring: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    metadata_: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata", JSON, nullable=True
    )

    __table_args__ = (
        Index("ix_task_workspace_project", "workspace_id", "project_id"),
        CheckConstraint("parent_id IS NULL OR parent_id <> id", name="ck_task_not_own_parent"),
    )


class RecurringTask(GlobalModel, Base):
    """Recurrence rule attached one-to-one to a task. Table: recurring_task."""

    __tablename__ = "recurring_task"

    task_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("task.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    frequency: Mapped[str] = mapped_column(String(16), nullable=False)
    interval: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    days_of_week: Mapped[list[int] | None] = mapped_column(JSON, nullable=True)
    day_of_month: Mapped[int | None] = mapped_column(Integer, nullable=True)
    next_due_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_generated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
