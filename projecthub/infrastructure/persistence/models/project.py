"""Project, status and milestone ORM models."""

from datetime import date

from sqlalchemy import Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from projecthub.infrastructure.persistence.database import Base
from projecthub.infrastructure.persistence.models.mixins import WorkspaceScopedModel


class Project(WorkspaceScopedModel, Base):
    """Project within a workspace. Table: project."""

    __tablename__ = "project"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class Status(WorkspaceScopedModel, Base):
    """Task status (ordered within a workspace). Table: status."""

    __tablename__ = "status"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class Milestone(WorkspaceScopedModel, Base):
    """Milestone, optionally tied to a project. Table: milestone."""

    __tablename__ = "milestone"

    project_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("project.id", ondelete="CASCADE"), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
