"""Workspace (tenant boundary) and user ORM models."""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from projecthub.infrastructure.persistence.database import Base
from projecthub.infrastructure.persistence.models.mixins import GlobalModel


class Workspace(GlobalModel, Base):
    """Top-level tenant. Table: workspace."""

    __tablename__ = "workspace"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)


class User(GlobalModel, Base):
    """Application user. Table: app_user."""

    __tablename__ = "app_user"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
