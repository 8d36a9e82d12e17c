"""Conversation ORM model and its membership join table."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from projecthub.infrastructure.persistence.database import Base
from projecthub.infrastructure.persistence.models.mixins import WorkspaceScopedModel

conversation_user = Table(
    "conversation_user",
    Base.metadata,
    Column(
        "conversation_id",
        Integer,
        ForeignKey("conversation.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id", Integer, ForeignKey("app_user.id", ondelete="CASCADE"), primary_key=True
    ),
    Column("role", String(16), nullable=False, default="member"),
    Column("joined_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("last_read_at", DateTime(timezone=True), nullable=True),
)


class Conversation(WorkspaceScopedModel, Base):
    """Direct, group or channel conversation. Table: conversation."""

    __tablename__ = "conversation"

    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    type: Mapped[str] = mapped_column(String(16), nullable=False, default="group")
    is_private: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
