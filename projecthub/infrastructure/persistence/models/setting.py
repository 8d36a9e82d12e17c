"""Setting ORM model. workspace_id NULL marks a global setting."""

import json
from typing import Any

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from projecthub.infrastructure.persistence.database import Base
from projecthub.infrastructure.persistence.models.mixins import GlobalModel


class Setting(GlobalModel, Base):
    """Key/value setting stored as text and decoded by type."""

    __tablename__ = "setting"

    workspace_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("workspace.id", ondelete="CASCADE"), nullable=True, index=True
    )
    key: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(16), nullable=False, default="string")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("workspace_id", "key", name="uq_setting_workspace_key"),
    )

    @property
    def typed_value(self) -> Any:
        """Decode the stored text according to type."""
        if self.value is None:
            return None
        if self.type == "boolean":
            return self.value.strip().lower() in ("1", "true", "yes", "on")
        if self.type == "integer":
            try:
                return int(self.value)
            except ValueError:
                return int(float(self.value))
        if self.type == "json":
            return json.loads(self.value)
        return self.value
