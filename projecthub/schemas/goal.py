"""Goal API schemas."""

from datetime import date
from typing import Any

from pydantic import BaseModel, Field

from projecthub.schemas.common import Timestamped, metadata_field


class GoalResponse(Timestamped):
    workspace_id: int
    owner_id: int | None = None
    name: str
    description: str | None = None
    status: str
    start_date: date | None = None
    end_date: date | None = None
    progress: int
    metadata: dict[str, Any] | None = metadata_field()


class GoalProgressRequest(BaseModel):
    progress: int = Field(ge=0, le=100)
