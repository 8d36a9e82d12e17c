"""Time log API schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from projecthub.schemas.common import Timestamped


class TimeLogResponse(Timestamped):
    workspace_id: int
    user_id: int
    task_id: int
    started_at: datetime
    ended_at: datetime | None = None
    duration: int | None = None
    description: str | None = None
    is_billable: bool
    hourly_rate: Decimal | None = None


class StopTimeLogRequest(BaseModel):
    ended_at: datetime | None = None


class TaskTimeTotal(BaseModel):
    task_id: int
    minutes: int
