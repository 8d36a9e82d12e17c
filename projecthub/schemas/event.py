"""Calendar event API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from projecthub.schemas.common import Timestamped, metadata_field


class EventParticipant(BaseModel):
    user_id: int
    status: str


class EventResponse(Timestamped):
    workspace_id: int
    created_by_id: int | None = None
    title: str
    description: str | None = None
    type: str
    start_date: datetime
    end_date: datetime | None = None
    all_day: bool
    location: str | None = None
    metadata: dict[str, Any] | None = metadata_field()


class EventDetailResponse(EventResponse):
    participants: list[EventParticipant] = []
