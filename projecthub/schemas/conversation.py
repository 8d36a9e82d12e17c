"""Conversation API schemas."""

from datetime import datetime

from pydantic import BaseModel

from projecthub.schemas.common import Timestamped


class ConversationMember(BaseModel):
    user_id: int
    role: str
    joined_at: datetime | None = None
    last_read_at: datetime | None = None


class ConversationResponse(Timestamped):
    workspace_id: int
    name: str | None = None
    type: str
    is_private: bool


class ConversationDetailResponse(ConversationResponse):
    members: list[ConversationMember] = []


class MembershipChange(BaseModel):
    changed: int
