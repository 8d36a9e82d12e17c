"""Calendar event requests."""

from __future__ import annotations

from projecthub.application.requests.base import ValidatedRequest
from projecthub.application.validation.rules import (
    After,
    Distinct,
    Exists,
    In,
    IsType,
    Max,
    Nullable,
    Required,
    Rule,
    Sometimes,
)
from projecthub.domain.enums import EventType, ParticipantStatus


def _participant_rules() -> dict[str, list[Rule]]:
    return {
        "participants": [Nullable(), IsType("array")],
        "participants.*": [IsType("integer"), Distinct(), Exists("app_user")],
    }


class CreateEventRequest(ValidatedRequest):
    def prepare(self) -> None:
        actor = self.context.actor
        if actor is not None:
            self.data["created_by_id"] = actor.user_id
        self.data.setdefault("all_day", False)

    def rules(self) -> dict[str, list[Rule]]:
        return {
            "workspace_id": [Required(), IsType("integer"), Exists("workspace")],
            "created_by_id": [Nullable(), IsType("integer"), Exists("app_user")],
            "title": [Required(), IsType("string"), Max(255)],
            "description": [Nullable(), IsType("string")],
            "start_date": [Required(), IsType("date")],
            "end_date": [Required(), IsType("date"), After("start_date")],
            "all_day": [Sometimes(), IsType("boolean")],
            "location": [Nullable(), IsType("string"), Max(255)],
            "type": [Required(), In(EventType.values())],
            "metadata": [Nullable(), IsType("object")],
            **_participant_rules(),
        }


class UpdateEventRequest(ValidatedRequest):
    def rules(self) -> dict[str, list[Rule]]:
        return {
            "title": [Sometimes(), IsType("string"), Max(255)],
            "description": [Nullable(), IsType("string")],
            "start_date": [Sometimes(), IsType("date")],
            "end_date": [Sometimes(), IsType("date"), After("start_date")],
            "all_day": [Sometimes(), IsType("boolean")],
            "location": [Nullable(), IsType("string"), Max(255)],
            "type": [Sometimes(), In(EventType.values())],
            "metadata": [Nullable(), IsType("object")],
            **_participant_rules(),
        }


class ParticipantStatusRequest(ValidatedRequest):
    def rules(self) -> dict[str, list[Rule]]:
        return {"status": [Required(), In(ParticipantStatus.values())]}


class AddParticipantRequest(ValidatedRequest):
    def prepare(self) -> None:
        self.data.setdefault("status", ParticipantStatus.PENDING.value)

    def rules(self) -> dict[str, list[Rule]]:
        return {
            "user_id": [Required(), IsType("integer"), Exists("app_user")],
            "status": [In(ParticipantStatus.values())],
        }
