"""Conversation and membership requests."""

from __future__ import annotations

from projecthub.application.requests.base import ValidatedRequest
from projecthub.application.validation.rules import (
    Distinct,
    Exists,
    In,
    IsType,
    Max,
    Min,
    Nullable,
    Required,
    Rule,
    Sometimes,
)
from projecthub.domain.enums import ConversationRole, ConversationType


class CreateConversationRequest(ValidatedRequest):
    def prepare(self) -> None:
        self.data.setdefault("type", ConversationType.GROUP.value)
        self.data.setdefault("is_private", False)

    def rules(self) -> dict[str, list[Rule]]:
        return {
            "workspace_id": [Required(), IsType("integer"), Exists("workspace")],
            "name": [Nullable(), IsType("string"), Max(255)],
            "type": [Required(), In(ConversationType.values())],
            "is_private": [Sometimes(), IsType("boolean")],
            "user_ids": [Nullable(), IsType("array")],
            "user_ids.*": [IsType("integer"), Distinct(), Exists("app_user")],
        }


class UpdateConversationRequest(ValidatedRequest):
    def rules(self) -> dict[str, list[Rule]]:
        return {
            "name": [Sometimes(), Nullable(), IsType("string"), Max(255)],
            "is_private": [Sometimes(), IsType("boolean")],
        }


class ConversationMembersRequest(ValidatedRequest):
    """Body of add/remove member calls."""

    def rules(self) -> dict[str, list[Rule]]:
        return {
            "user_ids": [Required(), IsType("array"), Min(1)],
            "user_ids.*": [IsType("integer"), Distinct(), Exists("app_user")],
        }


class UpdateMemberRoleRequest(ValidatedRequest):
    def rules(self) -> dict[str, list[Rule]]:
        return {"role": [Required(), In(ConversationRole.values())]}


class DirectConversationRequest(ValidatedRequest):
    def rules(self) -> dict[str, list[Rule]]:
        return {
            "workspace_id": [Required(), IsType("integer"), Exists("workspace")],
            "user_id": [Required(), IsType("integer"), Exists("app_user")],
        }
