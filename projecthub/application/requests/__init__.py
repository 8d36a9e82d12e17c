"""Validated request classes, one per entity operation."""

from projecthub.application.requests.base import ValidatedRequest, ValidationContext
from projecthub.application.requests.conversation import (
    ConversationMembersRequest,
    CreateConversationRequest,
    DirectConversationRequest,
    UpdateConversationRequest,
    UpdateMemberRoleRequest,
)
from projecthub.application.requests.custom_field import (
    CreateCustomFieldRequest,
    CreateCustomFieldValueRequest,
    UpdateCustomFieldRequest,
    UpdateCustomFieldValueRequest,
)
from projecthub.application.requests.event import (
    AddParticipantRequest,
    CreateEventRequest,
    ParticipantStatusRequest,
    UpdateEventRequest,
)
from projecthub.application.requests.file import (
    CreateAttachmentRequest,
    CreateExportRequest,
    CreateImportRequest,
    CreateMediaRequest,
    UpdateImportRequest,
)
from projecthub.application.requests.form import (
    CreateFormRequest,
    CreateFormResponseRequest,
    UpdateFormRequest,
    UpdateFormResponseRequest,
)
from projecthub.application.requests.goal import CreateGoalRequest, UpdateGoalRequest
from projecthub.application.requests.recurring_task import (
    CreateRecurringTaskRequest,
    UpdateRecurringTaskRequest,
)
from projecthub.application.requests.setting import CreateSettingRequest, UpdateSettingRequest
from projecthub.application.requests.task import CreateTaskRequest, UpdateTaskRequest
from projecthub.application.requests.time_log import CreateTimeLogRequest, UpdateTimeLogRequest
from projecthub.application.requests.webhook import (
    CreateWebhookDeliveryRequest,
    CreateWebhookRequest,
    UpdateWebhookDeliveryRequest,
    UpdateWebhookRequest,
)
from projecthub.application.requests.wiki import CreateWikiRequest, UpdateWikiRequest

__all__ = [
    "AddParticipantRequest",
    "ConversationMembersRequest",
    "CreateAttachmentRequest",
    "CreateConversationRequest",
    "CreateCustomFieldRequest",
    "CreateCustomFieldValueRequest",
    "CreateEventRequest",
    "CreateExportRequest",
    "CreateFormRequest",
    "CreateFormResponseRequest",
    "CreateGoalRequest",
    "CreateImportRequest",
    "CreateMediaRequest",
    "CreateRecurringTaskRequest",
    "CreateSettingRequest",
    "CreateTaskRequest",
    "CreateTimeLogRequest",
    "CreateWebhookDeliveryRequest",
    "CreateWebhookRequest",
    "CreateWikiRequest",
    "DirectConversationRequest",
    "ParticipantStatusRequest",
    "UpdateConversationRequest",
    "UpdateCustomFieldRequest",
    "UpdateCustomFieldValueRequest",
    "UpdateEventRequest",
    "UpdateFormRequest",
    "UpdateFormResponseRequest",
    "UpdateGoalRequest",
    "UpdateImportRequest",
    "UpdateMemberRoleRequest",
    "UpdateRecurringTaskRequest",
    "UpdateSettingRequest",
    "UpdateTaskRequest",
    "UpdateTimeLogRequest",
    "UpdateWebhookDeliveryRequest",
    "UpdateWebhookRequest",
    "UpdateWikiRequest",
    "ValidatedRequest",
    "ValidationContext",
]
