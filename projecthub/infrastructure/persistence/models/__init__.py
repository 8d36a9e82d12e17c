"""ORM models. Importing this package registers every table on Base.metadata."""

from projecthub.infrastructure.persistence.models.conversation import (
    Conversation,
    conversation_user,
)
from projecthub.infrastructure.persistence.models.custom_field import (
    CustomField,
    CustomFieldValue,
)
from projecthub.infrastructure.persistence.models.event import Event, event_participant
from projecthub.infrastructure.persistence.models.file import (
    Attachment,
    Export,
    Import,
    Media,
)
from projecthub.infrastructure.persistence.models.form import Form, FormResponse
from projecthub.infrastructure.persistence.models.goal import Goal
from projecthub.infrastructure.persistence.models.project import (
    Milestone,
    Project,
    Status,
)
from projecthub.infrastructure.persistence.models.setting import Setting
from projecthub.infrastructure.persistence.models.task import (
    RecurringTask,
    Task,
    task_dependency,
    task_milestone,
)
from projecthub.infrastructure.persistence.models.time_log import TimeLog
from projecthub.infrastructure.persistence.models.webhook import (
    Webhook,
    WebhookDelivery,
)
from projecthub.infrastructure.persistence.models.wiki import Wiki, WikiRevision
from projecthub.infrastructure.persistence.models.workspace import User, Workspace

__all__ = [
    "Attachment",
    "Conversation",
    "CustomField",
    "CustomFieldValue",
    "Event",
    "Export",
    "Form",
    "FormResponse",
    "Goal",
    "Import",
    "Media",
    "Milestone",
    "Project",
    "RecurringTask",
    "Setting",
    "Status",
    "Task",
    "TimeLog",
    "User",
    "Webhook",
    "WebhookDelivery",
    "Wiki",
    "WikiRevision",
    "Workspace",
    "conversation_user",
    "event_participant",
    "task_dependency",
    "task_milestone",
]
