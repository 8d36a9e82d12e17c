"""SQLAlchemy repositories, one per aggregate."""

from projecthub.infrastructure.persistence.repositories.base import BaseRepository
from projecthub.infrastructure.persistence.repositories.blob_repo import (
    AttachmentRepository,
    BlobOwningRepository,
    ExportRepository,
    ImportRepository,
    MediaRepository,
)
from projecthub.infrastructure.persistence.repositories.conversation_repo import (
    ConversationRepository,
)
from projecthub.infrastructure.persistence.repositories.custom_field_repo import (
    CustomFieldRepository,
    CustomFieldValueRepository,
)
from projecthub.infrastructure.persistence.repositories.event_repo import EventRepository
from projecthub.infrastructure.persistence.repositories.form_repo import (
    FormRepository,
    FormResponseRepository,
)
from projecthub.infrastructure.persistence.repositories.goal_repo import GoalRepository
from projecthub.infrastructure.persistence.repositories.recurring_task_repo import (
    RecurringTaskRepository,
)
from projecthub.infrastructure.persistence.repositories.setting_repo import SettingRepository
from projecthub.infrastructure.persistence.repositories.task_repo import TaskRepository
from projecthub.infrastructure.persistence.repositories.time_log_repo import TimeLogRepository
from projecthub.infrastructure.persistence.repositories.webhook_repo import (
    WebhookDeliveryRepository,
    WebhookRepository,
)
from projecthub.infrastructure.persistence.repositories.wiki_repo import WikiRepository
from projecthub.infrastructure.persistence.repositories.wiki_revision_repo import (
    WikiRevisionRepository,
)
from projecthub.infrastructure.persistence.repositories.workspace_repo import (
    MilestoneRepository,
    ProjectRepository,
    StatusRepository,
    UserRepository,
    WorkspaceRepository,
)

__all__ = [
    "AttachmentRepository",
    "BaseRepository",
    "BlobOwningRepository",
    "ConversationRepository",
    "CustomFieldRepository",
    "CustomFieldValueRepository",
    "EventRepository",
    "ExportRepository",
    "FormRepository",
    "FormResponseRepository",
    "GoalRepository",
    "ImportRepository",
    "MediaRepository",
    "MilestoneRepository",
    "ProjectRepository",
    "RecurringTaskRepository",
    "SettingRepository",
    "StatusRepository",
    "TaskRepository",
    "TimeLogRepository",
    "UserRepository",
    "WebhookDeliveryRepository",
    "WebhookRepository",
    "WikiRepository",
    "WikiRevisionRepository",
    "WorkspaceRepository",
]
