"""Domain enumerations for the ProjectHub application.

Enums represent fixed sets of domain values used by validation rules,
models and filters.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class TaskPriority(_ValuesMixin, str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskType(_ValuesMixin, str, Enum):
    TASK = "task"
    BUG = "bug"
    FEATURE = "feature"
    STORY = "story"
    EPIC = "epic"


class DependencyType(_ValuesMixin, str, Enum):
    """Edge type on task_dependency. BLOCKS is the default when unspecified."""

    BLOCKS = "blocks"
    RELATES_TO = "relates_to"
    DUPLICATES = "duplicates"


class Frequency(_ValuesMixin, str, Enum):
    """Recurring task frequency."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class GoalStatus(_ValuesMixin, str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CustomFieldType(_ValuesMixin, str, Enum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    SELECT = "select"
    MULTISELECT = "multiselect"
    CHECKBOX = "checkbox"
    TEXTAREA = "textarea"
    URL = "url"
    EMAIL = "email"


class FormFieldType(_ValuesMixin, str, Enum):
    TEXT = "text"
    EMAIL = "email"
    NUMBER = "number"
    TEXTAREA = "textarea"
    SELECT = "select"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    FILE = "file"


class WebhookEvent(_ValuesMixin, str, Enum):
    TASK_CREATED = "task.created"
    TASK_UPDATED = "task.updated"
    TASK_DELETED = "task.deleted"
    PROJECT_CREATED = "project.created"
    PROJECT_UPDATED = "project.updated"
    USER_ASSIGNED = "user.assigned"


class DeliveryStatus(_ValuesMixin, str, Enum):
    """Webhook delivery state. PENDING rows are picked up by the external worker."""

    PENDING = "pending"
    DELIVERED = "delivered"
    FAILED = "failed"


class ConversationType(_ValuesMixin, str, Enum):
    DIRECT = "direct"
    GROUP = "group"
    CHANNEL = "channel"


class ConversationRole(_ValuesMixin, str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


class SettingType(_ValuesMixin, str, Enum):
    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    JSON = "json"


class JobStatus(_ValuesMixin, str, Enum):
    """Lifecycle of import/export rows advanced by the external job queue."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class ExportFormat(_ValuesMixin, str, Enum):
    CSV = "csv"
    JSON = "json"
    EXCEL = "excel"
    PDF = "pdf"


class DataEntity(_ValuesMixin, str, Enum):
    """Entities that can be exported or imported."""

    TASKS = "tasks"
    PROJECTS = "projects"
    USERS = "users"


class EventType(_ValuesMixin, str, Enum):
    MEETING = "meeting"
    DEADLINE = "deadline"
    REMINDER = "reminder"
    OTHER = "other"


class ParticipantStatus(_ValuesMixin, str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    TENTATIVE = "tentative"
