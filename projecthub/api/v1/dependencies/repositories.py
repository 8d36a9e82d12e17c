"""Repository and validation-context dependencies.

All repositories of one request share the request session, so validation
probes, row locks and writes see the same transaction.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from projecthub.application.requests import ValidationContext
from projecthub.application.services.wiki_revision_service import WikiRevisionService
from projecthub.api.v1.dependencies.db import Blobs, CurrentActor, Session
from projecthub.infrastructure.persistence.record_checker import SqlRecordChecker
from projecthub.infrastructure.persistence.registry import default_registry
from projecthub.infrastructure.persistence.repositories import (
    AttachmentRepository,
    ConversationRepository,
    CustomFieldRepository,
    CustomFieldValueRepository,
    EventRepository,
    ExportRepository,
    FormRepository,
    FormResponseRepository,
    GoalRepository,
    ImportRepository,
    MediaRepository,
    RecurringTaskRepository,
    SettingRepository,
    TaskRepository,
    TimeLogRepository,
    WebhookDeliveryRepository,
    WebhookRepository,
    WikiRepository,
)


def get_validation_context(db: Session, actor: CurrentActor) -> ValidationContext:
    """Collaborators for request validation, bound to the request session."""
    return ValidationContext(
        checker=SqlRecordChecker(db),
        actor=actor,
        forms=FormRepository(db),
        custom_fields=CustomFieldRepository(db),
        time_logs=TimeLogRepository(db),
        wikis=WikiRepository(db),
        entities=default_registry.bind(db),
    )


def get_task_repository(db: Session) -> TaskRepository:
    return TaskRepository(db)


def get_recurring_task_repository(db: Session) -> RecurringTaskRepository:
    return RecurringTaskRepository(db)


def get_wiki_repository(db: Session) -> WikiRepository:
    return WikiRepository(db)


def get_wiki_revision_service(
    wikis: Annotated[WikiRepository, Depends(get_wiki_repository)],
) -> WikiRevisionService:
    return WikiRevisionService(wikis, wikis.revisions)


def get_form_repository(db: Session) -> FormRepository:
    return FormRepository(db)


def get_form_response_repository(db: Session) -> FormResponseRepository:
    return FormResponseRepository(db)


def get_custom_field_repository(db: Session) -> CustomFieldRepository:
    return CustomFieldRepository(db)


def get_custom_field_value_repository(db: Session) -> CustomFieldValueRepository:
    return CustomFieldValueRepository(db)


def get_webhook_repository(db: Session) -> WebhookRepository:
    return WebhookRepository(db)


def get_webhook_delivery_repository(db: Session) -> WebhookDeliveryRepository:
    return WebhookDeliveryRepository(db)


def get_time_log_repository(db: Session) -> TimeLogRepository:
    return TimeLogRepository(db)


def get_conversation_repository(db: Session) -> ConversationRepository:
    return ConversationRepository(db)


def get_goal_repository(db: Session) -> GoalRepository:
    return GoalRepository(db)


def get_setting_repository(db: Session) -> SettingRepository:
    return SettingRepository(db)


def get_event_repository(db: Session) -> EventRepository:
    return EventRepository(db)


def get_attachment_repository(db: Session, blobs: Blobs) -> AttachmentRepository:
    return AttachmentRepository(db, blob_store=blobs)


def get_media_repository(db: Session, blobs: Blobs) -> MediaRepository:
    return MediaRepository(db, blob_store=blobs)


def get_export_repository(db: Session, blobs: Blobs) -> ExportRepository:
    return ExportRepository(db, blob_store=blobs)


def get_import_repository(db: Session, blobs: Blobs) -> ImportRepository:
    return ImportRepository(db, blob_store=blobs)


Validation = Annotated[ValidationContext, Depends(get_validation_context)]
Tasks = Annotated[TaskRepository, Depends(get_task_repository)]
RecurringTasks = Annotated[RecurringTaskRepository, Depends(get_recurring_task_repository)]
Wikis = Annotated[WikiRepository, Depends(get_wiki_repository)]
Revisions = Annotated[WikiRevisionService, Depends(get_wiki_revision_service)]
Forms = Annotated[FormRepository, Depends(get_form_repository)]
FormResponses = Annotated[FormResponseRepository, Depends(get_form_response_repository)]
CustomFields = Annotated[CustomFieldRepository, Depends(get_custom_field_repository)]
CustomFieldValues = Annotated[
    CustomFieldValueRepository, Depends(get_custom_field_value_repository)
]
Webhooks = Annotated[WebhookRepository, Depends(get_webhook_repository)]
WebhookDeliveries = Annotated[
    WebhookDeliveryRepository, Depends(get_webhook_delivery_repository)
]
TimeLogs = Annotated[TimeLogRepository, Depends(get_time_log_repository)]
Conversations = Annotated[ConversationRepository, Depends(get_conversation_repository)]
Goals = Annotated[GoalRepository, Depends(get_goal_repository)]
Settings = Annotated[SettingRepository, Depends(get_setting_repository)]
Events = Annotated[EventRepository, Depends(get_event_repository)]
Attachments = Annotated[AttachmentRepository, Depends(get_attachment_repository)]
MediaItems = Annotated[MediaRepository, Depends(get_media_repository)]
Exports = Annotated[ExportRepository, Depends(get_export_repository)]
Imports = Annotated[ImportRepository, Depends(get_import_repository)]
