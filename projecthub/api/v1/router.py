"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. Routes get
repositories, the gate and the validation context from
projecthub.api.v1.dependencies.
"""

from fastapi import APIRouter

from projecthub.api.v1.endpoints import (
    conversations,
    custom_fields,
    events,
    files,
    forms,
    goals,
    health,
    recurring_tasks,
    settings,
    tasks,
    time_logs,
    webhooks,
    wikis,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
api_router.include_router(
    recurring_tasks.router, prefix="/recurring-tasks", tags=["recurring-tasks"]
)
api_router.include_router(wikis.router, prefix="/wikis", tags=["wikis"])
api_router.include_router(forms.router, prefix="/forms", tags=["forms"])
api_router.include_router(
    forms.responses_router, prefix="/form-responses", tags=["forms"]
)
api_router.include_router(
    custom_fields.router, prefix="/custom-fields", tags=["custom-fields"]
)
api_router.include_router(
    custom_fields.values_router, prefix="/custom-field-values", tags=["custom-fields"]
)
api_router.include_router(webhooks.router, prefix="/webhooks", tags=["webhooks"])
api_router.include_router(
    webhooks.deliveries_router, prefix="/webhook-deliveries", tags=["webhooks"]
)
api_router.include_router(time_logs.router, prefix="/time-logs", tags=["time-logs"])
api_router.include_router(
    conversations.router, prefix="/conversations", tags=["conversations"]
)
api_router.include_router(goals.router, prefix="/goals", tags=["goals"])
api_router.include_router(settings.router, prefix="/settings", tags=["settings"])
api_router.include_router(events.router, prefix="/events", tags=["events"])
api_router.include_router(files.attachments_router, prefix="/attachments", tags=["files"])
api_router.include_router(files.media_router, prefix="/media", tags=["files"])
api_router.include_router(files.exports_router, prefix="/exports", tags=["files"])
api_router.include_router(files.imports_router, prefix="/imports", tags=["files"])
