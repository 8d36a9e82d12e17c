"""Presentation-layer dependency injection (composition root).

Routes depend only on these aliases; repositories, the gate, the blob store
and the validation context are built here from infrastructure.
"""

from projecthub.api.v1.dependencies.db import (
    Blobs,
    CurrentActor,
    Gate,
    ListQuery,
    Listing,
    Session,
    get_actor,
    get_blob_store,
    get_gate,
    get_list_query,
)
from projecthub.api.v1.dependencies.repositories import (
    Attachments,
    Conversations,
    CustomFields,
    CustomFieldValues,
    Events,
    Exports,
    FormResponses,
    Forms,
    Goals,
    Imports,
    MediaItems,
    RecurringTasks,
    Revisions,
    Settings,
    Tasks,
    TimeLogs,
    Validation,
    WebhookDeliveries,
    Webhooks,
    Wikis,
    get_validation_context,
)

__all__ = [
    "Attachments",
    "Blobs",
    "Conversations",
    "CurrentActor",
    "CustomFieldValues",
    "CustomFields",
    "Events",
    "Exports",
    "FormResponses",
    "Forms",
    "Gate",
    "Goals",
    "Imports",
    "ListQuery",
    "Listing",
    "MediaItems",
    "RecurringTasks",
    "Revisions",
    "Session",
    "Settings",
    "Tasks",
    "TimeLogs",
    "Validation",
    "WebhookDeliveries",
    "Webhooks",
    "Wikis",
    "get_actor",
    "get_blob_store",
    "get_gate",
    "get_list_query",
    "get_validation_context",
]
