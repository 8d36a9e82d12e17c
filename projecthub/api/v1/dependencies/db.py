"""Session, actor, gate and list-query dependencies (composition root)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Any

from fastapi import Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from projecthub.application.interfaces.services import Actor, AuthorizationGate
from projecthub.application.services.authorization_service import PolicyGate
from projecthub.core.config import get_settings
from projecthub.domain.exceptions import AuthenticationException
from projecthub.infrastructure.external.storage import BlobStore, StorageFactory
from projecthub.infrastructure.persistence.database import get_db_transactional
from projecthub.infrastructure.persistence.models import User

# Every route runs in one request-wide transaction on this session.
Session = Annotated[AsyncSession, Depends(get_db_transactional)]

_PAGING_KEYS = frozenset({"page", "per_page"})


async def get_actor(request: Request, db: Session) -> Actor:
    """Resolve the acting user from the actor header (401 when missing or unknown)."""
    raw = request.headers.get(get_settings().actor_header)
    if not raw or not raw.strip().isdigit():
        raise AuthenticationException()
    user = await db.get(User, int(raw.strip()))
    if user is None:
        raise AuthenticationException("Unknown user")
    return Actor(user_id=user.id, is_admin=bool(user.is_admin))


def get_gate() -> AuthorizationGate:
    """Authorization gate; override in tests or deployments with another policy."""
    return PolicyGate()


def get_blob_store(request: Request) -> BlobStore:
    store = getattr(request.app.state, "blob_store", None)
    if store is None:
        store = StorageFactory.create_blob_store(get_settings())
        request.app.state.blob_store = store
    return store


@dataclass
class ListQuery:
    """Filter map plus paging taken from the query string."""

    filters: dict[str, Any] = field(default_factory=dict)
    page: int = 1
    per_page: int | None = None


def get_list_query(
    request: Request,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int | None, Query(ge=1)] = None,
) -> ListQuery:
    """Every query parameter other than page/per_page is a filter key."""
    filters = {k: v for k, v in request.query_params.items() if k not in _PAGING_KEYS}
    return ListQuery(filters=filters, page=page, per_page=per_page)


CurrentActor = Annotated[Actor, Depends(get_actor)]
Gate = Annotated[AuthorizationGate, Depends(get_gate)]
Blobs = Annotated[BlobStore, Depends(get_blob_store)]
Listing = Annotated[ListQuery, Depends(get_list_query)]
