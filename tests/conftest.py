"""Pytest configuration and fixtures for projecthub.

Every test gets a fresh in-memory SQLite database (aiosqlite, one shared
connection) with the full schema. HTTP tests run the app over ASGITransport
with the session dependencies pointed at that database.
"""

from collections.abc import AsyncIterator
from datetime import UTC, date, datetime
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event, insert
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

import projecthub.infrastructure.persistence.models  # noqa: F401  (register tables)
from projecthub.api.v1.dependencies import get_blob_store
from projecthub.application.interfaces.services import Actor
from projecthub.application.requests import ValidationContext
from projecthub.core.limiter import limiter
from projecthub.infrastructure.external.storage import LocalBlobStore
from projecthub.infrastructure.persistence.database import Base, get_db, get_db_transactional
from projecthub.infrastructure.persistence.models import (
    CustomField,
    Form,
    Project,
    RecurringTask,
    Task,
    TimeLog,
    User,
    Webhook,
    WebhookDelivery,
    Wiki,
    Workspace,
)
from projecthub.infrastructure.persistence.record_checker import SqlRecordChecker
from projecthub.infrastructure.persistence.registry import default_registry
from projecthub.infrastructure.persistence.repositories import (
    CustomFieldRepository,
    FormRepository,
    TimeLogRepository,
    WikiRepository,
)
from projecthub.main import app


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """In-memory SQLite engine with foreign keys and SAVEPOINT support."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(test_engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, _record: Any) -> None:
        # Let SQLAlchemy emit BEGIN itself so nested transactions work.
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(test_engine.sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Session on the test database; rolled back after the test."""
    async with AsyncSession(engine, expire_on_commit=False, autoflush=False) as session:
        yield session
        await session.rollback()


@pytest.fixture
def blob_store(tmp_path) -> LocalBlobStore:
    return LocalBlobStore(str(tmp_path / "storage"))


@pytest.fixture
async def client(db_session: AsyncSession, blob_store: LocalBlobStore) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the app, sharing the test session."""

    async def _session() -> AsyncIterator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_db] = _session
    app.dependency_overrides[get_db_transactional] = _session
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    limiter.enabled = False
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
        limiter.enabled = True


class Seed:
    """Inserts rows directly, bypassing request validation."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self._counter = 0

    def _next(self) -> int:
        self._counter += 1
        return self._counter

    async def _add(self, obj: Any) -> Any:
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def workspace(self, name: str | None = None) -> Workspace:
        n = self._next()
        return await self._add(Workspace(name=name or f"Workspace {n}", slug=f"workspace-{n}"))

    async def user(self, is_admin: bool = False) -> User:
        n = self._next()
        return await self._add(
            User(name=f"User {n}", email=f"user{n}@example.com", is_admin=is_admin)
        )

    async def project(self, workspace: Workspace) -> Project:
        return await self._add(Project(workspace_id=workspace.id, name=f"Project {self._next()}"))

    async def task(self, workspace: Workspace, reporter: User, **values: Any) -> Task:
        values.setdefault("title", f"Task {self._next()}")
        return await self._add(Task(workspace_id=workspace.id, reporter_id=reporter.id, **values))

    async def wiki(self, workspace: Workspace, **values: Any) -> Wiki:
        n = self._next()
        values.setdefault("title", f"Page {n}")
        values.setdefault("slug", f"page-{n}")
        values.setdefault("content", "")
        return await self._add(Wiki(workspace_id=workspace.id, **values))

    async def custom_field(self, workspace: Workspace, **values: Any) -> CustomField:
        values.setdefault("name", "Field")
        values.setdefault("key", f"field_{self._next()}")
        values.setdefault("type", "text")
        values.setdefault("applies_to", "tasks")
        return await self._add(CustomField(workspace_id=workspace.id, **values))

    async def time_log(self, workspace: Workspace, user: User, task: Task, **values: Any) -> TimeLog:
        values.setdefault("started_at", datetime(2026, 1, 5, 9, 0, tzinfo=UTC))
        return await self._add(
            TimeLog(workspace_id=workspace.id, user_id=user.id, task_id=task.id, **values)
        )

    async def form(self, workspace: Workspace, **values: Any) -> Form:
        n = self._next()
        values.setdefault("name", f"Form {n}")
        values.setdefault("slug", f"form-{n}")
        values.setdefault("fields", [])
        return await self._add(Form(workspace_id=workspace.id, **values))

    async def recurring(self, task: Task, **values: Any) -> RecurringTask:
        values.setdefault("frequency", "daily")
        values.setdefault("interval", 1)
        values.setdefault("next_due_date", date(2026, 1, 5))
        return await self._add(RecurringTask(task_id=task.id, **values))

    async def webhook(self, workspace: Workspace, **values: Any) -> Webhook:
        values.setdefault("name", "Hook")
        values.setdefault("url", "https://example.com/hook")
        values.setdefault("events", ["task.created"])
        return await self._add(Webhook(workspace_id=workspace.id, **values))

    async def delivery(self, webhook: Webhook, **values: Any) -> WebhookDelivery:
        values.setdefault("event", "task.created")
        values.setdefault("payload", {"id": 1})
        return await self._add(WebhookDelivery(webhook_id=webhook.id, **values))

    async def link(self, table: Any, **values: Any) -> None:
        await self.db.execute(insert(table).values(**values))


@pytest.fixture
def seed(db_session: AsyncSession) -> Seed:
    return Seed(db_session)


@pytest.fixture
def make_context(db_session: AsyncSession):
    """Build a ValidationContext bound to the test session for an actor."""

    def _make(actor_user: User | None = None, is_admin: bool = False) -> ValidationContext:
        actor = Actor(user_id=actor_user.id, is_admin=is_admin) if actor_user else None
        return ValidationContext(
            checker=SqlRecordChecker(db_session),
            actor=actor,
            forms=FormRepository(db_session),
            custom_fields=CustomFieldRepository(db_session),
            time_logs=TimeLogRepository(db_session),
            wikis=WikiRepository(db_session),
            entities=default_registry.bind(db_session),
        )

    return _make
