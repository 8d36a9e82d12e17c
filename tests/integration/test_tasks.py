"""Task repository: relation inputs and dependency edges."""

import pytest

from projecthub.application.requests.task import UpdateTaskRequest
from projecthub.domain.exceptions import DomainInvariantException, RequestValidationException
from projecthub.infrastructure.persistence.models import Milestone
from projecthub.infrastructure.persistence.repositories import TaskRepository


@pytest.mark.requires_db
async def test_dependency_types_pair_by_position(seed, db_session) -> None:
    """Missing type positions default to blocks."""
    ws = await seed.workspace()
    user = await seed.user()
    deps = [await seed.task(ws, user) for _ in range(3)]
    repo = TaskRepository(db_session)

    task = await repo.create(
        {
            "workspace_id": ws.id,
            "reporter_id": user.id,
            "title": "Ship it",
            "dependency_ids": [d.id for d in deps],
            "dependency_types": ["relates_to"],
        }
    )

    assert await repo.get_dependencies(task) == [
        (deps[0].id, "relates_to"),
        (deps[1].id, "blocks"),
        (deps[2].id, "blocks"),
    ]


@pytest.mark.requires_db
async def test_update_replaces_dependencies(seed, db_session) -> None:
    ws = await seed.workspace()
    user = await seed.user()
    first, second = await seed.task(ws, user), await seed.task(ws, user)
    repo = TaskRepository(db_session)
    task = await repo.create(
        {"workspace_id": ws.id, "reporter_id": user.id, "title": "T", "dependency_ids": [first.id]}
    )

    await repo.update(task, {"dependency_ids": [second.id], "dependency_types": ["duplicates"]})
    assert await repo.get_dependencies(task) == [(second.id, "duplicates")]

    await repo.update(task, {"title": "Renamed"})
    assert await repo.get_dependencies(task) == [(second.id, "duplicates")]


@pytest.mark.requires_db
async def test_task_cannot_depend_on_itself(seed, db_session) -> None:
    ws = await seed.workspace()
    user = await seed.user()
    task = await seed.task(ws, user)
    with pytest.raises(DomainInvariantException):
        await TaskRepository(db_session).add_dependencies(task, [task.id])


@pytest.mark.requires_db
async def test_string_ids_still_hit_self_checks(seed, db_session) -> None:
    ws = await seed.workspace()
    user = await seed.user()
    task = await seed.task(ws, user)
    repo = TaskRepository(db_session)

    with pytest.raises(DomainInvariantException):
        await repo.add_dependencies(task, [str(task.id)])
    with pytest.raises(DomainInvariantException):
        await repo.update(task, {"parent_id": str(task.id)})


@pytest.mark.requires_db
async def test_update_request_rejects_self_reference_given_as_string(
    seed, make_context
) -> None:
    ws = await seed.workspace()
    user = await seed.user()
    task = await seed.task(ws, user)

    with pytest.raises(RequestValidationException) as exc:
        await UpdateTaskRequest(
            {"parent_id": str(task.id), "dependency_ids": [str(task.id)]},
            make_context(),
            current=task,
        ).validate()
    assert exc.value.errors == {
        "parent_id": ["A task cannot be its own parent."],
        "dependency_ids": ["A task cannot depend on itself."],
    }


@pytest.mark.requires_db
async def test_milestones_attach_and_sync(seed, db_session) -> None:
    ws = await seed.workspace()
    user = await seed.user()
    m1 = Milestone(workspace_id=ws.id, name="Alpha")
    m2 = Milestone(workspace_id=ws.id, name="Beta")
    db_session.add_all([m1, m2])
    await db_session.flush()
    repo = TaskRepository(db_session)

    task = await repo.create(
        {
            "workspace_id": ws.id,
            "reporter_id": user.id,
            "title": "T",
            "milestone_ids": [m1.id, m1.id],
        }
    )
    assert await repo.get_milestone_ids(task) == [m1.id]

    await repo.update(task, {"milestone_ids": [m2.id]})
    assert await repo.get_milestone_ids(task) == [m2.id]


@pytest.mark.requires_db
async def test_list_filters_and_coerces(seed, db_session) -> None:
    ws = await seed.workspace()
    user = await seed.user()
    await seed.task(ws, user, priority="high", title="Fix login")
    await seed.task(ws, user, priority="low", title="Write docs")
    repo = TaskRepository(db_session)

    page = await repo.list({"workspace_id": str(ws.id), "priority": "high"})
    assert page.total == 1
    assert page.items[0].title == "Fix login"

    page = await repo.list({"search": "docs"})
    assert [t.title for t in page.items] == ["Write docs"]


@pytest.mark.requires_db
async def test_list_matches_wildcards_literally(seed, db_session) -> None:
    ws = await seed.workspace()
    user = await seed.user()
    await seed.task(ws, user, title="Cut price 50% today")
    await seed.task(ws, user, title="Cut price 500 today")
    await seed.task(ws, user, title="rename user_id")
    await seed.task(ws, user, title="rename userXid")
    repo = TaskRepository(db_session)

    assert [t.title for t in (await repo.list({"search": "50%"})).items] == [
        "Cut price 50% today"
    ]
    assert [t.title for t in (await repo.list({"search": "user_id"})).items] == [
        "rename user_id"
    ]
    assert (await repo.list({"workspace_id": "abc"})).total == 0
