"""Wiki repository: revision gating, hierarchy moves and revision service."""

import pytest

from projecthub.application.services.wiki_revision_service import WikiRevisionService
from projecthub.domain.exceptions import DomainInvariantException
from projecthub.infrastructure.persistence.repositories import WikiRepository


async def _create(repo, ws, **values):
    data = {"workspace_id": ws.id, "title": "Home", "slug": "home", "content": "hello", **values}
    return await repo.create(data)


@pytest.mark.requires_db
async def test_revision_only_when_title_or_content_changes(seed, db_session) -> None:
    ws = await seed.workspace()
    repo = WikiRepository(db_session)
    wiki = await _create(repo, ws)
    assert await repo.revisions.count_for_wiki(wiki.id) == 1

    await repo.update(wiki, {"content": "hello world"})
    assert await repo.revisions.count_for_wiki(wiki.id) == 2

    await repo.update(wiki, {"is_published": True, "content": "hello world"})
    assert await repo.revisions.count_for_wiki(wiki.id) == 2

    await repo.update(wiki, {"title": "Start"})
    assert await repo.revisions.count_for_wiki(wiki.id) == 3

    latest = await repo.revisions.latest(wiki.id)
    assert latest.title == "Start"
    assert latest.summary == "Content updated"


@pytest.mark.requires_db
async def test_empty_wiki_has_no_initial_revision(seed, db_session) -> None:
    ws = await seed.workspace()
    repo = WikiRepository(db_session)
    wiki = await _create(repo, ws, content="")
    assert await repo.revisions.count_for_wiki(wiki.id) == 0


@pytest.mark.requires_db
async def test_delete_moves_children_to_grandparent(seed, db_session) -> None:
    ws = await seed.workspace()
    root = await seed.wiki(ws)
    middle = await seed.wiki(ws, parent_id=root.id)
    leaf = await seed.wiki(ws, parent_id=middle.id)
    repo = WikiRepository(db_session)

    await repo.delete(middle)
    await db_session.refresh(leaf)

    assert leaf.parent_id == root.id
    assert await repo.get_by_id(middle.id) is None


@pytest.mark.requires_db
async def test_parent_cannot_be_self_or_descendant(seed, db_session) -> None:
    ws = await seed.workspace()
    root = await seed.wiki(ws)
    child = await seed.wiki(ws, parent_id=root.id)
    grandchild = await seed.wiki(ws, parent_id=child.id)
    repo = WikiRepository(db_session)

    with pytest.raises(DomainInvariantException) as exc:
        await repo.update(root, {"parent_id": grandchild.id})
    assert exc.value.details["invariant"] == "wiki_parent_cycle"

    with pytest.raises(DomainInvariantException) as exc:
        await repo.update(root, {"parent_id": root.id})
    assert exc.value.details["invariant"] == "wiki_not_own_parent"

    moved = await repo.update(grandchild, {"parent_id": root.id})
    assert moved.parent_id == root.id


@pytest.mark.requires_db
async def test_tree_and_breadcrumb(seed, db_session) -> None:
    ws = await seed.workspace()
    root = await seed.wiki(ws, title="A")
    child = await seed.wiki(ws, title="B", parent_id=root.id)
    await seed.wiki(ws, title="C")
    repo = WikiRepository(db_session)

    tree = await repo.get_tree(ws.id)
    assert [node["wiki"].title for node in tree] == ["A", "C"]
    assert [node["wiki"].title for node in tree[0]["children"]] == ["B"]
    assert [w.id for w in await repo.get_breadcrumb(child)] == [root.id, child.id]


@pytest.mark.requires_db
async def test_restore_records_a_revision(seed, db_session) -> None:
    ws = await seed.workspace()
    user = await seed.user()
    repo = WikiRepository(db_session)
    service = WikiRevisionService(repo, repo.revisions)
    wiki = await repo.create(
        {"workspace_id": ws.id, "title": "Home", "slug": "home", "content": "v1"}, user_id=user.id
    )
    first = await repo.revisions.latest(wiki.id)
    await repo.update(wiki, {"content": "v2"}, user_id=user.id)

    restored = await service.restore_to_revision(wiki, first, user_id=user.id)

    assert restored.content == "v1"
    assert await repo.revisions.count_for_wiki(wiki.id) == 3
    latest = await repo.revisions.latest(wiki.id)
    assert latest.summary.startswith("Restored to revision from ")
    assert latest.user_id == user.id


@pytest.mark.requires_db
async def test_last_revision_cannot_be_deleted(seed, db_session) -> None:
    ws = await seed.workspace()
    repo = WikiRepository(db_session)
    service = WikiRevisionService(repo, repo.revisions)
    wiki = await _create(repo, ws)
    only = await repo.revisions.latest(wiki.id)

    with pytest.raises(DomainInvariantException):
        await service.delete_revision(only)


@pytest.mark.requires_db
async def test_cleanup_keeps_newest(seed, db_session) -> None:
    ws = await seed.workspace()
    repo = WikiRepository(db_session)
    service = WikiRevisionService(repo, repo.revisions)
    wiki = await _create(repo, ws, content="0")
    for n in range(1, 5):
        await repo.update(wiki, {"content": str(n)})

    assert await service.cleanup_old_revisions(wiki, keep=2) == 3
    remaining = await service.list_revisions(wiki)
    assert [r.content for r in remaining] == ["4", "3"]
