"""Conversations: direct conversation lookup and the owner invariant."""

import pytest

from projecthub.domain.exceptions import DomainInvariantException
from projecthub.infrastructure.persistence.repositories import ConversationRepository


@pytest.mark.requires_db
async def test_direct_conversation_is_reused(seed, db_session) -> None:
    ws = await seed.workspace()
    alice, bob, carol = await seed.user(), await seed.user(), await seed.user()
    repo = ConversationRepository(db_session)

    first = await repo.find_or_create_direct_conversation(ws.id, alice.id, bob.id)
    again = await repo.find_or_create_direct_conversation(ws.id, bob.id, alice.id)
    other = await repo.find_or_create_direct_conversation(ws.id, alice.id, carol.id)

    assert again.id == first.id
    assert other.id != first.id
    assert first.type == "direct"
    assert await repo.get_member_ids(first) == sorted([alice.id, bob.id])


@pytest.mark.requires_db
async def test_group_with_same_members_is_not_direct(seed, db_session) -> None:
    ws = await seed.workspace()
    alice, bob = await seed.user(), await seed.user()
    repo = ConversationRepository(db_session)
    group = await repo.create({"workspace_id": ws.id, "name": "Pair"}, alice.id, [bob.id])

    direct = await repo.find_or_create_direct_conversation(ws.id, alice.id, bob.id)
    assert direct.id != group.id


@pytest.mark.requires_db
async def test_last_owner_cannot_leave(seed, db_session) -> None:
    ws = await seed.workspace()
    owner, member = await seed.user(), await seed.user()
    repo = ConversationRepository(db_session)
    conversation = await repo.create({"workspace_id": ws.id, "name": "Team"}, owner.id, [member.id])

    with pytest.raises(DomainInvariantException) as exc:
        await repo.remove_users(conversation, [owner.id])
    assert exc.value.details["invariant"] == "conversation_owner_required"
    assert await repo.get_member_ids(conversation) == sorted([owner.id, member.id])

    assert await repo.remove_users(conversation, [member.id]) == 1


@pytest.mark.requires_db
async def test_last_owner_cannot_be_demoted(seed, db_session) -> None:
    ws = await seed.workspace()
    owner, member = await seed.user(), await seed.user()
    repo = ConversationRepository(db_session)
    conversation = await repo.create({"workspace_id": ws.id}, owner.id, [member.id])

    with pytest.raises(DomainInvariantException):
        await repo.update_user_role(conversation, owner.id, "member")

    assert await repo.update_user_role(conversation, member.id, "owner") is True
    assert await repo.update_user_role(conversation, owner.id, "member") is True
    assert await repo.update_user_role(conversation, 9999, "admin") is False


@pytest.mark.requires_db
async def test_members_of_direct_conversation_can_leave(seed, db_session) -> None:
    """Direct conversations have no owner, so removal is not blocked."""
    ws = await seed.workspace()
    alice, bob = await seed.user(), await seed.user()
    repo = ConversationRepository(db_session)
    direct = await repo.find_or_create_direct_conversation(ws.id, alice.id, bob.id)

    assert await repo.remove_users(direct, [bob.id]) == 1
    assert await repo.get_member_ids(direct) == [alice.id]


@pytest.mark.requires_db
async def test_add_users_skips_existing(seed, db_session) -> None:
    ws = await seed.workspace()
    owner, member, newcomer = await seed.user(), await seed.user(), await seed.user()
    repo = ConversationRepository(db_session)
    conversation = await repo.create({"workspace_id": ws.id}, owner.id, [member.id])

    assert await repo.add_users(conversation, [member.id, newcomer.id, newcomer.id]) == 1
    assert await repo.mark_as_read(conversation, newcomer.id) is True
