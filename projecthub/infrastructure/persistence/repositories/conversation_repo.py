"""Conversation repository: membership, owner invariant and direct-conversation lookup."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import and_, case, delete, func, insert, select, update as sa_update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from projecthub.domain.enums import ConversationRole, ConversationType
from projecthub.domain.exceptions import DomainInvariantException
from projecthub.infrastructure.persistence.database import atomic
from projecthub.infrastructure.persistence.filters import FilterSpec
from projecthub.infrastructure.persistence.models.conversation import (
    Conversation,
    conversation_user,
)
from projecthub.infrastructure.persistence.repositories.base import BaseRepository
from projecthub.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)

OWNER = ConversationRole.OWNER.value
MEMBER = ConversationRole.MEMBER.value


class ConversationRepository(BaseRepository[Conversation]):
    """Conversations and their conversation_user membership rows."""

    filter_spec = FilterSpec(
        exact=("workspace_id", "type", "is_private"),
        search=("name",),
        order_by=(("created_at", "desc"),),
    )

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Conversation)

    def _extra_predicates(self, filters: dict[str, Any]) -> list[ColumnElement[bool]]:
        user_id = filters.get("user_id")
        if user_id in (None, ""):
            return []
        members = select(conversation_user.c.conversation_id).where(
            conversation_user.c.user_id == int(user_id)
        )
        return [Conversation.id.in_(members)]

    async def create(
        self,
        data: dict[str, Any],
        owner_id: int | None = None,
        user_ids: list[int] | None = None,
    ) -> Conversation:
        """Create the conversation with owner_id as owner and user_ids as members."""
        async with atomic(self.db):
            conversation = await super().create(data)
            if owner_id is not None:
                await self._insert_members(conversation.id, [owner_id], OWNER)
            others = [u for u in dict.fromkeys(user_ids or []) if u != owner_id]
            if others:
                await self._insert_members(conversation.id, others, MEMBER)
        return conversation

    async def _insert_members(self, conversation_id: int, user_ids: list[int], role: str) -> None:
        now = utc_now()
        await self.db.execute(
            insert(conversation_user),
            [
                {
                    "conversation_id": conversation_id,
                    "user_id": user_id,
                    "role": role,
                    "joined_at": now,
                }
                for user_id in user_ids
            ],
        )

    async def get_members(self, conversation: Conversation) -> list[dict[str, Any]]:
        """Membership rows as dicts (user_id, role, joined_at, last_read_at)."""
        result = await self.db.execute(
            select(conversation_user)
            .where(conversation_user.c.conversation_id == conversation.id)
            .order_by(conversation_user.c.joined_at, conversation_user.c.user_id)
        )
        return [dict(row._mapping) for row in result]

    async def get_member_ids(self, conversation: Conversation) -> list[int]:
        result = await self.db.execute(
            select(conversation_user.c.user_id)
            .where(conversation_user.c.conversation_id == conversation.id)
            .order_by(conversation_user.c.user_id)
        )
        return list(result.scalars().all())

    async def add_users(
        self, conversation: Conversation, user_ids: list[int], role: str = MEMBER
    ) -> int:
        """Add users not already in the conversation. Returns how many were added."""
        existing = set(await self.get_member_ids(conversation))
        new_ids = [u for u in dict.fromkeys(user_ids) if u not in existing]
        if new_ids:
            await self._insert_members(conversation.id, new_ids, role)
        return len(new_ids)

    async def _locked_roles(self, conversation: Conversation) -> dict[int, str]:
        """Lock the membership rows for this transaction and return user -> role."""
        result = await self.db.execute(
            select(conversation_user.c.user_id, conversation_user.c.role)
            .where(conversation_user.c.conversation_id == conversation.id)
            .with_for_update()
        )
        return {row.user_id: row.role for row in result}

    async def remove_users(self, conversation: Conversation, user_ids: list[int]) -> int:
        """Remove users; refuses when an owned conversation would lose its last owner.

        Raises:
            DomainInvariantException: If the removal leaves zero owners.
        """
        async with atomic(self.db):
            roles = await self._locked_roles(conversation)
            removing = set(user_ids)
            remaining_owners = [
                u for u, role in roles.items() if role == OWNER and u not in removing
            ]
            had_owner = OWNER in roles.values()
            if had_owner and not remaining_owners:
                raise DomainInvariantException(
                    "Cannot remove the last owner from the conversation",
                    "conversation_owner_required",
                    conversation_id=conversation.id,
                )
            result = await self.db.execute(
                delete(conversation_user).where(
                    conversation_user.c.conversation_id == conversation.id,
                    conversation_user.c.user_id.in_(removing),
                )
            )
        return result.rowcount or 0

    async def update_user_role(
        self, conversation: Conversation, user_id: int, role: str
    ) -> bool:
        """Change one member's role. Returns False when the user is not a member.

        Raises:
            DomainInvariantException: If the last owner would be demoted.
        """
        async with atomic(self.db):
            roles = await self._locked_roles(conversation)
            if user_id not in roles:
                return False
            owners = [u for u, r in roles.items() if r == OWNER]
            if roles[user_id] == OWNER and role != OWNER and len(owners) <= 1:
                raise DomainInvariantException(
                    "Cannot change role: conversation needs at least one owner",
                    "conversation_owner_required",
                    conversation_id=conversation.id,
                )
            await self.db.execute(
                sa_update(conversation_user)
                .where(
                    conversation_user.c.conversation_id == conversation.id,
                    conversation_user.c.user_id == user_id,
                )
                .values(role=role)
            )
        return True

    async def mark_as_read(self, conversation: Conversation, user_id: int) -> bool:
        result = await self.db.execute(
            sa_update(conversation_user)
            .where(
                conversation_user.c.conversation_id == conversation.id,
                conversation_user.c.user_id == user_id,
            )
            .values(last_read_at=utc_now())
        )
        return bool(result.rowcount)

    async def find_direct_conversation(
        self, workspace_id: int, user_a: int, user_b: int
    ) -> Conversation | None:
        """Most recently updated direct conversation whose members are exactly both users."""
        wanted = {user_a, user_b}
        matching = (
            select(conversation_user.c.conversation_id)
            .group_by(conversation_user.c.conversation_id)
            .having(
                and_(
                    func.count() == len(wanted),
                    func.sum(case((conversation_user.c.user_id.in_(wanted), 1), else_=0))
                    == len(wanted),
                )
            )
        )
        result = await self.db.execute(
            select(Conversation)
            .where(
                Conversation.workspace_id == workspace_id,
                Conversation.type == ConversationType.DIRECT.value,
                Conversation.id.in_(matching),
            )
            .order_by(Conversation.updated_at.desc(), Conversation.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def find_or_create_direct_conversation(
        self, workspace_id: int, user_a: int, user_b: int
    ) -> Conversation:
        """Return the existing direct conversation for the pair, or create one."""
        existing = await self.find_direct_conversation(workspace_id, user_a, user_b)
        if existing is not None:
            return existing
        async with atomic(self.db):
            conversation = await super().create(
                {
                    "workspace_id": workspace_id,
                    "type": ConversationType.DIRECT.value,
                    "is_private": True,
                }
            )
            await self._insert_members(
                conversation.id, list(dict.fromkeys([user_a, user_b])), MEMBER
            )
        logger.info(
            "Created direct conversation %s for users %s and %s",
            conversation.id,
            user_a,
            user_b,
        )
        return conversation

    async def get_for_user(
        self, user_id: int, workspace_id: int | None = None
    ) -> list[Conversation]:
        members = select(conversation_user.c.conversation_id).where(
            conversation_user.c.user_id == user_id
        )
        stmt = select(Conversation).where(Conversation.id.in_(members))
        if workspace_id is not None:
            stmt = stmt.where(Conversation.workspace_id == workspace_id)
        result = await self.db.execute(
            stmt.order_by(Conversation.updated_at.desc(), Conversation.id.desc())
        )
        return list(result.scalars().all())
