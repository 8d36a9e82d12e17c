"""Calendar event repository with participant rows."""

from __future__ import annotations

from typing import Any

from sqlalchemy import delete, insert, select, update as sa_update
from sqlalchemy.ext.asyncio import AsyncSession

from projecthub.domain.enums import ParticipantStatus
from projecthub.infrastructure.persistence.database import atomic
from projecthub.infrastructure.persistence.filters import FilterSpec
from projecthub.infrastructure.persistence.models.event import Event, event_participant
from projecthub.infrastructure.persistence.repositories.base import BaseRepository


class EventRepository(BaseRepository[Event]):
    """Events; the 'participants' input key carries user ids."""

    filter_spec = FilterSpec(
        exact=("workspace_id", "type", "all_day", "created_by_id"),
        search=("title", "description", "location"),
        date_column="start_date",
        order_by=(("start_date", "asc"),),
    )

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Event)

    async def create(self, data: dict[str, Any]) -> Event:
        """Create the event and its participant rows in one unit of work."""
        async with atomic(self.db):
            event = await super().create(data)
            participants = list(dict.fromkeys(data.get("participants") or []))
            if participants:
                await self.db.execute(
                    insert(event_participant),
                    [
                        {
                            "event_id": event.id,
                            "user_id": user_id,
                            "status": ParticipantStatus.PENDING.value,
                        }
                        for user_id in participants
                    ],
                )
        return event

    async def update(self, event: Event, data: dict[str, Any]) -> Event:
        """Update columns; a provided participants list replaces the current one."""
        async with atomic(self.db):
            event = await super().update(event, data)
            if "participants" in data:
                wanted = list(dict.fromkeys(data["participants"] or []))
                current = {p["user_id"] for p in await self.get_participants(event)}
                removed = current - set(wanted)
                if removed:
                    await self.db.execute(
                        delete(event_participant).where(
                            event_participant.c.event_id == event.id,
                            event_participant.c.user_id.in_(removed),
                        )
                    )
                for user_id in wanted:
                    if user_id not in current:
                        await self.add_participant(event, user_id)
        return event

    async def add_participant(
        self, event: Event, user_id: int, status: str = ParticipantStatus.PENDING.value
    ) -> bool:
        """Add user to the event. Returns False if already a participant."""
        existing = await self.db.execute(
            select(event_participant.c.user_id).where(
                event_participant.c.event_id == event.id,
                event_participant.c.user_id == user_id,
            )
        )
        if existing.first() is not None:
            return False
        await self.db.execute(
            insert(event_participant).values(event_id=event.id, user_id=user_id, status=status)
        )
        return True

    async def remove_participant(self, event: Event, user_id: int) -> bool:
        result = await self.db.execute(
            delete(event_participant).where(
                event_participant.c.event_id == event.id,
                event_participant.c.user_id == user_id,
            )
        )
        return bool(result.rowcount)

    async def update_participant_status(self, event: Event, user_id: int, status: str) -> bool:
        result = await self.db.execute(
            sa_update(event_participant)
            .where(
                event_participant.c.event_id == event.id,
                event_participant.c.user_id == user_id,
            )
            .values(status=status)
        )
        return bool(result.rowcount)

    async def get_participants(self, event: Event) -> list[dict[str, Any]]:
        result = await self.db.execute(
            select(event_participant.c.user_id, event_participant.c.status)
            .where(event_participant.c.event_id == event.id)
            .order_by(event_participant.c.user_id)
        )
        return [dict(row._mapping) for row in result]
