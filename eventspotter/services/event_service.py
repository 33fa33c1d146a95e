from sqlalchemy.ext.asyncio import AsyncSession
from eventspotter.schemas import EventCreate, EventUpdate, EventFilter
from eventspotter.db.models.event import Event
from eventspotter.db.models.user import User
from eventspotter.db.repositories import (
    create_event as db_create_event,
    get_event as db_get_event,
    update_event as db_update_event,
    delete_event as db_delete_event,
    list_events as db_list_events,
    list_categories as db_list_categories,
    list_tags as db_list_tags,
    get_random_event as db_get_random_event,
    batch_get_events as db_batch_get_events,
)
from eventspotter.core.errors import EventNotFoundError, ForbiddenError
from eventspotter.core.logging import logger
from typing import List, Sequence, Tuple


class EventService:
    """
    Event CRUD and discovery for the HTTP layer.

    Ownership of an event is enforced here for update and delete; the
    discovery reads never look at who is asking.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_event(self, payload: EventCreate, user: User) -> Event:
        return await db_create_event(self.session, payload, user)

    async def get_event(self, event_id) -> Event:
        ev = await db_get_event(self.session, event_id)
        if ev is None:
            raise EventNotFoundError(event_id)
        return ev

    async def _get_owned_event(self, event_id, user: User) -> Event:
        ev = await self.get_event(event_id)
        if ev.user_id != user.id:
            logger.warning(f"User {user.id} is not the owner of event {event_id} (owner {ev.user_id})")
            raise ForbiddenError("You are not authorized to modify this event.")
        return ev

    async def update_event(self, event_id, payload: EventUpdate, user: User) -> Event:
        ev = await self._get_owned_event(event_id, user)
        return await db_update_event(self.session, ev, payload)

    async def delete_event(self, event_id, user: User) -> None:
        ev = await self._get_owned_event(event_id, user)
        await db_delete_event(self.session, ev)

    async def list_events_paginated(self, filters: EventFilter) -> Tuple[int, List[Event]]:
        """
        List events with pagination support.
        Returns tuple of (total_count, events).
        """
        events, total = await db_list_events(self.session, filters)
        return total, events

    async def list_categories(self) -> List[str]:
        return await db_list_categories(self.session)

    async def list_tags(self) -> List[str]:
        return await db_list_tags(self.session)

    async def random_event(self) -> Event:
        return await db_get_random_event(self.session)

    async def batch_get(self, event_ids: Sequence) -> List[Event]:
        return await db_batch_get_events(self.session, event_ids)
