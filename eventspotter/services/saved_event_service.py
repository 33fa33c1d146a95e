from sqlalchemy.ext.asyncio import AsyncSession
from eventspotter.db.models.event import Event
from eventspotter.db.repositories import (
    SaveOutcome,
    save_event as db_save_event,
    unsave_event as db_unsave_event,
    list_saved_events as db_list_saved_events,
)
from typing import List


class SavedEventService:
    """Bookmarks; saving and unsaving need no ownership of the event."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, user_id, event_id) -> SaveOutcome:
        return await db_save_event(self.session, user_id, event_id)

    async def unsave(self, user_id, event_id) -> None:
        await db_unsave_event(self.session, user_id, event_id)

    async def list_saved(self, user_id) -> List[Event]:
        return await db_list_saved_events(self.session, user_id)
