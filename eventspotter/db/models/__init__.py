"""Database models package."""
from eventspotter.db.models.user import User
from eventspotter.db.models.event import Event, EventTag
from eventspotter.db.models.saved_event import UserSavedEvent

__all__ = ["User", "Event", "EventTag", "UserSavedEvent"]
