from sqlalchemy import Column, DateTime, ForeignKey, Index, Uuid, func
from eventspotter.db.session import Base
from eventspotter.db.models.base import utcnow


class UserSavedEvent(Base):
    """A user's bookmark of an event.

    The composite primary key guarantees at most one row per (user, event).
    """
    __tablename__ = "user_saved_events"
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    event_id = Column(Uuid(as_uuid=True), ForeignKey("events.id", ondelete="CASCADE"), primary_key=True)
    saved_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    __table_args__ = (
        Index('idx_saved_event_user_saved_at', 'user_id', 'saved_at'),
        Index('idx_saved_event_event', 'event_id'),
    )
