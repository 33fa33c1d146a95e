from typing import List, Optional, Iterable
from sqlalchemy import Column, Integer, String, Text, Date, Time, DateTime, ForeignKey, Index, Uuid, func
import uuid
from sqlalchemy.orm import relationship
from eventspotter.db.session import Base
from eventspotter.db.models.base import utcnow


class EventTag(Base):
    """One tag of an event, kept in entry order and stored exactly as entered."""
    __tablename__ = "event_tags"
    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Uuid(as_uuid=True), ForeignKey("events.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)
    value = Column(String(50), nullable=False)

    __table_args__ = (
        Index('idx_event_tag_event', 'event_id'),
        Index('idx_event_tag_value', 'value'),
    )


class Event(Base):
    __tablename__ = "events"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    event_date = Column(Date, nullable=False)
    event_time = Column(Time, nullable=True)
    location_description = Column(Text, nullable=False)
    organizer_name = Column(String(100), nullable=False)
    category = Column(String(100), nullable=False)
    website_url = Column(String(2048), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now(), nullable=False)

    tag_rows = relationship(
        "EventTag",
        order_by=EventTag.position,
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    # Indexes for frequently filtered and sorted fields
    __table_args__ = (
        Index('idx_event_date', 'event_date'),
        Index('idx_event_owner', 'user_id'),
        Index('idx_event_created_at', 'created_at'),
        Index('idx_event_category', 'category'),
    )

    @property
    def tags(self) -> List[str]:
        return [row.value for row in self.tag_rows]

    @tags.setter
    def tags(self, values: Optional[Iterable[str]]) -> None:
        self.tag_rows = [EventTag(position=i, value=v) for i, v in enumerate(values or [])]

    def __repr__(self) -> str:
        return f"<Event {self.id} {self.title!r}>"
