"""
The user-to-event bookmark relation.

Saving is insert-if-absent and unsaving is ensure-absent; neither surfaces a
conflict to the caller.
"""
import enum
from typing import List
from sqlalchemy import select, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from eventspotter.db.models.event import Event
from eventspotter.db.models.saved_event import UserSavedEvent
from eventspotter.core.config import settings
from eventspotter.core.errors import CapacityExceededError, EventNotFoundError
from eventspotter.core.logging import logger


class SaveOutcome(str, enum.Enum):
    created = "created"
    already_exists = "already_exists"


async def _event_exists(db: AsyncSession, event_id) -> bool:
    res = await db.execute(select(func.count()).select_from(Event).where(Event.id == event_id))
    return bool(res.scalar())


async def _saved_row_exists(db: AsyncSession, user_id, event_id) -> bool:
    q = select(func.count()).select_from(UserSavedEvent).where(
        UserSavedEvent.user_id == user_id,
        UserSavedEvent.event_id == event_id,
    )
    res = await db.execute(q)
    return bool(res.scalar())


async def save_event(db: AsyncSession, user_id, event_id) -> SaveOutcome:
    """
    Bookmark an event for a user.

    A repeated save leaves the existing row (and its saved_at) untouched. A
    uniqueness violation from a concurrent identical save is reported as
    ``already_exists``.

    Raises:
        EventNotFoundError: If the event does not exist
        CapacityExceededError: If the MAX_SAVED_EVENTS cap has been reached
    """
    if not await _event_exists(db, event_id):
        logger.warning(f"User {user_id} attempted to save non-existent event {event_id}")
        raise EventNotFoundError(event_id)

    if await _saved_row_exists(db, user_id, event_id):
        logger.info(f"Event {event_id} already saved by user {user_id}")
        return SaveOutcome.already_exists

    if settings.MAX_SAVED_EVENTS:
        res = await db.execute(select(func.count()).select_from(UserSavedEvent))
        current = res.scalar() or 0
        if current >= settings.MAX_SAVED_EVENTS:
            logger.warning(f"Event saving limit reached ({current}/{settings.MAX_SAVED_EVENTS})")
            raise CapacityExceededError(
                "Event saving limit reached. Please try again later.",
                {"limit": settings.MAX_SAVED_EVENTS},
            )

    db.add(UserSavedEvent(user_id=user_id, event_id=event_id))
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        if await _saved_row_exists(db, user_id, event_id):
            logger.info(f"Concurrent save of event {event_id} by user {user_id} absorbed")
            return SaveOutcome.already_exists
        # The event was deleted between the existence check and the insert
        raise EventNotFoundError(event_id)

    logger.info(f"Event {event_id} saved by user {user_id}")
    return SaveOutcome.created


async def unsave_event(db: AsyncSession, user_id, event_id) -> None:
    """Remove a bookmark if present. Missing rows and missing events are not errors."""
    res = await db.execute(
        delete(UserSavedEvent).where(
            UserSavedEvent.user_id == user_id,
            UserSavedEvent.event_id == event_id,
        )
    )
    await db.commit()
    if res.rowcount:
        logger.info(f"Event {event_id} unsaved by user {user_id}")
    else:
        logger.info(f"User {user_id} unsaved event {event_id} that was not saved")


async def list_saved_events(db: AsyncSession, user_id) -> List[Event]:
    """
    Events saved by a user, most recently saved first.

    The inner join drops rows whose event no longer exists.
    """
    q = (
        select(Event)
        .join(UserSavedEvent, UserSavedEvent.event_id == Event.id)
        .where(UserSavedEvent.user_id == user_id)
        .order_by(UserSavedEvent.saved_at.desc(), Event.id.asc())
    )
    res = await db.execute(q)
    return list(res.scalars().all())
