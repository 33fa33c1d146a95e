"""
Event persistence and the discovery engine.

Provides event CRUD plus the read paths used by the catalog: the filtered,
sorted, paginated listing with its matching count, the category/tag facets,
the random pick and the batch lookup. None of the read paths check ownership;
they operate over the whole corpus.
"""
import random
from typing import List, Optional, Sequence, Tuple
from sqlalchemy import select, or_, func
from sqlalchemy.ext.asyncio import AsyncSession
from eventspotter.db.models.event import Event, EventTag
from eventspotter.db.models.base import utcnow
from eventspotter.db.models.user import User
from eventspotter.schemas import EventCreate, EventUpdate, EventFilter, SortField, SortOrder
from eventspotter.cache.cache_decorators import cached, invalidate_facets, FACETS_PREFIX
from eventspotter.core.config import settings
from eventspotter.core.errors import CapacityExceededError, InvalidArgumentError, NotFoundError
from eventspotter.core.logging import logger

# Columns the search token is matched against
SEARCH_COLUMNS = (
    Event.title,
    Event.description,
    Event.location_description,
    Event.organizer_name,
    Event.category,
)

_SORT_KEYS = {
    SortField.event_date: Event.event_date,
    SortField.title: func.lower(Event.title),
    SortField.created_at: Event.created_at,
    SortField.organizer_name: Event.organizer_name,
    SortField.category: Event.category,
}


async def count_all_events(db: AsyncSession) -> int:
    res = await db.execute(select(func.count()).select_from(Event))
    return res.scalar() or 0


async def create_event(db: AsyncSession, payload: EventCreate, owner: User) -> Event:
    """
    Create a new event owned by ``owner`` and invalidate the facet cache.

    The organizer name defaults to the owner's username.

    Raises:
        CapacityExceededError: If the MAX_EVENTS cap has been reached
    """
    if settings.MAX_EVENTS:
        current = await count_all_events(db)
        if current >= settings.MAX_EVENTS:
            logger.warning(f"Event creation limit reached ({current}/{settings.MAX_EVENTS})")
            raise CapacityExceededError(
                "Event creation limit reached. Please try again later.",
                {"limit": settings.MAX_EVENTS},
            )

    data = payload.to_columns()
    data["organizer_name"] = data.get("organizer_name") or owner.username
    ev = Event(**data, user_id=owner.id)
    db.add(ev)
    await db.commit()

    await invalidate_facets()
    logger.info(f"Event {ev.id} created by user {owner.id}: {ev.title!r}")
    return ev


async def get_event(db: AsyncSession, event_id) -> Optional[Event]:
    res = await db.execute(select(Event).where(Event.id == event_id))
    return res.scalars().first()


async def update_event(db: AsyncSession, ev: Event, payload: EventUpdate) -> Event:
    """Replace only the fields present in ``payload``."""
    for field, value in payload.to_columns(exclude_unset=True).items():
        setattr(ev, field, value)
    # Tag-only edits still count as an update of the event
    ev.updated_at = utcnow()
    await db.commit()

    await invalidate_facets()
    logger.info(f"Event {ev.id} updated")
    return ev


async def delete_event(db: AsyncSession, ev: Event) -> None:
    """Delete an event. Saved rows that referenced it become invisible to readers."""
    event_id = ev.id
    await db.delete(ev)
    await db.commit()

    await invalidate_facets()
    logger.info(f"Event {event_id} deleted")


def _filter_conditions(filters: EventFilter) -> list:
    """Build the predicate set shared by the page query and the count query."""
    conditions = []
    if filters.category:
        conditions.append(Event.category == filters.category)
    if filters.tags:
        # Any requested tag matches; stored values are compared as entered
        tagged = select(EventTag.event_id).where(EventTag.value.in_(filters.tags))
        conditions.append(Event.id.in_(tagged))
    if filters.start_date:
        conditions.append(Event.event_date >= filters.start_date)
    if filters.end_date:
        conditions.append(Event.event_date <= filters.end_date)
    if filters.search:
        term = filters.search.lower()
        conditions.append(
            or_(*[func.lower(col).contains(term, autoescape=True) for col in SEARCH_COLUMNS])
        )
    return conditions


def _order_by(filters: EventFilter) -> list:
    key = _SORT_KEYS[filters.sort_by]
    primary = key.asc() if filters.sort_order == SortOrder.asc else key.desc()
    # Event id breaks ties so consecutive pages never overlap
    return [primary, Event.id.asc()]


async def count_events(db: AsyncSession, filters: EventFilter) -> int:
    """Count every event matching the filter, ignoring pagination."""
    q = select(func.count()).select_from(Event).where(*_filter_conditions(filters))
    res = await db.execute(q)
    return res.scalar() or 0


async def fetch_event_page(db: AsyncSession, filters: EventFilter) -> List[Event]:
    q = (
        select(Event)
        .where(*_filter_conditions(filters))
        .order_by(*_order_by(filters))
        .offset(filters.offset)
        .limit(filters.limit)
    )
    res = await db.execute(q)
    return list(res.scalars().all())


async def list_events(db: AsyncSession, filters: EventFilter) -> Tuple[List[Event], int]:
    """
    Run a discovery query.

    The count and the page are two separate reads; under concurrent writes
    they may disagree at a page edge.

    Returns:
        Tuple of (events on the requested page, total matching events)
    """
    total = await count_events(db, filters)
    if total == 0 or filters.offset >= total:
        return [], total
    events = await fetch_event_page(db, filters)
    return events, total


@cached(f"{FACETS_PREFIX}:categories", expire=settings.FACET_CACHE_TTL)
async def list_categories(db: AsyncSession) -> List[str]:
    """Distinct categories across all events, sorted."""
    res = await db.execute(select(Event.category).distinct())
    return sorted(set(res.scalars().all()))


@cached(f"{FACETS_PREFIX}:tags", expire=settings.FACET_CACHE_TTL)
async def list_tags(db: AsyncSession) -> List[str]:
    """Distinct tags across all events: trimmed, non-empty, sorted."""
    res = await db.execute(select(EventTag.value).distinct())
    normalized = {value.strip() for value in res.scalars().all()}
    normalized.discard("")
    return sorted(normalized)


async def get_random_event(db: AsyncSession) -> Event:
    """
    Pick one event uniformly at random.

    A random offset is drawn against a fresh count. If the corpus shrank in
    between and the offset lands past the end, the first event by id is
    returned instead.

    Raises:
        NotFoundError: If there are no events
    """
    total = await count_all_events(db)
    if total == 0:
        raise NotFoundError("No events found.")

    offset = random.randrange(total)
    res = await db.execute(select(Event).order_by(Event.id).offset(offset).limit(1))
    ev = res.scalars().first()
    if ev is not None:
        return ev

    logger.warning(f"Random pick at offset {offset} of {total} returned nothing, falling back")
    res = await db.execute(select(Event).order_by(Event.id).limit(1))
    ev = res.scalars().first()
    if ev is None:
        raise NotFoundError("No events found.")
    return ev


async def batch_get_events(db: AsyncSession, event_ids: Sequence) -> List[Event]:
    """
    Return the events among ``event_ids`` that exist; unknown ids are skipped.

    Raises:
        InvalidArgumentError: If no ids are given
    """
    if not event_ids:
        raise InvalidArgumentError("At least one event ID must be provided.")
    res = await db.execute(select(Event).where(Event.id.in_(set(event_ids))))
    return list(res.scalars().all())
