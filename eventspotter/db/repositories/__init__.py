"""
Repository layer for database operations.

Async functions over an ``AsyncSession`` for users, events (including the
discovery queries) and saved events.
"""
from eventspotter.db.repositories.users import (
    create_user,
    get_user,
    get_user_by_identifier,
    find_conflicting_user,
)
from eventspotter.db.repositories.events import (
    create_event,
    get_event,
    update_event,
    delete_event,
    count_all_events,
    count_events,
    fetch_event_page,
    list_events,
    list_categories,
    list_tags,
    get_random_event,
    batch_get_events,
)
from eventspotter.db.repositories.saved_events import (
    SaveOutcome,
    save_event,
    unsave_event,
    list_saved_events,
)

__all__ = [
    "create_user",
    "get_user",
    "get_user_by_identifier",
    "find_conflicting_user",
    "create_event",
    "get_event",
    "update_event",
    "delete_event",
    "count_all_events",
    "count_events",
    "fetch_event_page",
    "list_events",
    "list_categories",
    "list_tags",
    "get_random_event",
    "batch_get_events",
    "SaveOutcome",
    "save_event",
    "unsave_event",
    "list_saved_events",
]
