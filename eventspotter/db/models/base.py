from datetime import datetime, timezone


def utcnow() -> datetime:
    """Timestamp default for created/updated/saved columns."""
    return datetime.now(timezone.utc)
