"""Domain errors raised by the discovery and saved-event layers.

Each error carries a stable code and a user-safe message; the application's
exception handler maps the code to an HTTP status.
"""
from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Domain error codes."""

    NOT_FOUND = "NOT_FOUND"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    FORBIDDEN = "FORBIDDEN"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode = ErrorCode.INVALID_ARGUMENT

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(DomainError):
    """Raised when a referenced event does not exist."""

    code = ErrorCode.NOT_FOUND


class InvalidArgumentError(DomainError):
    """Raised when caller-supplied arguments violate a cross-field invariant."""

    code = ErrorCode.INVALID_ARGUMENT


class ForbiddenError(DomainError):
    code = ErrorCode.FORBIDDEN


class CapacityExceededError(DomainError):
    """Raised when a configured catalog cap has been reached."""

    code = ErrorCode.CAPACITY_EXCEEDED


class EventNotFoundError(NotFoundError):
    def __init__(self, event_id=None):
        super().__init__("Event not found.", {"event_id": str(event_id)} if event_id else None)
        self.event_id = event_id
