from pydantic import BaseModel, EmailStr, Field, HttpUrl, ValidationError, field_validator, model_validator
from typing import Generic, List, Optional, TypeVar, Union
from uuid import UUID
from datetime import date, datetime, time
from enum import Enum
from typing_extensions import Annotated

from eventspotter.core.config import settings
from eventspotter.core.errors import InvalidArgumentError

T = TypeVar("T")

TagStr = Annotated[str, Field(max_length=50)]


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class TokenResponse(BaseModel):
    """Access and refresh token pair issued on login."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class LoginRequest(BaseModel):
    """Login by email address or username."""
    identifier: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserCreate(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    email: EmailStr
    password: str


class UserOut(BaseModel):
    id: UUID
    username: str
    email: EmailStr
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class EventCreate(BaseModel):
    title: str = Field(min_length=3, max_length=255)
    description: str = Field(min_length=10)
    event_date: date
    event_time: Optional[time] = None
    location_description: str = Field(min_length=1)
    organizer_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    category: str = Field(min_length=1, max_length=100)
    tags: List[TagStr] = Field(default_factory=list)
    website_url: Optional[HttpUrl] = None

    def to_columns(self, exclude_unset: bool = False) -> dict:
        data = self.model_dump(exclude_unset=exclude_unset)
        if data.get("website_url") is not None:
            data["website_url"] = str(data["website_url"])
        return data


class EventUpdate(EventCreate):
    """Partial update; only the fields that are sent are replaced."""
    title: Optional[str] = Field(default=None, min_length=3, max_length=255)
    description: Optional[str] = Field(default=None, min_length=10)
    event_date: Optional[date] = None
    location_description: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    tags: Optional[List[TagStr]] = None

    @field_validator(
        "title", "description", "event_date", "location_description",
        "organizer_name", "category", "tags",
    )
    @classmethod
    def _not_null(cls, value):
        # Omit a field to keep it; only event_time and website_url can be cleared
        if value is None:
            raise ValueError("Field cannot be null")
        return value

    @model_validator(mode="after")
    def _require_a_field(self):
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update")
        return self


class EventOut(BaseModel):
    id: UUID
    user_id: UUID
    title: str
    description: str
    event_date: date
    event_time: Optional[time]
    location_description: str
    organizer_name: str
    category: str
    tags: List[str]
    website_url: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class EventListOut(BaseModel):
    events: List[EventOut]


class CategoriesOut(BaseModel):
    categories: List[str]


class TagsOut(BaseModel):
    tags: List[str]


class BatchGetRequest(BaseModel):
    # Emptiness is checked by the batch resolver itself
    event_ids: List[UUID]


class MessageOut(BaseModel):
    message: str


class PaginationMetadata(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int
    has_next: bool
    has_prev: bool


class PaginatedResponse(BaseModel, Generic[T]):
    items: List[T]
    pagination: PaginationMetadata


class SortField(str, Enum):
    event_date = "event_date"
    title = "title"
    created_at = "created_at"
    organizer_name = "organizer_name"
    category = "category"


class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"


class EventFilter(BaseModel):
    """
    Canonical discovery query: pagination, filters and sort.

    ``tags`` accepts a comma-separated string or a list; each tag is trimmed
    and empty entries are dropped. Requested tags are ORed, every other
    filter is ANDed.
    """
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT)
    sort_by: SortField = SortField.created_at
    sort_order: SortOrder = SortOrder.desc
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    search: Optional[str] = None

    class Config:
        frozen = True

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value: Union[str, List[str], None]):
        if value is None:
            return None
        if isinstance(value, str):
            value = value.split(",")
        parsed = []
        for tag in value:
            tag = tag.strip()
            if tag and tag not in parsed:
                parsed.append(tag)
        return parsed or None

    @field_validator("category", "search", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def _check_date_range(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")
        return self

    @classmethod
    def build(cls, **params) -> "EventFilter":
        """Construct a filter, reporting any violation as InvalidArgumentError."""
        try:
            return cls(**{k: v for k, v in params.items() if v is not None})
        except ValidationError as e:
            errors = {".".join(str(p) for p in err["loc"]) or "_general": err["msg"] for err in e.errors()}
            raise InvalidArgumentError("Invalid event filter", errors) from e

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit
