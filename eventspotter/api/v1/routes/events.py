from fastapi import APIRouter, Depends, Query, Response, status
from eventspotter.schemas import (
    BatchGetRequest,
    CategoriesOut,
    EventCreate,
    EventFilter,
    EventListOut,
    EventOut,
    EventUpdate,
    MessageOut,
    PaginatedResponse,
    PaginationMetadata,
    SortField,
    SortOrder,
    TagsOut,
)
from eventspotter.db.session import get_session
from eventspotter.db.repositories import SaveOutcome
from eventspotter.services.event_service import EventService
from eventspotter.services.saved_event_service import SavedEventService
from eventspotter.auth import get_current_user
from eventspotter.core.config import settings
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from datetime import date
from uuid import UUID

router = APIRouter(prefix="/events", tags=["events"])


def get_event_service(session: AsyncSession = Depends(get_session)) -> EventService:
    return EventService(session)


def get_saved_event_service(session: AsyncSession = Depends(get_session)) -> SavedEventService:
    return SavedEventService(session)


def event_filter_params(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT, description="Number of items per page"),
    sort_by: SortField = Query(SortField.created_at, description="Field to sort by"),
    sort_order: SortOrder = Query(SortOrder.desc, description="Sort direction"),
    category: Optional[str] = Query(None, description="Exact category match"),
    tags: Optional[str] = Query(None, description="Comma-separated tags; events with any of them match"),
    start_date: Optional[date] = Query(None, description="Events on or after this date (inclusive)"),
    end_date: Optional[date] = Query(None, description="Events on or before this date (inclusive)"),
    search: Optional[str] = Query(None, min_length=1, description="Case-insensitive substring search"),
) -> EventFilter:
    return EventFilter.build(
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
        category=category,
        tags=tags,
        start_date=start_date,
        end_date=end_date,
        search=search,
    )


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    payload: EventCreate,
    user=Depends(get_current_user),
    event_service: EventService = Depends(get_event_service)
):
    return await event_service.create_event(payload, user)


@router.get("/", response_model=PaginatedResponse[EventOut])
async def get_events(
    filters: EventFilter = Depends(event_filter_params),
    event_service: EventService = Depends(get_event_service)
):
    """
    List events with pagination, filtering, search and sorting.
    - page / limit: 1-indexed page and page size
    - category: exact category match
    - tags: comma-separated; an event matches if it has any of them
    - start_date / end_date: inclusive event date bounds (YYYY-MM-DD)
    - search: substring of title, description, location, organizer or category
    - sort_by / sort_order: event_date, title, created_at, organizer_name or category
    """
    total_count, events = await event_service.list_events_paginated(filters)

    total_pages = (total_count + filters.limit - 1) // filters.limit  # Ceiling division

    return PaginatedResponse[EventOut](
        items=[EventOut.model_validate(ev) for ev in events],
        pagination=PaginationMetadata(
            total=total_count,
            page=filters.page,
            limit=filters.limit,
            total_pages=total_pages,
            has_next=filters.page < total_pages,
            has_prev=filters.page > 1
        )
    )


@router.get("/categories", response_model=CategoriesOut)
async def get_event_categories(event_service: EventService = Depends(get_event_service)):
    return CategoriesOut(categories=await event_service.list_categories())


@router.get("/tags", response_model=TagsOut)
async def get_event_tags(event_service: EventService = Depends(get_event_service)):
    return TagsOut(tags=await event_service.list_tags())


@router.get("/random", response_model=EventOut)
async def get_random_event(event_service: EventService = Depends(get_event_service)):
    return await event_service.random_event()


@router.post("/batch-get", response_model=EventListOut)
async def batch_get_events(
    payload: BatchGetRequest,
    event_service: EventService = Depends(get_event_service)
):
    events = await event_service.batch_get(payload.event_ids)
    return EventListOut(events=[EventOut.model_validate(ev) for ev in events])


@router.get("/{event_id}", response_model=EventOut)
async def get_event_detail(
    event_id: UUID,
    event_service: EventService = Depends(get_event_service)
):
    return await event_service.get_event(event_id)


@router.patch("/{event_id}", response_model=EventOut)
async def update_event_endpoint(
    event_id: UUID,
    payload: EventUpdate,
    user=Depends(get_current_user),
    event_service: EventService = Depends(get_event_service)
):
    return await event_service.update_event(event_id, payload, user)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event_endpoint(
    event_id: UUID,
    user=Depends(get_current_user),
    event_service: EventService = Depends(get_event_service)
):
    await event_service.delete_event(event_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{event_id}/save", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
async def save_event_endpoint(
    event_id: UUID,
    response: Response,
    user=Depends(get_current_user),
    saved_service: SavedEventService = Depends(get_saved_event_service)
):
    outcome = await saved_service.save(user.id, event_id)
    if outcome == SaveOutcome.already_exists:
        response.status_code = status.HTTP_200_OK
        return MessageOut(message="Event already saved.")
    return MessageOut(message="Event saved successfully.")


@router.delete("/{event_id}/save", status_code=status.HTTP_204_NO_CONTENT)
async def unsave_event_endpoint(
    event_id: UUID,
    user=Depends(get_current_user),
    saved_service: SavedEventService = Depends(get_saved_event_service)
):
    await saved_service.unsave(user.id, event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
