"""Event API routes."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from offroad.dependencies import get_current_admin_user, get_optional_user
from offroad.api.utils.pagination import page_meta
from offroad.api.utils.dependencies import get_event_service
from offroad.models.event import EventStatus, Difficulty
from offroad.models.user import User
from offroad.services.event_service import EventService
from offroad.schemas.common import MessageResponse
from offroad.schemas.event import (
    EventCreate,
    EventUpdate,
    EventStatusUpdate,
    EventResponse,
    EventListResponse,
    EventActionResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/events", tags=["Events"])


# ============== Public ==============

@router.get("", response_model=EventListResponse)
async def list_events(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    status_filter: Optional[EventStatus] = Query(None, alias="status"),
    difficulty: Optional[Difficulty] = None,
    search: Optional[str] = Query(None, max_length=100),
    current_user: Optional[User] = Depends(get_optional_user),
    service: EventService = Depends(get_event_service)
):
    """
    List events.

    Visitors see upcoming active events; admins see everything and may
    filter by status.
    """
    is_admin = bool(current_user and current_user.is_admin)
    events, total = await service.list_events(
        page=page,
        page_size=limit,
        viewer_is_admin=is_admin,
        status=status_filter.value if status_filter else None,
        difficulty=difficulty.value if difficulty else None,
        search=search
    )
    return EventListResponse(
        items=[EventResponse.model_validate(event) for event in events],
        **page_meta(total, page, limit)
    )


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: int,
    current_user: Optional[User] = Depends(get_optional_user),
    service: EventService = Depends(get_event_service)
):
    """Get an event. Non-active events are only visible to admins."""
    is_admin = bool(current_user and current_user.is_admin)
    event = await service.get_visible_event(event_id, viewer_is_admin=is_admin)
    return EventResponse.model_validate(event)


# ============== Admin ==============

@router.post("", response_model=EventActionResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    data: EventCreate,
    current_user: User = Depends(get_current_admin_user),
    service: EventService = Depends(get_event_service)
):
    """Create an event (admin only)."""
    event = await service.create_event(data, created_by_id=current_user.id)
    return EventActionResponse(
        message="Event created successfully",
        event=EventResponse.model_validate(event)
    )


@router.put("/{event_id}", response_model=EventActionResponse)
async def update_event(
    event_id: int,
    data: EventUpdate,
    current_user: User = Depends(get_current_admin_user),
    service: EventService = Depends(get_event_service)
):
    """Update an event (admin only)."""
    event = await service.update_event(event_id, data)
    return EventActionResponse(
        message="Event updated successfully",
        event=EventResponse.model_validate(event)
    )


@router.patch("/{event_id}/status", response_model=EventActionResponse)
async def update_event_status(
    event_id: int,
    data: EventStatusUpdate,
    current_user: User = Depends(get_current_admin_user),
    service: EventService = Depends(get_event_service)
):
    """Change an event's status (admin only)."""
    event = await service.update_status(event_id, data.status)
    return EventActionResponse(
        message="Event status updated successfully",
        event=EventResponse.model_validate(event)
    )


@router.delete("/{event_id}", response_model=MessageResponse)
async def delete_event(
    event_id: int,
    current_user: User = Depends(get_current_admin_user),
    service: EventService = Depends(get_event_service)
):
    """Delete an event that nobody has registered for (admin only)."""
    await service.delete_event(event_id)
    logger.info(f"Admin {current_user.id} deleted event {event_id}")
    return MessageResponse(message="Event deleted successfully")
