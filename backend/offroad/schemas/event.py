"""Pydantic schemas for event management."""
from datetime import datetime, timezone
from typing import Optional, List
from pydantic import BaseModel, Field, ValidationInfo, field_validator

from offroad.models.event import EventStatus, Difficulty
from offroad.schemas.common import normalize_tags


class Coordinates(BaseModel):
    """Geographic coordinates of the meeting point."""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class Location(BaseModel):
    """Event location."""
    address: str = Field(..., min_length=1, max_length=500)
    coordinates: Optional[Coordinates] = None

    model_config = {"str_strip_whitespace": True}


class EventImage(BaseModel):
    """Image attached to an event."""
    url: str = Field(..., min_length=1, max_length=500)
    alt: str = Field("", max_length=255)
    is_primary: bool = False


def _check_single_primary(images: Optional[List[EventImage]]) -> Optional[List[EventImage]]:
    if images and sum(1 for image in images if image.is_primary) > 1:
        raise ValueError("At most one image can be marked as primary")
    return images


def _clean_list(values: Optional[List[str]]) -> Optional[List[str]]:
    if values is None:
        return None
    return [value.strip() for value in values if value and value.strip()]


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _check_future_date(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and _utc(value) <= datetime.now(timezone.utc):
        raise ValueError("Event date must be in the future")
    return value


def _check_deadline_before_date(
    deadline: Optional[datetime],
    date: Optional[datetime]
) -> Optional[datetime]:
    # date is absent from info.data when it failed its own validation
    if deadline is not None and date is not None and _utc(deadline) >= _utc(date):
        raise ValueError("Registration deadline must be before event date")
    return deadline


class EventCreate(BaseModel):
    """Schema for creating an event."""
    title: str = Field(..., min_length=5, max_length=100)
    description: str = Field(..., min_length=20, max_length=2000)
    short_description: str = Field(..., min_length=10, max_length=200)
    date: datetime
    registration_deadline: datetime
    location: Location
    price: float = Field(..., ge=0)
    max_participants: int = Field(..., ge=1)
    difficulty: Difficulty
    duration: str = Field(..., min_length=1, max_length=100)
    status: EventStatus = EventStatus.ACTIVE
    images: List[EventImage] = []
    equipment: List[str] = []
    requirements: List[str] = []
    includes: List[str] = []
    tags: List[str] = []

    model_config = {"str_strip_whitespace": True}

    @field_validator("status")
    @classmethod
    def status_allowed_on_create(cls, value: EventStatus) -> EventStatus:
        if value not in (EventStatus.ACTIVE, EventStatus.DRAFT):
            raise ValueError("New events must be created as active or draft")
        return value

    @field_validator("date")
    @classmethod
    def date_in_future(cls, value: datetime) -> datetime:
        return _check_future_date(value)

    @field_validator("registration_deadline")
    @classmethod
    def deadline_before_date(cls, value: datetime, info: ValidationInfo) -> datetime:
        return _check_deadline_before_date(value, info.data.get("date"))

    @field_validator("images")
    @classmethod
    def single_primary_image(cls, value):
        return _check_single_primary(value)

    @field_validator("equipment", "requirements", "includes")
    @classmethod
    def strip_entries(cls, value):
        return _clean_list(value)

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tag_list(cls, value):
        return normalize_tags(value)


class EventUpdate(BaseModel):
    """Schema for updating an event. Only supplied fields change."""
    title: Optional[str] = Field(None, min_length=5, max_length=100)
    description: Optional[str] = Field(None, min_length=20, max_length=2000)
    short_description: Optional[str] = Field(None, min_length=10, max_length=200)
    date: Optional[datetime] = None
    registration_deadline: Optional[datetime] = None
    location: Optional[Location] = None
    price: Optional[float] = Field(None, ge=0)
    max_participants: Optional[int] = Field(None, ge=1)
    difficulty: Optional[Difficulty] = None
    duration: Optional[str] = Field(None, min_length=1, max_length=100)
    images: Optional[List[EventImage]] = None
    equipment: Optional[List[str]] = None
    requirements: Optional[List[str]] = None
    includes: Optional[List[str]] = None
    tags: Optional[List[str]] = None

    model_config = {"str_strip_whitespace": True}

    @field_validator("date")
    @classmethod
    def date_in_future(cls, value):
        return _check_future_date(value)

    @field_validator("registration_deadline")
    @classmethod
    def deadline_before_date(cls, value, info: ValidationInfo):
        return _check_deadline_before_date(value, info.data.get("date"))

    @field_validator("images")
    @classmethod
    def single_primary_image(cls, value):
        return _check_single_primary(value)

    @field_validator("equipment", "requirements", "includes")
    @classmethod
    def strip_entries(cls, value):
        return _clean_list(value)

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tag_list(cls, value):
        if value is None:
            return None
        return normalize_tags(value)


class EventStatusUpdate(BaseModel):
    """Admin status change."""
    status: EventStatus


class EventResponse(BaseModel):
    """Event response schema, including derived capacity fields."""
    id: int
    title: str
    description: str
    short_description: str
    date: datetime
    registration_deadline: datetime
    location: Location
    price: float
    max_participants: int
    current_participants: int
    is_full: bool
    available_spots: int
    difficulty: str
    duration: str
    status: str
    images: List[EventImage] = []
    equipment: List[str] = []
    requirements: List[str] = []
    includes: List[str] = []
    tags: List[str] = []
    created_by_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class EventListResponse(BaseModel):
    """Paginated event list."""
    items: List[EventResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_prev: bool


class EventActionResponse(BaseModel):
    """Response for create/update/status change."""
    message: str
    event: EventResponse
