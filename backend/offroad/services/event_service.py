"""Event service for managing events and their seat counters."""
import logging
from datetime import datetime, timezone
from typing import Optional, List, Tuple
from sqlalchemy import select, func, update, or_
from sqlalchemy.ext.asyncio import AsyncSession

from offroad.models.event import Event, EventStatus
from offroad.models.registration import Registration
from offroad.schemas.event import EventCreate, EventUpdate
from offroad.services.errors import (
    ConflictError,
    FieldError,
    NotFoundError,
    ValidationError,
)
from offroad.services.rules import as_utc, validate_event_dates

logger = logging.getLogger(__name__)


def _capacity_error(current_participants: int) -> FieldError:
    return FieldError(
        "max_participants",
        f"Cannot be lower than current participants ({current_participants})"
    )


def _location_columns(location) -> dict:
    """Flatten the nested location structure into its columns."""
    coordinates = location.coordinates
    return {
        "location_address": location.address,
        "location_latitude": coordinates.latitude if coordinates else None,
        "location_longitude": coordinates.longitude if coordinates else None,
    }


class EventService:
    """Service for managing events and seat capacity."""

    def __init__(self, session: AsyncSession):
        """Initialize event service."""
        self.session = session

    # ============== Reads ==============

    async def get_event(self, event_id: int) -> Optional[Event]:
        """Get an event by ID, always reflecting the stored counter."""
        result = await self.session.execute(
            select(Event)
            .where(Event.id == event_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_event_or_raise(self, event_id: int) -> Event:
        event = await self.get_event(event_id)
        if not event:
            raise NotFoundError("Event", event_id)
        return event

    async def get_visible_event(self, event_id: int, viewer_is_admin: bool) -> Event:
        """
        Get an event as seen by the caller.

        Non-admins only see active events; anything else is reported as
        missing rather than forbidden.
        """
        event = await self.get_event_or_raise(event_id)
        if not viewer_is_admin and event.status != EventStatus.ACTIVE.value:
            raise NotFoundError("Event", event_id)
        return event

    async def list_events(
        self,
        page: int = 1,
        page_size: int = 10,
        viewer_is_admin: bool = False,
        status: Optional[str] = None,
        difficulty: Optional[str] = None,
        search: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> Tuple[List[Event], int]:
        """
        List events with filtering and pagination.

        Args:
            page: Page number (1-indexed)
            page_size: Items per page
            viewer_is_admin: Admins see every status and past events
            status: Status filter (admins only)
            difficulty: Difficulty filter
            search: Case-insensitive match on title, description or address
            now: Reference time for hiding past events

        Returns:
            Tuple of (events, total_count)
        """
        now = now or datetime.now(timezone.utc)
        query = select(Event)

        if viewer_is_admin:
            if status:
                query = query.where(Event.status == status)
        else:
            query = query.where(
                Event.status == EventStatus.ACTIVE.value,
                Event.date >= as_utc(now)
            )

        if difficulty:
            query = query.where(Event.difficulty == difficulty)

        if search:
            query = query.where(
                or_(
                    Event.title.icontains(search, autoescape=True),
                    Event.description.icontains(search, autoescape=True),
                    Event.location_address.icontains(search, autoescape=True),
                )
            )

        count_query = select(func.count()).select_from(query.subquery())
        total = (await self.session.execute(count_query)).scalar()

        offset = (page - 1) * page_size
        query = query.order_by(Event.date.asc(), Event.id.asc()).offset(offset).limit(page_size)
        result = await self.session.execute(query)
        return list(result.scalars().all()), total

    # ============== Writes ==============

    async def create_event(
        self,
        data: EventCreate,
        created_by_id: int,
        now: Optional[datetime] = None
    ) -> Event:
        """
        Create a new event.

        Raises:
            ValidationError: With every violated date rule
        """
        now = now or datetime.now(timezone.utc)
        errors = validate_event_dates(data.date, data.registration_deadline, now)
        if errors:
            raise ValidationError("Event validation failed", errors)

        event = Event(
            title=data.title,
            description=data.description,
            short_description=data.short_description,
            date=as_utc(data.date),
            registration_deadline=as_utc(data.registration_deadline),
            duration=data.duration,
            price=data.price,
            max_participants=data.max_participants,
            current_participants=0,
            difficulty=data.difficulty.value,
            status=data.status.value,
            images=[image.model_dump() for image in data.images],
            equipment=data.equipment,
            requirements=data.requirements,
            includes=data.includes,
            tags=data.tags,
            created_by_id=created_by_id,
            **_location_columns(data.location),
        )
        self.session.add(event)
        await self.session.commit()
        await self.session.refresh(event)

        logger.info("Created event %d '%s' (%d seats)", event.id, event.title, event.max_participants)
        return event

    async def update_event(
        self,
        event_id: int,
        data: EventUpdate,
        now: Optional[datetime] = None
    ) -> Event:
        """
        Apply a partial update.

        Date rules are re-checked against the merged values whenever either
        date is part of the update.

        Raises:
            NotFoundError: Unknown event
            ValidationError: Date rules or capacity below current participants
        """
        now = now or datetime.now(timezone.utc)
        event = await self.get_event_or_raise(event_id)
        fields = data.model_dump(exclude_unset=True)

        errors = []
        if "date" in fields or "registration_deadline" in fields:
            merged_date = fields.get("date") or event.date
            merged_deadline = fields.get("registration_deadline") or event.registration_deadline
            errors.extend(validate_event_dates(merged_date, merged_deadline, now))

        new_max = fields.pop("max_participants", None)
        if new_max is not None and new_max < event.current_participants:
            errors.append(_capacity_error(event.current_participants))

        if errors:
            raise ValidationError("Event validation failed", errors)

        if "location" in fields:
            location = data.location
            fields.pop("location")
            if location is not None:
                fields.update(_location_columns(location))
        if "images" in fields:
            fields["images"] = [image.model_dump() for image in data.images or []]
        for key in ("date", "registration_deadline"):
            if fields.get(key) is not None:
                fields[key] = as_utc(fields[key])
        if fields.get("difficulty") is not None:
            fields["difficulty"] = data.difficulty.value

        for key, value in fields.items():
            if value is None and key not in ("location_latitude", "location_longitude"):
                continue
            setattr(event, key, value)

        if new_max is not None:
            fields["max_participants"] = new_max
            if not await self._set_max_participants(event_id, new_max):
                await self.session.rollback()
                current = await self.get_event_or_raise(event_id)
                raise ValidationError(
                    "Event validation failed",
                    [_capacity_error(current.current_participants)]
                )

        await self.session.commit()
        await self.session.refresh(event)

        logger.info("Updated event %d (%s)", event.id, ", ".join(sorted(fields)) or "no fields")
        return event

    async def _set_max_participants(self, event_id: int, new_max: int) -> bool:
        """Lower or raise capacity only while it still covers the participants."""
        result = await self.session.execute(
            update(Event)
            .where(
                Event.id == event_id,
                Event.current_participants <= new_max
            )
            .values(max_participants=new_max)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def update_status(self, event_id: int, status: EventStatus) -> Event:
        """Change an event's publication status."""
        event = await self.get_event_or_raise(event_id)
        old_status = event.status
        event.status = status.value
        await self.session.commit()
        await self.session.refresh(event)

        logger.info("Event %d status changed %s -> %s", event.id, old_status, event.status)
        return event

    async def delete_event(self, event_id: int) -> None:
        """
        Delete an event.

        Raises:
            NotFoundError: Unknown event
            ConflictError: The event still has participants or registrations
        """
        event = await self.get_event_or_raise(event_id)

        registration_count = (await self.session.execute(
            select(func.count(Registration.id)).where(Registration.event_id == event_id)
        )).scalar()

        if event.current_participants > 0 or registration_count:
            raise ConflictError("Cannot delete event with existing registrations")

        await self.session.delete(event)
        await self.session.commit()
        logger.info("Deleted event %d", event_id)

    # ============== Seat Counter ==============
    # Neither method commits: the caller owns the transaction.

    async def reserve_seat(self, event_id: int) -> bool:
        """
        Take one seat if the event is active and not full.

        A single conditional UPDATE, so two concurrent callers competing for
        the last seat cannot both succeed.

        Returns:
            True if a seat was taken, False if the event was full or inactive
        """
        result = await self.session.execute(
            update(Event)
            .where(
                Event.id == event_id,
                Event.status == EventStatus.ACTIVE.value,
                Event.current_participants < Event.max_participants
            )
            .values(current_participants=Event.current_participants + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def release_seat(self, event_id: int) -> bool:
        """
        Give one seat back, never going below zero.

        Returns:
            True if the counter was decremented
        """
        result = await self.session.execute(
            update(Event)
            .where(
                Event.id == event_id,
                Event.current_participants > 0
            )
            .values(current_participants=Event.current_participants - 1)
            .execution_options(synchronize_session=False)
        )
        released = result.rowcount == 1
        if not released:
            logger.warning("Seat release for event %d skipped: counter already at zero", event_id)
        return released
