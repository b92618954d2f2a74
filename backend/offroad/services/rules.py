"""Capacity and eligibility rules.

Pure decision functions over plain values: no session, no I/O. The
registration lifecycle service consults them before touching the store,
and the store re-checks capacity atomically when the seat is taken.
"""
import math
from datetime import datetime, timezone
from typing import List, Optional

from offroad.models.event import EventStatus
from offroad.models.registration import RegistrationStatus
from offroad.services.errors import FieldError

SECONDS_PER_DAY = 24 * 60 * 60
DEFAULT_CANCELLATION_CUTOFF_DAYS = 3

# Allowed registration status transitions
_TRANSITIONS = {
    RegistrationStatus.PENDING.value: {
        RegistrationStatus.CONFIRMED.value,
        RegistrationStatus.CANCELLED.value,
    },
    RegistrationStatus.CONFIRMED.value: {
        RegistrationStatus.COMPLETED.value,
        RegistrationStatus.CANCELLED.value,
    },
    RegistrationStatus.CANCELLED.value: set(),
    RegistrationStatus.COMPLETED.value: set(),
}


def as_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime; naive values are taken to be UTC.

    SQLite hands back naive datetimes for TIMESTAMP(timezone=True) columns.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def registration_closed_reason(event, now: datetime) -> Optional[str]:
    """Explain why an event does not accept registrations, or None if it does."""
    if as_utc(now) > as_utc(event.registration_deadline):
        return "Registration deadline has passed"
    if event.status != EventStatus.ACTIVE.value:
        return "Event is not active"
    if event.current_participants >= event.max_participants:
        return "Event is full"
    return None


def is_registration_open(event, now: datetime) -> bool:
    """Check deadline, status and remaining capacity."""
    return registration_closed_reason(event, now) is None


def days_until(event_date: datetime, now: datetime) -> int:
    """Whole days until the event, rounded up."""
    delta = as_utc(event_date) - as_utc(now)
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)


def is_cancellation_allowed(
    event,
    now: datetime,
    cutoff_days: int = DEFAULT_CANCELLATION_CUTOFF_DAYS
) -> bool:
    """A registration may be cancelled until ``cutoff_days`` before the event."""
    return days_until(event.date, now) >= cutoff_days


def validate_event_dates(
    date: Optional[datetime],
    registration_deadline: Optional[datetime],
    now: datetime
) -> List[FieldError]:
    """Collect every violated date rule for an event."""
    errors = []
    if date is not None and as_utc(date) <= as_utc(now):
        errors.append(FieldError("date", "Event date must be in the future"))
    if (
        date is not None
        and registration_deadline is not None
        and as_utc(registration_deadline) >= as_utc(date)
    ):
        errors.append(FieldError(
            "registration_deadline",
            "Registration deadline must be before event date"
        ))
    return errors


def is_legal_transition(old_status: str, new_status: str) -> bool:
    """Check a registration status change against the lifecycle state machine."""
    return new_status in _TRANSITIONS.get(old_status, set())


def releases_seat(old_status: str, new_status: str) -> bool:
    """Leaving ``confirmed`` gives a seat back; nothing else touches the counter."""
    return (
        old_status == RegistrationStatus.CONFIRMED.value
        and new_status != RegistrationStatus.CONFIRMED.value
    )
