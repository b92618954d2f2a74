"""Registration lifecycle service.

Owns every change to a registration's status and keeps the event's seat
counter consistent with it:

    pending -> confirmed -> completed
    pending | confirmed -> cancelled

A seat is taken when the registration is created and given back when a
registration leaves ``confirmed``. Status writes are compare-and-set, and
the status write plus the counter change commit together.
"""
import logging
from datetime import datetime, timezone
from typing import Optional, List, Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from offroad.models.registration import Registration, RegistrationStatus, PaymentStatus
from offroad.schemas.registration import ParticipantDetails
from offroad.services.errors import (
    ConflictError,
    FieldError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from offroad.services.event_service import EventService
from offroad.services.registration_store import RegistrationStore
from offroad.services.rules import (
    DEFAULT_CANCELLATION_CUTOFF_DAYS,
    is_cancellation_allowed,
    is_legal_transition,
    registration_closed_reason,
    releases_seat,
)

logger = logging.getLogger(__name__)

ALREADY_REGISTERED = "You are already registered for this event"


def _value(status) -> str:
    return status.value if hasattr(status, "value") else status


class RegistrationService:
    """Service for registering users and moving registrations through their lifecycle."""

    def __init__(
        self,
        session: AsyncSession,
        notifier=None,
        cancellation_cutoff_days: int = DEFAULT_CANCELLATION_CUTOFF_DAYS
    ):
        """
        Initialize registration service.

        Args:
            session: Database session
            notifier: Post-commit notification port (see
                offroad.tasks.notifications.NotificationDispatcher); optional
            cancellation_cutoff_days: Days before the event after which users
                can no longer cancel
        """
        self.session = session
        self.notifier = notifier
        self.cancellation_cutoff_days = cancellation_cutoff_days
        self.events = EventService(session)
        self.store = RegistrationStore(session)

    async def register(
        self,
        event_id: int,
        user_id: int,
        participant_details: ParticipantDetails,
        waiver_signed: bool = False,
        now: Optional[datetime] = None
    ) -> Registration:
        """
        Register a user for an event, taking one seat.

        Raises:
            NotFoundError: Event does not exist
            ValidationError: Registration closed or the last seat was just taken
            ConflictError: User is already registered for this event
        """
        now = now or datetime.now(timezone.utc)

        event = await self.events.get_event(event_id)
        if not event:
            raise NotFoundError("Event", event_id)

        reason = registration_closed_reason(event, now)
        if reason:
            raise ValidationError(f"Registration is closed for this event: {reason}")

        if await self.store.get_by_event_and_user(event_id, user_id):
            raise ConflictError(ALREADY_REGISTERED)

        try:
            if not await self.events.reserve_seat(event_id):
                raise ValidationError("Event is full")

            registration = await self.store.add(Registration(
                event_id=event_id,
                user_id=user_id,
                participant_details=participant_details.model_dump(mode="json"),
                registration_status=RegistrationStatus.PENDING.value,
                payment_status=PaymentStatus.PENDING.value,
                payment_amount=event.price,
                waiver_signed=waiver_signed,
            ))
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.info("Duplicate registration rejected for event %d, user %d", event_id, user_id)
            raise ConflictError(ALREADY_REGISTERED) from e
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "User %d registered for event %d (registration %d)",
            user_id, event_id, registration.id
        )

        self._dispatch_registration_created(registration.id)
        return await self.store.get(registration.id)

    async def change_status(
        self,
        registration_id: int,
        new_status,
        notes: Optional[str] = None
    ) -> Registration:
        """
        Admin status change.

        Re-applying the current status only updates the notes.

        Raises:
            NotFoundError: Unknown registration
            ValidationError: Transition not allowed by the lifecycle
            ConflictError: Registration changed concurrently
        """
        new_status = _value(new_status)
        registration = await self.store.get(registration_id)
        if not registration:
            raise NotFoundError("Registration", registration_id)

        old_status = registration.registration_status
        if new_status == old_status:
            if notes is not None:
                await self.store.set_notes(registration_id, notes)
                await self.session.commit()
            return await self.store.get(registration_id)

        if not is_legal_transition(old_status, new_status):
            message = f"Cannot change registration status from {old_status} to {new_status}"
            raise ValidationError(message, [FieldError("status", message)])

        await self._transition(registration, old_status, new_status, notes)
        return await self.store.get(registration_id)

    async def cancel(
        self,
        registration_id: int,
        requester_id: int,
        requester_is_admin: bool = False,
        now: Optional[datetime] = None
    ) -> Registration:
        """
        Cancel a registration on behalf of its owner or an admin.

        Only a confirmed registration gives its seat back.

        Raises:
            NotFoundError: Unknown registration
            ForbiddenError: Requester neither owns the registration nor is admin
            ValidationError: Already final, or too close to the event
            ConflictError: Registration changed concurrently
        """
        now = now or datetime.now(timezone.utc)
        registration = await self.store.get(registration_id)
        if not registration:
            raise NotFoundError("Registration", registration_id)

        if not requester_is_admin and registration.user_id != requester_id:
            raise ForbiddenError("Not authorized to cancel this registration")

        old_status = registration.registration_status
        if old_status in (RegistrationStatus.CANCELLED.value, RegistrationStatus.COMPLETED.value):
            raise ValidationError(f"Registration is already {old_status}")

        if not is_cancellation_allowed(registration.event, now, self.cancellation_cutoff_days):
            raise ValidationError(
                f"Cancellation not allowed within {self.cancellation_cutoff_days} days of the event"
            )

        await self._transition(registration, old_status, RegistrationStatus.CANCELLED.value)
        return await self.store.get(registration_id)

    async def update_payment(
        self,
        registration_id: int,
        payment_status,
        now: Optional[datetime] = None
    ) -> Registration:
        """Set the payment status; marking it paid records the payment date."""
        now = now or datetime.now(timezone.utc)
        payment_status = _value(payment_status)

        registration = await self.store.get(registration_id)
        if not registration:
            raise NotFoundError("Registration", registration_id)

        payment_date = now if payment_status == PaymentStatus.PAID.value else None
        await self.store.set_payment(registration_id, payment_status, payment_date)
        await self.session.commit()

        logger.info("Registration %d payment status set to %s", registration_id, payment_status)
        return await self.store.get(registration_id)

    async def get_registration(
        self,
        registration_id: int,
        requester_id: int,
        requester_is_admin: bool = False
    ) -> Registration:
        """Get a registration; non-admins only see their own."""
        scope = None if requester_is_admin else requester_id
        registration = await self.store.get(registration_id, scope_user_id=scope)
        if not registration:
            raise NotFoundError("Registration", registration_id)
        return registration

    async def list_registrations(
        self,
        requester_id: int,
        requester_is_admin: bool = False,
        status: Optional[str] = None,
        event_id: Optional[int] = None,
        page: int = 1,
        page_size: int = 10
    ) -> Tuple[List[Registration], int]:
        """List registrations visible to the requester."""
        scope = None if requester_is_admin else requester_id
        return await self.store.list(
            scope_user_id=scope,
            status=status,
            event_id=event_id,
            offset=(page - 1) * page_size,
            limit=page_size
        )

    async def _transition(
        self,
        registration: Registration,
        old_status: str,
        new_status: str,
        notes: Optional[str] = None
    ) -> None:
        """Compare-and-set the status and adjust the seat counter in one commit."""
        try:
            changed = await self.store.transition_status(
                registration.id, old_status, new_status, notes
            )
            if not changed:
                raise ConflictError("Registration was modified concurrently, please retry")

            if releases_seat(old_status, new_status):
                await self.events.release_seat(registration.event_id)

            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Registration %d status changed %s -> %s",
            registration.id, old_status, new_status
        )

    def _dispatch_registration_created(self, registration_id: int) -> None:
        """Hand the new registration to the notifier; never fails the caller."""
        if self.notifier is None:
            return
        try:
            self.notifier.registration_created(registration_id)
        except Exception as e:
            logger.error(
                "Failed to dispatch notification for registration %d: %s",
                registration_id, e
            )
