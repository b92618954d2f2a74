"""Post-commit WhatsApp notifications.

Services call the NotificationDispatcher after their transaction has
committed. The dispatcher only schedules a one-shot job; the job opens its
own database session, reloads the entity and talks to WhatsApp, so a slow
or failing API never delays or fails the request that triggered it.
"""
import logging
from datetime import datetime, timezone
from sqlalchemy import select, update
from sqlalchemy.orm import selectinload

from offroad.config import get_settings
from offroad.database import AsyncSessionLocal
from offroad.models.contact import Contact
from offroad.models.registration import Registration
from offroad.services.whatsapp_service import WhatsAppService

logger = logging.getLogger(__name__)


async def send_registration_notification(registration_id: int, session_factory=None) -> bool:
    """Job body: announce a new registration. Returns True when delivered."""
    session_factory = session_factory or AsyncSessionLocal
    try:
        async with session_factory() as session:
            result = await session.execute(
                select(Registration)
                .options(selectinload(Registration.event))
                .where(Registration.id == registration_id)
            )
            registration = result.scalar_one_or_none()
            if not registration:
                logger.warning(f"Registration {registration_id} vanished before notification")
                return False

            outcome = await WhatsAppService().notify_registration(registration, registration.event)

        if outcome.success:
            logger.info(f"WhatsApp notification sent for registration {registration_id}")
        else:
            logger.warning(
                f"WhatsApp notification for registration {registration_id} not sent: "
                f"{outcome.error or outcome.message}"
            )
        return outcome.success

    except Exception as e:
        logger.error(f"Registration notification job failed for {registration_id}: {e}")
        return False


async def send_contact_notification(contact_id: int, session_factory=None) -> bool:
    """Job body: announce a contact submission and record delivery on the contact."""
    session_factory = session_factory or AsyncSessionLocal
    try:
        async with session_factory() as session:
            contact = (await session.execute(
                select(Contact).where(Contact.id == contact_id)
            )).scalar_one_or_none()
            if not contact:
                logger.warning(f"Contact {contact_id} vanished before notification")
                return False

            outcome = await WhatsAppService().notify_contact(contact)

            if outcome.success:
                await session.execute(
                    update(Contact)
                    .where(Contact.id == contact_id)
                    .values(whatsapp_sent=True, whatsapp_sent_at=datetime.now(timezone.utc))
                )
                await session.commit()
                logger.info(f"WhatsApp notification sent for contact {contact_id}")
            else:
                logger.warning(
                    f"WhatsApp notification for contact {contact_id} not sent: "
                    f"{outcome.error or outcome.message}"
                )
        return outcome.success

    except Exception as e:
        logger.error(f"Contact notification job failed for {contact_id}: {e}")
        return False


class NotificationDispatcher:
    """Schedules notification jobs on the background scheduler."""

    def __init__(self, scheduler=None, enabled: bool = None):
        if enabled is None:
            enabled = get_settings().NOTIFICATIONS_ENABLED
        self.enabled = enabled
        self._scheduler = scheduler

    @property
    def scheduler(self):
        if self._scheduler is None:
            from offroad.tasks.scheduler import get_scheduler
            self._scheduler = get_scheduler()
        return self._scheduler

    def _schedule(self, func, entity_id: int, job_id: str, name: str) -> None:
        if not self.enabled:
            logger.debug(f"Notifications disabled, skipping {job_id}")
            return
        self.scheduler.add_job(
            func=func,
            trigger='date',
            run_date=datetime.now(timezone.utc),
            args=[entity_id],
            id=job_id,
            name=name,
            replace_existing=True
        )
        logger.info(f"Scheduled notification job {job_id}")

    def registration_created(self, registration_id: int) -> None:
        self._schedule(
            send_registration_notification,
            registration_id,
            f"notify_registration_{registration_id}",
            f"Registration {registration_id} notification"
        )

    def contact_submitted(self, contact_id: int) -> None:
        self._schedule(
            send_contact_notification,
            contact_id,
            f"notify_contact_{contact_id}",
            f"Contact {contact_id} notification"
        )
