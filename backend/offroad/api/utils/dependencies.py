"""Common dependency injection utilities."""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from offroad.config import get_settings
from offroad.database import get_db
from offroad.services.event_service import EventService
from offroad.services.registration_service import RegistrationService
from offroad.services.contact_service import ContactService
from offroad.services.gallery_service import GalleryService
from offroad.tasks.notifications import NotificationDispatcher


def get_notification_dispatcher() -> NotificationDispatcher:
    """Notification port used by services after they commit."""
    return NotificationDispatcher()


async def get_event_service(
    db: AsyncSession = Depends(get_db)
) -> EventService:
    """
    Get EventService instance.

    Args:
        db: Database session from dependency injection

    Returns:
        Initialized EventService
    """
    return EventService(db)


async def get_registration_service(
    db: AsyncSession = Depends(get_db),
    notifier: NotificationDispatcher = Depends(get_notification_dispatcher)
) -> RegistrationService:
    """
    Get RegistrationService instance wired to the notification port.

    Args:
        db: Database session from dependency injection
        notifier: Post-commit notification dispatcher

    Returns:
        Initialized RegistrationService
    """
    return RegistrationService(
        db,
        notifier=notifier,
        cancellation_cutoff_days=get_settings().CANCELLATION_CUTOFF_DAYS
    )


async def get_contact_service(
    db: AsyncSession = Depends(get_db),
    notifier: NotificationDispatcher = Depends(get_notification_dispatcher)
) -> ContactService:
    """Get ContactService instance."""
    return ContactService(db, notifier=notifier)


async def get_gallery_service(
    db: AsyncSession = Depends(get_db)
) -> GalleryService:
    """Get GalleryService instance."""
    return GalleryService(db)
