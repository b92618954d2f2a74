"""Business logic services."""
from offroad.services.auth_service import AuthService
from offroad.services.event_service import EventService
from offroad.services.registration_service import RegistrationService
from offroad.services.contact_service import ContactService
from offroad.services.gallery_service import GalleryService
from offroad.services.whatsapp_service import WhatsAppService

__all__ = [
    "AuthService",
    "EventService",
    "RegistrationService",
    "ContactService",
    "GalleryService",
    "WhatsAppService",
]
