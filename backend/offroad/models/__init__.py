"""SQLAlchemy models."""
from offroad.models.user import User, UserRole
from offroad.models.session import Session
from offroad.models.event import Event, EventStatus, Difficulty
from offroad.models.registration import (
    Registration,
    RegistrationStatus,
    PaymentStatus,
    ExperienceLevel,
)
from offroad.models.contact import Contact, ContactStatus, ContactPriority
from offroad.models.gallery import GalleryImage, GalleryCategory

__all__ = [
    "User",
    "UserRole",
    "Session",
    "Event",
    "EventStatus",
    "Difficulty",
    "Registration",
    "RegistrationStatus",
    "PaymentStatus",
    "ExperienceLevel",
    "Contact",
    "ContactStatus",
    "ContactPriority",
    "GalleryImage",
    "GalleryCategory",
]
