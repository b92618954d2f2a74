"""Event registration model."""
import enum
from sqlalchemy import (
    Column, Integer, Float, Boolean, String, TIMESTAMP, JSON, Text,
    ForeignKey, Index, UniqueConstraint
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from offroad.database import Base


class RegistrationStatus(str, enum.Enum):
    """Lifecycle state of a registration."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class PaymentStatus(str, enum.Enum):
    """Payment state of a registration."""
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class ExperienceLevel(str, enum.Enum):
    """Driver experience declared at signup."""
    BEGINNER = "Beginner"
    SOME_EXPERIENCE = "Some Experience"
    EXPERIENCED = "Experienced"
    EXPERT = "Expert"


class Registration(Base):
    """
    One user's signup for one event.

    Registrations are never deleted; cancelling is a status transition.
    The (event_id, user_id) unique constraint is what prevents duplicate
    signups under concurrent requests.
    """
    __tablename__ = "registrations"

    id = Column(Integer, primary_key=True, index=True)

    event_id = Column(
        Integer,
        ForeignKey('events.id', ondelete='RESTRICT'),
        nullable=False,
        index=True
    )
    user_id = Column(
        Integer,
        ForeignKey('users.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )

    # {name, email, phone, emergency_contact{...}, medical_conditions,
    #  experience, vehicle_details{...}, additional_notes}
    participant_details = Column(JSON, nullable=False)

    registration_status = Column(
        String(20),
        default=RegistrationStatus.PENDING.value,
        nullable=False
    )
    payment_status = Column(
        String(20),
        default=PaymentStatus.PENDING.value,
        nullable=False
    )

    registration_date = Column(TIMESTAMP(timezone=True), server_default=func.now())
    payment_date = Column(TIMESTAMP(timezone=True), nullable=True)
    payment_amount = Column(Float, nullable=False)  # Event price at signup time
    waiver_signed = Column(Boolean, default=False, nullable=False)
    notes = Column(Text, nullable=True)  # Admin notes

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    event = relationship("Event", back_populates="registrations")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint('event_id', 'user_id', name='uq_registrations_event_user'),
        Index('idx_registrations_status', 'registration_status'),
        Index('idx_registrations_date', 'registration_date'),
    )

    @property
    def is_confirmed(self) -> bool:
        return self.registration_status == RegistrationStatus.CONFIRMED.value

    def __repr__(self):
        return (
            f"<Registration(id={self.id}, event_id={self.event_id}, "
            f"user_id={self.user_id}, status={self.registration_status})>"
        )
