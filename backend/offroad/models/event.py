"""Event model with seat capacity tracking."""
import enum
from sqlalchemy import (
    Column, Integer, String, Float, TIMESTAMP, JSON, Text,
    ForeignKey, Index, CheckConstraint
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from offroad.database import Base


class EventStatus(str, enum.Enum):
    """Publication status of an event."""
    ACTIVE = "active"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    DRAFT = "draft"


class Difficulty(str, enum.Enum):
    """Trail difficulty level."""
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    EXPERT = "Expert"


class Event(Base):
    """
    A scheduled off-road adventure.

    ``current_participants`` is a denormalized seat counter. It is only ever
    changed through single conditional UPDATE statements (see
    EventService.reserve_seat / release_seat) and the CHECK constraints
    below keep it inside ``[0, max_participants]`` at the storage level.
    """
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)

    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    short_description = Column(String(200), nullable=False)

    date = Column(TIMESTAMP(timezone=True), nullable=False)
    registration_deadline = Column(TIMESTAMP(timezone=True), nullable=False)
    duration = Column(String(100), nullable=False)

    # Location
    location_address = Column(String(500), nullable=False)
    location_latitude = Column(Float, nullable=True)
    location_longitude = Column(Float, nullable=True)

    # Pricing and capacity
    price = Column(Float, nullable=False, default=0)
    max_participants = Column(Integer, nullable=False)
    current_participants = Column(Integer, nullable=False, default=0)

    difficulty = Column(String(20), nullable=False)
    status = Column(
        String(20),
        default=EventStatus.ACTIVE.value,
        nullable=False,
        index=True
    )

    # Sub-documents
    images = Column(JSON, nullable=False, default=list)  # [{url, alt, is_primary}]
    equipment = Column(JSON, nullable=False, default=list)
    requirements = Column(JSON, nullable=False, default=list)
    includes = Column(JSON, nullable=False, default=list)
    tags = Column(JSON, nullable=False, default=list)

    created_by_id = Column(
        Integer,
        ForeignKey('users.id', ondelete='RESTRICT'),
        nullable=False,
        index=True
    )

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    created_by = relationship("User", foreign_keys=[created_by_id])
    registrations = relationship("Registration", back_populates="event")

    __table_args__ = (
        CheckConstraint("current_participants >= 0", name="ck_events_current_non_negative"),
        CheckConstraint("current_participants <= max_participants", name="ck_events_current_lte_max"),
        CheckConstraint("max_participants >= 1", name="ck_events_max_positive"),
        CheckConstraint("price >= 0", name="ck_events_price_non_negative"),
        Index('idx_events_date_status', 'date', 'status'),
    )

    @property
    def is_full(self) -> bool:
        """Check if every seat is taken."""
        return self.current_participants >= self.max_participants

    @property
    def available_spots(self) -> int:
        """Seats still open for registration."""
        return self.max_participants - self.current_participants

    @property
    def location(self) -> dict:
        """Location as the nested structure exposed by the API."""
        coordinates = None
        if self.location_latitude is not None and self.location_longitude is not None:
            coordinates = {
                "latitude": self.location_latitude,
                "longitude": self.location_longitude,
            }
        return {"address": self.location_address, "coordinates": coordinates}

    def __repr__(self):
        return (
            f"<Event(id={self.id}, title={self.title}, status={self.status}, "
            f"seats={self.current_participants}/{self.max_participants})>"
        )
