"""Contact form submission model."""
import enum
from sqlalchemy import Column, Integer, String, Boolean, TIMESTAMP, Text, Index
from sqlalchemy.sql import func
from offroad.database import Base


class ContactStatus(str, enum.Enum):
    NEW = "new"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class ContactPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


# Ordering used by the admin inbox (most pressing first)
PRIORITY_RANK = {
    ContactPriority.URGENT.value: 4,
    ContactPriority.HIGH.value: 3,
    ContactPriority.MEDIUM.value: 2,
    ContactPriority.LOW.value: 1,
}


class Contact(Base):
    """Inquiry submitted through the public contact form."""

    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=True)
    subject = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)

    status = Column(String(20), default=ContactStatus.NEW.value, nullable=False)
    priority = Column(String(20), default=ContactPriority.MEDIUM.value, nullable=False)
    admin_notes = Column(Text, nullable=True)
    response_date = Column(TIMESTAMP(timezone=True), nullable=True)

    # Outbound WhatsApp notification tracking
    whatsapp_sent = Column(Boolean, default=False, nullable=False)
    whatsapp_sent_at = Column(TIMESTAMP(timezone=True), nullable=True)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    __table_args__ = (
        Index('idx_contacts_status_created', 'status', 'created_at'),
        Index('idx_contacts_priority_created', 'priority', 'created_at'),
    )

    def __repr__(self):
        return f"<Contact(id={self.id}, subject={self.subject}, status={self.status})>"
