"""User account model."""
from sqlalchemy import Column, Integer, String, Boolean, TIMESTAMP
from sqlalchemy.sql import func
import enum
from offroad.database import Base


class UserRole(str, enum.Enum):
    """User role enumeration."""
    ADMIN = "admin"  # Manages events, registrations, gallery and contact inbox
    USER = "user"  # Registers for events and manages their own registrations


class User(Base):
    """
    Registered account.

    Users browse and register for events; admins additionally manage every
    event, registration, gallery image and contact message.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String(50), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(20), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    profile_image = Column(String(500), nullable=True)

    role = Column(
        String(20),
        default=UserRole.USER.value,
        nullable=False,
        index=True
    )
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    @property
    def is_admin(self) -> bool:
        """Check if user has the admin role."""
        return self.role == UserRole.ADMIN.value

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
