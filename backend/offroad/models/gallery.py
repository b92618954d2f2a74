"""Gallery image model."""
import enum
from sqlalchemy import Column, Integer, String, Boolean, TIMESTAMP, JSON, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from offroad.database import Base


class GalleryCategory(str, enum.Enum):
    EVENTS = "Events"
    VEHICLES = "Vehicles"
    LANDSCAPES = "Landscapes"
    ACTION = "Action"
    GROUP_PHOTOS = "Group Photos"
    OTHER = "Other"


class GalleryImage(Base):
    """
    Photo shown in the public gallery.

    Deleting an image only clears ``is_active``; inactive images are hidden
    from every public read.
    """

    __tablename__ = "gallery_images"

    id = Column(Integer, primary_key=True, index=True)

    title = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    image_url = Column(String(500), nullable=False)
    alt_text = Column(String(255), nullable=False)
    category = Column(String(30), default=GalleryCategory.OTHER.value, nullable=False)
    tags = Column(JSON, nullable=False, default=list)

    event_id = Column(
        Integer,
        ForeignKey('events.id', ondelete='SET NULL'),
        nullable=True,
        index=True
    )
    uploaded_by_id = Column(
        Integer,
        ForeignKey('users.id', ondelete='RESTRICT'),
        nullable=False
    )

    is_active = Column(Boolean, default=True, nullable=False)
    views = Column(Integer, default=0, nullable=False)
    likes = Column(Integer, default=0, nullable=False)
    featured = Column(Boolean, default=False, nullable=False)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    event = relationship("Event")
    uploaded_by = relationship("User")

    __table_args__ = (
        Index('idx_gallery_category_active', 'category', 'is_active'),
        Index('idx_gallery_featured_created', 'featured', 'created_at'),
    )

    def __repr__(self):
        return f"<GalleryImage(id={self.id}, title={self.title}, active={self.is_active})>"
