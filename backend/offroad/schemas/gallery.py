"""Pydantic schemas for the photo gallery."""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator

from offroad.models.gallery import GalleryCategory
from offroad.schemas.common import normalize_tags


class GalleryImageCreate(BaseModel):
    """Schema for adding a gallery image."""
    title: str = Field(..., min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    image_url: str = Field(..., min_length=1, max_length=500)
    alt_text: str = Field(..., min_length=1, max_length=255)
    category: GalleryCategory = GalleryCategory.OTHER
    tags: List[str] = []
    event_id: Optional[int] = Field(None, ge=1)
    featured: bool = False

    model_config = {"str_strip_whitespace": True}

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tag_list(cls, value):
        return normalize_tags(value)


class GalleryImageUpdate(BaseModel):
    """Partial update of a gallery image."""
    title: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    image_url: Optional[str] = Field(None, min_length=1, max_length=500)
    alt_text: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[GalleryCategory] = None
    tags: Optional[List[str]] = None
    event_id: Optional[int] = Field(None, ge=1)
    featured: Optional[bool] = None

    model_config = {"str_strip_whitespace": True}

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tag_list(cls, value):
        if value is None:
            return None
        return normalize_tags(value)


class FeaturedUpdate(BaseModel):
    featured: bool


class GalleryImageResponse(BaseModel):
    """Gallery image response schema."""
    id: int
    title: str
    description: Optional[str] = None
    image_url: str
    alt_text: str
    category: str
    tags: List[str] = []
    event_id: Optional[int] = None
    uploaded_by_id: int
    is_active: bool
    views: int
    likes: int
    featured: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class GalleryListResponse(BaseModel):
    items: List[GalleryImageResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_prev: bool


class GalleryActionResponse(BaseModel):
    message: str
    image: GalleryImageResponse


class LikeResponse(BaseModel):
    message: str
    likes: int
