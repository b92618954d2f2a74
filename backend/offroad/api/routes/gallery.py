"""Gallery API routes."""
from typing import Optional, List
from fastapi import APIRouter, Depends, Query, status

from offroad.dependencies import get_current_admin_user
from offroad.api.utils.pagination import page_meta
from offroad.api.utils.dependencies import get_gallery_service
from offroad.models.gallery import GalleryCategory
from offroad.models.user import User
from offroad.services.gallery_service import GalleryService
from offroad.schemas.common import MessageResponse
from offroad.schemas.gallery import (
    GalleryImageCreate,
    GalleryImageUpdate,
    FeaturedUpdate,
    GalleryImageResponse,
    GalleryListResponse,
    GalleryActionResponse,
    LikeResponse,
)

router = APIRouter(prefix="/api/gallery", tags=["Gallery"])


@router.get("", response_model=GalleryListResponse)
async def list_images(
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=50),
    category: Optional[GalleryCategory] = None,
    featured: Optional[bool] = None,
    event_id: Optional[int] = Query(None, ge=1),
    search: Optional[str] = Query(None, max_length=100),
    service: GalleryService = Depends(get_gallery_service)
):
    """Browse the public gallery."""
    images, total = await service.list_images(
        page=page,
        page_size=limit,
        category=category.value if category else None,
        featured=featured,
        event_id=event_id,
        search=search
    )
    return GalleryListResponse(
        items=[GalleryImageResponse.model_validate(image) for image in images],
        **page_meta(total, page, limit)
    )


@router.get("/featured", response_model=List[GalleryImageResponse])
async def list_featured_images(
    limit: int = Query(6, ge=1, le=50),
    service: GalleryService = Depends(get_gallery_service)
):
    """Featured images for the home page."""
    images = await service.list_featured(limit)
    return [GalleryImageResponse.model_validate(image) for image in images]


@router.get("/{image_id}", response_model=GalleryImageResponse)
async def get_image(
    image_id: int,
    service: GalleryService = Depends(get_gallery_service)
):
    """Get an image; each call counts as a view."""
    image = await service.view_image(image_id)
    return GalleryImageResponse.model_validate(image)


@router.post("/{image_id}/like", response_model=LikeResponse)
async def like_image(
    image_id: int,
    service: GalleryService = Depends(get_gallery_service)
):
    likes = await service.like_image(image_id)
    return LikeResponse(message="Image liked", likes=likes)


@router.post("", response_model=GalleryActionResponse, status_code=status.HTTP_201_CREATED)
async def create_image(
    data: GalleryImageCreate,
    current_user: User = Depends(get_current_admin_user),
    service: GalleryService = Depends(get_gallery_service)
):
    """Add an image by URL (admin only)."""
    image = await service.create_image(data, uploaded_by_id=current_user.id)
    return GalleryActionResponse(
        message="Image added successfully",
        image=GalleryImageResponse.model_validate(image)
    )


@router.put("/{image_id}", response_model=GalleryActionResponse)
async def update_image(
    image_id: int,
    data: GalleryImageUpdate,
    current_user: User = Depends(get_current_admin_user),
    service: GalleryService = Depends(get_gallery_service)
):
    image = await service.update_image(image_id, data)
    return GalleryActionResponse(
        message="Image updated successfully",
        image=GalleryImageResponse.model_validate(image)
    )


@router.patch("/{image_id}/featured", response_model=GalleryActionResponse)
async def set_featured(
    image_id: int,
    data: FeaturedUpdate,
    current_user: User = Depends(get_current_admin_user),
    service: GalleryService = Depends(get_gallery_service)
):
    image = await service.set_featured(image_id, data.featured)
    message = "Image featured" if data.featured else "Image unfeatured"
    return GalleryActionResponse(
        message=message,
        image=GalleryImageResponse.model_validate(image)
    )


@router.delete("/{image_id}", response_model=MessageResponse)
async def delete_image(
    image_id: int,
    current_user: User = Depends(get_current_admin_user),
    service: GalleryService = Depends(get_gallery_service)
):
    """Hide an image from the gallery (admin only)."""
    await service.delete_image(image_id)
    return MessageResponse(message="Image deleted successfully")
