"""Gallery service for managing public photos."""
import logging
from typing import Optional, List, Tuple
from sqlalchemy import select, func, update, or_
from sqlalchemy.ext.asyncio import AsyncSession

from offroad.models.gallery import GalleryImage
from offroad.schemas.gallery import GalleryImageCreate, GalleryImageUpdate
from offroad.services.errors import NotFoundError
from offroad.services.event_service import EventService

logger = logging.getLogger(__name__)


class GalleryService:
    """Service for gallery images. Deleting only hides an image."""

    def __init__(self, session: AsyncSession):
        """Initialize gallery service."""
        self.session = session

    async def _get(self, image_id: int, active_only: bool = True) -> GalleryImage:
        query = (
            select(GalleryImage)
            .where(GalleryImage.id == image_id)
            .execution_options(populate_existing=True)
        )
        if active_only:
            query = query.where(GalleryImage.is_active == True)
        image = (await self.session.execute(query)).scalar_one_or_none()
        if not image:
            raise NotFoundError("Gallery image", image_id)
        return image

    async def _ensure_event(self, event_id: Optional[int]) -> None:
        if event_id is not None:
            await EventService(self.session).get_event_or_raise(event_id)

    async def list_images(
        self,
        page: int = 1,
        page_size: int = 12,
        category: Optional[str] = None,
        featured: Optional[bool] = None,
        event_id: Optional[int] = None,
        search: Optional[str] = None
    ) -> Tuple[List[GalleryImage], int]:
        """
        List active images, newest first.

        Returns:
            Tuple of (images, total_count)
        """
        query = select(GalleryImage).where(GalleryImage.is_active == True)
        if category:
            query = query.where(GalleryImage.category == category)
        if featured is not None:
            query = query.where(GalleryImage.featured == featured)
        if event_id:
            query = query.where(GalleryImage.event_id == event_id)
        if search:
            query = query.where(
                or_(
                    GalleryImage.title.icontains(search, autoescape=True),
                    GalleryImage.description.icontains(search, autoescape=True),
                    GalleryImage.alt_text.icontains(search, autoescape=True),
                )
            )

        total = (await self.session.execute(
            select(func.count()).select_from(query.subquery())
        )).scalar()

        offset = (page - 1) * page_size
        query = (
            query.order_by(
                GalleryImage.featured.desc(),
                GalleryImage.created_at.desc(),
                GalleryImage.id.desc()
            )
            .offset(offset)
            .limit(page_size)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all()), total

    async def list_featured(self, limit: int = 6) -> List[GalleryImage]:
        images, _ = await self.list_images(page=1, page_size=limit, featured=True)
        return images

    async def view_image(self, image_id: int) -> GalleryImage:
        """Get an active image and count the view."""
        await self._get(image_id)
        await self.session.execute(
            update(GalleryImage)
            .where(GalleryImage.id == image_id)
            .values(views=GalleryImage.views + 1)
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        return await self._get(image_id)

    async def create_image(self, data: GalleryImageCreate, uploaded_by_id: int) -> GalleryImage:
        await self._ensure_event(data.event_id)
        image = GalleryImage(
            title=data.title,
            description=data.description,
            image_url=data.image_url,
            alt_text=data.alt_text,
            category=data.category.value,
            tags=data.tags,
            event_id=data.event_id,
            featured=data.featured,
            uploaded_by_id=uploaded_by_id,
        )
        self.session.add(image)
        await self.session.commit()
        await self.session.refresh(image)
        logger.info(f"Added gallery image {image.id} '{image.title}'")
        return image

    async def update_image(self, image_id: int, data: GalleryImageUpdate) -> GalleryImage:
        image = await self._get(image_id)
        fields = data.model_dump(exclude_unset=True)
        if "event_id" in fields:
            await self._ensure_event(fields["event_id"])
        if fields.get("category") is not None:
            fields["category"] = data.category.value

        for key, value in fields.items():
            if value is None and key not in ("description", "event_id"):
                continue
            setattr(image, key, value)

        await self.session.commit()
        await self.session.refresh(image)
        return image

    async def set_featured(self, image_id: int, featured: bool) -> GalleryImage:
        image = await self._get(image_id)
        image.featured = featured
        await self.session.commit()
        await self.session.refresh(image)
        return image

    async def delete_image(self, image_id: int) -> None:
        """Soft delete: the image disappears from every public read."""
        image = await self._get(image_id)
        image.is_active = False
        await self.session.commit()
        logger.info(f"Deactivated gallery image {image_id}")

    async def like_image(self, image_id: int) -> int:
        """Increment the like counter atomically. Returns the new count."""
        result = await self.session.execute(
            update(GalleryImage)
            .where(GalleryImage.id == image_id, GalleryImage.is_active == True)
            .values(likes=GalleryImage.likes + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            await self.session.rollback()
            raise NotFoundError("Gallery image", image_id)
        await self.session.commit()
        image = await self._get(image_id)
        return image.likes
