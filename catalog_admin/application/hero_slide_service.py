"""Hero slide application service."""

from collections.abc import Mapping, Sequence
from typing import Any

import structlog

from catalog_admin.domain.entities import HeroSlide, utc_now
from catalog_admin.domain.exceptions import NotFoundError, UpstreamError, ValidationError
from catalog_admin.domain.normalization import parse_bool, validate_identifier
from catalog_admin.infrastructure.media import MediaResolver, MediaUpload
from catalog_admin.infrastructure.repositories import CatalogStore

logger = structlog.get_logger()


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class HeroSlideService:
    """Manages the ordered set of storefront hero slides."""

    def __init__(
        self,
        store: CatalogStore,
        media: MediaResolver,
        image_folder: str = "hero-slides",
        request_id: str | None = None,
    ) -> None:
        self.store = store
        self.media = media
        self.image_folder = image_folder
        self.request_id = request_id

    async def list_slides(self) -> list[HeroSlide]:
        """List all slides by ascending order."""
        return await self.store.hero_slides.list_ordered()

    async def create_slide(
        self,
        raw: Mapping[str, Any],
        image: MediaUpload | None = None,
    ) -> HeroSlide:
        """Create a slide at the end of the current order.

        Args:
            raw: Request fields: title, subtitle, link, active.
            image: Slide image; required.

        Returns:
            Created slide.

        Raises:
            ValidationError: If the title or image is missing.
            UpstreamError: If the image upload fails.
        """
        title = _optional_text(raw.get("title"))
        if title is None:
            raise ValidationError("Title is required")
        if image is None:
            raise ValidationError("Image is required")

        stored = await self.media.upload(image, self.image_folder)
        total = await self.store.hero_slides.count()

        slide = await self.store.hero_slides.add(
            HeroSlide(
                title=title,
                subtitle=_optional_text(raw.get("subtitle")),
                link=_optional_text(raw.get("link")),
                image_url=stored.url,
                active=parse_bool(raw.get("active")),
                order=total + 1,
            )
        )

        logger.info(
            "Hero slide created",
            slide_id=slide.id,
            order=slide.order,
            request_id=self.request_id,
        )
        return slide

    async def update_slide(
        self,
        slide_id: str,
        raw: Mapping[str, Any],
        image: MediaUpload | None = None,
    ) -> HeroSlide:
        """Update a slide's content.

        Title, subtitle and link change only when present in the input.
        ``active`` is always taken from the input and is false unless
        sent as true. The order is never changed here.

        Raises:
            InvalidIdentifier: If the ID is malformed.
            ValidationError: If a provided title is blank.
            NotFoundError: If the slide does not exist.
            UpstreamError: If the image upload fails.
        """
        slide_id = validate_identifier(slide_id, "slide")

        slide = await self.store.hero_slides.get(slide_id)
        if slide is None:
            raise NotFoundError("Hero slide", slide_id)

        if "title" in raw:
            title = _optional_text(raw.get("title"))
            if title is None:
                raise ValidationError("Title is required")
            slide.title = title
        if "subtitle" in raw:
            slide.subtitle = _optional_text(raw.get("subtitle"))
        if "link" in raw:
            slide.link = _optional_text(raw.get("link"))
        slide.active = parse_bool(raw.get("active"))

        if image is not None:
            stored = await self.media.upload(image, self.image_folder)
            slide.image_url = stored.url

        slide.updated_at = utc_now()
        updated = await self.store.hero_slides.update(slide)
        if updated is None:
            raise NotFoundError("Hero slide", slide_id)

        logger.info("Hero slide updated", slide_id=slide_id, request_id=self.request_id)
        return updated

    async def delete_slide(self, slide_id: str) -> HeroSlide:
        """Delete a slide and, best effort, its hosted image.

        Remaining slides keep their order values.

        Raises:
            InvalidIdentifier: If the ID is malformed.
            NotFoundError: If the slide does not exist.
        """
        slide_id = validate_identifier(slide_id, "slide")

        deleted = await self.store.hero_slides.delete(slide_id)
        if deleted is None:
            raise NotFoundError("Hero slide", slide_id)

        try:
            await self.media.delete(deleted.image_url, self.image_folder)
        except UpstreamError as e:
            logger.warning(
                "Failed to delete hero slide image",
                url=deleted.image_url,
                error=e.message,
                request_id=self.request_id,
            )

        logger.info("Hero slide deleted", slide_id=slide_id, request_id=self.request_id)
        return deleted

    async def reorder(self, slide_ids: Any) -> int:
        """Assign order 1..n following the given ID sequence.

        Unknown IDs are skipped. Every ID is validated before any slide
        is touched.

        Args:
            slide_ids: Slide IDs in the desired display order.

        Returns:
            Number of slides updated.

        Raises:
            ValidationError: If the input is not a list.
            InvalidIdentifier: If any ID is malformed.
        """
        if isinstance(slide_ids, (str, bytes)) or not isinstance(slide_ids, Sequence):
            raise ValidationError("Slides must be an array of IDs")

        canonical = [validate_identifier(slide_id, "slide") for slide_id in slide_ids]

        updated = 0
        for position, slide_id in enumerate(canonical, start=1):
            if await self.store.hero_slides.set_order(slide_id, position):
                updated += 1

        logger.info(
            "Hero slides reordered",
            requested=len(canonical),
            updated=updated,
            request_id=self.request_id,
        )
        return updated
