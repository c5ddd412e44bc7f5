"""Hero slide API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from catalog_admin.api.dependencies import Payload, get_hero_slide_service, require_admin
from catalog_admin.api.schemas import (
    ErrorResponse,
    HeroSlideListResponse,
    HeroSlideResponse,
    HeroSlideSchema,
    MessageResponse,
    ReorderRequest,
)
from catalog_admin.application import HeroSlideService
from catalog_admin.domain.entities import HeroSlide

router = APIRouter(prefix="/api/hero-slides", tags=["Hero Slides"])

ServiceDep = Annotated[HeroSlideService, Depends(get_hero_slide_service)]

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input or slide ID"},
    404: {"model": ErrorResponse, "description": "Slide not found"},
}


def slide_to_response(slide: HeroSlide) -> HeroSlideSchema:
    """Convert HeroSlide entity to response schema."""
    return HeroSlideSchema(
        id=slide.id,
        title=slide.title,
        subtitle=slide.subtitle,
        image_url=slide.image_url,
        link=slide.link,
        active=slide.active,
        order=slide.order,
        created_at=slide.created_at,
        updated_at=slide.updated_at,
    )


@router.get("", response_model=HeroSlideListResponse)
async def list_slides(service: ServiceDep) -> HeroSlideListResponse:
    """List slides in display order."""
    slides = await service.list_slides()
    return HeroSlideListResponse(slides=[slide_to_response(s) for s in slides])


@router.post(
    "",
    response_model=HeroSlideResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: ERROR_RESPONSES[400]},
    dependencies=[Depends(require_admin)],
)
async def create_slide(payload: Payload, service: ServiceDep) -> HeroSlideResponse:
    """Create a slide from a multipart form with a required image."""
    fields, image = payload
    slide = await service.create_slide(fields, image)
    return HeroSlideResponse(slide=slide_to_response(slide))


@router.post(
    "/reorder",
    response_model=MessageResponse,
    responses={400: ERROR_RESPONSES[400]},
    dependencies=[Depends(require_admin)],
)
async def reorder_slides(body: ReorderRequest, service: ServiceDep) -> MessageResponse:
    """Set slide order from the position of each ID in ``orderList``."""
    await service.reorder(body.order_list)
    return MessageResponse(message="Slides reordered")


@router.put(
    "/{slide_id}",
    response_model=HeroSlideResponse,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(require_admin)],
)
async def update_slide(slide_id: str, payload: Payload, service: ServiceDep) -> HeroSlideResponse:
    """Update a slide, replacing its image only when one is sent."""
    fields, image = payload
    slide = await service.update_slide(slide_id, fields, image)
    return HeroSlideResponse(slide=slide_to_response(slide))


@router.delete(
    "/{slide_id}",
    response_model=MessageResponse,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(require_admin)],
)
async def delete_slide(slide_id: str, service: ServiceDep) -> MessageResponse:
    """Delete a slide and its hosted image."""
    await service.delete_slide(slide_id)
    return MessageResponse(message="Slide deleted")
