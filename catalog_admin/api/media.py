"""Standalone media upload endpoint.

Lets the admin UI check media host connectivity with a single image.
"""

from fastapi import APIRouter, Depends

from catalog_admin.api.dependencies import MediaDep, Payload, SettingsDep, require_admin
from catalog_admin.api.schemas import ErrorResponse, UploadResponse
from catalog_admin.domain.exceptions import ValidationError

router = APIRouter(prefix="/api", tags=["Media"])


@router.post(
    "/test-upload",
    response_model=UploadResponse,
    responses={
        400: {"model": ErrorResponse, "description": "No file uploaded"},
        500: {"model": ErrorResponse, "description": "Media host failure"},
    },
    dependencies=[Depends(require_admin)],
)
async def test_upload(payload: Payload, media: MediaDep, settings: SettingsDep) -> UploadResponse:
    """Upload one image to the product image folder and echo its location."""
    _, image = payload
    if image is None:
        raise ValidationError("No file uploaded")

    stored = await media.upload(image, settings.product_image_folder)
    return UploadResponse(image_url=stored.url, public_id=stored.public_id)
