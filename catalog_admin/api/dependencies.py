"""Shared FastAPI dependencies.

The store handle, media client and settings are resolved per request
from ``app.state`` so tests can replace any of them through
``app.dependency_overrides``.
"""

from collections.abc import AsyncGenerator
from typing import Annotated, Any

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.datastructures import UploadFile

from catalog_admin.application import (
    AuthService,
    CatalogService,
    CategoryService,
    HeroSlideService,
)
from catalog_admin.domain.exceptions import AuthenticationError, ValidationError
from catalog_admin.infrastructure.config import Settings
from catalog_admin.infrastructure.media import MediaResolver, MediaUpload
from catalog_admin.infrastructure.repositories import CatalogStore
from catalog_admin.infrastructure.sql_store import SqlCatalogStore

IMAGE_FIELD = "image"

bearer_scheme = HTTPBearer(auto_error=False)


# ============================================================================
# Core Dependencies
# ============================================================================


def get_settings(request: Request) -> Settings:
    """Get the settings the application was created with."""
    return request.app.state.settings


async def get_store(request: Request) -> AsyncGenerator[CatalogStore, None]:
    """Open a database session for the request and wrap it in a store.

    The session commits when the handler returns, before the response is
    sent, and rolls back when it raises.
    """
    async with request.app.state.database.session() as session:
        yield SqlCatalogStore(session)


def get_media_resolver(request: Request) -> MediaResolver:
    """Get the shared media host client."""
    return request.app.state.media


def get_request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


SettingsDep = Annotated[Settings, Depends(get_settings)]
StoreDep = Annotated[CatalogStore, Depends(get_store, scope="function")]
MediaDep = Annotated[MediaResolver, Depends(get_media_resolver)]
RequestIdDep = Annotated[str | None, Depends(get_request_id)]


# ============================================================================
# Services
# ============================================================================


def get_category_service(store: StoreDep, request_id: RequestIdDep) -> CategoryService:
    """Get category service with request ID."""
    return CategoryService(store, request_id=request_id)


def get_catalog_service(
    store: StoreDep,
    media: MediaDep,
    settings: SettingsDep,
    request_id: RequestIdDep,
) -> CatalogService:
    """Get product service configured from settings."""
    return CatalogService(
        store,
        media,
        policy=settings.numeric_coercion,
        image_folder=settings.product_image_folder,
        request_id=request_id,
    )


def get_hero_slide_service(
    store: StoreDep,
    media: MediaDep,
    settings: SettingsDep,
    request_id: RequestIdDep,
) -> HeroSlideService:
    """Get hero slide service configured from settings."""
    return HeroSlideService(
        store,
        media,
        image_folder=settings.hero_slide_folder,
        request_id=request_id,
    )


def get_auth_service(store: StoreDep, settings: SettingsDep) -> AuthService:
    """Get admin auth service."""
    return AuthService(store, settings)


# ============================================================================
# Authentication
# ============================================================================


async def require_admin(
    request: Request,
    settings: SettingsDep,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> dict[str, Any] | None:
    """Guard mutating routes with an admin bearer token.

    Only enforced when ``require_admin_auth`` is enabled.

    Returns:
        Decoded token claims, or None when enforcement is off.

    Raises:
        AuthenticationError: If the token is missing, invalid or expired.
    """
    if not settings.require_admin_auth:
        return None

    if credentials is None:
        raise AuthenticationError("Missing Authorization header")

    payload = auth.verify_token(credentials.credentials)
    request.state.admin_id = payload.get("sub")
    return payload


# ============================================================================
# Request Payloads
# ============================================================================


async def read_payload(request: Request) -> tuple[dict[str, Any], MediaUpload | None]:
    """Read a write request sent as multipart/urlencoded form or JSON.

    Returns:
        Field values (the image excluded) and the uploaded image, if any.

    Raises:
        ValidationError: If the body is not valid JSON or not an object.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        form = await request.form()
        fields: dict[str, Any] = {}
        image = None
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                if key == IMAGE_FIELD and value.filename:
                    image = MediaUpload(
                        filename=value.filename,
                        data=await value.read(),
                        content_type=value.content_type,
                    )
                continue
            fields[key] = value
        return fields, image

    body = await request.body()
    if not body:
        return {}, None

    try:
        data = await request.json()
    except ValueError as e:
        raise ValidationError("Malformed JSON body", details=str(e)) from e
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data, None


Payload = Annotated[tuple[dict[str, Any], MediaUpload | None], Depends(read_payload)]
