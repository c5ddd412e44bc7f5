"""Shared fixtures for catalog admin tests."""

from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from catalog_admin.api.dependencies import get_media_resolver, get_store
from catalog_admin.domain.exceptions import UpstreamError
from catalog_admin.infrastructure.config import Settings
from catalog_admin.infrastructure.media import MediaResolver, MediaUpload, StoredMedia
from catalog_admin.infrastructure.memory_store import InMemoryCatalogStore
from catalog_admin.main import create_app


class RecordingMediaResolver(MediaResolver):
    """Media resolver that records calls instead of contacting a host."""

    def __init__(self) -> None:
        self.uploads: list[tuple[str, str]] = []
        self.deleted: list[tuple[str, str]] = []
        self.fail_uploads = False
        self.fail_deletes = False

    async def upload(self, upload: MediaUpload, folder: str) -> StoredMedia:
        if self.fail_uploads:
            raise UpstreamError("Media host request failed")
        self.uploads.append((upload.filename, folder))
        stem = upload.filename.rsplit(".", 1)[0]
        return StoredMedia(
            url=f"https://res.cloudinary.com/demo/image/upload/v1/{folder}/{stem}.jpg",
            public_id=f"{folder}/{stem}",
        )

    async def delete(self, url: str, folder: str) -> bool:
        if self.fail_deletes:
            raise UpstreamError("Media host request failed")
        self.deleted.append((url, folder))
        return True


def make_product_fields(category_id: str, **overrides: Any) -> dict[str, Any]:
    """Create raw product form fields."""
    fields = {
        "name": "Carrot",
        "category": category_id,
        "subcategory": "Root",
        "price": "40",
        "unit": "kg",
        "stock": "10",
    }
    fields.update(overrides)
    return fields


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from external services."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        create_tables_on_startup=False,
        seed_default_admin=False,
        log_json=False,
        jwt_secret="test-secret",
    )


@pytest.fixture
def store() -> InMemoryCatalogStore:
    """Fresh in-memory catalog store."""
    return InMemoryCatalogStore()


@pytest.fixture
def media() -> RecordingMediaResolver:
    """Recording media resolver."""
    return RecordingMediaResolver()


@pytest.fixture
def app(
    settings: Settings,
    store: InMemoryCatalogStore,
    media: RecordingMediaResolver,
) -> FastAPI:
    """Application wired to the in-memory store and recording media resolver."""
    application = create_app(settings)
    application.dependency_overrides[get_store] = lambda: store
    application.dependency_overrides[get_media_resolver] = lambda: media
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client without authentication."""
    return TestClient(app)
