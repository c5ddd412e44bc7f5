"""Media host client.

Uploads product and hero-slide images to Cloudinary and returns the
hosted URL. The catalog only stores and forwards that URL.
"""

import hashlib
import time
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from catalog_admin.domain.exceptions import UpstreamError, ValidationError
from catalog_admin.infrastructure.config import Settings

logger = structlog.get_logger()


@dataclass
class MediaUpload:
    """Binary file received from a client."""

    filename: str
    data: bytes
    content_type: str | None = None

    @property
    def extension(self) -> str:
        """Lowercase filename extension without the dot."""
        if "." not in self.filename:
            return ""
        return self.filename.rsplit(".", 1)[-1].lower()


@dataclass
class StoredMedia:
    """Reference to a hosted file."""

    url: str
    public_id: str


class MediaResolver(ABC):
    """Uploads files to a media host and deletes them again."""

    @abstractmethod
    async def upload(self, upload: MediaUpload, folder: str) -> StoredMedia:
        """Upload a file.

        Raises:
            ValidationError: If the file format is not accepted.
            UpstreamError: If the media host rejects or fails the request.
        """

    @abstractmethod
    async def delete(self, url: str, folder: str) -> bool:
        """Delete a hosted file by URL.

        Returns:
            True if a delete request was sent.

        Raises:
            UpstreamError: If the media host fails the request.
        """

    async def close(self) -> None:
        """Release client resources."""


def public_id_from_url(url: str | None, folder: str) -> str | None:
    """Derive a Cloudinary public ID from a delivery URL.

    Example:
        https://res.cloudinary.com/demo/image/upload/v17/hero-slides/abc.jpg
        with folder "hero-slides" gives "hero-slides/abc".
    """
    if not url or CloudinaryMediaResolver.HOST_MARKER not in url:
        return None
    filename = url.rstrip("/").rsplit("/", 1)[-1]
    stem = filename.split(".", 1)[0]
    if not stem:
        return None
    return f"{folder}/{stem}"


class CloudinaryMediaResolver(MediaResolver):
    """Cloudinary client using signed REST uploads.

    Example usage:
        resolver = CloudinaryMediaResolver.from_settings(settings)
        stored = await resolver.upload(upload, folder="product-images")
        await resolver.delete(stored.url, folder="product-images")
    """

    HOST_MARKER = "res.cloudinary.com"

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        api_url: str = "https://api.cloudinary.com/v1_1",
        timeout: float = 30.0,
        allowed_formats: Iterable[str] = ("jpg", "jpeg", "png"),
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize Cloudinary client.

        Args:
            cloud_name: Cloudinary cloud name.
            api_key: API key.
            api_secret: API secret used to sign requests.
            api_url: Base REST API URL.
            timeout: Request timeout in seconds.
            allowed_formats: Accepted image extensions.
            transport: Optional httpx transport (used by tests).
        """
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.allowed_formats = {f.lower() for f in allowed_formats}
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "CloudinaryMediaResolver":
        """Create a client from application settings."""
        return cls(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            api_url=settings.cloudinary_api_url,
            timeout=settings.media_timeout_seconds,
            allowed_formats=settings.allowed_image_formats,
        )

    @property
    def configured(self) -> bool:
        """Whether credentials are present."""
        return bool(self.cloud_name and self.api_key and self.api_secret)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=f"{self.api_url}/{self.cloud_name}",
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def sign(self, params: dict[str, Any]) -> str:
        """Compute the request signature.

        Parameters are sorted by name, joined as ``key=value`` pairs with
        ``&``, suffixed with the API secret and SHA-1 hashed.
        """
        payload = "&".join(f"{key}={params[key]}" for key in sorted(params))
        return hashlib.sha1(f"{payload}{self.api_secret}".encode("utf-8")).hexdigest()

    def check_format(self, upload: MediaUpload) -> None:
        """Reject files whose format is not in the allowed list."""
        subtype = (upload.content_type or "").split("/")[-1].lower()
        if upload.extension in self.allowed_formats or subtype in self.allowed_formats:
            return
        raise ValidationError(
            "Unsupported image format",
            details={
                "filename": upload.filename,
                "allowed_formats": sorted(self.allowed_formats),
            },
        )

    async def _post(self, path: str, params: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        if not self.configured:
            raise UpstreamError("Media host is not configured")

        data = {**params, "api_key": self.api_key, "signature": self.sign(params)}
        try:
            client = await self._get_client()
            response = await client.post(path, data=data, **kwargs)
        except httpx.RequestError as e:
            logger.error("Media host request failed", path=path, error=str(e))
            raise UpstreamError("Media host request failed", details=str(e)) from e

        if response.status_code != 200:
            logger.error(
                "Media host rejected request",
                path=path,
                status_code=response.status_code,
            )
            raise UpstreamError(
                "Media host rejected request",
                details={"status_code": response.status_code, "body": response.text},
            )
        return response.json()

    async def upload(self, upload: MediaUpload, folder: str) -> StoredMedia:
        self.check_format(upload)

        params = {"folder": folder, "timestamp": int(time.time())}
        body = await self._post(
            "/image/upload",
            params,
            files={
                "file": (
                    upload.filename,
                    upload.data,
                    upload.content_type or "application/octet-stream",
                )
            },
        )

        stored = StoredMedia(url=body["secure_url"], public_id=body["public_id"])
        logger.info("Uploaded media", folder=folder, public_id=stored.public_id)
        return stored

    async def delete(self, url: str, folder: str) -> bool:
        public_id = public_id_from_url(url, folder)
        if public_id is None:
            return False

        params = {"public_id": public_id, "timestamp": int(time.time())}
        await self._post("/image/destroy", params)
        logger.info("Deleted media", public_id=public_id)
        return True
