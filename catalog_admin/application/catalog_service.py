"""Product catalog application service.

Orchestrates product writes (validation, coercion, image upload) and
the storefront read queries.
"""

from collections.abc import Mapping
from typing import Any

import structlog

from catalog_admin.domain.entities import Product
from catalog_admin.domain.exceptions import NotFoundError, UpstreamError, ValidationError
from catalog_admin.domain.normalization import (
    CoercionPolicy,
    coerce_integer,
    coerce_number,
    normalize_subcategory,
    parse_bool,
    parse_quantity_options,
    require_number,
    validate_identifier,
)
from catalog_admin.infrastructure.media import MediaResolver, MediaUpload
from catalog_admin.infrastructure.repositories import CatalogStore

logger = structlog.get_logger()

SIMILAR_PRODUCTS_LIMIT = 4


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _category_reference(value: Any) -> Any:
    # Clients may echo the joined {"id", "name"} object back on update.
    if isinstance(value, Mapping):
        return value.get("id")
    return value


class CatalogService:
    """Application service for products.

    Every product leaving this service has its subcategory reduced to a
    bare normalized name, whatever shape the store returned.
    """

    def __init__(
        self,
        store: CatalogStore,
        media: MediaResolver,
        policy: CoercionPolicy = CoercionPolicy.PERMISSIVE,
        image_folder: str = "product-images",
        request_id: str | None = None,
    ) -> None:
        """Initialize service.

        Args:
            store: Catalog store handle.
            media: Media host client for product images.
            policy: Coercion policy for optional numeric fields.
            image_folder: Media host folder for product images.
            request_id: Request ID for correlation.
        """
        self.store = store
        self.media = media
        self.policy = policy
        self.image_folder = image_folder
        self.request_id = request_id

    # ========================================================================
    # Writes
    # ========================================================================

    def build_fields(self, raw: Mapping[str, Any]) -> dict[str, Any]:
        """Turn raw form or JSON input into editable product fields.

        Args:
            raw: Request fields keyed by their camelCase names.

        Returns:
            Keyword arguments for ``Product``, without ID, image or timestamps.

        Raises:
            ValidationError: If a required field is missing or a value is invalid.
            InvalidIdentifier: If the category reference is malformed.
        """
        name = _text(raw.get("name"))
        if not name:
            raise ValidationError("Product name is required")

        category = _category_reference(raw.get("category"))
        if category is None or (isinstance(category, str) and not category.strip()):
            raise ValidationError("Category is required")
        category_id = validate_identifier(
            category.strip() if isinstance(category, str) else category, "category"
        )

        description = raw.get("description")

        return {
            "name": name,
            "category_id": category_id,
            "description": None if description is None else str(description),
            "subcategory": normalize_subcategory(raw.get("subcategory")),
            "price": require_number(raw.get("price"), "price"),
            "cost_price": coerce_number(raw.get("costPrice"), "costPrice", self.policy),
            "unit": _text(raw.get("unit")) or "kg",
            "default_quantity": _text(raw.get("defaultQuantity")) or "1",
            "custom_quantity_options": parse_quantity_options(
                raw.get("customQuantityOptions"), self.policy
            ),
            "stock": coerce_integer(raw.get("stock"), "stock", self.policy),
            "display_in_latest": parse_bool(raw.get("displayInLatest")),
            "display_in_best_selling": parse_bool(raw.get("displayInBestSelling")),
            "on_sale": parse_bool(raw.get("onSale")),
            "sale_price": coerce_number(raw.get("salePrice"), "salePrice", self.policy),
        }

    async def create_product(
        self,
        raw: Mapping[str, Any],
        image: MediaUpload | None = None,
    ) -> Product:
        """Create a product, uploading its image first when one is given.

        The category reference is not checked for existence.

        Raises:
            ValidationError: If input is invalid or the image format is rejected.
            InvalidIdentifier: If the category reference is malformed.
            UpstreamError: If the image upload fails; nothing is stored.
        """
        fields = self.build_fields(raw)

        image_url = None
        if image is not None:
            stored = await self.media.upload(image, self.image_folder)
            image_url = stored.url

        product = await self.store.products.add(Product(image_url=image_url, **fields))

        logger.info(
            "Product created",
            product_id=product.id,
            category_id=product.category_id,
            has_image=image_url is not None,
            request_id=self.request_id,
        )
        return self._normalized(product)

    async def update_product(
        self,
        product_id: str,
        raw: Mapping[str, Any],
        image: MediaUpload | None = None,
    ) -> Product:
        """Replace every editable field of a product.

        The image URL changes only when a new image is uploaded; the
        previous file is left on the media host.

        Raises:
            InvalidIdentifier: If an ID is malformed.
            ValidationError: If input is invalid.
            NotFoundError: If the product does not exist.
            UpstreamError: If the image upload fails; the product is unchanged.
        """
        product_id = validate_identifier(product_id, "product")
        fields = self.build_fields(raw)

        existing = await self.store.products.get(product_id, with_category=False)
        if existing is None:
            raise NotFoundError("Product", product_id)

        image_url = existing.image_url
        if image is not None:
            stored = await self.media.upload(image, self.image_folder)
            image_url = stored.url

        updated = await self.store.products.replace(
            Product(
                id=product_id,
                created_at=existing.created_at,
                image_url=image_url,
                **fields,
            )
        )
        if updated is None:
            raise NotFoundError("Product", product_id)

        logger.info(
            "Product updated",
            product_id=product_id,
            image_replaced=image is not None,
            request_id=self.request_id,
        )
        return self._normalized(updated)

    async def delete_product(self, product_id: str) -> Product:
        """Delete a product and, best effort, its hosted image.

        Raises:
            InvalidIdentifier: If the ID is malformed.
            NotFoundError: If the product does not exist.
        """
        product_id = validate_identifier(product_id, "product")

        deleted = await self.store.products.delete(product_id)
        if deleted is None:
            raise NotFoundError("Product", product_id)

        if deleted.image_url:
            await self._discard_image(deleted.image_url)

        logger.info("Product deleted", product_id=product_id, request_id=self.request_id)
        return self._normalized(deleted)

    async def _discard_image(self, url: str) -> None:
        try:
            await self.media.delete(url, self.image_folder)
        except UpstreamError as e:
            logger.warning(
                "Failed to delete product image",
                url=url,
                error=e.message,
                request_id=self.request_id,
            )

    # ========================================================================
    # Reads
    # ========================================================================

    async def list_all(self) -> list[Product]:
        """List all products, newest first."""
        return self._normalized_all(await self.store.products.find_all())

    async def list_latest(self) -> list[Product]:
        """List products flagged for the "latest" section, newest first."""
        return self._normalized_all(await self.store.products.find_all(display_in_latest=True))

    async def list_best_selling(self) -> list[Product]:
        """List products flagged as best selling, newest first."""
        return self._normalized_all(
            await self.store.products.find_all(display_in_best_selling=True)
        )

    async def get_by_id(self, product_id: str) -> Product:
        """Get a product with its category name.

        Raises:
            InvalidIdentifier: If the ID is malformed.
            NotFoundError: If the product does not exist.
        """
        product_id = validate_identifier(product_id, "product")

        product = await self.store.products.get(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return self._normalized(product)

    async def find_similar(
        self,
        product_id: str,
        limit: int = SIMILAR_PRODUCTS_LIMIT,
    ) -> list[Product]:
        """List other products in the same category, newest first.

        Raises:
            InvalidIdentifier: If the ID is malformed.
            NotFoundError: If the product does not exist.
        """
        product_id = validate_identifier(product_id, "product")

        product = await self.store.products.get(product_id, with_category=False)
        if product is None:
            raise NotFoundError("Product", product_id)

        similar = await self.store.products.list_by_category(
            product.category_id, exclude_id=product_id, limit=limit
        )
        return self._normalized_all(similar)

    @staticmethod
    def _normalized(product: Product) -> Product:
        product.subcategory = normalize_subcategory(product.subcategory)
        return product

    def _normalized_all(self, products: list[Product]) -> list[Product]:
        return [self._normalized(p) for p in products]
