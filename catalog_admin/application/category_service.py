"""Category application service.

Handles the category taxonomy: creating, renaming and deleting
categories and managing their subcategories.
"""

from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from catalog_admin.domain.entities import Category, CategoryStatus, Subcategory
from catalog_admin.domain.exceptions import ConflictError, NotFoundError, ValidationError
from catalog_admin.domain.normalization import (
    normalize_name,
    normalize_subcategory,
    validate_identifier,
)
from catalog_admin.infrastructure.repositories import CatalogStore

logger = structlog.get_logger()


class CategoryService:
    """Application service for the category taxonomy.

    Category deletion does not cascade: products keep their reference
    and read back with no category attached.
    """

    def __init__(self, store: CatalogStore, request_id: str | None = None) -> None:
        """Initialize service.

        Args:
            store: Catalog store handle.
            request_id: Request ID for correlation.
        """
        self.store = store
        self.request_id = request_id

    async def list_categories(self) -> list[Category]:
        """List all categories."""
        return await self.store.categories.list_all()

    async def create_category(
        self,
        name: Any,
        description: Any = None,
        subcategories: Iterable[Any] | None = None,
    ) -> Category:
        """Create a category.

        Args:
            name: Category name; stored trimmed and lowercased.
            description: Optional description.
            subcategories: Optional subcategory names or {"name": ...} objects.
                Names that normalize to the same value are kept once.

        Returns:
            Created category.

        Raises:
            ValidationError: If the name or a subcategory name is empty.
        """
        normalized = normalize_name(name)
        if not normalized:
            raise ValidationError("Category name is required")

        if subcategories is None:
            subcategories = []
        elif isinstance(subcategories, (str, bytes, Mapping)):
            raise ValidationError("subcategories must be a list")

        subs: list[Subcategory] = []
        for item in subcategories:
            sub_name = normalize_subcategory(item)
            if not sub_name:
                raise ValidationError("Subcategory name is required")
            if all(sub.name != sub_name for sub in subs):
                subs.append(Subcategory(name=sub_name))

        category = await self.store.categories.add(
            Category(
                name=normalized,
                description="" if description is None else str(description),
                subcategories=subs,
            )
        )

        logger.info(
            "Category created",
            category_id=category.id,
            name=category.name,
            subcategory_count=len(category.subcategories),
            request_id=self.request_id,
        )
        return category

    async def update_category(self, category_id: str, fields: Mapping[str, Any]) -> Category:
        """Update only the provided category fields.

        Args:
            category_id: Category ID.
            fields: Any of "name", "description", "status".

        Returns:
            Updated category.

        Raises:
            InvalidIdentifier: If the ID is malformed.
            ValidationError: If the name is empty or the status unknown.
            NotFoundError: If the category does not exist.
        """
        category_id = validate_identifier(category_id, "category")

        changes: dict[str, Any] = {}
        if "name" in fields:
            name = normalize_name(fields["name"])
            if not name:
                raise ValidationError("Category name is required")
            changes["name"] = name
        if "description" in fields:
            description = fields["description"]
            changes["description"] = "" if description is None else str(description)
        if "status" in fields:
            try:
                changes["status"] = CategoryStatus(fields["status"])
            except ValueError:
                raise ValidationError(
                    "Invalid category status",
                    details={"allowed": [s.value for s in CategoryStatus]},
                ) from None

        if changes:
            category = await self.store.categories.update(category_id, changes)
        else:
            category = await self.store.categories.get(category_id)

        if category is None:
            raise NotFoundError("Category", category_id)

        logger.info(
            "Category updated",
            category_id=category_id,
            fields=sorted(changes),
            request_id=self.request_id,
        )
        return category

    async def delete_category(self, category_id: str) -> Category:
        """Delete a category without touching its products.

        Raises:
            InvalidIdentifier: If the ID is malformed.
            NotFoundError: If the category does not exist.
        """
        category_id = validate_identifier(category_id, "category")

        deleted = await self.store.categories.delete(category_id)
        if deleted is None:
            raise NotFoundError("Category", category_id)

        logger.info("Category deleted", category_id=category_id, request_id=self.request_id)
        return deleted

    async def add_subcategory(self, category_id: str, name: Any) -> Category:
        """Append a subcategory to a category.

        The duplicate check here covers the common case; the store's
        uniqueness constraint covers concurrent writers.

        Raises:
            InvalidIdentifier: If the ID is malformed.
            NotFoundError: If the category does not exist.
            ValidationError: If the name is empty.
            ConflictError: If the normalized name already exists.
        """
        category_id = validate_identifier(category_id, "category")

        category = await self.store.categories.get(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)

        sub_name = normalize_subcategory(name)
        if not sub_name:
            raise ValidationError("Subcategory name is required")

        if category.has_subcategory(sub_name):
            raise ConflictError("Subcategory already exists", details={"name": sub_name})

        updated = await self.store.categories.add_subcategory(
            category_id, Subcategory(name=sub_name)
        )
        if updated is None:
            raise NotFoundError("Category", category_id)

        logger.info(
            "Subcategory added",
            category_id=category_id,
            name=sub_name,
            request_id=self.request_id,
        )
        return updated

    async def remove_subcategory(self, category_id: str, subcategory_id: str) -> Category:
        """Remove a subcategory from a category.

        Raises:
            InvalidIdentifier: If either ID is malformed.
            NotFoundError: If the category or subcategory does not exist.
        """
        category_id = validate_identifier(category_id, "category")
        subcategory_id = validate_identifier(subcategory_id, "subcategory")

        category = await self.store.categories.get(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)
        if category.find_subcategory(subcategory_id) is None:
            raise NotFoundError("Subcategory", subcategory_id)

        updated = await self.store.categories.remove_subcategory(category_id, subcategory_id)
        if updated is None:
            raise NotFoundError("Category", category_id)

        logger.info(
            "Subcategory removed",
            category_id=category_id,
            subcategory_id=subcategory_id,
            request_id=self.request_id,
        )
        return updated
