"""Repository interfaces and the catalog store handle.

Services depend only on these abstractions. ``SqlCatalogStore`` backs
them with a database session; ``InMemoryCatalogStore`` backs them with
dictionaries for tests and local tooling.
"""

from abc import ABC, abstractmethod
from typing import Any

from catalog_admin.domain.entities import AdminUser, Category, HeroSlide, Product, Subcategory


class CategoryRepository(ABC):
    """Persistence for categories and their subcategories."""

    @abstractmethod
    async def list_all(self) -> list[Category]:
        """List all categories ordered by name."""

    @abstractmethod
    async def get(self, category_id: str) -> Category | None:
        """Get category by ID."""

    @abstractmethod
    async def add(self, category: Category) -> Category:
        """Persist a new category."""

    @abstractmethod
    async def update(self, category_id: str, changes: dict[str, Any]) -> Category | None:
        """Apply field changes to a category.

        Args:
            category_id: Category ID.
            changes: Attribute name to new value.

        Returns:
            Updated category, or None if it does not exist.
        """

    @abstractmethod
    async def delete(self, category_id: str) -> Category | None:
        """Delete a category, returning the removed record."""

    @abstractmethod
    async def add_subcategory(
        self, category_id: str, subcategory: Subcategory
    ) -> Category | None:
        """Append a subcategory.

        Raises:
            ConflictError: If the name already exists under the category.
        """

    @abstractmethod
    async def remove_subcategory(
        self, category_id: str, subcategory_id: str
    ) -> Category | None:
        """Remove a subcategory, returning the updated category."""


class ProductRepository(ABC):
    """Persistence and joined reads for products.

    Every list method returns products newest first with the
    referenced category's name joined in.
    """

    @abstractmethod
    async def add(self, product: Product) -> Product:
        """Persist a new product."""

    @abstractmethod
    async def replace(self, product: Product) -> Product | None:
        """Overwrite every editable field and the image URL.

        Returns:
            Stored product, or None if no product has this ID.
        """

    @abstractmethod
    async def get(self, product_id: str, with_category: bool = True) -> Product | None:
        """Get product by ID, optionally joining its category."""

    @abstractmethod
    async def find_all(
        self,
        display_in_latest: bool | None = None,
        display_in_best_selling: bool | None = None,
    ) -> list[Product]:
        """List products matching the display flags."""

    @abstractmethod
    async def list_by_category(
        self,
        category_id: str,
        exclude_id: str | None = None,
        limit: int | None = None,
    ) -> list[Product]:
        """List products that reference a category."""

    @abstractmethod
    async def delete(self, product_id: str) -> Product | None:
        """Delete a product, returning the removed record."""


class HeroSlideRepository(ABC):
    """Persistence for hero slides."""

    @abstractmethod
    async def list_ordered(self) -> list[HeroSlide]:
        """List slides by ascending display order."""

    @abstractmethod
    async def count(self) -> int:
        """Count all slides."""

    @abstractmethod
    async def add(self, slide: HeroSlide) -> HeroSlide:
        """Persist a new slide."""

    @abstractmethod
    async def get(self, slide_id: str) -> HeroSlide | None:
        """Get slide by ID."""

    @abstractmethod
    async def update(self, slide: HeroSlide) -> HeroSlide | None:
        """Overwrite a slide's fields."""

    @abstractmethod
    async def delete(self, slide_id: str) -> HeroSlide | None:
        """Delete a slide, returning the removed record."""

    @abstractmethod
    async def set_order(self, slide_id: str, order: int) -> bool:
        """Set a slide's display order. Returns False if it does not exist."""


class AdminRepository(ABC):
    """Persistence for admin accounts."""

    @abstractmethod
    async def get_by_email(self, email: str) -> AdminUser | None:
        """Get admin by email."""

    @abstractmethod
    async def add(self, admin: AdminUser) -> AdminUser:
        """Persist a new admin."""


class CatalogStore(ABC):
    """Handle bundling every repository behind one injected object."""

    categories: CategoryRepository
    products: ProductRepository
    hero_slides: HeroSlideRepository
    admins: AdminRepository

    @abstractmethod
    async def ping(self) -> bool:
        """Check that the backing store is reachable."""
