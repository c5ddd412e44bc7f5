"""In-memory catalog store.

Dictionary-backed repositories with the same contracts as the SQL
store, including the subcategory uniqueness constraint and the
category join. Records are copied on the way in and out so callers
never share state with the store.
"""

from copy import deepcopy
from itertools import count
from typing import Any

from catalog_admin.domain.entities import (
    AdminUser,
    Category,
    CategoryRef,
    HeroSlide,
    Product,
    Subcategory,
)
from catalog_admin.domain.exceptions import ConflictError
from catalog_admin.infrastructure.repositories import (
    AdminRepository,
    CatalogStore,
    CategoryRepository,
    HeroSlideRepository,
    ProductRepository,
)


class InMemoryCategoryRepository(CategoryRepository):
    """In-memory repository for categories."""

    def __init__(self) -> None:
        self._categories: dict[str, Category] = {}

    async def list_all(self) -> list[Category]:
        return sorted(
            (deepcopy(c) for c in self._categories.values()),
            key=lambda c: c.name,
        )

    async def get(self, category_id: str) -> Category | None:
        category = self._categories.get(category_id)
        return deepcopy(category) if category else None

    async def add(self, category: Category) -> Category:
        self._categories[category.id] = deepcopy(category)
        return deepcopy(category)

    async def update(self, category_id: str, changes: dict[str, Any]) -> Category | None:
        category = self._categories.get(category_id)
        if category is None:
            return None
        for key, value in changes.items():
            setattr(category, key, value)
        return deepcopy(category)

    async def delete(self, category_id: str) -> Category | None:
        return self._categories.pop(category_id, None)

    async def add_subcategory(
        self, category_id: str, subcategory: Subcategory
    ) -> Category | None:
        category = self._categories.get(category_id)
        if category is None:
            return None
        if category.has_subcategory(subcategory.name):
            raise ConflictError("Subcategory already exists")
        category.subcategories.append(deepcopy(subcategory))
        return deepcopy(category)

    async def remove_subcategory(
        self, category_id: str, subcategory_id: str
    ) -> Category | None:
        category = self._categories.get(category_id)
        if category is None:
            return None
        category.subcategories = [
            sub for sub in category.subcategories if sub.id != subcategory_id
        ]
        return deepcopy(category)

    def name_of(self, category_id: str) -> str | None:
        """Look up a category name for joins."""
        category = self._categories.get(category_id)
        return category.name if category else None


class InMemoryProductRepository(ProductRepository):
    """In-memory repository for products.

    Joins read the category repository directly, mirroring the SQL
    outer join.
    """

    def __init__(self, categories: InMemoryCategoryRepository) -> None:
        self._categories = categories
        self._products: dict[str, Product] = {}
        self._sequence: dict[str, int] = {}
        self._counter = count()

    def _joined(self, product: Product) -> Product:
        joined = deepcopy(product)
        name = self._categories.name_of(product.category_id)
        joined.category = CategoryRef(id=product.category_id, name=name) if name else None
        return joined

    def _newest_first(self, products: list[Product]) -> list[Product]:
        return sorted(
            products,
            key=lambda p: (p.created_at, self._sequence[p.id]),
            reverse=True,
        )

    async def add(self, product: Product) -> Product:
        stored = deepcopy(product)
        stored.category = None
        self._products[product.id] = stored
        self._sequence[product.id] = next(self._counter)
        return deepcopy(stored)

    async def replace(self, product: Product) -> Product | None:
        existing = self._products.get(product.id)
        if existing is None:
            return None
        stored = deepcopy(product)
        stored.category = None
        stored.created_at = existing.created_at
        self._products[product.id] = stored
        return deepcopy(stored)

    async def get(self, product_id: str, with_category: bool = True) -> Product | None:
        product = self._products.get(product_id)
        if product is None:
            return None
        return self._joined(product) if with_category else deepcopy(product)

    async def find_all(
        self,
        display_in_latest: bool | None = None,
        display_in_best_selling: bool | None = None,
    ) -> list[Product]:
        products = [
            p
            for p in self._products.values()
            if (display_in_latest is None or p.display_in_latest == display_in_latest)
            and (
                display_in_best_selling is None
                or p.display_in_best_selling == display_in_best_selling
            )
        ]
        return [self._joined(p) for p in self._newest_first(products)]

    async def list_by_category(
        self,
        category_id: str,
        exclude_id: str | None = None,
        limit: int | None = None,
    ) -> list[Product]:
        products = [
            p
            for p in self._products.values()
            if p.category_id == category_id and p.id != exclude_id
        ]
        products = self._newest_first(products)
        if limit is not None:
            products = products[:limit]
        return [self._joined(p) for p in products]

    async def delete(self, product_id: str) -> Product | None:
        self._sequence.pop(product_id, None)
        return self._products.pop(product_id, None)


class InMemoryHeroSlideRepository(HeroSlideRepository):
    """In-memory repository for hero slides."""

    def __init__(self) -> None:
        self._slides: dict[str, HeroSlide] = {}

    async def list_ordered(self) -> list[HeroSlide]:
        return sorted(
            (deepcopy(s) for s in self._slides.values()),
            key=lambda s: (s.order, s.created_at),
        )

    async def count(self) -> int:
        return len(self._slides)

    async def add(self, slide: HeroSlide) -> HeroSlide:
        self._slides[slide.id] = deepcopy(slide)
        return deepcopy(slide)

    async def get(self, slide_id: str) -> HeroSlide | None:
        slide = self._slides.get(slide_id)
        return deepcopy(slide) if slide else None

    async def update(self, slide: HeroSlide) -> HeroSlide | None:
        if slide.id not in self._slides:
            return None
        self._slides[slide.id] = deepcopy(slide)
        return deepcopy(slide)

    async def delete(self, slide_id: str) -> HeroSlide | None:
        return self._slides.pop(slide_id, None)

    async def set_order(self, slide_id: str, order: int) -> bool:
        slide = self._slides.get(slide_id)
        if slide is None:
            return False
        slide.order = order
        return True


class InMemoryAdminRepository(AdminRepository):
    """In-memory repository for admins."""

    def __init__(self) -> None:
        self._admins: dict[str, AdminUser] = {}

    async def get_by_email(self, email: str) -> AdminUser | None:
        admin = self._admins.get(email)
        return deepcopy(admin) if admin else None

    async def add(self, admin: AdminUser) -> AdminUser:
        if admin.email in self._admins:
            raise ConflictError("Admin already exists")
        self._admins[admin.email] = deepcopy(admin)
        return deepcopy(admin)


class InMemoryCatalogStore(CatalogStore):
    """Catalog store held entirely in process memory."""

    def __init__(self) -> None:
        self.categories = InMemoryCategoryRepository()
        self.products = InMemoryProductRepository(self.categories)
        self.hero_slides = InMemoryHeroSlideRepository()
        self.admins = InMemoryAdminRepository()

    async def ping(self) -> bool:
        return True
