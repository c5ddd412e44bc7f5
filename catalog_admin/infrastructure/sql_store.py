"""SQLAlchemy-backed catalog store.

Each repository wraps the request's ``AsyncSession``. Writes flush so
that constraint violations surface inside the call; the session owner
commits or rolls back.
"""

from typing import Any

from sqlalchemy import and_, func, select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_admin.domain.entities import (
    AdminUser,
    Category,
    CategoryStatus,
    HeroSlide,
    Product,
    Subcategory,
)
from catalog_admin.domain.exceptions import ConflictError
from catalog_admin.infrastructure.models import (
    AdminModel,
    CategoryModel,
    HeroSlideModel,
    ProductModel,
    SubcategoryModel,
)
from catalog_admin.infrastructure.repositories import (
    AdminRepository,
    CatalogStore,
    CategoryRepository,
    HeroSlideRepository,
    ProductRepository,
)


class SqlCategoryRepository(CategoryRepository):
    """Category repository over an async session."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def list_all(self) -> list[Category]:
        result = await self.session.execute(
            select(CategoryModel).order_by(CategoryModel.name, CategoryModel.created_at)
        )
        return [model.to_entity() for model in result.scalars().all()]

    async def get(self, category_id: str) -> Category | None:
        model = await self.session.get(CategoryModel, category_id)
        return model.to_entity() if model else None

    async def add(self, category: Category) -> Category:
        model = CategoryModel(
            id=category.id,
            name=category.name,
            description=category.description,
            product_count=category.product_count,
            status=category.status.value,
            subcategories=[
                SubcategoryModel(id=sub.id, name=sub.name, position=i)
                for i, sub in enumerate(category.subcategories)
            ],
        )
        self.session.add(model)
        await self._flush()
        return model.to_entity()

    async def update(self, category_id: str, changes: dict[str, Any]) -> Category | None:
        model = await self.session.get(CategoryModel, category_id)
        if model is None:
            return None

        for key, value in changes.items():
            if isinstance(value, CategoryStatus):
                value = value.value
            setattr(model, key, value)

        await self._flush()
        return model.to_entity()

    async def delete(self, category_id: str) -> Category | None:
        model = await self.session.get(CategoryModel, category_id)
        if model is None:
            return None

        category = model.to_entity()
        await self.session.delete(model)
        await self.session.flush()
        return category

    async def add_subcategory(
        self, category_id: str, subcategory: Subcategory
    ) -> Category | None:
        model = await self.session.get(CategoryModel, category_id)
        if model is None:
            return None

        position = max((sub.position for sub in model.subcategories), default=-1) + 1
        model.subcategories.append(
            SubcategoryModel(id=subcategory.id, name=subcategory.name, position=position)
        )
        await self._flush()
        return model.to_entity()

    async def remove_subcategory(
        self, category_id: str, subcategory_id: str
    ) -> Category | None:
        model = await self.session.get(CategoryModel, category_id)
        if model is None:
            return None

        for sub in list(model.subcategories):
            if sub.id == subcategory_id:
                model.subcategories.remove(sub)

        await self.session.flush()
        return model.to_entity()

    async def _flush(self) -> None:
        """Flush, translating the subcategory unique constraint."""
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise ConflictError("Subcategory already exists", details=str(e.orig)) from e


class SqlProductRepository(ProductRepository):
    """Product repository over an async session.

    Reads join ``categories`` with an outer join so products whose
    category was deleted are still returned, with no category attached.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    def _joined(self) -> Any:
        return select(ProductModel, CategoryModel.name).outerjoin(
            CategoryModel, CategoryModel.id == ProductModel.category_id
        )

    async def add(self, product: Product) -> Product:
        model = ProductModel.from_entity(product)
        self.session.add(model)
        await self.session.flush()
        return model.to_entity()

    async def replace(self, product: Product) -> Product | None:
        model = await self.session.get(ProductModel, product.id)
        if model is None:
            return None

        model.apply(product)
        model.image_url = product.image_url
        await self.session.flush()
        return model.to_entity()

    async def get(self, product_id: str, with_category: bool = True) -> Product | None:
        if not with_category:
            model = await self.session.get(ProductModel, product_id)
            return model.to_entity() if model else None

        result = await self.session.execute(
            self._joined().where(ProductModel.id == product_id)
        )
        row = result.first()
        if row is None:
            return None
        return row[0].to_entity(category_name=row[1])

    async def find_all(
        self,
        display_in_latest: bool | None = None,
        display_in_best_selling: bool | None = None,
    ) -> list[Product]:
        query = self._joined()

        conditions = []
        if display_in_latest is not None:
            conditions.append(ProductModel.display_in_latest == display_in_latest)
        if display_in_best_selling is not None:
            conditions.append(ProductModel.display_in_best_selling == display_in_best_selling)
        if conditions:
            query = query.where(and_(*conditions))

        query = query.order_by(ProductModel.created_at.desc())
        result = await self.session.execute(query)
        return [row[0].to_entity(category_name=row[1]) for row in result.all()]

    async def list_by_category(
        self,
        category_id: str,
        exclude_id: str | None = None,
        limit: int | None = None,
    ) -> list[Product]:
        query = self._joined().where(ProductModel.category_id == category_id)
        if exclude_id is not None:
            query = query.where(ProductModel.id != exclude_id)
        query = query.order_by(ProductModel.created_at.desc())
        if limit is not None:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return [row[0].to_entity(category_name=row[1]) for row in result.all()]

    async def delete(self, product_id: str) -> Product | None:
        model = await self.session.get(ProductModel, product_id)
        if model is None:
            return None

        product = model.to_entity()
        await self.session.delete(model)
        await self.session.flush()
        return product


class SqlHeroSlideRepository(HeroSlideRepository):
    """Hero slide repository over an async session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_ordered(self) -> list[HeroSlide]:
        result = await self.session.execute(
            select(HeroSlideModel).order_by(HeroSlideModel.order, HeroSlideModel.created_at)
        )
        return [model.to_entity() for model in result.scalars().all()]

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(HeroSlideModel.id)))
        return result.scalar_one()

    async def add(self, slide: HeroSlide) -> HeroSlide:
        model = HeroSlideModel.from_entity(slide)
        self.session.add(model)
        await self.session.flush()
        return model.to_entity()

    async def get(self, slide_id: str) -> HeroSlide | None:
        model = await self.session.get(HeroSlideModel, slide_id)
        return model.to_entity() if model else None

    async def update(self, slide: HeroSlide) -> HeroSlide | None:
        model = await self.session.get(HeroSlideModel, slide.id)
        if model is None:
            return None

        model.title = slide.title
        model.subtitle = slide.subtitle
        model.link = slide.link
        model.active = slide.active
        model.image_url = slide.image_url
        await self.session.flush()
        return model.to_entity()

    async def delete(self, slide_id: str) -> HeroSlide | None:
        model = await self.session.get(HeroSlideModel, slide_id)
        if model is None:
            return None

        slide = model.to_entity()
        await self.session.delete(model)
        await self.session.flush()
        return slide

    async def set_order(self, slide_id: str, order: int) -> bool:
        model = await self.session.get(HeroSlideModel, slide_id)
        if model is None:
            return False
        model.order = order
        await self.session.flush()
        return True


class SqlAdminRepository(AdminRepository):
    """Admin repository over an async session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_email(self, email: str) -> AdminUser | None:
        result = await self.session.execute(
            select(AdminModel).where(AdminModel.email == email)
        )
        model = result.scalar_one_or_none()
        return model.to_entity() if model else None

    async def add(self, admin: AdminUser) -> AdminUser:
        model = AdminModel(id=admin.id, email=admin.email, password_hash=admin.password_hash)
        self.session.add(model)
        await self.session.flush()
        return model.to_entity()


class SqlCatalogStore(CatalogStore):
    """Catalog store bound to one database session.

    Example usage:
        async with database.session() as session:
            store = SqlCatalogStore(session)
            product = await store.products.get(product_id)
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize store with database session.

        Args:
            session: Async SQLAlchemy session shared by all repositories.
        """
        self.session = session
        self.categories = SqlCategoryRepository(session)
        self.products = SqlProductRepository(session)
        self.hero_slides = SqlHeroSlideRepository(session)
        self.admins = SqlAdminRepository(session)

    async def ping(self) -> bool:
        await self.session.execute(text("SELECT 1"))
        return True
