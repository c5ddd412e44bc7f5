"""Tests for the SQLAlchemy catalog store, run against SQLite."""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from catalog_admin.domain import (
    Category,
    ConflictError,
    HeroSlide,
    Product,
    QuantityOption,
    Subcategory,
)
from catalog_admin.domain.entities import AdminUser
from catalog_admin.domain.exceptions import InternalError
from catalog_admin.infrastructure.database import Database
from catalog_admin.infrastructure.models import CategoryModel
from catalog_admin.infrastructure.sql_store import SqlCatalogStore

BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def database(tmp_path):
    """Create a file-backed SQLite database with all tables."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")
    await db.create_tables()
    yield db
    await db.dispose()


def make_product(category_id: str, name: str, age_minutes: int = 0, **fields) -> Product:
    """Create a product entity with a fixed creation time."""
    return Product(
        name=name,
        category_id=category_id,
        price=10,
        created_at=BASE_TIME - timedelta(minutes=age_minutes),
        **fields,
    )


class TestSqlCategories:
    """Tests for SQL category persistence."""

    @pytest.mark.asyncio
    async def test_add_and_list(self, database: Database) -> None:
        """Categories round-trip with ordered subcategories, sorted by name."""
        async with database.session() as session:
            store = SqlCatalogStore(session)
            await store.categories.add(
                Category(name="vegetables", subcategories=[Subcategory("root"), Subcategory("leafy")])
            )
            await store.categories.add(Category(name="dairy"))

        async with database.session() as session:
            categories = await SqlCatalogStore(session).categories.list_all()

        assert [c.name for c in categories] == ["dairy", "vegetables"]
        assert [s.name for s in categories[1].subcategories] == ["root", "leafy"]

    @pytest.mark.asyncio
    async def test_unique_constraint_raises_conflict(self, database: Database) -> None:
        """A duplicate subcategory name hits the unique constraint."""
        async with database.session() as session:
            category = await SqlCatalogStore(session).categories.add(
                Category(name="vegetables", subcategories=[Subcategory("root")])
            )

        with pytest.raises(ConflictError):
            async with database.session() as session:
                await SqlCatalogStore(session).categories.add_subcategory(
                    category.id, Subcategory("root")
                )

        async with database.session() as session:
            stored = await SqlCatalogStore(session).categories.get(category.id)
        assert [s.name for s in stored.subcategories] == ["root"]

    @pytest.mark.asyncio
    async def test_remove_subcategory(self, database: Database) -> None:
        """Removed subcategories are deleted."""
        async with database.session() as session:
            category = await SqlCatalogStore(session).categories.add(
                Category(name="vegetables", subcategories=[Subcategory("root"), Subcategory("leafy")])
            )

        async with database.session() as session:
            updated = await SqlCatalogStore(session).categories.remove_subcategory(
                category.id, category.subcategories[0].id
            )
        assert [s.name for s in updated.subcategories] == ["leafy"]


class TestSqlProducts:
    """Tests for SQL product persistence and joins."""

    @pytest.mark.asyncio
    async def test_join_and_dangling_category(self, database: Database) -> None:
        """Products join their category name and read null once it is deleted."""
        async with database.session() as session:
            store = SqlCatalogStore(session)
            category = await store.categories.add(Category(name="vegetables"))
            product = await store.products.add(
                make_product(
                    category.id,
                    "Carrot",
                    custom_quantity_options=[QuantityOption("500", "g", 22.0, 5)],
                )
            )

        async with database.session() as session:
            fetched = await SqlCatalogStore(session).products.get(product.id)
        assert fetched.category.name == "vegetables"
        assert fetched.custom_quantity_options == [QuantityOption("500", "g", 22.0, 5)]

        async with database.session() as session:
            await SqlCatalogStore(session).categories.delete(category.id)

        async with database.session() as session:
            fetched = await SqlCatalogStore(session).products.get(product.id)
        assert fetched is not None
        assert fetched.category is None

    @pytest.mark.asyncio
    async def test_flag_filters_newest_first(self, database: Database) -> None:
        """Display flag filters return newest first."""
        async with database.session() as session:
            store = SqlCatalogStore(session)
            category = await store.categories.add(Category(name="vegetables"))
            old = await store.products.add(
                make_product(category.id, "old", 30, display_in_best_selling=True)
            )
            await store.products.add(make_product(category.id, "plain", 20))
            new = await store.products.add(
                make_product(category.id, "new", 10, display_in_best_selling=True)
            )

        async with database.session() as session:
            products = await SqlCatalogStore(session).products.find_all(
                display_in_best_selling=True
            )
        assert [p.id for p in products] == [new.id, old.id]

    @pytest.mark.asyncio
    async def test_list_by_category_excludes_and_limits(self, database: Database) -> None:
        """Category listing honors exclusion and limit."""
        async with database.session() as session:
            store = SqlCatalogStore(session)
            category = await store.categories.add(Category(name="vegetables"))
            subject = await store.products.add(make_product(category.id, "subject", 0))
            for i in range(5):
                await store.products.add(make_product(category.id, f"veg-{i}", 10 + i))

        async with database.session() as session:
            similar = await SqlCatalogStore(session).products.list_by_category(
                category.id, exclude_id=subject.id, limit=4
            )
        assert [p.name for p in similar] == ["veg-0", "veg-1", "veg-2", "veg-3"]

    @pytest.mark.asyncio
    async def test_replace_keeps_created_at(self, database: Database) -> None:
        """Replacing a product overwrites fields but not the creation time."""
        async with database.session() as session:
            store = SqlCatalogStore(session)
            category = await store.categories.add(Category(name="vegetables"))
            product = await store.products.add(make_product(category.id, "Carrot", 60))

        replacement = make_product(category.id, "Baby Carrot", 0, image_url="https://x/y.jpg")
        replacement.id = product.id
        async with database.session() as session:
            await SqlCatalogStore(session).products.replace(replacement)

        async with database.session() as session:
            fetched = await SqlCatalogStore(session).products.get(product.id)
        assert fetched.name == "Baby Carrot"
        assert fetched.image_url == "https://x/y.jpg"
        assert fetched.created_at == product.created_at
        assert fetched.created_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_prices_keep_full_precision(self, database: Database) -> None:
        """Prices read back exactly as written, like quantity option prices."""
        saffron = make_product("", "Saffron", cost_price=1e12, sale_price=0.125)
        saffron.price = 2.555
        async with database.session() as session:
            store = SqlCatalogStore(session)
            category = await store.categories.add(Category(name="spices"))
            saffron.category_id = category.id
            product = await store.products.add(saffron)

        async with database.session() as session:
            fetched = await SqlCatalogStore(session).products.get(product.id)
        assert fetched.price == 2.555
        assert fetched.cost_price == 1e12
        assert fetched.sale_price == 0.125


class TestDatabaseSession:
    """Tests for session commit handling."""

    @pytest.mark.asyncio
    async def test_commit_failure_raises_internal_error(self, database: Database) -> None:
        """A failed commit rolls back and surfaces as InternalError."""
        with pytest.raises(InternalError):
            async with database.session() as session:
                session.add(CategoryModel(id="broken", name=None))

        async with database.session() as session:
            assert await SqlCatalogStore(session).categories.list_all() == []


class TestSqlHeroSlidesAndAdmins:
    """Tests for SQL hero slide and admin persistence."""

    @pytest.mark.asyncio
    async def test_slide_order(self, database: Database) -> None:
        """Slides list by their order column."""
        async with database.session() as session:
            store = SqlCatalogStore(session)
            first = await store.hero_slides.add(HeroSlide(title="A", image_url="a", order=1))
            second = await store.hero_slides.add(HeroSlide(title="B", image_url="b", order=2))
            assert await store.hero_slides.count() == 2
            await store.hero_slides.set_order(first.id, 3)

        async with database.session() as session:
            slides = await SqlCatalogStore(session).hero_slides.list_ordered()
        assert [s.id for s in slides] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_admin_lookup(self, database: Database) -> None:
        """Admins are found by email."""
        async with database.session() as session:
            store = SqlCatalogStore(session)
            admin = await store.admins.add(AdminUser(email="admin@example.com", password_hash="x"))
            assert await store.ping() is True

        async with database.session() as session:
            found = await SqlCatalogStore(session).admins.get_by_email("admin@example.com")
        assert found.id == admin.id
