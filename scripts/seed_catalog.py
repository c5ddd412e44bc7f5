#!/usr/bin/env python3
"""Seed catalog script.

Creates the database tables, the default admin and, optionally, a
small demo taxonomy with a few products.

Usage:
    python scripts/seed_catalog.py
    python scripts/seed_catalog.py --with-demo-data
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from catalog_admin.application import AuthService, CatalogService, CategoryService
from catalog_admin.infrastructure.config import settings
from catalog_admin.infrastructure.database import Database
from catalog_admin.infrastructure.media import CloudinaryMediaResolver
from catalog_admin.infrastructure.sql_store import SqlCatalogStore

DEMO_CATEGORIES = {
    "vegetables": ["root", "leafy"],
    "fruits": ["citrus", "berries"],
}

DEMO_PRODUCTS = [
    {
        "name": "Carrot",
        "category": "vegetables",
        "subcategory": "root",
        "price": "40",
        "costPrice": "25",
        "unit": "kg",
        "stock": "120",
        "customQuantityOptions": '[{"amount":"500","unit":"g","price":22,"stock":50}]',
        "displayInLatest": "true",
        "displayInBestSelling": "true",
    },
    {
        "name": "Spinach",
        "category": "vegetables",
        "subcategory": "leafy",
        "price": "30",
        "unit": "bunch",
        "stock": "40",
        "displayInLatest": "true",
    },
    {
        "name": "Orange",
        "category": "fruits",
        "subcategory": "citrus",
        "price": "80",
        "stock": "60",
        "onSale": "true",
        "salePrice": "70",
        "displayInBestSelling": "true",
    },
]


async def seed_demo_data(store: SqlCatalogStore) -> dict:
    """Create demo categories and products.

    Returns:
        Seeding result.
    """
    categories = CategoryService(store)
    media = CloudinaryMediaResolver.from_settings(settings)
    products = CatalogService(store, media, policy=settings.numeric_coercion)

    existing = {c.name: c.id for c in await categories.list_categories()}
    created_categories = 0
    for name, subcategories in DEMO_CATEGORIES.items():
        if name not in existing:
            category = await categories.create_category(name, subcategories=subcategories)
            existing[name] = category.id
            created_categories += 1

    for raw in DEMO_PRODUCTS:
        await products.create_product({**raw, "category": existing[raw["category"]]})

    await media.close()
    return {"categories_created": created_categories, "products_created": len(DEMO_PRODUCTS)}


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed the catalog database",
    )
    parser.add_argument(
        "--with-demo-data",
        action="store_true",
        help="Also create demo categories and products",
    )

    args = parser.parse_args()

    print("=" * 60)
    print("Catalog Admin Seeder")
    print("=" * 60)

    database = Database(settings.database_url)

    print("Creating database tables...")
    await database.create_tables()
    print("Tables ready.")
    print()

    try:
        async with database.session() as session:
            store = SqlCatalogStore(session)

            admin = await AuthService(store, settings).ensure_default_admin()
            if admin:
                print(f"  ✓ Created admin: {admin.email}")
            else:
                print("  ✓ Admin already exists")

            if args.with_demo_data:
                result = await seed_demo_data(store)
                print(f"  ✓ Categories: {result['categories_created']}")
                print(f"  ✓ Products: {result['products_created']}")
    finally:
        await database.dispose()

    print("=" * 60)
    print("Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
