"""Application layer module.

Services orchestrating the catalog use cases on top of the store and
the media host.
"""

from catalog_admin.application.auth_service import AuthService
from catalog_admin.application.catalog_service import SIMILAR_PRODUCTS_LIMIT, CatalogService
from catalog_admin.application.category_service import CategoryService
from catalog_admin.application.hero_slide_service import HeroSlideService

__all__ = [
    "AuthService",
    "CatalogService",
    "CategoryService",
    "HeroSlideService",
    "SIMILAR_PRODUCTS_LIMIT",
]
