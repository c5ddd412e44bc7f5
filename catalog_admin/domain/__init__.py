"""Domain layer module.

Contains catalog entities, input normalization and the error
taxonomy shared by every other layer.
"""

from catalog_admin.domain.entities import (
    AdminUser,
    Category,
    CategoryRef,
    CategoryStatus,
    HeroSlide,
    Product,
    QuantityOption,
    Subcategory,
)
from catalog_admin.domain.exceptions import (
    AuthenticationError,
    CatalogError,
    ConflictError,
    InternalError,
    InvalidIdentifier,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from catalog_admin.domain.normalization import (
    CoercionPolicy,
    coerce_integer,
    coerce_number,
    normalize_name,
    normalize_subcategory,
    parse_bool,
    parse_quantity_options,
    require_number,
    validate_identifier,
)

__all__ = [
    # Entities
    "AdminUser",
    "Category",
    "CategoryRef",
    "CategoryStatus",
    "HeroSlide",
    "Product",
    "QuantityOption",
    "Subcategory",
    # Exceptions
    "AuthenticationError",
    "CatalogError",
    "ConflictError",
    "InternalError",
    "InvalidIdentifier",
    "NotFoundError",
    "UpstreamError",
    "ValidationError",
    # Normalization
    "CoercionPolicy",
    "coerce_integer",
    "coerce_number",
    "normalize_name",
    "normalize_subcategory",
    "parse_bool",
    "parse_quantity_options",
    "require_number",
    "validate_identifier",
]
