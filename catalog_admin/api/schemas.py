"""API schemas for the catalog admin API.

Pydantic models for request/response validation and serialization.
Fields are declared in snake_case and exposed in camelCase.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from catalog_admin.domain.entities import CategoryStatus


class CamelModel(BaseModel):
    """Base model serialized with camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    success: bool = Field(default=False, description="Always false for errors")
    error: str = Field(..., description="Human-readable error message")
    details: Any | None = Field(default=None, description="Diagnostic details (debug only)")


class MessageResponse(BaseModel):
    """Acknowledgement without a payload."""

    success: bool = True
    message: str


# ============================================================================
# Category Schemas
# ============================================================================


class SubcategorySchema(CamelModel):
    """Subcategory representation."""

    id: str
    name: str


class CategorySchema(CamelModel):
    """Category representation."""

    id: str
    name: str
    description: str = ""
    subcategories: list[SubcategorySchema] = Field(default_factory=list)
    product_count: int = 0
    status: CategoryStatus = CategoryStatus.ACTIVE


class CategoryCreateRequest(CamelModel):
    """Request to create a category.

    Subcategories may be plain names or ``{"name": ...}`` objects.
    """

    name: str | None = None
    description: str | None = None
    subcategories: list[str | dict[str, Any]] | None = None


class CategoryUpdateRequest(CamelModel):
    """Partial category update; only fields that are sent are applied."""

    name: str | None = None
    description: str | None = None
    status: str | None = None


class SubcategoryCreateRequest(CamelModel):
    """Request to add a subcategory."""

    name: str | None = None


# ============================================================================
# Product Schemas
# ============================================================================


class QuantityOptionSchema(CamelModel):
    """Purchasable pack size."""

    amount: str
    unit: str
    price: float
    stock: int = 0


class CategoryRefSchema(CamelModel):
    """Category joined into a product on read."""

    id: str
    name: str


class ProductSchema(CamelModel):
    """Product representation.

    ``category`` is the joined ``{id, name}`` object on reads, ``null``
    when the category no longer exists, and the bare category ID in
    write responses.
    """

    id: str
    name: str
    description: str | None = None
    category: CategoryRefSchema | str | None = None
    subcategory: str | None = None
    price: float
    cost_price: float = 0
    unit: str = "kg"
    default_quantity: str = "1"
    custom_quantity_options: list[QuantityOptionSchema] = Field(default_factory=list)
    stock: int = 0
    image_url: str | None = None
    display_in_latest: bool = False
    display_in_best_selling: bool = False
    on_sale: bool = False
    sale_price: float = 0
    created_at: datetime


class ProductListResponse(BaseModel):
    """Product list envelope."""

    success: bool = True
    products: list[ProductSchema]


class ProductMutationResponse(BaseModel):
    """Product write envelope."""

    success: bool = True
    message: str
    product: ProductSchema


# ============================================================================
# Hero Slide Schemas
# ============================================================================


class HeroSlideSchema(CamelModel):
    """Hero slide representation."""

    id: str
    title: str
    subtitle: str | None = None
    image_url: str
    link: str | None = None
    active: bool = True
    order: int = 0
    created_at: datetime
    updated_at: datetime


class HeroSlideListResponse(BaseModel):
    """Hero slide list envelope."""

    success: bool = True
    slides: list[HeroSlideSchema]


class HeroSlideResponse(BaseModel):
    """Single hero slide envelope."""

    success: bool = True
    slide: HeroSlideSchema


class ReorderRequest(CamelModel):
    """Slide IDs in their new display order."""

    order_list: list[Any] = Field(..., description="Slide IDs, first shown first")


# ============================================================================
# Auth & Media Schemas
# ============================================================================


class LoginRequest(BaseModel):
    """Admin credentials."""

    email: str | None = None
    password: str | None = None


class TokenResponse(BaseModel):
    """Issued access token."""

    token: str


class UploadResponse(BaseModel):
    """Result of a standalone image upload."""

    success: bool = True
    image_url: str = Field(..., serialization_alias="imageUrl")
    public_id: str
