"""Product API endpoints.

Writes accept a multipart form (with an optional ``image`` file) or a
JSON body.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from catalog_admin.api.dependencies import Payload, get_catalog_service, require_admin
from catalog_admin.api.schemas import (
    CategoryRefSchema,
    ErrorResponse,
    MessageResponse,
    ProductListResponse,
    ProductMutationResponse,
    ProductSchema,
    QuantityOptionSchema,
)
from catalog_admin.application import CatalogService
from catalog_admin.domain.entities import Product

router = APIRouter(prefix="/api/products", tags=["Products"])

ServiceDep = Annotated[CatalogService, Depends(get_catalog_service)]

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input or product ID"},
    404: {"model": ErrorResponse, "description": "Product not found"},
}


# ============================================================================
# Converters
# ============================================================================


def product_to_response(product: Product, joined: bool = True) -> ProductSchema:
    """Convert Product entity to response schema.

    Args:
        product: Product entity.
        joined: Whether the category was joined on read. Write responses
            carry the bare category ID instead.
    """
    if joined:
        category = (
            CategoryRefSchema(id=product.category.id, name=product.category.name)
            if product.category
            else None
        )
    else:
        category = product.category_id

    return ProductSchema(
        id=product.id,
        name=product.name,
        description=product.description,
        category=category,
        subcategory=product.subcategory,
        price=product.price,
        cost_price=product.cost_price,
        unit=product.unit,
        default_quantity=product.default_quantity,
        custom_quantity_options=[
            QuantityOptionSchema(
                amount=option.amount,
                unit=option.unit,
                price=option.price,
                stock=option.stock,
            )
            for option in product.custom_quantity_options
        ],
        stock=product.stock,
        image_url=product.image_url,
        display_in_latest=product.display_in_latest,
        display_in_best_selling=product.display_in_best_selling,
        on_sale=product.on_sale,
        sale_price=product.sale_price,
        created_at=product.created_at,
    )


def products_to_response(products: list[Product]) -> ProductListResponse:
    return ProductListResponse(products=[product_to_response(p) for p in products])


# ============================================================================
# Read Endpoints
# ============================================================================


@router.get("", response_model=ProductListResponse)
async def list_products(service: ServiceDep) -> ProductListResponse:
    """List all products, newest first."""
    return products_to_response(await service.list_all())


@router.get("/latest", response_model=ProductListResponse)
async def list_latest_products(service: ServiceDep) -> ProductListResponse:
    """List products shown in the "latest" section."""
    return products_to_response(await service.list_latest())


@router.get("/bestselling", response_model=ProductListResponse)
async def list_best_selling_products(service: ServiceDep) -> ProductListResponse:
    """List products shown in the "best selling" section."""
    return products_to_response(await service.list_best_selling())


@router.get(
    "/similar/{product_id}",
    response_model=list[ProductSchema],
    responses=ERROR_RESPONSES,
)
async def list_similar_products(product_id: str, service: ServiceDep) -> list[ProductSchema]:
    """List up to four other products from the same category."""
    return [product_to_response(p) for p in await service.find_similar(product_id)]


@router.get("/{product_id}", response_model=ProductSchema, responses=ERROR_RESPONSES)
async def get_product(product_id: str, service: ServiceDep) -> ProductSchema:
    """Get a single product with its category."""
    return product_to_response(await service.get_by_id(product_id))


# ============================================================================
# Write Endpoints
# ============================================================================


@router.post(
    "",
    response_model=ProductMutationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: ERROR_RESPONSES[400],
        500: {"model": ErrorResponse, "description": "Image upload failed"},
    },
    dependencies=[Depends(require_admin)],
)
async def create_product(payload: Payload, service: ServiceDep) -> ProductMutationResponse:
    """Create a product."""
    fields, image = payload
    product = await service.create_product(fields, image)
    return ProductMutationResponse(
        message="Product added successfully",
        product=product_to_response(product, joined=False),
    )


@router.put(
    "/{product_id}",
    response_model=ProductMutationResponse,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(require_admin)],
)
async def update_product(
    product_id: str,
    payload: Payload,
    service: ServiceDep,
) -> ProductMutationResponse:
    """Replace a product's editable fields, and its image if one is sent."""
    fields, image = payload
    product = await service.update_product(product_id, fields, image)
    return ProductMutationResponse(
        message="Product updated successfully",
        product=product_to_response(product, joined=False),
    )


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(require_admin)],
)
async def delete_product(product_id: str, service: ServiceDep) -> MessageResponse:
    """Delete a product."""
    await service.delete_product(product_id)
    return MessageResponse(message="Product deleted")
