"""Category API endpoints.

Category payloads are returned bare (no success envelope); deletes
answer 204 with no body.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from catalog_admin.api.dependencies import get_category_service, require_admin
from catalog_admin.api.schemas import (
    CategoryCreateRequest,
    CategorySchema,
    CategoryUpdateRequest,
    ErrorResponse,
    SubcategoryCreateRequest,
    SubcategorySchema,
)
from catalog_admin.application import CategoryService
from catalog_admin.domain.entities import Category

router = APIRouter(prefix="/api/categories", tags=["Categories"])

ServiceDep = Annotated[CategoryService, Depends(get_category_service)]

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input or ID"},
    404: {"model": ErrorResponse, "description": "Category not found"},
}


# ============================================================================
# Converters
# ============================================================================


def category_to_response(category: Category) -> CategorySchema:
    """Convert Category entity to response schema."""
    return CategorySchema(
        id=category.id,
        name=category.name,
        description=category.description,
        subcategories=[
            SubcategorySchema(id=sub.id, name=sub.name) for sub in category.subcategories
        ],
        product_count=category.product_count,
        status=category.status,
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.get("", response_model=list[CategorySchema])
async def list_categories(service: ServiceDep) -> list[CategorySchema]:
    """List all categories ordered by name."""
    return [category_to_response(c) for c in await service.list_categories()]


@router.post(
    "",
    response_model=CategorySchema,
    status_code=status.HTTP_201_CREATED,
    responses={400: ERROR_RESPONSES[400]},
    dependencies=[Depends(require_admin)],
)
async def create_category(body: CategoryCreateRequest, service: ServiceDep) -> CategorySchema:
    """Create a category with optional subcategories."""
    category = await service.create_category(
        body.name,
        description=body.description,
        subcategories=body.subcategories,
    )
    return category_to_response(category)


@router.put(
    "/{category_id}",
    response_model=CategorySchema,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(require_admin)],
)
async def update_category(
    category_id: str,
    body: CategoryUpdateRequest,
    service: ServiceDep,
) -> CategorySchema:
    """Update the fields present in the request body."""
    category = await service.update_category(
        category_id, body.model_dump(exclude_unset=True)
    )
    return category_to_response(category)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(require_admin)],
)
async def delete_category(category_id: str, service: ServiceDep) -> Response:
    """Delete a category. Products referencing it are left in place."""
    await service.delete_category(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{category_id}/subcategories",
    response_model=CategorySchema,
    status_code=status.HTTP_201_CREATED,
    responses={
        **ERROR_RESPONSES,
        409: {"model": ErrorResponse, "description": "Subcategory already exists"},
    },
    dependencies=[Depends(require_admin)],
)
async def add_subcategory(
    category_id: str,
    body: SubcategoryCreateRequest,
    service: ServiceDep,
) -> CategorySchema:
    """Append a subcategory and return the updated category."""
    category = await service.add_subcategory(category_id, body.name)
    return category_to_response(category)


@router.delete(
    "/{category_id}/subcategories/{subcategory_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(require_admin)],
)
async def remove_subcategory(
    category_id: str,
    subcategory_id: str,
    service: ServiceDep,
) -> Response:
    """Remove a subcategory."""
    await service.remove_subcategory(category_id, subcategory_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
