"""
Category Endpoints

Category admin form operations.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from catalog_admin.database.repository import CatalogRepository
from catalog_admin.serving.api.deps import get_repository
from catalog_admin.serving.api.schemas import CategoryPayload, CategoryResponse

router = APIRouter()


@router.get("", response_model=List[CategoryResponse])
async def list_categories(
    repo: CatalogRepository = Depends(get_repository),
) -> List[CategoryResponse]:
    """List all categories."""
    return [CategoryResponse.model_validate(c) for c in await repo.list_categories()]


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(
    category_id: int,
    repo: CatalogRepository = Depends(get_repository),
) -> CategoryResponse:
    return CategoryResponse.model_validate(await repo.get_category(category_id))


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: CategoryPayload,
    repo: CatalogRepository = Depends(get_repository),
) -> CategoryResponse:
    return CategoryResponse.model_validate(await repo.create_category(payload.model_dump()))


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: int,
    payload: CategoryPayload,
    repo: CatalogRepository = Depends(get_repository),
) -> CategoryResponse:
    return CategoryResponse.model_validate(await repo.update_category(category_id, payload.model_dump()))


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: int,
    repo: CatalogRepository = Depends(get_repository),
) -> Response:
    """Delete a category. Products in it are left untouched."""
    await repo.delete_category(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
