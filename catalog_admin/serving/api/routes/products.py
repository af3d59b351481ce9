"""
Product Endpoints

Product admin form operations. Rendering goes through the catalog view
endpoints.
"""

from fastapi import APIRouter, Depends, Response, status

from catalog_admin.database.repository import CatalogRepository
from catalog_admin.serving.api.deps import get_repository
from catalog_admin.serving.api.schemas import ProductPayload, ProductResponse

router = APIRouter()


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int,
    repo: CatalogRepository = Depends(get_repository),
) -> ProductResponse:
    """Get a product for editing."""
    return ProductResponse.model_validate(await repo.get_product(product_id))


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductPayload,
    repo: CatalogRepository = Depends(get_repository),
) -> ProductResponse:
    """
    Create a product.

    The category id is not checked for existence.
    """
    return ProductResponse.model_validate(await repo.create_product(payload.model_dump()))


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    payload: ProductPayload,
    repo: CatalogRepository = Depends(get_repository),
) -> ProductResponse:
    return ProductResponse.model_validate(await repo.update_product(product_id, payload.model_dump()))


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: int,
    repo: CatalogRepository = Depends(get_repository),
) -> Response:
    await repo.delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
