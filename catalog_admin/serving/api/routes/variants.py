"""
Variant and Pricing Endpoints

Variant and pricing admin form operations. Variants are created under a
product, pricing rows under a variant.
"""

from fastapi import APIRouter, Depends, Response, status

from catalog_admin.database.repository import CatalogRepository
from catalog_admin.serving.api.deps import get_repository
from catalog_admin.serving.api.schemas import (
    PricingPayload,
    PricingResponse,
    VariantPayload,
    VariantResponse,
)

router = APIRouter()


# =============================================================================
# VARIANTS
# =============================================================================

@router.post(
    "/products/{product_id}/variants",
    response_model=VariantResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_variant(
    product_id: int,
    payload: VariantPayload,
    repo: CatalogRepository = Depends(get_repository),
) -> VariantResponse:
    return VariantResponse.model_validate(await repo.create_variant(product_id, payload.model_dump()))


@router.get("/variants/{variant_id}", response_model=VariantResponse)
async def get_variant(
    variant_id: int,
    repo: CatalogRepository = Depends(get_repository),
) -> VariantResponse:
    return VariantResponse.model_validate(await repo.get_variant(variant_id))


@router.put("/variants/{variant_id}", response_model=VariantResponse)
async def update_variant(
    variant_id: int,
    payload: VariantPayload,
    repo: CatalogRepository = Depends(get_repository),
) -> VariantResponse:
    return VariantResponse.model_validate(await repo.update_variant(variant_id, payload.model_dump()))


@router.delete("/variants/{variant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_variant(
    variant_id: int,
    repo: CatalogRepository = Depends(get_repository),
) -> Response:
    await repo.delete_variant(variant_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# PRICING
# =============================================================================

@router.post(
    "/variants/{variant_id}/pricing",
    response_model=PricingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_pricing(
    variant_id: int,
    payload: PricingPayload,
    repo: CatalogRepository = Depends(get_repository),
) -> PricingResponse:
    return PricingResponse.model_validate(await repo.create_pricing(variant_id, payload.to_values()))


@router.get("/pricing/{pricing_id}", response_model=PricingResponse)
async def get_pricing(
    pricing_id: int,
    repo: CatalogRepository = Depends(get_repository),
) -> PricingResponse:
    return PricingResponse.model_validate(await repo.get_pricing(pricing_id))


@router.put("/pricing/{pricing_id}", response_model=PricingResponse)
async def update_pricing(
    pricing_id: int,
    payload: PricingPayload,
    repo: CatalogRepository = Depends(get_repository),
) -> PricingResponse:
    return PricingResponse.model_validate(await repo.update_pricing(pricing_id, payload.to_values()))


@router.delete("/pricing/{pricing_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pricing(
    pricing_id: int,
    repo: CatalogRepository = Depends(get_repository),
) -> Response:
    await repo.delete_pricing(pricing_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
