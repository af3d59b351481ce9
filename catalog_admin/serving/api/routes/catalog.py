"""
Catalog View Endpoints

Product list and product detail views assembled by the catalog view
assembler, the on-demand discount lookup and the low-stock report.
Filter query parameters are taken as raw strings and coerced; malformed
numbers never produce a validation error.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from catalog_admin.assembly.assembler import CatalogViewAssembler
from catalog_admin.assembly.coerce import coerce_int
from catalog_admin.assembly.filters import FilterCriteria
from catalog_admin.serving.api.deps import get_assembler, get_reference_date
from catalog_admin.serving.api.schemas import (
    CatalogViewResponse,
    DiscountResponse,
    LowStockItem,
    LowStockResponse,
)
from catalog_admin.transformation.frames import low_stock_report

router = APIRouter()


@router.get("/products", response_model=CatalogViewResponse)
async def list_products(
    search: Optional[str] = Query(None, description="Name or SKU substring"),
    min_price: Optional[str] = Query(None, description="Lower variant price bound"),
    max_price: Optional[str] = Query(None, description="Upper variant price bound"),
    category_id: Optional[str] = Query(None, description="Restrict to one category"),
    reference_date: date = Depends(get_reference_date),
    assembler: CatalogViewAssembler = Depends(get_assembler),
) -> CatalogViewResponse:
    """
    Product list view with search and price-range filtering.
    """
    criteria = FilterCriteria.from_raw(search, min_price, max_price)
    view = await assembler.build_list_view(
        criteria,
        reference_date,
        category_id=coerce_int(category_id, None),
    )
    return CatalogViewResponse.model_validate(view)


@router.get("/products/{product_id}", response_model=CatalogViewResponse)
async def get_product_view(
    product_id: int,
    reference_date: date = Depends(get_reference_date),
    assembler: CatalogViewAssembler = Depends(get_assembler),
) -> CatalogViewResponse:
    """Product detail view with pricing, lifecycle and compliance."""
    view = await assembler.build_detail_view(product_id, reference_date)
    return CatalogViewResponse.model_validate(view)


@router.get("/variants/{variant_id}/discount", response_model=DiscountResponse)
async def get_variant_discount(
    variant_id: int,
    reference_date: date = Depends(get_reference_date),
    assembler: CatalogViewAssembler = Depends(get_assembler),
) -> DiscountResponse:
    """Discounted price of one variant; null when no pricing is active."""
    discounted = await assembler.discount_for_variant(variant_id, reference_date)
    return DiscountResponse(
        variant_id=variant_id,
        reference_date=reference_date,
        discounted_price=discounted,
    )


@router.get("/low-stock", response_model=LowStockResponse)
async def get_low_stock(
    reference_date: date = Depends(get_reference_date),
    assembler: CatalogViewAssembler = Depends(get_assembler),
) -> LowStockResponse:
    """Variants whose stock is below their reorder threshold."""
    view = await assembler.build_list_view(FilterCriteria(), reference_date)
    report = low_stock_report(view)

    return LowStockResponse(
        reference_date=reference_date,
        items=[
            LowStockItem(**row)
            for row in report.select(list(LowStockItem.model_fields)).to_dicts()
        ],
    )
