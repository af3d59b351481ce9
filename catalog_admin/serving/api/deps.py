"""
API Dependencies

Builds the view assembler from settings and resolves the reference date
for a request. The reference date is read from the request or the settings
here, at the outermost layer, and passed down explicitly.
"""

from datetime import date
from typing import Optional

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_admin.assembly.assembler import CatalogViewAssembler
from catalog_admin.assembly.coerce import coerce_date
from catalog_admin.assembly.discounts import DiscountFunction, StrategyDiscountFunction
from catalog_admin.config import get_settings
from catalog_admin.database.connection import get_db_dependency
from catalog_admin.database.fetcher import SqlEntityFetcher
from catalog_admin.database.procedures import DatabaseDiscountFunction
from catalog_admin.database.repository import CatalogRepository


def create_discount_function() -> DiscountFunction:
    """Discount function selected by ``CATALOG_DISCOUNT_BACKEND``"""
    catalog = get_settings().catalog
    if catalog.discount_backend == "database":
        return DatabaseDiscountFunction(procedure=catalog.discount_procedure)
    return StrategyDiscountFunction()


def get_assembler() -> CatalogViewAssembler:
    """FastAPI dependency providing a view assembler"""
    return CatalogViewAssembler(
        fetcher=SqlEntityFetcher(),
        discount_fn=create_discount_function(),
        discount_basis=get_settings().catalog.discount_basis,
    )


def get_reference_date(
    as_of: Optional[str] = Query(None, description="Reference date (YYYY-MM-DD) for pricing windows"),
) -> date:
    """
    Reference date of the request.

    An unparsable ``as_of`` is ignored. Without one, the configured
    ``CATALOG_REFERENCE_DATE`` is used, then today.
    """
    configured = get_settings().catalog.reference_date
    return coerce_date(as_of) or configured or date.today()


async def get_repository(
    db: AsyncSession = Depends(get_db_dependency),
) -> CatalogRepository:
    """FastAPI dependency providing a repository bound to the request session"""
    return CatalogRepository(db)
