"""
SQL Entity Fetcher

Reads catalog collections through SQLAlchemy and maps ORM rows to the
immutable records consumed by the view assembler. Each fetch runs in its own
session so the reads of one view-build can run concurrently.
"""

from decimal import Decimal
from typing import Any, AsyncContextManager, Callable, Dict, List, Optional, Type

import structlog
from sqlalchemy import and_, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_admin.assembly.errors import FetchError
from catalog_admin.assembly.predicates import And, Eq, Gte, In, IsNull, Lte, Or, Predicate
from catalog_admin.assembly.records import (
    Category,
    Collection,
    Compliance,
    Inventory,
    Lifecycle,
    Pricing,
    Product,
    Variant,
)
from catalog_admin.database.connection import get_db
from catalog_admin.database.models import (
    Base,
    CategoryRow,
    ComplianceRow,
    InventoryRow,
    LifecycleRow,
    PricingRow,
    ProductRow,
    VariantRow,
)

logger = structlog.get_logger(__name__)

SessionFactory = Callable[[], AsyncContextManager[AsyncSession]]

COLLECTION_MODELS: Dict[Collection, Type[Base]] = {
    Collection.CATEGORY: CategoryRow,
    Collection.PRODUCT: ProductRow,
    Collection.VARIANT: VariantRow,
    Collection.PRICING: PricingRow,
    Collection.INVENTORY: InventoryRow,
    Collection.LIFECYCLE: LifecycleRow,
    Collection.COMPLIANCE: ComplianceRow,
}


def _num(value: Optional[Decimal]) -> Optional[float]:
    return None if value is None else float(value)


def category_record(row: CategoryRow) -> Category:
    return Category(
        category_id=row.category_id,
        name=row.name,
        parent_category_id=row.parent_category_id,
    )


def product_record(row: ProductRow) -> Product:
    return Product(
        product_id=row.product_id,
        sku=row.sku,
        name=row.name,
        category_id=row.category_id,
        description=row.description,
        created_at=row.created_at,
    )


def variant_record(row: VariantRow) -> Variant:
    return Variant(
        variant_id=row.variant_id,
        product_id=row.product_id,
        sku=row.sku,
        price=_num(row.price) or 0.0,
        inventory_level=row.inventory_level or 0,
        color=row.color,
        size=row.size,
        weight=_num(row.weight),
        attributes=row.attributes or {},
    )


def pricing_record(row: PricingRow) -> Pricing:
    return Pricing(
        pricing_id=row.pricing_id,
        variant_id=row.variant_id,
        region=row.region,
        price=_num(row.price),
        start_date=row.start_date,
        end_date=row.end_date,
        discount_type=row.discount_type,
        discount_value=_num(row.discount_value),
    )


def inventory_record(row: InventoryRow) -> Inventory:
    return Inventory(
        inventory_id=row.inventory_id,
        variant_id=row.variant_id,
        stock_level=row.stock_level,
        reorder_threshold=row.reorder_threshold,
        last_updated=row.last_updated,
    )


def lifecycle_record(row: LifecycleRow) -> Lifecycle:
    return Lifecycle(
        lifecycle_id=row.lifecycle_id,
        variant_id=row.variant_id,
        stage=row.stage,
        stage_start=row.stage_start,
        stage_end=row.stage_end,
    )


def compliance_record(row: ComplianceRow) -> Compliance:
    return Compliance(
        compliance_id=row.compliance_id,
        product_id=row.product_id,
        compliant=bool(row.compliant),
        certification=row.certification,
        note=row.note,
    )


RECORD_MAPPERS: Dict[Type[Base], Callable[[Any], Any]] = {
    CategoryRow: category_record,
    ProductRow: product_record,
    VariantRow: variant_record,
    PricingRow: pricing_record,
    InventoryRow: inventory_record,
    LifecycleRow: lifecycle_record,
    ComplianceRow: compliance_record,
}


def row_to_record(row: Base) -> Any:
    """Map an ORM row to its immutable record"""
    return RECORD_MAPPERS[type(row)](row)


def to_clause(model: Type[Base], predicate: Predicate):
    """Translate a fetch predicate into a SQLAlchemy boolean clause"""
    if isinstance(predicate, And):
        return and_(*(to_clause(model, clause) for clause in predicate.clauses))
    if isinstance(predicate, Or):
        return or_(*(to_clause(model, clause) for clause in predicate.clauses))

    column = getattr(model, predicate.field)
    if isinstance(predicate, Eq):
        return column == predicate.value
    if isinstance(predicate, Gte):
        return column >= predicate.value
    if isinstance(predicate, Lte):
        return column <= predicate.value
    if isinstance(predicate, In):
        return column.in_(predicate.values)
    if isinstance(predicate, IsNull):
        return column.is_(None)

    raise TypeError(f"Unsupported predicate: {type(predicate).__name__}")


class SqlEntityFetcher:
    """
    Entity fetcher backed by SQLAlchemy async sessions.

    Rows come back in primary key order, which is the fetch order the
    assembler's first-match rules rely on.

    Example:
        fetcher = SqlEntityFetcher()
        rows = await fetcher.fetch(Collection.VARIANT, Eq("product_id", 1))
    """

    def __init__(self, session_factory: SessionFactory = get_db):
        self._session_factory = session_factory

    async def fetch(self, collection: Collection, predicate: Optional[Predicate] = None) -> List[Any]:
        model = COLLECTION_MODELS[collection]

        query = select(model)
        if predicate is not None:
            query = query.where(to_clause(model, predicate))
        query = query.order_by(*model.__mapper__.primary_key)

        try:
            async with self._session_factory() as db:
                result = await db.execute(query)
                return [row_to_record(row) for row in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database fetch failed", collection=collection.value, error=str(e))
            raise FetchError(collection.value, e) from e
