"""
Catalog Repository

Create, update and delete operations behind the admin forms for
categories, products, variants and pricing. Reads for the catalog views go
through the entity fetcher instead.
"""

from typing import Any, Dict, List, Type, TypeVar

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_admin.assembly.errors import NotFoundError
from catalog_admin.assembly.records import Category, Pricing, Product, Variant
from catalog_admin.database.fetcher import (
    category_record,
    pricing_record,
    product_record,
    variant_record,
)
from catalog_admin.database.models import Base, CategoryRow, PricingRow, ProductRow, VariantRow

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class CatalogRepository:
    """
    Write access to the catalog tables within one session.

    The caller owns the transaction (see ``get_db``).

    Example:
        async with get_db() as db:
            repo = CatalogRepository(db)
            product = await repo.create_product({"sku": "P-1", "name": "Phone", "category_id": 1})
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get(self, model: Type[ModelT], entity: str, entity_id: int) -> ModelT:
        row = await self.session.get(model, entity_id)
        if row is None:
            raise NotFoundError(entity, entity_id)
        return row

    async def _create(self, model: Type[ModelT], entity: str, values: Dict[str, Any]) -> ModelT:
        row = model(**values)
        self.session.add(row)
        await self.session.flush()
        await self.session.refresh(row)
        logger.info(f"{entity} created", entity_id=row.__mapper__.primary_key_from_instance(row)[0])
        return row

    async def _update(self, model: Type[ModelT], entity: str, entity_id: int, values: Dict[str, Any]) -> ModelT:
        row = await self._get(model, entity, entity_id)
        for field, value in values.items():
            setattr(row, field, value)
        await self.session.flush()
        await self.session.refresh(row)
        logger.info(f"{entity} updated", entity_id=entity_id, fields=sorted(values))
        return row

    async def _delete(self, model: Type[ModelT], entity: str, entity_id: int) -> None:
        row = await self._get(model, entity, entity_id)
        await self.session.delete(row)
        await self.session.flush()
        logger.info(f"{entity} deleted", entity_id=entity_id)

    # Categories

    async def list_categories(self) -> List[Category]:
        result = await self.session.execute(select(CategoryRow).order_by(CategoryRow.category_id))
        return [category_record(row) for row in result.scalars().all()]

    async def get_category(self, category_id: int) -> Category:
        return category_record(await self._get(CategoryRow, "Category", category_id))

    async def create_category(self, values: Dict[str, Any]) -> Category:
        return category_record(await self._create(CategoryRow, "Category", values))

    async def update_category(self, category_id: int, values: Dict[str, Any]) -> Category:
        return category_record(await self._update(CategoryRow, "Category", category_id, values))

    async def delete_category(self, category_id: int) -> None:
        await self._delete(CategoryRow, "Category", category_id)

    # Products

    async def get_product(self, product_id: int) -> Product:
        return product_record(await self._get(ProductRow, "Product", product_id))

    async def create_product(self, values: Dict[str, Any]) -> Product:
        return product_record(await self._create(ProductRow, "Product", values))

    async def update_product(self, product_id: int, values: Dict[str, Any]) -> Product:
        return product_record(await self._update(ProductRow, "Product", product_id, values))

    async def delete_product(self, product_id: int) -> None:
        await self._delete(ProductRow, "Product", product_id)

    # Variants

    async def get_variant(self, variant_id: int) -> Variant:
        return variant_record(await self._get(VariantRow, "Variant", variant_id))

    async def create_variant(self, product_id: int, values: Dict[str, Any]) -> Variant:
        await self._get(ProductRow, "Product", product_id)
        return variant_record(
            await self._create(VariantRow, "Variant", {**values, "product_id": product_id})
        )

    async def update_variant(self, variant_id: int, values: Dict[str, Any]) -> Variant:
        return variant_record(await self._update(VariantRow, "Variant", variant_id, values))

    async def delete_variant(self, variant_id: int) -> None:
        await self._delete(VariantRow, "Variant", variant_id)

    # Pricing

    async def get_pricing(self, pricing_id: int) -> Pricing:
        return pricing_record(await self._get(PricingRow, "Pricing", pricing_id))

    async def create_pricing(self, variant_id: int, values: Dict[str, Any]) -> Pricing:
        await self._get(VariantRow, "Variant", variant_id)
        return pricing_record(
            await self._create(PricingRow, "Pricing", {**values, "variant_id": variant_id})
        )

    async def update_pricing(self, pricing_id: int, values: Dict[str, Any]) -> Pricing:
        return pricing_record(await self._update(PricingRow, "Pricing", pricing_id, values))

    async def delete_pricing(self, pricing_id: int) -> None:
        await self._delete(PricingRow, "Pricing", pricing_id)
