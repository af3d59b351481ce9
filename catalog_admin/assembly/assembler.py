"""
Catalog View Assembler

Runs one view-build end to end:

    fetch (concurrent) -> filter -> temporal selection -> discount
    resolution (fan-out/fan-in) -> cross-reference join -> view model

Every upstream read of a view-build must succeed before anything is joined;
a failed read aborts the build with ``FetchError``. Discount failures are
contained per variant.

Example:
    assembler = CatalogViewAssembler(fetcher, StrategyDiscountFunction())
    view = await assembler.build_detail_view(42, date(2025, 5, 27))
"""

import asyncio
from datetime import date
from typing import Any, List, Optional, Tuple

import structlog

from .discounts import DiscountFunction, resolve_discounted_price, resolve_discounts, discount_base_price
from .errors import FetchError, NotFoundError
from .filters import FilterCriteria, apply_filters, variants_in_range
from .joiner import build_joined_view, group_by_key, index_first
from .pricing import index_active_pricing, select_active_pricing
from .predicates import EntityFetcher, Eq, Predicate, in_, window_contains
from .records import Collection, Product, Variant
from .view_model import CatalogView, build_view_model

logger = structlog.get_logger(__name__)


class CatalogViewAssembler:
    """
    Assembles product list and product detail views.

    Args:
        fetcher: Entity fetcher for the catalog collections
        discount_fn: External discount function
        discount_basis: ``variant`` feeds the variant base price to the
            discount function, ``region`` the regional pricing price
    """

    def __init__(
        self,
        fetcher: EntityFetcher,
        discount_fn: DiscountFunction,
        discount_basis: str = "variant",
    ):
        self.fetcher = fetcher
        self.discount_fn = discount_fn
        self.discount_basis = discount_basis

    async def _fetch(self, collection: Collection, predicate: Optional[Predicate] = None) -> List[Any]:
        """Fetch one collection, normalizing failures to ``FetchError``"""
        try:
            rows = await self.fetcher.fetch(collection, predicate)
        except FetchError:
            raise
        except Exception as e:
            logger.error("Collection fetch failed", collection=collection.value, error=str(e))
            raise FetchError(collection.value, e) from e

        logger.debug("Fetched collection", collection=collection.value, rows=len(rows))
        return list(rows)

    async def _fetch_all(self, *requests: Tuple[Collection, Optional[Predicate]]) -> List[List[Any]]:
        """
        Run reads side by side. The first failed read cancels the others and
        its ``FetchError`` is raised as is.
        """
        try:
            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(self._fetch(collection, predicate)) for collection, predicate in requests]
        except ExceptionGroup as eg:
            failures = eg.subgroup(FetchError)
            if failures is None:
                raise
            raise failures.exceptions[0]

        return [task.result() for task in tasks]

    async def build_list_view(
        self,
        criteria: FilterCriteria,
        reference_date: date,
        category_id: Optional[int] = None,
    ) -> CatalogView:
        """
        Build the product list view.

        When price bounds are set, only variants priced within them are
        listed under each product.

        Args:
            criteria: Search and price filter
            reference_date: Date pricing windows are evaluated at
            category_id: Optional category restriction

        Returns:
            CatalogView of the filtered products
        """
        product_predicate = Eq("category_id", category_id) if category_id else None

        products, variants, pricing_rows, inventory, lifecycle, compliance = await self._fetch_all(
            (Collection.PRODUCT, product_predicate),
            (Collection.VARIANT, None),
            (Collection.PRICING, window_contains("start_date", "end_date", reference_date)),
            (Collection.INVENTORY, None),
            (Collection.LIFECYCLE, None),
            (Collection.COMPLIANCE, None),
        )

        visible_products = apply_filters(
            products, variants, criteria.search_term, criteria.min_price, criteria.max_price,
        )
        visible_ids = {p.product_id for p in visible_products}
        candidate_variants = (
            variants_in_range(variants, criteria.min_price, criteria.max_price)
            if criteria.has_price_bounds else variants
        )
        visible_variants = [v for v in candidate_variants if v.product_id in visible_ids]

        view = await self._assemble(
            visible_products, visible_variants, pricing_rows, inventory, lifecycle, compliance, reference_date,
        )
        logger.info(
            "List view built",
            products=len(view.products),
            variants=len(visible_variants),
            category_id=category_id,
            filtered=not criteria.is_default,
        )
        return view

    async def build_detail_view(self, product_id: int, reference_date: date) -> CatalogView:
        """
        Build the detail view of one product.

        Raises:
            NotFoundError: The product does not exist
            FetchError: Any read failed
        """
        products, variants, compliance = await self._fetch_all(
            (Collection.PRODUCT, Eq("product_id", product_id)),
            (Collection.VARIANT, Eq("product_id", product_id)),
            (Collection.COMPLIANCE, Eq("product_id", product_id)),
        )
        if not products:
            raise NotFoundError("Product", product_id)

        variant_ids = [v.variant_id for v in variants]
        if variant_ids:
            pricing_rows, inventory, lifecycle = await self._fetch_all(
                (
                    Collection.PRICING,
                    in_("variant_id", variant_ids) & window_contains("start_date", "end_date", reference_date),
                ),
                (Collection.INVENTORY, in_("variant_id", variant_ids)),
                (Collection.LIFECYCLE, in_("variant_id", variant_ids)),
            )
        else:
            pricing_rows, inventory, lifecycle = [], [], []

        view = await self._assemble(
            products[:1], variants, pricing_rows, inventory, lifecycle, compliance, reference_date,
        )
        logger.info("Detail view built", product_id=product_id, variants=len(variants))
        return view

    async def discount_for_variant(self, variant_id: int, reference_date: date) -> Optional[float]:
        """
        Resolve the discounted price of one variant on demand.

        Returns:
            The discounted price, or None when no pricing is active

        Raises:
            NotFoundError: The variant does not exist
        """
        variants, pricing_rows = await self._fetch_all(
            (Collection.VARIANT, Eq("variant_id", variant_id)),
            (
                Collection.PRICING,
                Eq("variant_id", variant_id) & window_contains("start_date", "end_date", reference_date),
            ),
        )
        if not variants:
            raise NotFoundError("Variant", variant_id)

        variant: Variant = variants[0]
        pricing = select_active_pricing(pricing_rows, variant_id, reference_date)
        if pricing is None:
            logger.info("No active pricing for variant", variant_id=variant_id, reference_date=str(reference_date))
            return None

        return await resolve_discounted_price(
            discount_base_price(variant, pricing, self.discount_basis),
            pricing.discount_type,
            pricing.discount_value,
            self.discount_fn,
            variant_id=variant_id,
        )

    async def _assemble(
        self,
        products: List[Product],
        variants: List[Variant],
        pricing_rows: List[Any],
        inventory: List[Any],
        lifecycle: List[Any],
        compliance: List[Any],
        reference_date: date,
    ) -> CatalogView:
        """Temporal selection, discounts, join and view model over fetched rows"""
        variants_by_id = index_first(variants, lambda v: v.variant_id)

        active_pricing = {
            variant_id: pricing
            for variant_id, pricing in index_active_pricing(pricing_rows, reference_date).items()
            if variant_id in variants_by_id
        }
        resolved_pricing = await resolve_discounts(
            active_pricing, variants_by_id, self.discount_fn, self.discount_basis,
        )

        joined = build_joined_view(
            products,
            variants,
            resolved_pricing,
            index_first(inventory, lambda i: i.variant_id),
            index_first(lifecycle, lambda lc: lc.variant_id),
        )
        return build_view_model(
            joined,
            group_by_key(compliance, lambda c: c.product_id),
            reference_date=reference_date,
        )
