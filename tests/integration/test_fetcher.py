"""
Integration Tests - SQL Entity Fetcher
"""
from contextlib import asynccontextmanager
from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from catalog_admin.assembly.assembler import CatalogViewAssembler
from catalog_admin.assembly.discounts import StrategyDiscountFunction
from catalog_admin.assembly.errors import FetchError
from catalog_admin.assembly.filters import FilterCriteria
from catalog_admin.assembly.predicates import Eq, in_, window_contains
from catalog_admin.assembly.records import Collection, Pricing, Variant
from catalog_admin.database.fetcher import SqlEntityFetcher
from catalog_admin.database.procedures import DatabaseDiscountFunction


@pytest.fixture
def fetcher(seeded_db):
    return SqlEntityFetcher()


class TestSqlEntityFetcher:
    """Tests for reading collections through SQLAlchemy"""

    async def test_fetch_all_in_key_order(self, fetcher):
        variants = await fetcher.fetch(Collection.VARIANT)

        assert [v.variant_id for v in variants] == [1, 2, 3, 4]
        assert all(isinstance(v, Variant) for v in variants)

    async def test_maps_records(self, fetcher, catalog_data):
        """Rows come back equal to the records they were stored from"""
        assert await fetcher.fetch(Collection.PRICING) == catalog_data[Collection.PRICING]
        assert await fetcher.fetch(Collection.CATEGORY) == catalog_data[Collection.CATEGORY]
        assert await fetcher.fetch(Collection.COMPLIANCE) == catalog_data[Collection.COMPLIANCE]

    async def test_variant_attributes_round_trip(self, fetcher):
        variants = await fetcher.fetch(Collection.VARIANT, Eq("variant_id", 1))

        assert variants[0].attributes == {"camera": "48MP", "battery": "4000mAh"}
        assert variants[0].price == 100.0

    async def test_equality_and_membership(self, fetcher):
        by_product = await fetcher.fetch(Collection.VARIANT, Eq("product_id", 2))
        by_ids = await fetcher.fetch(Collection.INVENTORY, in_("variant_id", [4]))

        assert [v.variant_id for v in by_product] == [3, 4]
        assert [i.inventory_id for i in by_ids] == [2, 3]

    async def test_window_predicate_with_open_bounds(self, fetcher):
        """Null start or end dates count as unbounded"""
        rows = await fetcher.fetch(Collection.PRICING, window_contains("start_date", "end_date", date(2025, 4, 1)))

        assert [p.pricing_id for p in rows] == [1, 2, 4]
        assert all(isinstance(p, Pricing) for p in rows)

    async def test_window_predicate_matches_in_memory_evaluation(self, fetcher, catalog_data):
        predicate = window_contains("start_date", "end_date", date(2024, 6, 1))

        rows = await fetcher.fetch(Collection.PRICING, predicate)

        assert rows == [p for p in catalog_data[Collection.PRICING] if predicate.matches(p)]

    async def test_database_error_wrapped(self, seeded_db):
        @asynccontextmanager
        async def broken_session():
            raise OperationalError("SELECT", {}, Exception("connection refused"))
            yield

        fetcher = SqlEntityFetcher(session_factory=broken_session)

        with pytest.raises(FetchError) as exc_info:
            await fetcher.fetch(Collection.PRODUCT)

        assert exc_info.value.collection == "products"


class TestAssemblerOverDatabase:
    """End-to-end view builds against the database"""

    async def test_p1_scenario(self, fetcher, reference_date):
        """P1 passes 50-150 through V1; 90 with 10% off resolves to 81"""
        assembler = CatalogViewAssembler(fetcher, StrategyDiscountFunction(), discount_basis="region")

        view = await assembler.build_list_view(FilterCriteria.from_raw("", "50", "150"), reference_date)

        assert [p.product_id for p in view.products] == [1]
        v1 = view.get(1).variants[0]
        assert v1.variant_id == 1
        assert v1.pricing.discounted_price == 81.0

    async def test_detail_view(self, fetcher, reference_date):
        assembler = CatalogViewAssembler(fetcher, StrategyDiscountFunction())

        view = await assembler.build_detail_view(2, reference_date)

        v3, v4 = view.get(2).variants
        assert v3.low_stock is True
        assert v3.pricing is None
        assert v4.low_stock is False
        assert v4.pricing.discounted_price == 25.0

    async def test_missing_procedure_falls_back_to_base(self, fetcher, reference_date):
        """SQLite has no discount procedure, so every price stays undiscounted"""
        assembler = CatalogViewAssembler(fetcher, DatabaseDiscountFunction())

        assert await assembler.discount_for_variant(1, reference_date) == 100.0
