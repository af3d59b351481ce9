"""
Test Suite Configuration
"""
from dataclasses import fields
from datetime import date
from typing import Any, AsyncGenerator, Dict, Iterable, List, Mapping, Optional

import pytest
from httpx import ASGITransport, AsyncClient

from catalog_admin.assembly.predicates import Predicate
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
from catalog_admin.config import Settings
from catalog_admin.database.connection import close_database, create_schema, get_db, init_database
from catalog_admin.database.fetcher import COLLECTION_MODELS

REFERENCE_DATE = date(2025, 4, 1)


def column_values(record) -> Dict[str, Any]:
    """Record fields as ORM column values; read-only mappings become dicts"""
    values = {f.name: getattr(record, f.name) for f in fields(record)}
    return {k: dict(v) if isinstance(v, Mapping) else v for k, v in values.items()}


class MemoryFetcher:
    """
    Entity fetcher over in-memory records.

    Predicates are evaluated with ``Predicate.matches``. Collections listed
    in ``fail_on`` raise.
    """

    def __init__(
        self,
        data: Dict[Collection, List[Any]],
        fail_on: Iterable[Collection] = (),
    ):
        self.data = data
        self.fail_on = set(fail_on)
        self.calls: List[tuple] = []

    async def fetch(self, collection: Collection, predicate: Optional[Predicate] = None) -> List[Any]:
        self.calls.append((collection, predicate))
        if collection in self.fail_on:
            raise ConnectionError(f"{collection.value} unavailable")
        rows = self.data.get(collection, [])
        return [row for row in rows if predicate is None or predicate.matches(row)]


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        app_env="testing",
        debug=True,
    )


@pytest.fixture
def reference_date() -> date:
    return REFERENCE_DATE


@pytest.fixture
def catalog_data() -> Dict[Collection, List[Any]]:
    """
    Sample catalog.

    P1 has V1 (100.0) and V2 (20.0); V1 has two active pricing rows, EU 90.0
    with 10% off first. P2 has V3 (low stock, expired pricing) and V4 (two
    inventory rows, open-ended fixed discount). P3 has no variants.
    """
    return {
        Collection.CATEGORY: [
            Category(category_id=1, name="Phones"),
            Category(category_id=2, name="Accessories"),
            Category(category_id=3, name="Cases", parent_category_id=2),
        ],
        Collection.PRODUCT: [
            Product(product_id=1, sku="PH-100", name="Phone One", category_id=1, description="Flagship"),
            Product(product_id=2, sku="CS-200", name="Leather Case", category_id=3),
            Product(product_id=3, sku="PH-300", name="Phone Three", category_id=1),
        ],
        Collection.VARIANT: [
            Variant(
                variant_id=1, product_id=1, sku="PH-100-BLK", price=100.0, inventory_level=12,
                color="black", size="128GB", attributes={"camera": "48MP", "battery": "4000mAh"},
            ),
            Variant(variant_id=2, product_id=1, sku="PH-100-WHT", price=20.0, color="white"),
            Variant(variant_id=3, product_id=2, sku="CS-200-BRN", price=15.0, inventory_level=7, color="brown"),
            Variant(variant_id=4, product_id=2, sku="CS-200-BLK", price=30.0, color="black"),
        ],
        Collection.PRICING: [
            Pricing(
                pricing_id=1, variant_id=1, region="EU", price=90.0,
                start_date=date(2025, 1, 1), end_date=date(2025, 12, 31),
                discount_type="percentage", discount_value=10.0,
            ),
            Pricing(pricing_id=2, variant_id=1, region="US", price=95.0, start_date=date(2025, 1, 1)),
            Pricing(
                pricing_id=3, variant_id=3, region="EU", price=14.0,
                start_date=date(2024, 1, 1), end_date=date(2024, 12, 31),
                discount_type="fixed", discount_value=2.0,
            ),
            Pricing(pricing_id=4, variant_id=4, region="EU", price=28.0, discount_type="fixed", discount_value=5.0),
        ],
        Collection.INVENTORY: [
            Inventory(inventory_id=1, variant_id=3, stock_level=2, reorder_threshold=5),
            Inventory(inventory_id=2, variant_id=4, stock_level=10, reorder_threshold=5),
            Inventory(inventory_id=3, variant_id=4, stock_level=0, reorder_threshold=50),
        ],
        Collection.LIFECYCLE: [
            Lifecycle(lifecycle_id=1, variant_id=1, stage="active", stage_start=date(2025, 1, 1)),
            Lifecycle(lifecycle_id=2, variant_id=4, stage="discontinued", stage_start=date(2025, 2, 1)),
        ],
        Collection.COMPLIANCE: [
            Compliance(compliance_id=1, product_id=1, compliant=True, certification="CE"),
            Compliance(compliance_id=2, product_id=1, compliant=False, certification="FCC", note="Pending retest"),
        ],
    }


@pytest.fixture
def memory_fetcher(catalog_data) -> MemoryFetcher:
    return MemoryFetcher(catalog_data)


@pytest.fixture
async def db_engine(tmp_path):
    """Initialize a file-backed SQLite database with the catalog schema"""
    engine = await init_database(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")
    await create_schema()

    yield engine

    await close_database()


@pytest.fixture
async def seeded_db(db_engine, catalog_data):
    """Database loaded with the sample catalog"""
    async with get_db() as db:
        for collection, records in catalog_data.items():
            model = COLLECTION_MODELS[collection]
            db.add_all(model(**column_values(record)) for record in records)

    return db_engine


@pytest.fixture
def api_app(seeded_db):
    from catalog_admin.main import create_app

    app = create_app()
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(api_app) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the application"""
    async with AsyncClient(transport=ASGITransport(app=api_app), base_url="http://test") as ac:
        yield ac
