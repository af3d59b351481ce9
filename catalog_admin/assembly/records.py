"""
Catalog Records

Immutable records for the catalog collections as handed to the view
assembler. Identifiers are opaque positive integers; relationships are
plain foreign-key values resolved at view-build time.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


class Collection(str, Enum):
    """Catalog collections readable through an entity fetcher"""
    CATEGORY = "pm_Category"
    PRODUCT = "products"
    VARIANT = "pm_ProductVariant"
    PRICING = "pm_Pricing"
    INVENTORY = "pm_Inventory"
    LIFECYCLE = "pm_ProductLifecycle"
    COMPLIANCE = "pm_Compliance"


class DiscountType(str, Enum):
    """Discount type enumeration"""
    PERCENTAGE = "percentage"
    FIXED = "fixed"


@dataclass(frozen=True)
class Category:
    category_id: int
    name: str
    parent_category_id: Optional[int] = None


@dataclass(frozen=True)
class Product:
    product_id: int
    sku: str
    name: str
    category_id: int
    description: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Variant:
    """
    Sellable variant of a product.

    ``price`` is the base price. ``inventory_level`` is the variant's own
    stock counter and is independent of the inventory collection.
    ``attributes`` is an open, ordered mapping of string keys to string
    values (camera spec, battery spec, ...); no key set is assumed. It is
    read-only like the rest of the record.
    """
    variant_id: int
    product_id: int
    sku: str
    price: float
    inventory_level: int = 0
    color: Optional[str] = None
    size: Optional[str] = None
    weight: Optional[float] = None
    attributes: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        attributes = {str(k): str(v) for k, v in (self.attributes or {}).items()}
        object.__setattr__(self, "attributes", MappingProxyType(attributes))


@dataclass(frozen=True)
class Pricing:
    """Regional price valid between ``start_date`` and ``end_date`` inclusive"""
    pricing_id: int
    variant_id: int
    region: str
    price: float
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    discount_type: Optional[str] = None
    discount_value: Optional[float] = None


@dataclass(frozen=True)
class Inventory:
    inventory_id: int
    variant_id: int
    stock_level: int
    reorder_threshold: int
    last_updated: Optional[datetime] = None


@dataclass(frozen=True)
class Lifecycle:
    lifecycle_id: int
    variant_id: int
    stage: str  # active, discontinued, ...
    stage_start: Optional[date] = None
    stage_end: Optional[date] = None


@dataclass(frozen=True)
class Compliance:
    compliance_id: int
    product_id: int
    compliant: bool
    certification: Optional[str] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class ResolvedPricing:
    """Active pricing row with the discounted price resolved for it"""
    pricing: Pricing
    discounted_price: float

    @property
    def pricing_id(self) -> int:
        return self.pricing.pricing_id

    @property
    def region(self) -> str:
        return self.pricing.region
