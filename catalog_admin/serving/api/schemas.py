"""
API Schemas

Request payloads for the admin forms and response models for catalog
views. Blank form fields are normalized with the shared coerce helpers
before validation.
"""

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from catalog_admin.assembly.coerce import blank_to_none
from catalog_admin.assembly.records import DiscountType


# =============================================================================
# FORM PAYLOADS
# =============================================================================

class CategoryPayload(BaseModel):
    """Category form"""
    name: str = Field(min_length=1, max_length=200)
    parent_category_id: Optional[int] = Field(default=None, gt=0)

    @field_validator("parent_category_id", mode="before")
    @classmethod
    def blank_parent(cls, v):
        return blank_to_none(v)


class ProductPayload(BaseModel):
    """Product form"""
    sku: str = Field(min_length=1, max_length=100)
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    category_id: int = Field(gt=0, description="Category the product belongs to")

    @field_validator("description", mode="before")
    @classmethod
    def blank_description(cls, v):
        return blank_to_none(v)


class VariantPayload(BaseModel):
    """Variant form; ``attributes`` is a free-form JSON object of strings"""
    sku: str = Field(min_length=1, max_length=100)
    color: Optional[str] = None
    size: Optional[str] = None
    weight: Optional[float] = None
    price: float
    inventory_level: int = 0
    attributes: Dict[str, str] = Field(default_factory=dict)

    @field_validator("color", "size", "weight", mode="before")
    @classmethod
    def blank_optional(cls, v):
        return blank_to_none(v)

    @field_validator("attributes", mode="before")
    @classmethod
    def stringify_attributes(cls, v):
        if v is None:
            return {}
        if isinstance(v, dict):
            return {str(key): str(value) for key, value in v.items()}
        return v


class PricingPayload(BaseModel):
    """Pricing form"""
    region: str = Field(min_length=1, max_length=100)
    price: float
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[float] = None

    @field_validator("start_date", "end_date", "discount_type", "discount_value", mode="before")
    @classmethod
    def blank_optional(cls, v):
        return blank_to_none(v)

    def to_values(self) -> dict:
        values = self.model_dump()
        if self.discount_type is not None:
            values["discount_type"] = self.discount_type.value
        return values


# =============================================================================
# RECORD RESPONSES
# =============================================================================

class RecordModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class CategoryResponse(RecordModel):
    category_id: int
    name: str
    parent_category_id: Optional[int]


class ProductResponse(RecordModel):
    product_id: int
    sku: str
    name: str
    description: Optional[str]
    category_id: int
    created_at: Optional[datetime] = None


class VariantResponse(RecordModel):
    variant_id: int
    product_id: int
    sku: str
    color: Optional[str]
    size: Optional[str]
    weight: Optional[float]
    price: float
    inventory_level: int
    attributes: Dict[str, str]


class PricingResponse(RecordModel):
    pricing_id: int
    variant_id: int
    region: str
    price: float
    start_date: Optional[date]
    end_date: Optional[date]
    discount_type: Optional[str]
    discount_value: Optional[float]


class InventoryResponse(RecordModel):
    inventory_id: int
    stock_level: int
    reorder_threshold: int
    last_updated: Optional[datetime] = None


class LifecycleResponse(RecordModel):
    lifecycle_id: int
    stage: str
    stage_start: Optional[date]
    stage_end: Optional[date]


class ComplianceResponse(RecordModel):
    compliance_id: int
    certification: Optional[str]
    compliant: bool
    note: Optional[str]


# =============================================================================
# VIEW RESPONSES
# =============================================================================

class ResolvedPricingResponse(RecordModel):
    pricing: PricingResponse
    discounted_price: float


class VariantViewResponse(RecordModel):
    variant: VariantResponse
    pricing: Optional[ResolvedPricingResponse]
    inventory: Optional[InventoryResponse]
    lifecycle: Optional[LifecycleResponse]
    low_stock: bool
    stock_level: int


class ProductViewResponse(RecordModel):
    product: ProductResponse
    variants: List[VariantViewResponse]
    compliance: List[ComplianceResponse]


class CatalogViewResponse(RecordModel):
    reference_date: Optional[date]
    products: List[ProductViewResponse]


class DiscountResponse(BaseModel):
    variant_id: int
    reference_date: date
    discounted_price: Optional[float]


class LowStockItem(BaseModel):
    product_id: int
    product_name: str
    variant_id: int
    variant_sku: str
    stock_level: int
    reorder_threshold: int
    shortfall: int


class LowStockResponse(BaseModel):
    reference_date: date
    items: List[LowStockItem]
