"""
Database Models - Product Catalog Schema

This module defines the relational tables backing the catalog admin:

Catalog Tables:
- CategoryRow: Category tree (self-referential parent)
- ProductRow: Products, each in one category
- VariantRow: Sellable variants of a product with base price and attributes

Commercial Tables:
- PricingRow: Regional price overrides with validity windows and discounts
- InventoryRow: Stock level and reorder threshold per variant
- LifecycleRow: Lifecycle stage per variant
- ComplianceRow: Certifications per product

Foreign keys are declared for the storage engine; the catalog view
assembler never relies on them and resolves relationships by key lookups.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


# =============================================================================
# CATALOG TABLES
# =============================================================================

class CategoryRow(Base):
    """
    Category Table

    Categories form a tree through ``parent_category_id``.
    """
    __tablename__ = "pm_Category"

    category_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    parent_category_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("pm_Category.category_id", ondelete="SET NULL")
    )


class ProductRow(Base):
    """
    Product Table

    Catalog products. Every product belongs to one category; a category
    with products cannot be deleted.
    """
    __tablename__ = "products"

    product_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sku: Mapped[str] = mapped_column(String(100), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    category_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("pm_Category.category_id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now()
    )

    __table_args__ = (
        Index("ix_products_category", "category_id"),
    )


class VariantRow(Base):
    """
    Product Variant Table

    ``inventory_level`` is a denormalized copy kept by the variant form and
    is distinct from the inventory table.
    """
    __tablename__ = "pm_ProductVariant"

    variant_id: Mapped[int] = mapped_column(
        "productvariant_id", Integer, primary_key=True, autoincrement=True
    )
    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("products.product_id", ondelete="CASCADE"), nullable=False
    )
    sku: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[Optional[str]] = mapped_column(String(50))
    size: Mapped[Optional[str]] = mapped_column(String(50))
    weight: Mapped[Optional[float]] = mapped_column(Numeric(10, 3, asdecimal=False))
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)
    inventory_level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    attributes: Mapped[Optional[Dict[str, str]]] = mapped_column(JSON)

    __table_args__ = (
        Index("ix_variants_product", "product_id"),
        Index("ix_variants_price", "price"),
    )


# =============================================================================
# COMMERCIAL TABLES
# =============================================================================

class PricingRow(Base):
    """
    Pricing Table

    Regional price override valid between ``start_date`` and ``end_date``
    (both inclusive, either may be open).
    """
    __tablename__ = "pm_Pricing"

    pricing_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    variant_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("pm_ProductVariant.productvariant_id", ondelete="CASCADE"), nullable=False
    )
    region: Mapped[str] = mapped_column(String(100), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    start_date: Mapped[Optional[date]] = mapped_column(Date)
    end_date: Mapped[Optional[date]] = mapped_column(Date)
    discount_type: Mapped[Optional[str]] = mapped_column(String(20))  # percentage, fixed
    discount_value: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2))

    __table_args__ = (
        Index("ix_pricing_variant", "variant_id"),
        Index("ix_pricing_window", "start_date", "end_date"),
    )


class InventoryRow(Base):
    """Inventory Table"""
    __tablename__ = "pm_Inventory"

    inventory_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    variant_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("pm_ProductVariant.productvariant_id", ondelete="CASCADE"), nullable=False
    )
    stock_level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reorder_threshold: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_updated: Mapped[Optional[datetime]] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("ix_inventory_variant", "variant_id"),
    )


class LifecycleRow(Base):
    """Product Lifecycle Table"""
    __tablename__ = "pm_ProductLifecycle"

    lifecycle_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    variant_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("pm_ProductVariant.productvariant_id", ondelete="CASCADE"), nullable=False
    )
    stage: Mapped[str] = mapped_column(String(50), nullable=False)  # active, discontinued, ...
    stage_start: Mapped[Optional[date]] = mapped_column(Date)
    stage_end: Mapped[Optional[date]] = mapped_column(Date)

    __table_args__ = (
        Index("ix_lifecycle_variant", "variant_id"),
    )


class ComplianceRow(Base):
    """Compliance Table"""
    __tablename__ = "pm_Compliance"

    compliance_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("products.product_id", ondelete="CASCADE"), nullable=False
    )
    certification: Mapped[Optional[str]] = mapped_column(String(200))
    compliant: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    note: Mapped[Optional[str]] = mapped_column(Text)

    __table_args__ = (
        Index("ix_compliance_product", "product_id"),
    )
