"""
View Model Builder

Turns joined products into the immutable snapshot handed to presentation:
Product -> [Variant -> {pricing?, inventory?, lifecycle?, low_stock}] plus
the product's compliance rows.
"""

from dataclasses import dataclass, replace
from datetime import date
from typing import Mapping, Optional, Sequence, Tuple

from .joiner import JoinedProduct
from .records import Compliance, Inventory, Lifecycle, Product, ResolvedPricing, Variant


def low_stock(inventory: Optional[Inventory]) -> bool:
    """True when stock is below the reorder threshold; False without inventory"""
    if inventory is None:
        return False
    return inventory.stock_level < inventory.reorder_threshold


@dataclass(frozen=True)
class VariantView:
    variant: Variant
    pricing: Optional[ResolvedPricing]
    inventory: Optional[Inventory]
    lifecycle: Optional[Lifecycle]
    low_stock: bool

    @property
    def variant_id(self) -> int:
        return self.variant.variant_id

    @property
    def stock_level(self) -> int:
        """Inventory stock level, or the variant's own counter without inventory"""
        if self.inventory is not None:
            return self.inventory.stock_level
        return self.variant.inventory_level


@dataclass(frozen=True)
class ProductView:
    product: Product
    variants: Tuple[VariantView, ...]
    compliance: Tuple[Compliance, ...]

    @property
    def product_id(self) -> int:
        return self.product.product_id


@dataclass(frozen=True)
class CatalogView:
    """Snapshot of one view-build"""
    products: Tuple[ProductView, ...]
    reference_date: Optional[date] = None

    def get(self, product_id: int) -> Optional[ProductView]:
        for product_view in self.products:
            if product_view.product_id == product_id:
                return product_view
        return None

    def without_product(self, product_id: int) -> "CatalogView":
        """Copy of the view with a deleted product removed"""
        return replace(
            self,
            products=tuple(p for p in self.products if p.product_id != product_id),
        )

    def without_variant(self, variant_id: int) -> "CatalogView":
        """Copy of the view with a deleted variant removed"""
        return replace(
            self,
            products=tuple(
                replace(p, variants=tuple(v for v in p.variants if v.variant_id != variant_id))
                for p in self.products
            ),
        )


def build_view_model(
    joined_products: Sequence[JoinedProduct],
    compliance_by_product: Mapping[int, Sequence[Compliance]],
    reference_date: Optional[date] = None,
) -> CatalogView:
    """
    Build the catalog view snapshot.

    Every compliance row of a product is attached, duplicates included.
    """
    return CatalogView(
        products=tuple(
            ProductView(
                product=joined.product,
                variants=tuple(
                    VariantView(
                        variant=jv.variant,
                        pricing=jv.pricing,
                        inventory=jv.inventory,
                        lifecycle=jv.lifecycle,
                        low_stock=low_stock(jv.inventory),
                    )
                    for jv in joined.variants
                ),
                compliance=tuple(compliance_by_product.get(joined.product_id, ())),
            )
            for joined in joined_products
        ),
        reference_date=reference_date,
    )
