"""
Cross-Reference Joiner

Joins variants to their product and to their pricing, inventory and
lifecycle rows by foreign key. Uniqueness is never assumed upstream: every
lookup index keeps the first row per key in input order.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Hashable, Iterable, List, Mapping, Optional, Sequence, Tuple, TypeVar

from .records import Inventory, Lifecycle, Product, ResolvedPricing, Variant

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


@dataclass(frozen=True)
class JoinedVariant:
    """Variant with its optional attachments"""
    variant: Variant
    pricing: Optional[ResolvedPricing] = None
    inventory: Optional[Inventory] = None
    lifecycle: Optional[Lifecycle] = None

    @property
    def variant_id(self) -> int:
        return self.variant.variant_id


@dataclass(frozen=True)
class JoinedProduct:
    product: Product
    variants: Tuple[JoinedVariant, ...] = ()

    @property
    def product_id(self) -> int:
        return self.product.product_id


def index_first(rows: Iterable[T], key: Callable[[T], K]) -> Dict[K, T]:
    """Index rows by ``key``, keeping the first row seen for each key"""
    index: Dict[K, T] = {}
    for row in rows:
        index.setdefault(key(row), row)
    return index


def group_by_key(rows: Iterable[T], key: Callable[[T], K]) -> Dict[K, List[T]]:
    """Group rows by ``key``, preserving input order within each group"""
    groups: Dict[K, List[T]] = {}
    for row in rows:
        groups.setdefault(key(row), []).append(row)
    return groups


def build_joined_view(
    products: Sequence[Product],
    variants: Sequence[Variant],
    pricing_by_variant: Mapping[int, ResolvedPricing],
    inventory_by_variant: Mapping[int, Inventory],
    lifecycle_by_variant: Mapping[int, Lifecycle],
) -> List[JoinedProduct]:
    """
    Assemble products with their joined variants.

    Products keep their input order, and variants keep their input order
    within each product. Pricing, inventory and lifecycle are optional per
    variant. Inputs are not modified.

    Args:
        products: Products to render
        variants: Candidate variants (any product)
        pricing_by_variant: Resolved active pricing per variant id
        inventory_by_variant: First inventory row per variant id
        lifecycle_by_variant: First lifecycle row per variant id

    Returns:
        One joined record per product
    """
    variants_by_product = group_by_key(variants, lambda v: v.product_id)

    joined: List[JoinedProduct] = []
    for product in products:
        joined_variants = tuple(
            JoinedVariant(
                variant=variant,
                pricing=pricing_by_variant.get(variant.variant_id),
                inventory=inventory_by_variant.get(variant.variant_id),
                lifecycle=lifecycle_by_variant.get(variant.variant_id),
            )
            for variant in variants_by_product.get(product.product_id, [])
        )
        joined.append(JoinedProduct(product=product, variants=joined_variants))

    return joined
