"""
Filter Engine

Narrows the product list by a free-text search over name and SKU and by a
price range over variant base prices. Filtering never fetches and never
modifies its inputs.
"""

import math
from dataclasses import dataclass
from typing import Any, List, Sequence, Set

from .coerce import coerce_float, coerce_str
from .records import Product, Variant


@dataclass(frozen=True)
class FilterCriteria:
    """Search and price-range filter state"""
    search_term: str = ""
    min_price: float = 0.0
    max_price: float = math.inf

    @classmethod
    def from_raw(cls, search_term: Any = None, min_price: Any = None, max_price: Any = None) -> "FilterCriteria":
        """
        Build criteria from untrusted input.

        Unparsable bounds fall back to no bound (0 and +inf). The search
        term is matched as given, surrounding whitespace included.
        """
        return cls(
            search_term=coerce_str(search_term, strip=False),
            min_price=coerce_float(min_price, 0.0),
            max_price=coerce_float(max_price, math.inf),
        )

    @property
    def is_default(self) -> bool:
        return not self.search_term and self.min_price == 0 and self.max_price == math.inf

    @property
    def has_price_bounds(self) -> bool:
        return self.min_price != 0 or self.max_price != math.inf


def matches_search(product: Product, search_term: str) -> bool:
    """Case-insensitive substring match on name or SKU; empty term matches"""
    if not search_term:
        return True
    needle = search_term.casefold()
    return needle in (product.name or "").casefold() or needle in (product.sku or "").casefold()


def variants_in_range(variants: Sequence[Variant], min_price: Any, max_price: Any) -> List[Variant]:
    """Variants whose base price lies in ``[min_price, max_price]``"""
    low = coerce_float(min_price, 0.0)
    high = coerce_float(max_price, math.inf)
    return [v for v in variants if low <= v.price <= high]


def apply_filters(
    products: Sequence[Product],
    variants: Sequence[Variant],
    search_term: Any = "",
    min_price: Any = 0.0,
    max_price: Any = math.inf,
) -> List[Product]:
    """
    Filter products by search term and variant price range.

    With default criteria the product list is returned unchanged. Otherwise a
    product is kept when its name or SKU contains the search term and at
    least one of its variants is priced within the range. Products without
    variants are dropped once any criterion is set.

    Args:
        products: Products in display order
        variants: Variants of those products
        search_term: Free text, matched case-insensitively
        min_price: Lower bound (unparsable -> 0)
        max_price: Upper bound (unparsable -> +inf)

    Returns:
        Filtered products in input order
    """
    criteria = FilterCriteria.from_raw(search_term, min_price, max_price)
    if criteria.is_default:
        return list(products)

    priced_product_ids: Set[int] = {
        v.product_id for v in variants_in_range(variants, criteria.min_price, criteria.max_price)
    }

    return [
        p for p in products
        if p.product_id in priced_product_ids and matches_search(p, criteria.search_term)
    ]
