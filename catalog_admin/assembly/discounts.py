"""
Discount Resolver

Adapts an external discount function into the view pipeline. The function
is treated as opaque: it may be local strategies or a remote procedure, it
may be sync or async, and it may fail. Failures never escape this module;
the undiscounted price is used instead.

Local strategy contract (``StrategyDiscountFunction``):
- ``percentage``: ``base * (1 - value / 100)``
- ``fixed``: ``max(base - value, 0)``
- no type or no value: ``base``
- unknown type: error, so the adapter falls back to ``base``
"""

import asyncio
import inspect
import math
from typing import Awaitable, Callable, Dict, Mapping, Optional, Union

import structlog

from .errors import DiscountComputationError
from .records import DiscountType, Pricing, ResolvedPricing, Variant

logger = structlog.get_logger(__name__)

DiscountResult = Union[float, None, Awaitable[Optional[float]]]
DiscountFunction = Callable[[float, Optional[str], Optional[float]], DiscountResult]
DiscountStrategy = Callable[[float, float], float]


def percentage_discount(base_price: float, discount_value: float) -> float:
    """Take ``discount_value`` percent off the base price"""
    return base_price * (1 - discount_value / 100)


def fixed_discount(base_price: float, discount_value: float) -> float:
    """Subtract a fixed amount, never going below zero"""
    return max(base_price - discount_value, 0.0)


DEFAULT_STRATEGIES: Dict[str, DiscountStrategy] = {
    DiscountType.PERCENTAGE.value: percentage_discount,
    DiscountType.FIXED.value: fixed_discount,
}


class StrategyDiscountFunction:
    """
    Discount function backed by strategies keyed by discount type.

    Example:
        compute = StrategyDiscountFunction()
        compute.register("bogo", lambda base, value: base / 2)
        price = await compute(100.0, "percentage", 10.0)  # 90.0
    """

    def __init__(self, strategies: Optional[Mapping[str, DiscountStrategy]] = None):
        self._strategies: Dict[str, DiscountStrategy] = dict(
            DEFAULT_STRATEGIES if strategies is None else strategies
        )

    def register(self, discount_type: str, strategy: DiscountStrategy) -> None:
        """Register or replace the strategy for a discount type"""
        self._strategies[discount_type] = strategy

    async def __call__(
        self,
        base_price: float,
        discount_type: Optional[str],
        discount_value: Optional[float],
    ) -> float:
        if not discount_type or discount_value is None:
            return base_price

        strategy = self._strategies.get(discount_type)
        if strategy is None:
            raise ValueError(f"Unknown discount type: {discount_type}")

        return round(strategy(float(base_price), float(discount_value)), 2)


async def resolve_discounted_price(
    base_price: float,
    discount_type: Optional[str],
    discount_value: Optional[float],
    compute_fn: DiscountFunction,
    variant_id: Optional[int] = None,
) -> float:
    """
    Compute the discounted price, falling back to ``base_price``.

    ``compute_fn`` is always invoked. When it raises, or returns None, a non-finite
    value or something that is not a number, the failure is logged as a
    warning and ``base_price`` is returned. This function never raises.
    """
    try:
        result = compute_fn(base_price, discount_type, discount_value)
        if inspect.isawaitable(result):
            result = await result
        if result is None:
            raise DiscountComputationError(variant_id, "no value returned")
        price = float(result)
        if not math.isfinite(price):
            raise DiscountComputationError(variant_id, "non-finite value returned")
        return price
    except Exception as e:
        error = e if isinstance(e, DiscountComputationError) else DiscountComputationError(variant_id, str(e))
        logger.warning(
            "Discount computation failed, using base price",
            variant_id=variant_id,
            base_price=base_price,
            discount_type=discount_type,
            error=str(error),
            error_type=type(e).__name__,
        )
        return base_price


def discount_base_price(
    variant: Optional[Variant],
    pricing: Pricing,
    basis: str = "variant",
) -> float:
    """
    Pick the price fed to the discount function.

    ``variant`` uses the variant's base price, ``region`` the regional
    price of the pricing row. Without a variant the regional price is used.
    """
    if basis == "region" or variant is None:
        return pricing.price
    return variant.price


async def resolve_discounts(
    pricing_by_variant: Mapping[int, Pricing],
    variants_by_id: Mapping[int, Variant],
    compute_fn: DiscountFunction,
    basis: str = "variant",
) -> Dict[int, ResolvedPricing]:
    """
    Resolve discounted prices for every variant with an active pricing row.

    All discount calls are issued concurrently and gathered before
    returning, so latency is bounded by the slowest single call.

    Args:
        pricing_by_variant: Active pricing row per variant id
        variants_by_id: Variants by id, supplying base prices
        compute_fn: External discount function
        basis: ``variant`` or ``region``

    Returns:
        Resolved pricing per variant id, in the order of ``pricing_by_variant``
    """
    async def resolve(variant_id: int, pricing: Pricing):
        variant = variants_by_id.get(variant_id)
        if variant is None:
            logger.warning("No variant found for pricing row", variant_id=variant_id, pricing_id=pricing.pricing_id)
        base_price = discount_base_price(variant, pricing, basis)
        discounted = await resolve_discounted_price(
            base_price,
            pricing.discount_type,
            pricing.discount_value,
            compute_fn,
            variant_id=variant_id,
        )
        return variant_id, ResolvedPricing(pricing=pricing, discounted_price=discounted)

    results = await asyncio.gather(
        *(resolve(variant_id, pricing) for variant_id, pricing in pricing_by_variant.items())
    )
    return dict(results)
