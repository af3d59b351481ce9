"""
Unit Tests - Discount Resolution
"""
import asyncio
from datetime import date
from decimal import Decimal

import pytest
from structlog.testing import capture_logs

from catalog_admin.assembly.discounts import (
    StrategyDiscountFunction,
    discount_base_price,
    fixed_discount,
    percentage_discount,
    resolve_discounted_price,
    resolve_discounts,
)
from catalog_admin.assembly.records import Pricing, Variant


def make_variant(variant_id=1, price=100.0):
    return Variant(variant_id=variant_id, product_id=1, sku=f"SKU-{variant_id}", price=price)


def make_pricing(variant_id=1, price=90.0, discount_type="percentage", discount_value=10.0):
    return Pricing(
        pricing_id=variant_id * 10,
        variant_id=variant_id,
        region="EU",
        price=price,
        start_date=date(2025, 1, 1),
        discount_type=discount_type,
        discount_value=discount_value,
    )


class TestStrategies:
    """Tests for the built-in discount strategies"""

    def test_percentage(self):
        assert percentage_discount(90.0, 10.0) == pytest.approx(81.0)
        assert percentage_discount(100.0, 0.0) == 100.0

    def test_fixed_never_negative(self):
        assert fixed_discount(30.0, 5.0) == 25.0
        assert fixed_discount(3.0, 5.0) == 0.0


class TestStrategyDiscountFunction:
    """Tests for the local discount function"""

    async def test_percentage_of_region_price(self):
        """90 with 10% off is 81"""
        compute = StrategyDiscountFunction()

        assert await compute(90.0, "percentage", 10.0) == 81.0

    async def test_fixed(self):
        compute = StrategyDiscountFunction()

        assert await compute(28.0, "fixed", 5.0) == 23.0

    async def test_missing_type_or_value_returns_base(self):
        """No discount configured leaves the price unchanged"""
        compute = StrategyDiscountFunction()

        assert await compute(50.0, None, 10.0) == 50.0
        assert await compute(50.0, "percentage", None) == 50.0
        assert await compute(50.0, "", 10.0) == 50.0

    async def test_unknown_type_raises(self):
        compute = StrategyDiscountFunction()

        with pytest.raises(ValueError, match="bogo"):
            await compute(50.0, "bogo", 1.0)

    async def test_register_strategy(self):
        """Registered strategies extend the known discount types"""
        compute = StrategyDiscountFunction()
        compute.register("half", lambda base, value: base / 2)

        assert await compute(50.0, "half", 1.0) == 25.0

    async def test_result_rounded_to_cents(self):
        compute = StrategyDiscountFunction()

        assert await compute(9.99, "percentage", 33.0) == 6.69


class TestResolveDiscountedPrice:
    """Tests for the discount adapter fallback"""

    async def test_uses_function_result(self):
        result = await resolve_discounted_price(90.0, "percentage", 10.0, StrategyDiscountFunction())

        assert result == 81.0

    async def test_sync_function_supported(self):
        """Plain callables are accepted as well as coroutines"""
        result = await resolve_discounted_price(90.0, "fixed", 5.0, lambda base, t, v: base - v)

        assert result == 85.0

    async def test_raising_function_falls_back_to_base(self):
        """A failing discount function yields the base price and a warning"""
        async def broken(base, discount_type, discount_value):
            raise ConnectionError("procedure unavailable")

        with capture_logs() as logs:
            result = await resolve_discounted_price(90.0, "percentage", 10.0, broken, variant_id=7)

        assert result == 90.0
        warnings = [entry for entry in logs if entry["log_level"] == "warning"]
        assert len(warnings) == 1
        assert warnings[0]["variant_id"] == 7
        assert "procedure unavailable" in warnings[0]["error"]

    async def test_none_result_falls_back_to_base(self):
        async def empty(base, discount_type, discount_value):
            return None

        assert await resolve_discounted_price(90.0, "percentage", 10.0, empty) == 90.0

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), Decimal("NaN")])
    async def test_non_finite_result_falls_back_to_base(self, value):
        """NaN from a numeric procedure is not a price"""
        with capture_logs() as logs:
            result = await resolve_discounted_price(100.0, "percentage", 10.0, lambda *args: value, variant_id=3)

        assert result == 100.0
        assert "non-finite" in logs[0]["error"]

    async def test_zero_is_a_valid_price(self):
        result = await resolve_discounted_price(5.0, "fixed", 10.0, StrategyDiscountFunction())

        assert result == 0.0

    async def test_function_called_without_discount(self):
        """The function is consulted even when no discount is configured"""
        calls = []

        def compute(base, discount_type, discount_value):
            calls.append((base, discount_type, discount_value))
            return base

        assert await resolve_discounted_price(42.0, None, None, compute) == 42.0
        assert calls == [(42.0, None, None)]


class TestDiscountBasePrice:
    """Tests for the base price fed to the discount function"""

    def test_variant_basis(self):
        assert discount_base_price(make_variant(price=100.0), make_pricing(price=90.0)) == 100.0

    def test_region_basis(self):
        assert discount_base_price(make_variant(price=100.0), make_pricing(price=90.0), "region") == 90.0

    def test_missing_variant_uses_region_price(self):
        assert discount_base_price(None, make_pricing(price=90.0)) == 90.0


class TestResolveDiscounts:
    """Tests for the discount fan-out"""

    async def test_one_entry_per_active_pricing(self):
        pricing = {1: make_pricing(1), 2: make_pricing(2, price=40.0, discount_type="fixed", discount_value=5.0)}
        variants = {1: make_variant(1, 100.0), 2: make_variant(2, 50.0)}

        resolved = await resolve_discounts(pricing, variants, StrategyDiscountFunction(), basis="region")

        assert list(resolved) == [1, 2]
        assert resolved[1].discounted_price == 81.0
        assert resolved[2].discounted_price == 35.0
        assert resolved[1].pricing is pricing[1]

    async def test_failures_are_isolated(self):
        """One failing variant does not affect the others"""
        async def compute(base, discount_type, discount_value):
            if base == 50.0:
                raise RuntimeError("boom")
            return base - 1

        pricing = {1: make_pricing(1), 2: make_pricing(2)}
        variants = {1: make_variant(1, 100.0), 2: make_variant(2, 50.0)}

        resolved = await resolve_discounts(pricing, variants, compute)

        assert resolved[1].discounted_price == 99.0
        assert resolved[2].discounted_price == 50.0

    async def test_calls_run_concurrently(self):
        """All calls are in flight before any completes"""
        in_flight = 0
        peak = 0

        async def compute(base, discount_type, discount_value):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return base

        pricing = {i: make_pricing(i) for i in range(1, 6)}
        variants = {i: make_variant(i) for i in range(1, 6)}

        await resolve_discounts(pricing, variants, compute)

        assert peak == 5

    async def test_empty_input(self):
        assert await resolve_discounts({}, {}, StrategyDiscountFunction()) == {}
