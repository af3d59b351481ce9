"""
Unit Tests - Temporal Pricing Selection
"""
from datetime import date

from catalog_admin.assembly.pricing import index_active_pricing, is_active_on, select_active_pricing
from catalog_admin.assembly.records import Pricing


def make_pricing(pricing_id, variant_id=1, start=None, end=None, region="EU", price=10.0):
    return Pricing(
        pricing_id=pricing_id,
        variant_id=variant_id,
        region=region,
        price=price,
        start_date=start,
        end_date=end,
    )


class TestIsActiveOn:
    """Tests for pricing window evaluation"""

    def test_open_window_is_always_active(self):
        """Both bounds absent means always active"""
        pricing = make_pricing(1)

        assert is_active_on(pricing, date(1999, 1, 1))
        assert is_active_on(pricing, date(2099, 12, 31))

    def test_bounds_are_inclusive(self):
        """Start and end dates themselves are inside the window"""
        pricing = make_pricing(1, start=date(2025, 1, 1), end=date(2025, 1, 31))

        assert is_active_on(pricing, date(2025, 1, 1))
        assert is_active_on(pricing, date(2025, 1, 31))

    def test_outside_window(self):
        """Dates before start or after end are inactive"""
        pricing = make_pricing(1, start=date(2025, 1, 1), end=date(2025, 1, 31))

        assert not is_active_on(pricing, date(2024, 12, 31))
        assert not is_active_on(pricing, date(2025, 2, 1))

    def test_missing_start_is_unbounded(self):
        """A null start date does not exclude the row"""
        pricing = make_pricing(1, end=date(2025, 1, 31))

        assert is_active_on(pricing, date(2000, 1, 1))
        assert not is_active_on(pricing, date(2025, 2, 1))


class TestSelectActivePricing:
    """Tests for the first-active-row selector"""

    def test_overlapping_windows_first_row_wins(self):
        """Both rows qualify on 2025-04-01; input order breaks the tie"""
        rows = [
            make_pricing(1, start=date(2025, 1, 1), end=date(2025, 6, 1)),
            make_pricing(2, start=date(2025, 3, 1)),
        ]

        selected = select_active_pricing(rows, 1, date(2025, 4, 1))

        assert selected.pricing_id == 1

    def test_overlap_order_is_input_order(self):
        """Reversing the input reverses the winner"""
        rows = [
            make_pricing(2, start=date(2025, 3, 1)),
            make_pricing(1, start=date(2025, 1, 1), end=date(2025, 6, 1)),
        ]

        assert select_active_pricing(rows, 1, date(2025, 4, 1)).pricing_id == 2

    def test_skips_inactive_rows(self):
        """An expired first row does not shadow a later active one"""
        rows = [
            make_pricing(1, start=date(2024, 1, 1), end=date(2024, 12, 31)),
            make_pricing(2, start=date(2025, 1, 1)),
        ]

        assert select_active_pricing(rows, 1, date(2025, 4, 1)).pricing_id == 2

    def test_no_active_row(self):
        """Returns None when nothing is in force"""
        rows = [make_pricing(1, start=date(2026, 1, 1))]

        assert select_active_pricing(rows, 1, date(2025, 4, 1)) is None

    def test_ignores_other_variants(self):
        rows = [make_pricing(1, variant_id=2), make_pricing(2, variant_id=1)]

        assert select_active_pricing(rows, 1, date(2025, 4, 1)).pricing_id == 2

    def test_region_prefilter(self):
        """Region restricts the candidates before the first-match scan"""
        rows = [make_pricing(1, region="EU"), make_pricing(2, region="US")]

        assert select_active_pricing(rows, 1, date(2025, 4, 1), region="US").pricing_id == 2
        assert select_active_pricing(rows, 1, date(2025, 4, 1), region="APAC") is None

    def test_empty_input(self):
        assert select_active_pricing([], 1, date(2025, 4, 1)) is None


class TestIndexActivePricing:
    """Tests for the single-pass index"""

    def test_matches_per_variant_selection(self):
        """Index agrees with calling the selector per variant"""
        d = date(2025, 4, 1)
        rows = [
            make_pricing(1, variant_id=1, end=date(2025, 1, 1)),
            make_pricing(2, variant_id=2),
            make_pricing(3, variant_id=1, start=date(2025, 3, 1)),
            make_pricing(4, variant_id=1),
            make_pricing(5, variant_id=3, start=date(2025, 5, 1)),
        ]

        index = index_active_pricing(rows, d)

        assert {k: v.pricing_id for k, v in index.items()} == {1: 3, 2: 2}
        for variant_id in (1, 2, 3):
            expected = select_active_pricing(rows, variant_id, d)
            assert index.get(variant_id) == expected
