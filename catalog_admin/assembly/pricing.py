"""
Temporal Pricing Selector

Selects the pricing row in force for a variant on a reference date. The
reference date is always passed in by the caller; nothing here reads the
clock.
"""

from datetime import date
from typing import Dict, Iterable, Optional, Sequence

from .records import Pricing


def is_active_on(pricing: Pricing, reference_date: date) -> bool:
    """
    Check whether the pricing window contains ``reference_date``.

    Both bounds are inclusive and a missing bound is unbounded.
    """
    if pricing.start_date is not None and pricing.start_date > reference_date:
        return False
    if pricing.end_date is not None and pricing.end_date < reference_date:
        return False
    return True


def select_active_pricing(
    pricing_rows: Sequence[Pricing],
    variant_id: int,
    reference_date: date,
    region: Optional[str] = None,
) -> Optional[Pricing]:
    """
    Return the first pricing row of ``variant_id`` active on ``reference_date``.

    Rows are scanned in input order and the first active one wins, even when
    several windows overlap. Pass ``region`` to restrict the scan to one
    region first.

    Args:
        pricing_rows: Pricing rows in fetch order
        variant_id: Variant to select for
        reference_date: Date the window must contain
        region: Optional region pre-filter

    Returns:
        The active row, or None when no row qualifies
    """
    for pricing in pricing_rows:
        if pricing.variant_id != variant_id:
            continue
        if region is not None and pricing.region != region:
            continue
        if is_active_on(pricing, reference_date):
            return pricing
    return None


def index_active_pricing(
    pricing_rows: Iterable[Pricing],
    reference_date: date,
) -> Dict[int, Pricing]:
    """
    Map every variant id to its active pricing row in a single pass.

    Equivalent to calling ``select_active_pricing`` per variant.
    """
    active: Dict[int, Pricing] = {}
    for pricing in pricing_rows:
        if pricing.variant_id in active:
            continue
        if is_active_on(pricing, reference_date):
            active[pricing.variant_id] = pricing
    return active
