"""
Coerce-or-default helpers

Untrusted input (query strings, form fields) is turned into typed values
here. A value that cannot be parsed yields the supplied default instead of
raising.
"""

import math
from datetime import date, datetime
from typing import Any, Optional, TypeVar, Union

T = TypeVar("T")


def blank_to_none(value: Any) -> Any:
    """Map empty or whitespace-only strings to None"""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def coerce_float(value: Any, default: T) -> Union[float, T]:
    """
    Parse a float, falling back to ``default``.

    None, blank strings, unparsable strings and NaN all yield the default.
    Infinite values are kept so ``"inf"`` stays a valid upper bound.
    """
    value = blank_to_none(value)
    if value is None or isinstance(value, bool):
        return default
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(result):
        return default
    return result


def coerce_int(value: Any, default: T) -> Union[int, T]:
    """Parse an integer, falling back to ``default``"""
    value = blank_to_none(value)
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def coerce_str(value: Any, default: str = "", strip: bool = True) -> str:
    """Stringify ``value``, stripped unless ``strip`` is False; None yields ``default``"""
    if value is None:
        return default
    text = str(value)
    return text.strip() if strip else text


def coerce_date(value: Any, default: Optional[date] = None) -> Optional[date]:
    """Parse an ISO date (``YYYY-MM-DD``), falling back to ``default``"""
    value = blank_to_none(value)
    if value is None:
        return default
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return default
