"""
Unit Tests - Coerce Helpers
"""
import math
from datetime import date, datetime

from catalog_admin.assembly.coerce import blank_to_none, coerce_date, coerce_float, coerce_int, coerce_str


class TestCoerceFloat:
    """Tests for float parsing"""

    def test_parses_numbers_and_strings(self):
        assert coerce_float("12.5", 0.0) == 12.5
        assert coerce_float(" 7 ", 0.0) == 7.0
        assert coerce_float(3, 0.0) == 3.0

    def test_unparsable_returns_default(self):
        assert coerce_float("abc", 0.0) == 0.0
        assert coerce_float("", math.inf) == math.inf
        assert coerce_float(None, 1.0) == 1.0
        assert coerce_float([1], 2.0) == 2.0

    def test_nan_returns_default(self):
        assert coerce_float("nan", 5.0) == 5.0

    def test_infinity_kept(self):
        assert coerce_float("inf", 0.0) == math.inf

    def test_bool_rejected(self):
        assert coerce_float(True, 0.0) == 0.0


class TestCoerceInt:

    def test_parses(self):
        assert coerce_int("42", None) == 42
        assert coerce_int(7, None) == 7

    def test_unparsable_returns_default(self):
        assert coerce_int("4.2", None) is None
        assert coerce_int("", 0) == 0
        assert coerce_int("x", -1) == -1


class TestCoerceStrAndBlank:

    def test_strip(self):
        assert coerce_str("  phone ") == "phone"
        assert coerce_str(None) == ""
        assert coerce_str(12) == "12"

    def test_blank_to_none(self):
        assert blank_to_none("   ") is None
        assert blank_to_none("x") == "x"
        assert blank_to_none(0) == 0


class TestCoerceDate:

    def test_iso_string(self):
        assert coerce_date("2025-04-01") == date(2025, 4, 1)
        assert coerce_date("2025-04-01T10:00:00") == date(2025, 4, 1)

    def test_date_and_datetime(self):
        assert coerce_date(date(2025, 4, 1)) == date(2025, 4, 1)
        assert coerce_date(datetime(2025, 4, 1, 12, 30)) == date(2025, 4, 1)

    def test_invalid_returns_default(self):
        assert coerce_date("yesterday") is None
        assert coerce_date("", date(2025, 1, 1)) == date(2025, 1, 1)
