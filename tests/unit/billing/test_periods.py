"""Unit tests for month keys and Decimal helpers."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from utility_billing.billing.money import quantize_money, to_decimal
from utility_billing.billing.periods import due_date, next_month, normalize_month, previous_month


class TestNormalizeMonth:
    @pytest.mark.parametrize(
        "value",
        ["2025-04", "2025-04-17", "2025-04-17T10:00:00Z", date(2025, 4, 30)],
    )
    def test_first_day_of_month(self, value):
        assert normalize_month(value) == date(2025, 4, 1)

    def test_datetime(self):
        assert normalize_month(datetime(2025, 4, 17, 10, 0)) == date(2025, 4, 1)

    def test_invalid_string_raises(self):
        with pytest.raises(ValueError, match="Invalid month"):
            normalize_month("April")


class TestMonthArithmetic:
    def test_previous_month_wraps_year(self):
        assert previous_month(date(2025, 1, 1)) == date(2024, 12, 1)

    def test_next_month_wraps_year(self):
        assert next_month(date(2024, 12, 1)) == date(2025, 1, 1)

    def test_due_date_defaults_to_fifteenth(self):
        assert due_date(date(2025, 4, 1)) == date(2025, 4, 15)

    def test_due_date_custom_day(self):
        assert due_date(date(2025, 4, 1), 10) == date(2025, 4, 10)


class TestMoney:
    def test_float_goes_through_str(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_none_is_zero(self):
        assert to_decimal(None) == Decimal("0")

    def test_garbage_raises(self):
        with pytest.raises(ValueError):
            to_decimal("abc")

    def test_quantize_rounds_half_up(self):
        assert quantize_money(Decimal("2.005")) == Decimal("2.01")
        assert quantize_money(Decimal("2.004")) == Decimal("2.00")
