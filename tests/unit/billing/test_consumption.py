"""Unit tests for the consumption calculator."""

from decimal import Decimal

import pytest

from utility_billing.billing.consumption import compute_consumption, compute_water_consumption
from utility_billing.billing.types import ConsumptionResult, MeterSnapshot


def snapshot(import_reading, export_reading, carry="0") -> MeterSnapshot:
    return MeterSnapshot(Decimal(import_reading), Decimal(export_reading), Decimal(carry))


class TestComputeConsumption:
    """Net-metered electricity consumption and export carry-forward."""

    def test_first_reading_bootstraps_to_zero(self):
        """Without a previous reading nothing is consumed or carried."""
        result = compute_consumption(snapshot("1500", "200"), None, 5)

        assert result == ConsumptionResult(Decimal("0"), Decimal("0"), Decimal("0"))

    def test_import_minus_export(self):
        result = compute_consumption(snapshot("1300", "250"), snapshot("1000", "200"), 5)

        assert result.consumption == Decimal("250")
        assert result.billed_energy == Decimal("250")
        assert result.carry_forward == Decimal("0")

    def test_positive_consumption_uses_up_carry(self):
        result = compute_consumption(snapshot("1300", "250"), snapshot("1000", "200", "100"), 6)

        assert result.consumption == Decimal("250")
        assert result.billed_energy == Decimal("150")
        assert result.carry_forward == Decimal("0")

    def test_carry_larger_than_consumption_keeps_remainder(self):
        result = compute_consumption(snapshot("1100", "200"), snapshot("1000", "200", "300"), 7)

        assert result.billed_energy == Decimal("0")
        assert result.carry_forward == Decimal("200")

    def test_negative_consumption_accumulates_outside_fiscal_start(self):
        """June: carry 100 and consumption -50 leave 150 banked."""
        result = compute_consumption(snapshot("1050", "600"), snapshot("1000", "500", "100"), 6)

        assert result.consumption == Decimal("-50")
        assert result.billed_energy == Decimal("0")
        assert result.carry_forward == Decimal("150")

    def test_fiscal_year_start_discards_previous_carry(self):
        """April: the banked 500 is dropped; consumption -200 banks 200."""
        result = compute_consumption(snapshot("1100", "800"), snapshot("1000", "500", "500"), 4)

        assert result.consumption == Decimal("-200")
        assert result.billed_energy == Decimal("0")
        assert result.carry_forward == Decimal("200")

    def test_fiscal_year_start_bills_full_consumption(self):
        result = compute_consumption(snapshot("1300", "500"), snapshot("1000", "500", "500"), 4)

        assert result.billed_energy == Decimal("300")
        assert result.carry_forward == Decimal("0")

    def test_custom_fiscal_year_start(self):
        result = compute_consumption(
            snapshot("1300", "500"), snapshot("1000", "500", "500"), 1, fiscal_year_start_month=1
        )

        assert result.billed_energy == Decimal("300")

    def test_billed_energy_never_negative(self):
        result = compute_consumption(snapshot("1000", "900"), snapshot("1000", "200", "50"), 8)

        assert result.billed_energy >= 0
        assert result.carry_forward == Decimal("750")

    def test_same_inputs_same_result(self):
        current, previous = snapshot("1234.5", "100.25"), snapshot("1000", "50", "10")

        assert compute_consumption(current, previous, 9) == compute_consumption(
            current, previous, 9
        )

    @pytest.mark.parametrize("month", [0, 13])
    def test_invalid_month_raises(self, month):
        with pytest.raises(ValueError, match="period_month"):
            compute_consumption(snapshot("1", "0"), snapshot("0", "0"), month)


class TestComputeWaterConsumption:
    """Water consumption from cumulative meter values."""

    def test_difference_from_previous(self):
        assert compute_water_consumption(Decimal("150"), Decimal("100")) == Decimal("50")

    def test_no_history_is_zero(self):
        assert compute_water_consumption(Decimal("150"), None) == Decimal("0")

    def test_zero_previous_is_zero(self):
        assert compute_water_consumption(Decimal("150"), Decimal("0")) == Decimal("0")

    def test_meter_reset_clamps_to_zero(self):
        assert compute_water_consumption(Decimal("40"), Decimal("100")) == Decimal("0")

    def test_accepts_plain_numbers(self):
        assert compute_water_consumption(120.5, "100") == Decimal("20.5")
