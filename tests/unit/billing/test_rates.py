"""Unit tests for the charge rate applier."""

from decimal import Decimal

import pytest

from utility_billing.billing.rates import apply_rates, compute_water_charge
from utility_billing.billing.types import TariffRates


@pytest.fixture
def tariff() -> TariffRates:
    return TariffRates(
        fixed_charge_rate=Decimal("1.50"),
        electricity_charge_rate=Decimal("7.50"),
        electricity_duty_rate=Decimal("0.75"),
        maintenance_charge_rate=Decimal("0.50"),
        water_charge_rate=Decimal("2.00"),
    )


class TestApplyRates:
    """Electricity-side charges from billed energy."""

    def test_each_component_is_rate_times_energy(self, tariff):
        charges = apply_rates(Decimal("100"), tariff)

        assert charges.fixed_charge == Decimal("150.00")
        assert charges.electricity_charge == Decimal("750.00")
        assert charges.electricity_duty == Decimal("75.00")
        assert charges.maintenance_charge == Decimal("50.00")

    def test_zero_energy_gives_zero_charges(self, tariff):
        charges = apply_rates(Decimal("0"), tariff)

        assert all(value == 0 for value in charges)

    def test_rounds_half_up_to_cents(self):
        charges = apply_rates(Decimal("1"), TariffRates(electricity_charge_rate=Decimal("0.335")))

        assert charges.electricity_charge == Decimal("0.34")
        assert charges.electricity_charge.as_tuple().exponent == -2

    def test_unset_rates_are_zero(self):
        charges = apply_rates(Decimal("42"), TariffRates())

        assert charges.fixed_charge == Decimal("0.00")

    def test_negative_energy_raises(self, tariff):
        with pytest.raises(ValueError, match="negative"):
            apply_rates(Decimal("-1"), tariff)


class TestComputeWaterCharge:
    def test_rate_times_consumption(self, tariff):
        assert compute_water_charge(Decimal("50"), tariff) == Decimal("100.00")

    def test_negative_consumption_raises(self, tariff):
        with pytest.raises(ValueError):
            compute_water_charge(Decimal("-5"), tariff)


class TestTariffRatesFromMapping:
    def test_names_are_case_insensitive(self):
        rates = TariffRates.from_mapping({"ELECTRICITY_CHARGE_RATE": "7.5"})

        assert rates.electricity_charge_rate == Decimal("7.5")

    def test_missing_and_unknown_names(self):
        rates = TariffRates.from_mapping({"garden_rate": 3, "water_charge_rate": None})

        assert rates.water_charge_rate == Decimal("0")
        assert rates.fixed_charge_rate == Decimal("0")
