"""Charge rate applier: per-unit tariff rates times consumption."""

from decimal import Decimal

from utility_billing.billing.money import quantize_money, to_decimal
from utility_billing.billing.types import ElectricityCharges, TariffRates


def apply_rates(billed_energy, rates: TariffRates) -> ElectricityCharges:
    """Itemize electricity-side charges for a period.

    Each component is ``rate * billed_energy`` rounded to cents. Maintenance
    is keyed off billed energy as well.

    Raises:
        ValueError: If billed_energy is negative
    """
    energy = to_decimal(billed_energy)
    if energy < 0:
        raise ValueError("Billed energy cannot be negative")

    return ElectricityCharges(
        fixed_charge=quantize_money(to_decimal(rates.fixed_charge_rate) * energy),
        electricity_charge=quantize_money(to_decimal(rates.electricity_charge_rate) * energy),
        electricity_duty=quantize_money(to_decimal(rates.electricity_duty_rate) * energy),
        maintenance_charge=quantize_money(to_decimal(rates.maintenance_charge_rate) * energy),
    )


def compute_water_charge(water_consumption, rates: TariffRates) -> Decimal:
    """Water charge for a period, keyed off water consumption (never billed energy).

    Raises:
        ValueError: If water_consumption is negative
    """
    consumption = to_decimal(water_consumption)
    if consumption < 0:
        raise ValueError("Water consumption cannot be negative")
    return quantize_money(to_decimal(rates.water_charge_rate) * consumption)


__all__ = ["apply_rates", "compute_water_charge"]
