"""Consumption calculator for net-metered electricity and water.

Electricity consumption is import minus export between two cumulative
readings. Negative excess is banked as a carry-forward that offsets later
periods, except at the start of the fiscal year (April) where the bank is
discarded.
"""

from decimal import Decimal

from utility_billing.billing.money import ZERO, to_decimal
from utility_billing.billing.types import ConsumptionResult, MeterSnapshot

FISCAL_YEAR_START_MONTH = 4


def compute_consumption(
    current: MeterSnapshot,
    previous: MeterSnapshot | None,
    period_month: int,
    fiscal_year_start_month: int = FISCAL_YEAR_START_MONTH,
) -> ConsumptionResult:
    """Derive period consumption, billed energy and carry-forward.

    Args:
        current: Cumulative readings for the period being computed
        previous: Readings of the latest earlier period, or None for the first reading
        period_month: Calendar month (1-12) of the current period
        fiscal_year_start_month: Month in which the carry-forward bank resets

    Returns:
        ConsumptionResult(consumption, billed_energy, carry_forward)

    Raises:
        ValueError: If period_month is not a calendar month
    """
    if not 1 <= period_month <= 12:
        raise ValueError(f"period_month must be between 1 and 12, got {period_month}")

    if previous is None:
        return ConsumptionResult(ZERO, ZERO, ZERO)

    import_diff = to_decimal(current.import_reading) - to_decimal(previous.import_reading)
    export_diff = to_decimal(current.export_reading) - to_decimal(previous.export_reading)
    consumption = import_diff - export_diff

    fiscal_reset = period_month == fiscal_year_start_month
    previous_carry = ZERO if fiscal_reset else to_decimal(previous.export_carry_forward)

    billed_energy = consumption - previous_carry
    if billed_energy < 0:
        return ConsumptionResult(consumption, ZERO, -billed_energy)

    return ConsumptionResult(consumption, billed_energy, ZERO)


def compute_water_consumption(current_reading, previous_reading) -> Decimal:
    """Water used since the latest earlier non-zero reading.

    A missing or zero previous reading means there is no history yet (0).
    A negative difference indicates a meter reset and is clamped to 0.
    """
    previous = to_decimal(previous_reading)
    if previous <= 0:
        return ZERO

    consumption = to_decimal(current_reading) - previous
    if consumption < 0:
        return ZERO
    return consumption


__all__ = ["FISCAL_YEAR_START_MONTH", "compute_consumption", "compute_water_consumption"]
