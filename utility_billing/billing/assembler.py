"""Bill assembler: combines itemized charges and carried arrears into two bills.

Bill 1 = fixed charge + electricity charge + electricity duty + bill 1 arrear.
Bill 2 = license fee + residence fee + maintenance + water + other charges
         + bill 2 arrear.

Each side gets a post-due-date amount with a flat penalty applied to the
whole standard amount (1.5% by default).
"""

import logging
from decimal import Decimal

from utility_billing.billing.errors import (
    MissingPreviousPeriodError,
    ReadingNotEnteredError,
    UnconfiguredTariffError,
)
from utility_billing.billing.money import ZERO, is_zero, quantize_money, to_decimal
from utility_billing.billing.types import (
    BillRecord,
    BillStatus,
    ChargeComponents,
    PreviousBillState,
)

logger = logging.getLogger(__name__)

PENALTY_RATE = Decimal("0.015")


def ensure_readings_entered(import_reading, water_reading) -> None:
    """Reject a period whose electricity or water reading is still zero.

    Raises:
        ReadingNotEnteredError: If either reading is exactly zero
    """
    if is_zero(import_reading):
        raise ReadingNotEnteredError("Electricity reading has not been entered")
    if is_zero(water_reading):
        raise ReadingNotEnteredError("Water reading has not been entered")


def ensure_tariffs_configured(charges: ChargeComponents) -> None:
    """Refuse to bill when a whole side of the bill is zero.

    Raises:
        UnconfiguredTariffError: If all electricity components or all
            water/fee components are zero
    """
    if all(
        is_zero(value)
        for value in (charges.fixed_charge, charges.electricity_charge, charges.electricity_duty)
    ):
        raise UnconfiguredTariffError(
            "The values of fixed charge, electricity charge and electricity duty "
            "are not updated and are 0"
        )
    if all(
        is_zero(value)
        for value in (
            charges.license_fee,
            charges.residence_fee,
            charges.maintenance_charge,
            charges.water_charge,
        )
    ):
        raise UnconfiguredTariffError(
            "The values of license fee, residence fee, maintenance charges and water charges "
            "are not updated and are 0"
        )


def carried_arrears(previous: PreviousBillState | None) -> tuple[Decimal, Decimal]:
    """Arrears the preceding period carries into the next bill.

    - never generated: the arrears it passes through from an earlier bill
      (``bill1_arrear``/``bill2_arrear``), or nothing for a first reading
    - generated but unpaid: the full post-penalty amounts carry
    - paid or partially paid: the recorded arrears carry

    Raises:
        MissingPreviousPeriodError: If there is no preceding period record
    """
    if previous is None:
        raise MissingPreviousPeriodError()

    if previous.status == BillStatus.PENDING:
        return to_decimal(previous.bill1_arrear), to_decimal(previous.bill2_arrear)

    if previous.paid_amount is None:
        return to_decimal(previous.bill1_penalty), to_decimal(previous.bill2_penalty)

    return to_decimal(previous.bill1_arrear), to_decimal(previous.bill2_arrear)


def _other_charges(value) -> Decimal:
    if value is None:
        return ZERO
    amount = to_decimal(value)
    if amount.is_nan():
        return ZERO
    return amount


def assemble_bill(
    charges: ChargeComponents,
    previous_bill1_arrear,
    previous_bill2_arrear,
    penalty_rate: Decimal = PENALTY_RATE,
) -> BillRecord:
    """Assemble the two-sided bill for one period.

    Args:
        charges: Itemized charges for the period
        previous_bill1_arrear: Electricity-side arrear carried from the previous period
        previous_bill2_arrear: Water-side arrear carried from the previous period
        penalty_rate: Late surcharge applied after the due date

    Returns:
        BillRecord with status GENERATED

    Raises:
        UnconfiguredTariffError: If a whole side of the bill is zero
    """
    ensure_tariffs_configured(charges)

    multiplier = Decimal(1) + to_decimal(penalty_rate)

    bill1_standard = quantize_money(
        to_decimal(charges.fixed_charge)
        + to_decimal(charges.electricity_charge)
        + to_decimal(charges.electricity_duty)
        + to_decimal(previous_bill1_arrear)
    )
    bill1_penalty = quantize_money(bill1_standard * multiplier)

    bill2_standard = quantize_money(
        to_decimal(charges.license_fee)
        + to_decimal(charges.residence_fee)
        + to_decimal(charges.maintenance_charge)
        + to_decimal(charges.water_charge)
        + _other_charges(charges.other_charges)
        + to_decimal(previous_bill2_arrear)
    )
    bill2_penalty = quantize_money(bill2_standard * multiplier)

    bill = BillRecord(
        bill1_standard=bill1_standard,
        bill1_penalty=bill1_penalty,
        bill2_standard=bill2_standard,
        bill2_penalty=bill2_penalty,
        total_standard=bill1_standard + bill2_standard,
        total_penalty=bill1_penalty + bill2_penalty,
        status=BillStatus.GENERATED,
    )
    logger.debug(
        "Assembled bill: bill1=%s/%s bill2=%s/%s",
        bill1_standard,
        bill1_penalty,
        bill2_standard,
        bill2_penalty,
    )
    return bill


__all__ = [
    "PENALTY_RATE",
    "ensure_readings_entered",
    "ensure_tariffs_configured",
    "carried_arrears",
    "assemble_bill",
]
