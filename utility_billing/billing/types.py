"""Value types consumed and produced by the billing engine."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Mapping, NamedTuple

from utility_billing.billing.money import ZERO, to_decimal


class BillStatus(str, Enum):
    """Lifecycle status of a period's bill."""

    PENDING = "PENDING"
    """Readings recorded, bill not generated yet"""

    GENERATED = "GENERATED"
    """Bill assembled, no payment recorded"""

    PARTIALLY_PAID = "PARTIALLY_PAID"
    """Payment below the post-penalty total; arrears carried forward"""

    PAID = "PAID"
    """Payment covered the post-penalty total"""

    OVERDUE = "OVERDUE"
    """Generated bill past its due date without payment"""


BILLED_STATUSES = frozenset(
    {BillStatus.GENERATED, BillStatus.PARTIALLY_PAID, BillStatus.PAID, BillStatus.OVERDUE}
)


class MeterSnapshot(NamedTuple):
    """Cumulative electricity meter values for one billing period."""

    import_reading: Decimal
    export_reading: Decimal
    export_carry_forward: Decimal = ZERO


class ConsumptionResult(NamedTuple):
    """Outcome of the consumption calculation for one period."""

    consumption: Decimal
    billed_energy: Decimal
    carry_forward: Decimal


TARIFF_RATE_NAMES = (
    "fixed_charge_rate",
    "electricity_charge_rate",
    "electricity_duty_rate",
    "maintenance_charge_rate",
    "water_charge_rate",
)


@dataclass(frozen=True)
class TariffRates:
    """Per-unit rates applied to billed consumption. Unset rates are zero."""

    fixed_charge_rate: Decimal = ZERO
    electricity_charge_rate: Decimal = ZERO
    electricity_duty_rate: Decimal = ZERO
    maintenance_charge_rate: Decimal = ZERO
    water_charge_rate: Decimal = ZERO

    @classmethod
    def from_mapping(cls, rates: Mapping[str, object]) -> "TariffRates":
        """Build rates from a name -> amount mapping (names are case-insensitive).

        Unknown names are ignored; missing or None amounts become 0.
        """
        normalized = {str(name).lower(): amount for name, amount in rates.items()}
        return cls(**{name: to_decimal(normalized.get(name)) for name in TARIFF_RATE_NAMES})


class ElectricityCharges(NamedTuple):
    """Itemized charges derived from billed energy."""

    fixed_charge: Decimal
    electricity_charge: Decimal
    electricity_duty: Decimal
    maintenance_charge: Decimal


@dataclass(frozen=True)
class ChargeComponents:
    """Itemized monetary amounts for one period."""

    fixed_charge: Decimal = ZERO
    electricity_charge: Decimal = ZERO
    electricity_duty: Decimal = ZERO
    maintenance_charge: Decimal = ZERO
    water_charge: Decimal = ZERO
    other_charges: Decimal | None = ZERO
    license_fee: Decimal = ZERO
    residence_fee: Decimal = ZERO


@dataclass(frozen=True)
class BillRecord:
    """Assembled bill for one period.

    Bill 1 is the electricity side, bill 2 the water / maintenance / fees side.
    Standard amounts apply up to the due date, penalty amounts after it.
    """

    bill1_standard: Decimal
    bill1_penalty: Decimal
    bill2_standard: Decimal
    bill2_penalty: Decimal
    total_standard: Decimal
    total_penalty: Decimal
    status: BillStatus = BillStatus.GENERATED


class PaymentOutcome(NamedTuple):
    """Result of applying a payment to a bill."""

    status: BillStatus
    bill1_arrear: Decimal
    bill2_arrear: Decimal


@dataclass(frozen=True)
class PreviousBillState:
    """The slice of the preceding period that the next bill depends on.

    For an unbilled (PENDING) period, ``bill1_arrear``/``bill2_arrear`` hold
    the arrears of the latest earlier bill passing through it, and
    ``bill_version`` is that bill's version. Both arrears are None when no
    earlier bill exists.
    """

    status: BillStatus
    bill1_penalty: Decimal | None = None
    bill2_penalty: Decimal | None = None
    paid_amount: Decimal | None = None
    bill1_arrear: Decimal | None = None
    bill2_arrear: Decimal | None = None
    bill_version: int = 0


__all__ = [
    "BillStatus",
    "BILLED_STATUSES",
    "MeterSnapshot",
    "ConsumptionResult",
    "TARIFF_RATE_NAMES",
    "TariffRates",
    "ElectricityCharges",
    "ChargeComponents",
    "BillRecord",
    "PaymentOutcome",
    "PreviousBillState",
]
