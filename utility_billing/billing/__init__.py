"""Billing rules engine.

Pure, synchronous functions over Decimal values. Nothing here touches the
database; callers pass the history they have loaded and persist the results.
"""

from utility_billing.billing.assembler import (
    PENALTY_RATE,
    assemble_bill,
    carried_arrears,
    ensure_readings_entered,
    ensure_tariffs_configured,
)
from utility_billing.billing.chain import (
    ChainPeriod,
    ChainResult,
    ensure_regeneration_allowed,
    is_stale,
    pass_through,
    rebuild_chain,
)
from utility_billing.billing.consumption import (
    FISCAL_YEAR_START_MONTH,
    compute_consumption,
    compute_water_consumption,
)
from utility_billing.billing.errors import (
    BillingError,
    InvalidPaymentAmountError,
    InvalidPaymentStateError,
    MissingPreviousPeriodError,
    ReadingNotEnteredError,
    StaleChainError,
    UnconfiguredTariffError,
)
from utility_billing.billing.payments import apply_payment, split_arrears
from utility_billing.billing.rates import apply_rates, compute_water_charge
from utility_billing.billing.types import (
    BILLED_STATUSES,
    BillRecord,
    BillStatus,
    ChargeComponents,
    ConsumptionResult,
    ElectricityCharges,
    MeterSnapshot,
    PaymentOutcome,
    PreviousBillState,
    TariffRates,
)

__all__ = [
    "PENALTY_RATE",
    "FISCAL_YEAR_START_MONTH",
    "assemble_bill",
    "carried_arrears",
    "ensure_readings_entered",
    "ensure_tariffs_configured",
    "ChainPeriod",
    "ChainResult",
    "ensure_regeneration_allowed",
    "is_stale",
    "pass_through",
    "rebuild_chain",
    "compute_consumption",
    "compute_water_consumption",
    "BillingError",
    "InvalidPaymentAmountError",
    "InvalidPaymentStateError",
    "MissingPreviousPeriodError",
    "ReadingNotEnteredError",
    "StaleChainError",
    "UnconfiguredTariffError",
    "apply_payment",
    "split_arrears",
    "apply_rates",
    "compute_water_charge",
    "BILLED_STATUSES",
    "BillRecord",
    "BillStatus",
    "ChargeComponents",
    "ConsumptionResult",
    "ElectricityCharges",
    "MeterSnapshot",
    "PaymentOutcome",
    "PreviousBillState",
    "TariffRates",
]
