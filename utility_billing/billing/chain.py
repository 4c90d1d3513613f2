"""Per-house sequence of billing periods.

Each period's arrears feed the next period's bill, so bills form a chain.
A bill records the version of its predecessor it was assembled against
(``previous_bill_version``); any later change to the predecessor bumps the
predecessor's ``bill_version`` and makes the link stale.
"""

from datetime import date
from decimal import Decimal
from typing import NamedTuple, Sequence

from utility_billing.billing.assembler import PENALTY_RATE, assemble_bill, carried_arrears
from utility_billing.billing.errors import MissingPreviousPeriodError, StaleChainError
from utility_billing.billing.payments import apply_payment
from utility_billing.billing.periods import next_month, previous_month
from utility_billing.billing.types import (
    BILLED_STATUSES,
    BillRecord,
    BillStatus,
    ChargeComponents,
    PaymentOutcome,
    PreviousBillState,
)


class ChainPeriod(NamedTuple):
    """Stored inputs of one period, as needed to recompute its bill."""

    month: date
    charges: ChargeComponents
    status: BillStatus
    paid_amount: Decimal | None = None
    bill_version: int = 0


class ChainResult(NamedTuple):
    """Recomputed state of one period."""

    month: date
    status: BillStatus
    bill: BillRecord | None
    outcome: PaymentOutcome | None
    previous_bill_version: int | None
    bill_version: int
    state: PreviousBillState


def is_stale(previous_bill_version: int | None, predecessor_version: int) -> bool:
    """True when a bill was assembled against an older version of its predecessor."""
    if previous_bill_version is None:
        return False
    return previous_bill_version != predecessor_version


def ensure_regeneration_allowed(
    month: date, successor_status: BillStatus | None, successor_month: date | None = None
) -> None:
    """Refuse to regenerate a period whose successor already has a bill.

    ``successor_month`` names the later bill when it is not the following
    month (unbilled months in between pass arrears through to it).

    Raises:
        StaleChainError: If the successor is already billed
    """
    if successor_status is not None and BillStatus(successor_status) in BILLED_STATUSES:
        raise StaleChainError(
            f"Bill for {(successor_month or next_month(month)):%Y-%m} is already generated; "
            f"regenerate the chain from {month:%Y-%m} instead"
        )


def pass_through(state: PreviousBillState | None, bill_version: int = 0) -> PreviousBillState:
    """State of an unbilled period given the state of the period before it.

    Arrears reaching the period flow on unchanged, still tied to the version
    of the bill they came from. Without an earlier bill the period starts a
    fresh chain carrying nothing, linked to its own ``bill_version``.
    """
    fresh = state is None or (
        state.status == BillStatus.PENDING
        and state.bill1_arrear is None
        and state.bill2_arrear is None
    )
    if fresh:
        return PreviousBillState(status=BillStatus.PENDING, bill_version=bill_version)
    bill1_arrear, bill2_arrear = carried_arrears(state)
    return PreviousBillState(
        status=BillStatus.PENDING,
        bill1_arrear=bill1_arrear,
        bill2_arrear=bill2_arrear,
        bill_version=state.bill_version,
    )


def rebuild_chain(
    opening: PreviousBillState | None,
    periods: Sequence[ChainPeriod],
    penalty_rate: Decimal = PENALTY_RATE,
) -> list[ChainResult]:
    """Recompute a forward chain of periods in month order.

    Periods that were never billed stay PENDING and pass the arrears reaching
    them on to the next bill. Billed periods are re-assembled with freshly
    carried arrears and, when a payment was recorded, the same paid amount
    is re-applied. Unpaid OVERDUE bills stay OVERDUE.

    Args:
        opening: State of the period just before ``periods[0]`` (None if none exists)
        periods: Consecutive months, oldest first
        penalty_rate: Late surcharge rate

    Returns:
        One ChainResult per period, in the same order

    Raises:
        MissingPreviousPeriodError: If a billed period has no predecessor or
            the months are not consecutive
    """
    results: list[ChainResult] = []
    state = opening
    expected_month: date | None = None

    for period in periods:
        if expected_month is not None and period.month != expected_month:
            raise MissingPreviousPeriodError(
                f"Cannot rebuild chain: no reading for {previous_month(period.month):%Y-%m}"
            )
        expected_month = next_month(period.month)

        previous_version = state.bill_version if state is not None else None

        if BillStatus(period.status) not in BILLED_STATUSES:
            state = pass_through(state, period.bill_version)
            results.append(
                ChainResult(
                    month=period.month,
                    status=BillStatus.PENDING,
                    bill=None,
                    outcome=None,
                    previous_bill_version=previous_version,
                    bill_version=period.bill_version,
                    state=state,
                )
            )
            continue

        bill1_arrear, bill2_arrear = carried_arrears(state)
        bill = assemble_bill(period.charges, bill1_arrear, bill2_arrear, penalty_rate)
        version = period.bill_version + 1

        outcome = None
        status = BillStatus.GENERATED
        if period.paid_amount is not None:
            outcome = apply_payment(bill, period.paid_amount)
            status = outcome.status
        elif period.status == BillStatus.OVERDUE:
            status = BillStatus.OVERDUE

        state = PreviousBillState(
            status=status,
            bill1_penalty=bill.bill1_penalty,
            bill2_penalty=bill.bill2_penalty,
            paid_amount=period.paid_amount,
            bill1_arrear=outcome.bill1_arrear if outcome else None,
            bill2_arrear=outcome.bill2_arrear if outcome else None,
            bill_version=version,
        )
        results.append(
            ChainResult(
                month=period.month,
                status=status,
                bill=bill,
                outcome=outcome,
                previous_bill_version=previous_version,
                bill_version=version,
                state=state,
            )
        )

    return results


__all__ = [
    "ChainPeriod",
    "ChainResult",
    "is_stale",
    "ensure_regeneration_allowed",
    "pass_through",
    "rebuild_chain",
]
