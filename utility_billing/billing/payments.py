"""Payment allocator: classifies a payment and splits any shortfall into arrears."""

from decimal import Decimal

from utility_billing.billing.errors import InvalidPaymentAmountError, InvalidPaymentStateError
from utility_billing.billing.money import ZERO, quantize_money, to_decimal
from utility_billing.billing.types import BillRecord, BillStatus, PaymentOutcome


def split_arrears(remaining, bill1_penalty, bill2_penalty) -> tuple[Decimal, Decimal]:
    """Split an unpaid remainder proportionally to each side's penalty amount.

    Bill 1 gets its share rounded to cents and bill 2 gets the rest, so the
    pair always sums to ``remaining``. A zero penalty total splits to (0, 0).
    """
    bill1_total = to_decimal(bill1_penalty)
    bill2_total = to_decimal(bill2_penalty)
    total = bill1_total + bill2_total
    if total <= 0:
        return ZERO, ZERO

    remaining = quantize_money(remaining)
    bill1_arrear = quantize_money(remaining * bill1_total / total)
    bill2_arrear = remaining - bill1_arrear
    return bill1_arrear, bill2_arrear


def apply_payment(bill: BillRecord, amount_paid, previously_paid=None) -> PaymentOutcome:
    """Apply a payment against the post-penalty total of a bill.

    The comparison always uses the penalty total, whatever the payment date.
    Instalments accumulate: ``previously_paid`` plus ``amount_paid`` is what
    gets compared.

    Args:
        bill: The generated bill
        amount_paid: Amount of this payment
        previously_paid: Amount already recorded against this bill, if any

    Returns:
        PaymentOutcome with PAID and zero arrears, or PARTIALLY_PAID with
        proportional arrears

    Raises:
        InvalidPaymentStateError: If the bill was never generated
        InvalidPaymentAmountError: If amount_paid is not positive
    """
    if bill.status == BillStatus.PENDING:
        raise InvalidPaymentStateError()

    paid = to_decimal(amount_paid)
    if paid <= 0:
        raise InvalidPaymentAmountError()
    paid += to_decimal(previously_paid)

    total = to_decimal(bill.total_penalty)
    if paid >= total:
        return PaymentOutcome(BillStatus.PAID, ZERO, ZERO)

    bill1_arrear, bill2_arrear = split_arrears(total - paid, bill.bill1_penalty, bill.bill2_penalty)
    return PaymentOutcome(BillStatus.PARTIALLY_PAID, bill1_arrear, bill2_arrear)


__all__ = ["split_arrears", "apply_payment"]
