"""Errors raised by the billing engine.

Each error is local to the call that raised it and carries a stable ``code``
so the HTTP layer can report it without inspecting messages.
"""


class BillingError(Exception):
    """Base exception for billing rule violations."""

    code = "billing_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class MissingPreviousPeriodError(BillingError):
    """The preceding period's record does not exist."""

    code = "missing_previous_period"

    def __init__(self, message: str = "Cannot generate bill: previous reading is missing"):
        super().__init__(message)


class UnconfiguredTariffError(BillingError):
    """Every component of one bill side is zero, i.e. rates were never configured."""

    code = "unconfigured_tariff"


class ReadingNotEnteredError(BillingError):
    """A meter reading of exactly zero means it has not been entered yet."""

    code = "reading_not_entered"


class InvalidPaymentStateError(BillingError):
    """Payment attempted against a bill that was never generated."""

    code = "invalid_payment_state"

    def __init__(self, message: str = "Bill has not been generated yet"):
        super().__init__(message)


class InvalidPaymentAmountError(BillingError):
    """Payment amount must be positive."""

    code = "invalid_payment_amount"

    def __init__(self, message: str = "Payment amount must be greater than zero"):
        super().__init__(message)


class StaleChainError(BillingError):
    """Regeneration would leave later periods built on outdated arrears."""

    code = "stale_chain"


__all__ = [
    "BillingError",
    "MissingPreviousPeriodError",
    "UnconfiguredTariffError",
    "ReadingNotEnteredError",
    "InvalidPaymentStateError",
    "InvalidPaymentAmountError",
    "StaleChainError",
]
