"""Decimal helpers shared by the billing engine.

All engine arithmetic stays in Decimal. Values arriving as int, str or
float are converted through ``str`` so binary float artefacts never leak in.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value) -> Decimal:
    """Convert a number-like value to Decimal; None becomes 0.

    Raises:
        ValueError: If value cannot be interpreted as a number
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (ValueError, InvalidOperation) as e:
        raise ValueError(f"Cannot interpret {value!r} as a decimal amount") from e


def quantize_money(value: Decimal) -> Decimal:
    """Round to cents using ROUND_HALF_UP."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def is_zero(value) -> bool:
    return to_decimal(value) == ZERO


__all__ = ["CENT", "ZERO", "to_decimal", "quantize_money", "is_zero"]
