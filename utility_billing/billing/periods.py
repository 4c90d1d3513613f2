"""Calendar helpers for month-keyed billing periods.

Billing periods are keyed by the first day of their month. Callers normalize
before handing dates to the engine.
"""

from datetime import date, datetime

DEFAULT_DUE_DAY = 15


def normalize_month(value: date | datetime | str) -> date:
    """Return the first day of the month containing ``value``.

    Accepts dates, datetimes and ISO strings ("2025-04", "2025-04-17",
    "2025-04-17T10:00:00Z").

    Raises:
        ValueError: If the string cannot be parsed
    """
    if isinstance(value, datetime):
        return date(value.year, value.month, 1)
    if isinstance(value, date):
        return value.replace(day=1)

    text = str(value).strip()
    if len(text) == 7:
        text = f"{text}-01"
    try:
        parsed = date.fromisoformat(text[:10])
    except ValueError as e:
        raise ValueError(f"Invalid month value: {value!r}") from e
    return parsed.replace(day=1)


def previous_month(month: date) -> date:
    month = normalize_month(month)
    if month.month == 1:
        return date(month.year - 1, 12, 1)
    return date(month.year, month.month - 1, 1)


def next_month(month: date) -> date:
    month = normalize_month(month)
    if month.month == 12:
        return date(month.year + 1, 1, 1)
    return date(month.year, month.month + 1, 1)


def due_date(month: date, due_day: int = DEFAULT_DUE_DAY) -> date:
    """Last day on which the standard (pre-penalty) amount applies."""
    return normalize_month(month).replace(day=due_day)


__all__ = ["DEFAULT_DUE_DAY", "normalize_month", "previous_month", "next_month", "due_date"]
