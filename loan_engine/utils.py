"""Utility functions for the loan payment-schedule engine.

This module provides helpers for coercing user input into ``Decimal`` values,
rounding money to cents and handling dates: parsing ISO date strings, adding
months and stepping due dates for each supported payment frequency. Twice
monthly schedules are the awkward case (the 15th and the last day of every
month), so that logic lives in its own function.
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, getcontext
from typing import Optional, Union

from .data_models import MONTHLY, PAYMENT_FREQUENCY_CONFIG, TWICE_MONTHLY

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

CENT = Decimal("0.01")


def to_decimal(value) -> Decimal:
    """Convert ``value`` into a ``Decimal``.

    Floats go through ``str`` so that ``0.1`` becomes ``Decimal("0.1")`` and
    not its binary expansion. Strings may contain thousands separators.
    ``None`` is treated as zero, matching optional fee fields. Raises
    ``ValueError`` when the value cannot be interpreted as a number.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid numeric value: {value!r}")
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    try:
        return Decimal(str(value).replace(",", "").strip())
    except InvalidOperation as exc:
        raise ValueError(f"Invalid numeric value: {value!r}") from exc


def safe_decimal(value) -> Optional[Decimal]:
    """Like :func:`to_decimal` but return ``None`` for anything unusable.

    Non-finite values (NaN, infinity) are also mapped to ``None`` so callers
    can compare the result without tripping ``InvalidOperation``.
    """
    try:
        result = to_decimal(value)
    except ValueError:
        return None
    if not result.is_finite():
        return None
    return result


def finite_decimal(value) -> Decimal:
    """Like :func:`to_decimal` but also raise ``ValueError`` for NaN and infinity."""
    result = to_decimal(value)
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value!r}")
    return result


def round_currency(amount) -> Decimal:
    """Round an amount to two decimal places (half up)."""
    return to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def parse_iso_date(value: Union[date, str]) -> date:
    """Parse a ``YYYY-MM-DD`` string into a ``date``.

    ``date`` instances are returned unchanged. The date is taken as a plain
    calendar date; no timezone conversion is applied.

    Raises
    ------
    ValueError
        If the string is not a valid calendar date.
    """
    if isinstance(value, date):
        return value
    try:
        parts = str(value).strip().split("-")
        if len(parts) != 3:
            raise ValueError
        year, month, day = (int(p) for p in parts)
        return date(year, month, day)
    except Exception as exc:
        raise ValueError(f"Invalid date string: {value}") from exc


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def last_day_of_month(dt: date) -> date:
    return date(dt.year, dt.month, calendar.monthrange(dt.year, dt.month)[1])


def twice_monthly_due_date(first_payment_date: date, index: int) -> date:
    """Return the due date of payment ``index`` (0-based) on a twice-monthly plan.

    Payments come in pairs per calendar month, starting with the month of
    ``first_payment_date``: the even index of each pair is due on the 15th and
    the odd index on the last day of the month (28th to 31st). The day of
    ``first_payment_date`` itself only selects the starting month.
    """
    month_start = first_payment_date.replace(day=1)
    target_month = add_months(month_start, index // 2)
    if index % 2 == 0:
        return target_month.replace(day=15)
    return last_day_of_month(target_month)


def due_date_for(frequency: str, first_payment_date: date, index: int) -> date:
    """Return the due date of payment ``index`` (0-based) for ``frequency``.

    Raises ``KeyError`` for an unknown frequency.
    """
    config = PAYMENT_FREQUENCY_CONFIG[frequency]
    if frequency == MONTHLY:
        return add_months(first_payment_date, index * config.months_between)
    if frequency == TWICE_MONTHLY:
        return twice_monthly_due_date(first_payment_date, index)
    return first_payment_date + timedelta(days=index * config.days_between)
