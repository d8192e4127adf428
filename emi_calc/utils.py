"""Utility functions for the EMI calculator.

This module converts user-facing quantities into the units the engine works
in: arbitrary numeric input into ``Decimal``, an annual percentage rate into a
monthly rate and a duration given as years plus months into a month count. It
also holds the year-month date helpers used to label schedule rows.
"""

from __future__ import annotations

import calendar
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, getcontext
from typing import Union

from .errors import InvalidInput

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Convert ``value`` into a ``Decimal``.

    Floats go through ``str`` so that ``7.5`` becomes ``Decimal("7.5")`` rather
    than its binary expansion. Strings may contain grouping commas.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidInput(f"Invalid numeric value: {value!r}")
    try:
        result = Decimal(str(value).replace(",", "").strip())
    except InvalidOperation as exc:
        raise InvalidInput(f"Invalid numeric value: {value!r}") from exc
    if not result.is_finite():
        raise InvalidInput(f"Invalid numeric value: {value!r}")
    return result


def monthly_rate(annual_rate_percent: Number) -> Decimal:
    """Return the monthly rate for an annual percentage rate (``7.5`` -> ``0.00625``)."""
    return to_decimal(annual_rate_percent) / Decimal(100) / Decimal(12)


def total_months(years: Number, months: Number = 0) -> int:
    """Return ``round((years + months / 12) * 12)``.

    ``months`` is conventionally 0-11 but larger values are accepted. Halves
    round up, so 2.5 months counts as 3.
    """
    count = to_decimal(years) * 12 + to_decimal(months)
    return int(count.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def parse_year_month(ym: str) -> date:
    """Parse a YYYY-MM string into a ``date`` object (first day of month).

    Raises
    ------
    ValueError
        If the string is not a valid year-month.
    """
    parts = ym.strip().split("-")
    if len(parts) < 2:
        raise ValueError(f"Invalid year-month string: {ym}")
    try:
        return date(int(parts[0]), int(parts[1]), 1)
    except ValueError as exc:
        raise ValueError(f"Invalid year-month string: {ym}") from exc


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)
