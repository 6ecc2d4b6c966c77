"""Utility functions for the debt engine.

This module provides the calendar and rate helpers the amortization engine is
built on, together with parsers that turn user input into Python data types.
It uses Python's ``datetime`` and ``calendar`` modules to calculate month
offsets.
"""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal, getcontext
import calendar

from .data_models import PERIOD_MONTHS

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

CENT = Decimal("0.01")


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def installment_date(start: date, offset: int, months_per_period: int) -> date:
    """Return the due date of the installment ``offset`` periods after ``start``.

    The offset is zero-based: offset 0 is the first installment itself.
    Months are always counted from ``start`` so a clamped day (Jan 31 to
    Feb 28) does not drift into later installments.
    """
    return add_months(start, offset * months_per_period)


def months_per_period(period: str) -> int:
    """Return the number of calendar months covered by one installment."""
    try:
        return PERIOD_MONTHS[period]
    except KeyError as exc:
        raise ValueError(f"Unknown installment period: {period}") from exc


def periodic_rate(annual_rate: Decimal, period: str) -> Decimal:
    """Convert an annual nominal rate in percent to a per-installment fraction.

    For example 12 (%/yr) paid monthly gives ``Decimal("0.01")``.
    """
    periods_per_year = Decimal(12) / Decimal(months_per_period(period))
    return (Decimal(annual_rate) / Decimal(100)) / periods_per_year


def round_money(value: Decimal) -> Decimal:
    """Round a money amount to cents, half away from zero."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` or ``YYYY-MM`` string into a ``date``.

    A missing day component defaults to the first day of the month.

    Raises
    ------
    ValueError
        If the string is not a valid date.
    """
    try:
        parts = value.strip().split("-")
        if len(parts) == 2:
            return date(int(parts[0]), int(parts[1]), 1)
        if len(parts) == 3:
            return date(int(parts[0]), int(parts[1]), int(parts[2]))
        raise ValueError
    except Exception as exc:
        raise ValueError(f"Invalid date string: {value}") from exc


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips any commas and handles both integer and float-like
    strings. It raises ``ValueError`` if conversion fails.
    """
    try:
        cleaned = str(value).replace(",", "").strip()
        result = Decimal(cleaned)
    except Exception as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value}")
    return result
