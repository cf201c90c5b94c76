"""Utility functions for the amortization calculator.

This module provides helpers for parsing user input into Python data types
and for handling payment dates. Monthly dates use calendar-aware month
arithmetic rather than fixed 30-day steps; bi-weekly and weekly dates are
plain day offsets.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal, InvalidOperation, getcontext
import calendar

from .data_models import PaymentFrequency

getcontext().prec = 28  # increase decimal precision to avoid rounding errors


def parse_iso_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string into a ``date``.

    A bare ``YYYY-MM`` is accepted as well and resolves to the first day of
    that month.

    Raises
    ------
    ValueError
        If the string is not a valid date.
    """
    text = (value or "").strip()
    try:
        if len(text) == 7:
            year, month = text.split("-")
            return date(int(year), int(month), 1)
        return date.fromisoformat(text)
    except ValueError as exc:
        raise ValueError(f"Invalid date: {value!r} (expected YYYY-MM-DD)") from exc


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def payment_date(start: date, frequency: PaymentFrequency, offset: int) -> date:
    """Return the date ``offset`` payment periods after ``start``.

    Always computed from ``start`` so a clamped month end (Jan 31 -> Feb 28)
    does not drift into the following months.
    """
    if frequency == PaymentFrequency.MONTHLY:
        return add_months(start, offset)
    if frequency == PaymentFrequency.BIWEEKLY:
        return start + timedelta(days=14 * offset)
    return start + timedelta(days=7 * offset)


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a finite ``Decimal``.

    The function strips any commas and handles both integer and float-like
    strings. It raises ``ValueError`` if conversion fails or the value is
    NaN or infinite.
    """
    try:
        cleaned = str(value).strip().replace(",", "")
        result = Decimal(cleaned)
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value}")
    return result


def parse_amount(value: str) -> Decimal:
    """Parse an amount with optional ``k``/``m`` suffixes.

    Accepts plain numbers ("300000") and shorthand such as "300k" or
    "1.2m".
    """
    text = str(value).strip().lower().replace(",", "")
    factor = Decimal(1)
    if text.endswith("k"):
        factor = Decimal(1_000)
        text = text[:-1]
    elif text.endswith("m"):
        factor = Decimal(1_000_000)
        text = text[:-1]
    try:
        return decimal_from_str(text) * factor
    except ValueError as exc:
        raise ValueError(f"Invalid amount: {value}") from exc


def parse_percent(value: str) -> Decimal:
    """Parse a percentage string such as ``"6.5"`` or ``"6.5%"``.

    The value stays in percent; ``"6.5"`` is 6.5 %, not 650 %.
    """
    text = str(value).strip()
    if text.endswith("%"):
        text = text[:-1]
    try:
        return decimal_from_str(text)
    except ValueError as exc:
        raise ValueError(f"Invalid percentage: {value}") from exc
