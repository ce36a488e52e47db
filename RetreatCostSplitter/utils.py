"""
Utilities Module

This module provides small helpers shared by the retreat cost splitter.

Features:
    - ISO date parsing and formatting
    - Division with IEEE-754 semantics (no ZeroDivisionError)
    - Half-up rounding for integer and two-decimal display values
    - Currency formatting for EUR and USD amounts
    - Sequential identifier generation

Functions:
    parse_date: Parse a YYYY-MM-DD string into a date.
    format_date: Format a date as YYYY-MM-DD.
    divide: Divide two numbers, yielding inf/nan instead of raising.
    round_half_up: Round to the nearest integer, halves away from -inf.
    round_decimal: Round to 2 decimal places using Decimal.
    format_currency: Format amount with currency symbol.
    generate_id: Generate a formatted identifier (P001, A002, ...).
"""

import math
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP


DATE_FORMAT = "%Y-%m-%d"

CURRENCY_SYMBOLS = {"EUR": "€", "USD": "$"}


def parse_date(value) -> date:
    """
    Parse a YYYY-MM-DD string into a date.

    Args:
        value: Date string, or a date which is returned unchanged.

    Returns:
        date: Parsed calendar date.

    Raises:
        ValueError: If the string is not a valid YYYY-MM-DD date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value).strip(), DATE_FORMAT).date()


def format_date(value: date) -> str:
    """Format a date as YYYY-MM-DD."""
    return value.strftime(DATE_FORMAT)


def is_valid_date(value) -> bool:
    """Return True if value parses as a YYYY-MM-DD date."""
    try:
        parse_date(value)
        return True
    except (TypeError, ValueError):
        return False


def divide(numerator: float, denominator: float) -> float:
    """
    Divide two numbers following IEEE-754 rules.

    A zero denominator yields +/-inf for a non-zero numerator and nan for
    0/0, so degenerate input shows up as non-finite numbers in results.

    Args:
        numerator: Dividend.
        denominator: Divisor.

    Returns:
        float: The quotient.
    """
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def round_half_up(value: float) -> float:
    """
    Round to the nearest whole unit, with halves rounded up.

    Non-finite values are returned unchanged.
    """
    if not math.isfinite(value):
        return value
    return float(math.floor(value + 0.5))


def round_decimal(value) -> float:
    """
    Round a value to 2 decimal places and convert to float.

    Uses ROUND_HALF_UP for consistent rounding of displayed amounts.

    Args:
        value: Decimal or float value to round.

    Returns:
        float: Rounded value as float.
    """
    if isinstance(value, float) and not math.isfinite(value):
        return value
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def format_currency(amount: float, currency: str = "EUR", round_usd: bool = False) -> str:
    """
    Format a monetary amount with the appropriate currency symbol.

    USD amounts are shown without decimals when USD rounding is enabled.

    Args:
        amount: The amount to format.
        currency: "EUR" or "USD".
        round_usd: Whether USD amounts are rounded to whole dollars.

    Returns:
        str: Formatted string like "€1,234.56" or "$1,321".
    """
    symbol = CURRENCY_SYMBOLS.get(currency, "")
    if currency == "USD" and round_usd:
        return f"{symbol}{round_half_up(amount):,.0f}"
    return f"{symbol}{amount:,.2f}"


def generate_id(prefix: str = "ID", number: int = 1) -> str:
    """
    Generate a formatted identifier.

    Args:
        prefix: Prefix for the ID (e.g., "P", "A").
        number: Numeric value to format.

    Returns:
        str: Formatted ID like "P001", "A042".
    """
    return f"{prefix}{number:03d}"
