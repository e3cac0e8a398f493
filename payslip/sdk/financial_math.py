"""Integer-cents arithmetic primitives.

Every monetary value handled by the SDK is an int count of cents. These
helpers are the only places where a float meets money, and each one
rounds back to whole cents before returning.

Rounding is half-up (ties go toward positive infinity), matching what
payroll systems print on a payslip:

    calculate_percentage(25, 0.1)   # 2.5 -> 3
    annual_to_monthly(6)            # 0.5 -> 1
"""

import math

CENTS_PER_DOLLAR = 100
MONTHS_PER_YEAR = 12


def _round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward positive infinity."""
    return int(math.floor(value + 0.5))


def dollars_to_cents(dollars: float) -> int:
    """Convert a dollar amount to cents.

    Example: 60000 -> 6000000, 0.125 -> 13
    """
    return _round_half_up(dollars * CENTS_PER_DOLLAR)


def cents_to_dollars(cents: int) -> float:
    """Convert cents to dollars (may be non-integral)."""
    return cents / CENTS_PER_DOLLAR


def format_cents_as_decimal(cents: int) -> str:
    """Format cents as a fixed two-decimal string, e.g. 5 -> "0.05".

    Built from integer division so large amounts never pick up float noise.
    """
    sign = "-" if cents < 0 else ""
    whole, fraction = divmod(abs(cents), CENTS_PER_DOLLAR)
    return f"{sign}{whole}.{fraction:02d}"


def calculate_percentage(amount_cents: int, rate: float) -> int:
    """Apply a rate to an amount, rounded to whole cents.

    This is the single rounding point of the bracket calculation.
    """
    return _round_half_up(amount_cents * rate)


def annual_to_monthly(annual_cents: int) -> int:
    """Derive a monthly amount from an annual one, rounded to whole cents."""
    return _round_half_up(annual_cents / MONTHS_PER_YEAR)
