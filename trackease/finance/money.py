"""Mini README: Fixed-point money helpers.

Amounts travel through the system as integer minor units (centavos) so
repeated sums never accumulate floating-point drift. Conversion from user
input happens once in ``to_minor_units`` and conversion back to display
form only at the formatting boundary.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

_CENT = Decimal("0.01")

# Largest value a signed 64-bit amount_cents column can hold.
MAX_MINOR_UNITS = 2**63 - 1


def to_minor_units(value: object) -> int:
    """Convert a decimal-like amount into non-negative integer minor units."""

    if value is None or isinstance(value, bool):
        raise ValueError("Amount is required and must be a number.")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as error:
        raise ValueError(f"Invalid amount: {value!r}") from error
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    if amount < 0:
        raise ValueError("Amount must not be negative.")
    try:
        cents = int((amount.quantize(_CENT, rounding=ROUND_HALF_UP) * 100).to_integral_value())
    except ArithmeticError as error:
        raise ValueError(f"Amount is too large: {value!r}") from error
    if cents > MAX_MINOR_UNITS:
        raise ValueError(f"Amount is too large: {value!r}")
    return cents


def from_minor_units(cents: int) -> float:
    """Return the wire representation (a JSON number) of minor units."""

    return float(Decimal(cents) / 100)


def format_amount(cents: int) -> str:
    """Render minor units with exactly two decimals and no grouping, e.g. ``1234.50``."""

    sign = "-" if cents < 0 else ""
    whole, fraction = divmod(abs(cents), 100)
    return f"{sign}{whole}.{fraction:02d}"


def format_currency(cents: int, symbol: str = "₱") -> str:
    """Render minor units for display, e.g. ``₱1,234.50`` or ``-₱50.00``."""

    sign = "-" if cents < 0 else ""
    whole, fraction = divmod(abs(cents), 100)
    return f"{sign}{symbol}{whole:,}.{fraction:02d}"
