"""
Conversion between smallest units and the human-readable decimal unit.

Only the public balance/send boundary uses these helpers. Everything below
it works on integers.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from utxohandler.constants import DECIMALS


def from_units(units: int, decimals: int = DECIMALS) -> Decimal:
    """Convert an integer amount of smallest units to a Decimal display value."""
    return Decimal(units).scaleb(-decimals)


def to_units(value: Decimal | int | str, decimals: int = DECIMALS) -> int:
    """
    Convert a display value to smallest units.

    Raises:
        ValueError: If the value is not a finite number or has more
            fractional digits than the ledger supports.
    """
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Invalid amount: {value!r}") from e

    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")

    scaled = amount.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValueError(f"Amount {value} has more than {decimals} decimal places")
    return int(scaled)
