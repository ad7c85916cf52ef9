"""
Fixed-point unit conversion (18 decimals by default).

    to_wei("1.5")        -> 1_500_000_000_000_000_000
    from_wei(10**21)     -> "1000.0"

Formatting always keeps at least one fractional digit and strips trailing
zeros, so values round-trip through their shortest exact decimal form.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Union

DEFAULT_DECIMALS = 18


def to_wei(value: Union[str, int, Decimal], decimals: int = DEFAULT_DECIMALS) -> int:
    """
    Parse a decimal amount into integer base units.

    Raises:
        TypeError: For floats and other non-exact inputs
        ValueError: If the value is malformed or has more fractional digits than `decimals`
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise TypeError("amount must be a str, int or Decimal (floats are not exact)")
    if isinstance(value, int):
        return value * 10**decimals
    if isinstance(value, str):
        try:
            value = Decimal(value.strip())
        except InvalidOperation as exc:
            raise ValueError(f"invalid decimal amount: {value!r}") from exc
    if not isinstance(value, Decimal):
        raise TypeError(f"unsupported amount type: {type(value).__name__}")
    if not value.is_finite():
        raise ValueError(f"amount must be finite: {value}")

    # Work on the digit tuple directly; Decimal arithmetic would round to the
    # context precision (28 digits).
    sign, digits, exponent = value.as_tuple()
    coefficient = int("".join(map(str, digits)) or "0")
    shift = exponent + decimals
    if shift >= 0:
        result = coefficient * 10**shift
    else:
        result, remainder = divmod(coefficient, 10**-shift)
        if remainder:
            raise ValueError(f"fractional component exceeds {decimals} decimals: {value}")
    return -result if sign else result


def from_wei(amount: int, decimals: int = DEFAULT_DECIMALS) -> str:
    """Format integer base units as a decimal string."""
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise TypeError("amount must be an int")
    sign = "-" if amount < 0 else ""
    whole, frac = divmod(abs(amount), 10**decimals)
    if decimals == 0:
        return f"{sign}{whole}.0"
    frac_str = str(frac).rjust(decimals, "0").rstrip("0") or "0"
    return f"{sign}{whole}.{frac_str}"
