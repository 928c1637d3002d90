"""Utilities for converting payout amounts between decimals and stored cents."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

CENT = Decimal("0.01")

AmountLike = Union[Decimal, int, float, str]


def to_decimal(value: AmountLike) -> Decimal:
    """Convert ``value`` to a :class:`~decimal.Decimal` with two decimal places."""

    if isinstance(value, bool):
        raise TypeError("Booleans are not amounts.")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation as exc:
            raise ValueError(f"Invalid amount: {value!r}") from exc
    else:
        raise TypeError(f"Unsupported amount type: {type(value)!r}")
    if not result.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")

    return result.quantize(CENT, rounding=ROUND_HALF_UP)


def to_cents(value: AmountLike) -> int:
    return int(to_decimal(value) * 100)


def from_cents(cents: int) -> str:
    """Return stored cents as a plain two-place string (``"12.50"``)."""

    return str((Decimal(cents) / 100).quantize(CENT))


def require_positive(cents: int, *, allow_zero: bool = False) -> int:
    """Ensure ``cents`` is positive (or non-negative when ``allow_zero`` is true)."""

    if allow_zero:
        if cents < 0:
            raise ValueError("Amount must be zero or greater.")
    else:
        if cents <= 0:
            raise ValueError("Amount must be greater than zero.")
    return cents
