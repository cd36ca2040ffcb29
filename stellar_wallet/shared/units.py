"""Conversion between lumens (display unit) and stroops (atomic unit).

All wallet arithmetic happens on integer stroops. Display values only appear
where ledger service payloads are parsed or where amounts are shown to a user.
Excess fractional digits are truncated toward zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Any

DECIMALS = 7
MAX_INT64 = 9_223_372_036_854_775_807


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ValueError(f"Not a numeric amount: {value!r}")
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f"Not a numeric amount: {value!r}") from None
    if not amount.is_finite():
        raise ValueError(f"Not a finite amount: {value!r}")
    return amount


def unit_to_atom(value: str | int | float | Decimal, decimals: int = DECIMALS) -> int:
    amount = _to_decimal(value)
    if amount < 0:
        raise ValueError(f"Amount cannot be negative: {value!r}")
    scaled = (amount * (Decimal(10) ** decimals)).quantize(
        Decimal(1), rounding=ROUND_DOWN
    )
    return int(scaled)


def atom_to_unit(value: int, decimals: int = DECIMALS) -> str:
    if value < 0:
        raise ValueError(f"Atomic amount cannot be negative: {value}")
    whole, fraction = divmod(value, 10**decimals)
    if fraction == 0 or decimals == 0:
        return str(whole)
    digits = str(fraction).rjust(decimals, "0").rstrip("0")
    return f"{whole}.{digits}"


@dataclass(frozen=True)
class Amount:
    value: int
    decimals: int = DECIMALS

    def to_unit(self) -> str:
        return atom_to_unit(self.value, self.decimals)

    def __str__(self) -> str:
        return self.to_unit()

