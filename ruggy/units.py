"""Decimal and base-unit helpers for token amounts."""
from __future__ import annotations

from decimal import ROUND_DOWN, Decimal, InvalidOperation, localcontext
from typing import Any, Optional

# Enough digits for any uint256 value.
_UINT256_PRECISION = 80


def to_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        result = Decimal(str(value).strip().replace(",", ""))
    except (InvalidOperation, TypeError, ValueError):
        return None
    if not result.is_finite():
        return None
    return result


def format_decimal(value: Decimal) -> str:
    normalized = value.normalize()
    exponent = normalized.as_tuple().exponent
    if exponent > 0:
        normalized = normalized.quantize(Decimal(1))
    text = format(normalized, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def parse_units(amount: str | Decimal, decimals: int) -> int:
    """Convert a human amount into integer base units, truncating extra precision."""
    value = amount if isinstance(amount, Decimal) else to_decimal(amount)
    if value is None:
        raise ValueError(f"Amount must be a number, got {amount!r}.")
    with localcontext() as ctx:
        ctx.prec = _UINT256_PRECISION
        scaled = (value * (Decimal(10) ** decimals)).quantize(Decimal(1), rounding=ROUND_DOWN)
    return int(scaled)


def format_units(value: int, decimals: int) -> str:
    """Render integer base units as a plain decimal string."""
    if decimals == 0:
        return str(value)
    with localcontext() as ctx:
        ctx.prec = _UINT256_PRECISION
        return format_decimal(Decimal(value) / (Decimal(10) ** decimals))
