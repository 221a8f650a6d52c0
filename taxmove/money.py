"""Exact conversions between user-facing money/rate strings and Fractions."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from fractions import Fraction
import math
import re

AMOUNT_RE = re.compile(r"^\$?(\d{1,3}(?:,\d{3})+|\d+)(\.\d+)?$")


class MoneyError(ValueError):
    """Raised when an amount or rate cannot be read exactly."""


def to_fraction(value: object, path: str = "value") -> Fraction:
    """Coerce an int, Decimal, Fraction or numeric string to an exact Fraction.

    Strings may be decimals (``"0.0123"``), ratios (``"1/10"``) or percents
    (``"12.5%"``). Floats and bools are rejected since they are not exact.
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise MoneyError(f"{path}: {value!r} is not exact; use a string, int or Fraction")
    if isinstance(value, Fraction):
        return value
    if isinstance(value, int):
        return Fraction(value)
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise MoneyError(f"{path}: {value!r} is not finite")
        return Fraction(value)
    if isinstance(value, str):
        raw = value.strip()
        scale = Fraction(1)
        if raw.endswith("%"):
            raw = raw[:-1].strip()
            scale = Fraction(1, 100)
        try:
            return Fraction(raw) * scale
        except (ValueError, ZeroDivisionError) as exc:
            raise MoneyError(f"{path}: cannot read {value!r} as a number") from exc
    raise MoneyError(f"{path}: unsupported type {type(value).__name__}")


def parse_amount(text: str) -> Fraction:
    """Parse a currency string such as ``$120,000.50`` into a non-negative Fraction."""
    raw = text.strip().replace(" ", "")
    if raw.startswith("-") or raw.startswith("$-"):
        raise MoneyError(f"amount {text!r} must not be negative")
    match = AMOUNT_RE.match(raw)
    if match is None:
        raise MoneyError(f"cannot read {text!r} as a currency amount")
    digits = match.group(1).replace(",", "") + (match.group(2) or "")
    try:
        return Fraction(Decimal(digits))
    except InvalidOperation as exc:
        raise MoneyError(f"cannot read {text!r} as a currency amount") from exc


def split_amount(value: Fraction) -> tuple[int, int, Fraction]:
    """Split a non-negative amount into (dollars, cents, leftover fraction of a cent)."""
    total_cents = value * 100
    whole_cents = math.floor(total_cents)
    dollars, cents = divmod(whole_cents, 100)
    return dollars, cents, total_cents - whole_cents


def format_amount(value: Fraction) -> str:
    dollars, cents, _ = split_amount(value)
    return f"${dollars:,}.{cents:02d}"
