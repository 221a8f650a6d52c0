"""Turn an ordered list of bracket separators into adjacent ranges."""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Iterable, Sequence


class BracketInvariantError(RuntimeError):
    """Raised when a computation breaks a bracket invariant (never a user input problem)."""


@dataclass(frozen=True, slots=True)
class BracketRange:
    """One bracket's span. A bound of None is unbounded on that side."""

    lower: Fraction | None
    upper: Fraction | None
    lower_inclusive: bool = False
    upper_inclusive: bool = True

    def contains(self, value: Fraction) -> bool:
        if self.lower is not None:
            if value < self.lower or (value == self.lower and not self.lower_inclusive):
                return False
        if self.upper is not None:
            if value > self.upper or (value == self.upper and not self.upper_inclusive):
                return False
        return True

    @property
    def start(self) -> Fraction:
        """Value the bracket's taxable amount is measured from (zero when unbounded below)."""
        return Fraction(0) if self.lower is None else self.lower


def pair_bounds(separators: Iterable[Fraction], inclusive_bounds: bool = True) -> list[BracketRange]:
    """Pair N-1 separators into N ranges covering the whole number line.

    With ``inclusive_bounds`` a separator belongs to the range below it, so
    range i is ``(separators[i-1], separators[i]]``. Otherwise it belongs to
    the range above it: ``[separators[i-1], separators[i])``.
    """
    values: list[Fraction | None] = list(separators)
    lowers = [None, *values]
    uppers = [*values, None]
    return [
        BracketRange(
            lower=lower,
            upper=upper,
            lower_inclusive=not inclusive_bounds,
            upper_inclusive=inclusive_bounds,
        )
        for lower, upper in zip(lowers, uppers)
    ]


def find_range(ranges: Sequence[BracketRange], value: Fraction) -> int:
    for index, bracket_range in enumerate(ranges):
        if bracket_range.contains(value):
            return index
    raise BracketInvariantError(f"no bracket contains {value}; bound pairing must cover every value")
