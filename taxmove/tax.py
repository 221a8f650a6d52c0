"""Per-filing-status tax systems built from bracket tables."""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
import logging
from typing import Iterable, Mapping, Sequence

from .brackets import BracketError, TaxBrackets, merge_brackets
from .tax_data import FILING_STATUS_ALIASES, FILING_STATUSES

logger = logging.getLogger(__name__)


def normalize_filing_status(filing_status: str) -> str:
    key = filing_status.strip().lower()
    if key not in FILING_STATUS_ALIASES:
        expected = ", ".join(FILING_STATUSES)
        raise ValueError(f"unsupported filing_status '{filing_status}'; expected one of [{expected}]")
    return FILING_STATUS_ALIASES[key]


def brackets_from_rows(rows: Sequence[tuple[object | None, object]]) -> TaxBrackets:
    """Build a schedule from (upper_bound, rate) rows whose last upper bound is None."""
    if not rows:
        raise BracketError("at least one bracket row is required")
    separators = []
    for index, (upper, _) in enumerate(rows[:-1]):
        if upper is None:
            raise BracketError(f"rows[{index}]: only the last bracket may be unbounded")
        separators.append(upper)
    if rows[-1][0] is not None:
        raise BracketError(f"rows[{len(rows) - 1}]: the last bracket must be unbounded")
    return TaxBrackets.new(separators, (rate for _, rate in rows))


@dataclass(frozen=True, slots=True)
class TaxSystem:
    """A jurisdiction's schedules keyed by filing status.

    A status without a schedule pays no tax there.
    """

    by_status: Mapping[str, TaxBrackets]

    def __post_init__(self) -> None:
        object.__setattr__(self, "by_status", dict(self.by_status))

    @classmethod
    def from_tables(cls, table: Mapping[str, Sequence[tuple[object | None, object]]]) -> "TaxSystem":
        return cls({normalize_filing_status(status): brackets_from_rows(rows) for status, rows in table.items()})

    @classmethod
    def flat(cls, rate: object) -> "TaxSystem":
        brackets = TaxBrackets.flat(rate)
        return cls({status: brackets for status in FILING_STATUSES})

    @property
    def statuses(self) -> tuple[str, ...]:
        return tuple(self.by_status)

    def brackets_for(self, filing_status: str) -> TaxBrackets | None:
        return self.by_status.get(filing_status)

    def calc_taxes(self, gross: Fraction, filing_status: str) -> Fraction:
        brackets = self.by_status.get(filing_status)
        if brackets is None:
            return Fraction(0)
        return brackets.calc_taxes(gross)

    def calc_net(self, gross: Fraction, filing_status: str) -> Fraction:
        brackets = self.by_status.get(filing_status)
        if brackets is None:
            return gross
        return brackets.calc_net(gross)

    def calc_gross(self, net: Fraction, filing_status: str) -> Fraction:
        brackets = self.by_status.get(filing_status)
        if brackets is None:
            return net
        return brackets.calc_gross(net)


def merge_systems(lhs: TaxSystem, rhs: TaxSystem) -> TaxSystem:
    merged: dict[str, TaxBrackets] = {}
    ordered = [*FILING_STATUSES, *(s for s in (*lhs.statuses, *rhs.statuses) if s not in FILING_STATUSES)]
    for status in dict.fromkeys(ordered):
        left = lhs.by_status.get(status)
        right = rhs.by_status.get(status)
        if left is None and right is None:
            continue
        if left is None or right is None:
            merged[status] = left if left is not None else right
        else:
            merged[status] = merge_brackets(left, right)
    return TaxSystem(merged)


def fold_systems(systems: Iterable[TaxSystem | None]) -> TaxSystem | None:
    """Merge layers left to right, skipping layers with no tax. None when every layer is None."""
    merged: TaxSystem | None = None
    for index, system in enumerate(systems):
        logger.debug("Merging tax layer %d", index)
        if system is None:
            continue
        merged = system if merged is None else merge_systems(merged, system)
    return merged
