"""Progressive tax bracket schedules: forward tax, inverse gross, and merging."""

from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
import logging
from typing import Final, Iterable

from .bounds import BracketInvariantError, find_range, pair_bounds
from .money import MoneyError, to_fraction

logger = logging.getLogger(__name__)

# Which schedule(s) introduced a merged separator.
SIDE_LHS: Final[str] = "lhs"
SIDE_RHS: Final[str] = "rhs"
SIDE_BOTH: Final[str] = "both"


class BracketError(ValueError):
    """Raised when separators and rates do not describe a valid schedule."""


def _flat_deductions(separators: tuple[Fraction, ...], rates: tuple[Fraction, ...]) -> tuple[Fraction, ...]:
    flats = [Fraction(0)]
    lower = Fraction(0)
    for upper, rate in zip(separators, rates):
        flats.append(flats[-1] + (upper - lower) * rate)
        lower = upper
    return tuple(flats)


@dataclass(frozen=True, slots=True)
class TaxBrackets:
    """A piecewise-linear marginal tax schedule.

    ``separators`` holds the N-1 inclusive upper bounds of every bracket but
    the last, ``rates`` the N marginal rates. ``flats[i]`` is the tax owed on
    all income below bracket i, so tax inside a bracket is one multiply-add.
    """

    separators: tuple[Fraction, ...]
    rates: tuple[Fraction, ...]
    flats: tuple[Fraction, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        try:
            separators = tuple(to_fraction(v, f"separators[{i}]") for i, v in enumerate(self.separators))
            rates = tuple(to_fraction(v, f"rates[{i}]") for i, v in enumerate(self.rates))
        except MoneyError as exc:
            raise BracketError(str(exc)) from exc

        if len(rates) != len(separators) + 1:
            raise BracketError(
                f"expected {len(separators) + 1} rates for {len(separators)} separators, got {len(rates)}"
            )
        for index, rate in enumerate(rates):
            if not 0 <= rate < 1:
                raise BracketError(f"rates[{index}]: {rate} is outside [0, 1)")
        previous: Fraction | None = None
        for index, separator in enumerate(separators):
            if separator < 0:
                raise BracketError(f"separators[{index}]: {separator} is negative")
            if previous is not None and separator <= previous:
                raise BracketError(f"separators[{index}]: {separator} does not increase past {previous}")
            previous = separator

        object.__setattr__(self, "separators", separators)
        object.__setattr__(self, "rates", rates)
        object.__setattr__(self, "flats", _flat_deductions(separators, rates))

    @classmethod
    def new(cls, separators: Iterable[object], rates: Iterable[object]) -> "TaxBrackets":
        return cls(tuple(separators), tuple(rates))

    @classmethod
    def flat(cls, rate: object) -> "TaxBrackets":
        return cls((), (rate,))

    def rate_at(self, amount: Fraction) -> Fraction:
        return self.rates[find_range(pair_bounds(self.separators), amount)]

    def calc_taxes(self, gross: Fraction) -> Fraction:
        ranges = pair_bounds(self.separators, inclusive_bounds=True)
        index = find_range(ranges, gross)
        amount_over = gross - ranges[index].start
        taxes = self.flats[index] + amount_over * self.rates[index]
        logger.debug(
            "Taxes for %s calced to be %s with rate %s on %s and bump %s",
            gross,
            taxes,
            self.rates[index],
            amount_over,
            self.flats[index],
        )
        return taxes

    def calc_net(self, gross: Fraction) -> Fraction:
        taxes = self.calc_taxes(gross)
        if taxes > gross:
            raise BracketInvariantError(f"taxes {taxes} exceed gross income {gross}")
        return gross - taxes

    def post_tax_separators(self) -> tuple[Fraction, ...]:
        """Bracket boundaries re-expressed as net income."""
        return tuple(separator - flat for separator, flat in zip(self.separators, self.flats[1:]))

    def calc_gross(self, net: Fraction) -> Fraction:
        """Invert ``calc_net``: the gross income that leaves exactly ``net`` after tax."""
        ranges = pair_bounds(self.post_tax_separators(), inclusive_bounds=True)
        index = find_range(ranges, net)
        prev_bucket = ranges[index].start
        over_amount = net - prev_bucket
        rate = self.rates[index]
        if rate >= 1:
            raise BracketInvariantError(f"marginal rate {rate} leaves no net income to invert")
        gross = self.flats[index] + prev_bucket + over_amount / (1 - rate)
        logger.debug(
            "Net %s maps to gross %s (bracket %d, rate %s, over %s, flat %s)",
            net,
            gross,
            index,
            rate,
            over_amount,
            self.flats[index],
        )
        return gross


def merge_separators(lhs: tuple[Fraction, ...], rhs: tuple[Fraction, ...]) -> list[tuple[str, Fraction]]:
    """Sorted union of two separator lists, tagging each value with its origin."""
    merged: list[tuple[str, Fraction]] = []
    i = j = 0
    while i < len(lhs) and j < len(rhs):
        if lhs[i] == rhs[j]:
            merged.append((SIDE_BOTH, lhs[i]))
            i += 1
            j += 1
        elif lhs[i] < rhs[j]:
            merged.append((SIDE_LHS, lhs[i]))
            i += 1
        else:
            merged.append((SIDE_RHS, rhs[j]))
            j += 1
    merged.extend((SIDE_LHS, value) for value in lhs[i:])
    merged.extend((SIDE_RHS, value) for value in rhs[j:])
    return merged


def merge_brackets(lhs: TaxBrackets, rhs: TaxBrackets) -> TaxBrackets:
    """Combine two schedules into one whose marginal rate is their pointwise sum.

    Flat deductions are not merged; the result is rebuilt from the merged
    separators and rates.
    """
    tagged = merge_separators(lhs.separators, rhs.separators)

    lhs_index = 0
    rhs_index = 0
    rates = [lhs.rates[0] + rhs.rates[0]]
    for side, _ in tagged:
        if side in (SIDE_LHS, SIDE_BOTH):
            lhs_index += 1
        if side in (SIDE_RHS, SIDE_BOTH):
            rhs_index += 1
        rates.append(lhs.rates[lhs_index] + rhs.rates[rhs_index])

    logger.debug("Merged %d + %d separators into %d", len(lhs.separators), len(rhs.separators), len(tagged))
    return TaxBrackets.new((value for _, value in tagged), rates)
