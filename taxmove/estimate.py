"""Equivalent income estimation between two locations."""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
import logging
from typing import Final

from .location import JurisdictionRegistry, Location
from .tax import normalize_filing_status

logger = logging.getLogger(__name__)

ANALYSIS_MODES: Final[tuple[str, ...]] = ("post_tax", "disposable")
DEFAULT_ANALYSIS_MODE: Final[str] = "disposable"


class EstimateError(ValueError):
    """Raised when the inputs to an estimate are inconsistent."""


class UnsupportedAnalysisError(NotImplementedError):
    """Raised when an analysis mode needs data that is not modeled for a location."""


@dataclass(slots=True)
class EstimateResult:
    mode: str
    equivalent_income: Fraction
    home_net: Fraction
    target_net: Fraction
    home_taxes: Fraction
    target_taxes: Fraction


@dataclass(slots=True)
class Citizen:
    income: Fraction
    filing_status: str
    home: Location

    def __post_init__(self) -> None:
        if self.income < 0:
            raise EstimateError(f"income {self.income} must not be negative")
        self.filing_status = normalize_filing_status(self.filing_status)

    def calc_taxes(self, registry: JurisdictionRegistry) -> Fraction:
        return registry.calc_taxes(self.income, self.home, self.filing_status)

    def calc_taxes_at(self, target: Location, registry: JurisdictionRegistry) -> Fraction:
        return registry.calc_taxes(self.income, target, self.filing_status)

    def _living_cost_ratio(self, target: Location, registry: JurisdictionRegistry) -> Fraction:
        home_index = registry.living_cost_factor(self.home)
        target_index = registry.living_cost_factor(target)
        missing = [str(loc) for loc, index in ((self.home, home_index), (target, target_index)) if index is None]
        if missing:
            raise UnsupportedAnalysisError(f"disposable analysis needs a living cost index for {', '.join(missing)}")
        return target_index / home_index

    def estimate(
        self,
        target: Location,
        registry: JurisdictionRegistry,
        mode: str = DEFAULT_ANALYSIS_MODE,
        fixed_expenses: Fraction = Fraction(0),
    ) -> EstimateResult:
        """Find the gross income at ``target`` that preserves this citizen's position.

        ``post_tax`` keeps net income equal. ``disposable`` also scales what is
        left after ``fixed_expenses`` by the ratio of living costs; the fixed
        expenses themselves are location independent and are added back.
        """
        if mode not in ANALYSIS_MODES:
            expected = ", ".join(ANALYSIS_MODES)
            raise EstimateError(f"unsupported analysis mode '{mode}'; expected one of [{expected}]")
        if fixed_expenses < 0:
            raise EstimateError(f"fixed expenses {fixed_expenses} must not be negative")

        home_net = registry.calc_net(self.income, self.home, self.filing_status)
        logger.info("Net income at %s: %s", self.home, home_net)

        if mode == "post_tax":
            target_net = home_net
        else:
            disposable = home_net - fixed_expenses
            if disposable < 0:
                raise EstimateError(f"fixed expenses {fixed_expenses} exceed net income {home_net}")
            ratio = self._living_cost_ratio(target, registry)
            logger.info("Living cost ratio %s -> %s: %s", self.home, target, ratio)
            target_net = disposable * ratio + fixed_expenses

        equivalent = registry.calc_gross(target_net, target, self.filing_status)
        logger.info("Equivalent income at %s deduced to be %s", target, equivalent)
        return EstimateResult(
            mode=mode,
            equivalent_income=equivalent,
            home_net=home_net,
            target_net=target_net,
            home_taxes=self.income - home_net,
            target_taxes=registry.calc_taxes(equivalent, target, self.filing_status),
        )

    def estimate_equivalent_income_at(
        self,
        target: Location,
        registry: JurisdictionRegistry,
        mode: str = DEFAULT_ANALYSIS_MODE,
        fixed_expenses: Fraction = Fraction(0),
    ) -> Fraction:
        return self.estimate(target, registry, mode, fixed_expenses).equivalent_income
