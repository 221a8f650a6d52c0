"""Location parsing and memoized per-location tax systems."""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
import logging
from typing import Mapping

from .schema import JurisdictionTables
from .tax import TaxSystem, fold_systems

logger = logging.getLogger(__name__)

LOCATION_SEPARATOR = "///"


class LocationError(ValueError):
    """Raised when a location string names an unknown jurisdiction."""


@dataclass(frozen=True, slots=True)
class Location:
    country: str
    state: str
    city: str

    def __str__(self) -> str:
        return LOCATION_SEPARATOR.join((self.country, self.state, self.city))


def _resolve(name: str, aliases: Mapping[str, str], known: Mapping[str, object], kind: str) -> str:
    key = name.strip()
    canonical = aliases.get(key, key)
    if canonical not in known:
        expected = ", ".join(sorted(known))
        raise LocationError(f"unknown {kind} '{name}'; expected one of [{expected}]")
    return canonical


def parse_location(text: str, tables: JurisdictionTables) -> Location:
    """Parse ``COUNTRY///STATE///CITY`` into a Location with canonical names."""
    parts = text.split(LOCATION_SEPARATOR)
    if len(parts) != 3:
        raise LocationError(f"location '{text}' must look like COUNTRY{LOCATION_SEPARATOR}STATE{LOCATION_SEPARATOR}CITY")
    country, state, city = parts
    return Location(
        country=_resolve(country, tables.country_aliases, tables.countries, "country"),
        state=_resolve(state, tables.state_aliases, tables.states, "state"),
        city=_resolve(city, tables.city_aliases, tables.cities, "city"),
    )


class JurisdictionRegistry:
    """Resolves locations to their merged country + state + city tax system.

    Merged systems are memoized per Location. The memo is keyed by immutable
    locations and recomputing an entry yields an equal value, so concurrent
    fills need no locking.
    """

    def __init__(self, tables: JurisdictionTables | None = None) -> None:
        self.tables = tables if tables is not None else JurisdictionTables.default()
        self._cache: dict[Location, TaxSystem | None] = {}

    def parse(self, text: str) -> Location:
        return parse_location(text, self.tables)

    def layers(self, location: Location) -> list[TaxSystem | None]:
        try:
            return [
                self.tables.countries[location.country],
                self.tables.states[location.state],
                self.tables.cities[location.city],
            ]
        except KeyError as exc:
            raise LocationError(f"no tax table for {exc.args[0]!r} in {location}") from exc

    def tax_system(self, location: Location, cached: bool = True) -> TaxSystem | None:
        if cached and location in self._cache:
            return self._cache[location]
        logger.debug("Merging tax layers for %s", location)
        system = fold_systems(self.layers(location))
        if cached:
            self._cache[location] = system
        return system

    def clear_cache(self) -> None:
        self._cache.clear()

    def calc_taxes(self, gross: Fraction, location: Location, filing_status: str) -> Fraction:
        system = self.tax_system(location)
        if system is None:
            return Fraction(0)
        return system.calc_taxes(gross, filing_status)

    def calc_net(self, gross: Fraction, location: Location, filing_status: str) -> Fraction:
        system = self.tax_system(location)
        if system is None:
            return gross
        return system.calc_net(gross, filing_status)

    def calc_gross(self, net: Fraction, location: Location, filing_status: str) -> Fraction:
        system = self.tax_system(location)
        if system is None:
            return net
        return system.calc_gross(net, filing_status)

    def living_cost_factor(self, location: Location) -> Fraction | None:
        return self.tables.living_cost_index.get(location.city)
