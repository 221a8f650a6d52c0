"""Jurisdiction table dataclasses and JSON loading."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from fractions import Fraction
import json
from pathlib import Path
from typing import Any

from .money import MoneyError, to_fraction
from .tax import TaxSystem
from .tax_data import (
    CITY_ALIASES,
    CITY_FLAT_RATES,
    COUNTRY_ALIASES,
    COUNTRY_BRACKETS,
    LIVING_COST_INDEX,
    STATE_ALIASES,
    STATE_BRACKETS,
)


class SchemaError(ValueError):
    """Raised when raw JSON cannot be parsed into jurisdiction tables."""


def _expect_dict(value: Any, path: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise SchemaError(f"{path}: expected object")
    return value


def _expect_list(value: Any, path: str) -> list[Any]:
    if not isinstance(value, list):
        raise SchemaError(f"{path}: expected array")
    return value


def _optional(data: dict[str, Any], key: str, default: Any = None) -> Any:
    return data.get(key, default)


def _parse_rows(value: Any, path: str) -> list[tuple[Any, Any]]:
    rows = []
    for index, row in enumerate(_expect_list(value, path)):
        row = _expect_list(row, f"{path}[{index}]")
        if len(row) != 2:
            raise SchemaError(f"{path}[{index}]: expected [upper_bound, rate]")
        rows.append((row[0], row[1]))
    return rows


def _parse_system(value: Any, path: str) -> TaxSystem | None:
    """A layer is null (no tax), a flat rate, or an object of bracket rows per filing status."""
    if value is None:
        return None
    try:
        if isinstance(value, (str, int, Decimal)) and not isinstance(value, bool):
            return TaxSystem.flat(to_fraction(value, path))
        table = {status: _parse_rows(rows, f"{path}.{status}") for status, rows in _expect_dict(value, path).items()}
        return TaxSystem.from_tables(table)
    except SchemaError:
        raise
    except ValueError as exc:
        raise SchemaError(f"{path}: {exc}") from exc


def _parse_systems(data: dict[str, Any], key: str, path: str) -> dict[str, TaxSystem | None]:
    raw = _expect_dict(_optional(data, key, {}), f"{path}.{key}")
    return {name: _parse_system(value, f"{path}.{key}.{name}") for name, value in raw.items()}


def _parse_index(data: dict[str, Any], path: str) -> dict[str, Fraction]:
    raw = _expect_dict(_optional(data, "living_cost_index", {}), f"{path}.living_cost_index")
    parsed: dict[str, Fraction] = {}
    for city, value in raw.items():
        try:
            index = to_fraction(value, f"{path}.living_cost_index.{city}")
        except MoneyError as exc:
            raise SchemaError(str(exc)) from exc
        if index <= 0:
            raise SchemaError(f"{path}.living_cost_index.{city}: must be > 0")
        parsed[city] = index
    return parsed


def _parse_aliases(data: dict[str, Any], key: str, path: str) -> dict[str, str]:
    raw = _expect_dict(_optional(data, key, {}), f"{path}.{key}")
    for alias, target in raw.items():
        if not isinstance(target, str):
            raise SchemaError(f"{path}.{key}.{alias}: expected string")
    return dict(raw)


@dataclass(slots=True)
class JurisdictionTables:
    countries: dict[str, TaxSystem | None] = field(default_factory=dict)
    states: dict[str, TaxSystem | None] = field(default_factory=dict)
    cities: dict[str, TaxSystem | None] = field(default_factory=dict)
    living_cost_index: dict[str, Fraction] = field(default_factory=dict)
    country_aliases: dict[str, str] = field(default_factory=dict)
    state_aliases: dict[str, str] = field(default_factory=dict)
    city_aliases: dict[str, str] = field(default_factory=dict)

    @classmethod
    def default(cls) -> "JurisdictionTables":
        return cls(
            countries={name: TaxSystem.from_tables(table) for name, table in COUNTRY_BRACKETS.items()},
            states={name: None if table is None else TaxSystem.from_tables(table) for name, table in STATE_BRACKETS.items()},
            cities={name: None if rate is None else TaxSystem.flat(rate) for name, rate in CITY_FLAT_RATES.items()},
            living_cost_index={city: to_fraction(index) for city, index in LIVING_COST_INDEX.items()},
            country_aliases=dict(COUNTRY_ALIASES),
            state_aliases=dict(STATE_ALIASES),
            city_aliases=dict(CITY_ALIASES),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "tables", base: "JurisdictionTables | None" = None) -> "JurisdictionTables":
        """Parse tables, overlaying them on ``base`` when given."""
        tables = cls() if base is None else base.copy()
        tables.countries.update(_parse_systems(data, "countries", path))
        tables.states.update(_parse_systems(data, "states", path))
        tables.cities.update(_parse_systems(data, "cities", path))
        tables.living_cost_index.update(_parse_index(data, path))

        aliases = _expect_dict(_optional(data, "aliases", {}), f"{path}.aliases")
        tables.country_aliases.update(_parse_aliases(aliases, "countries", f"{path}.aliases"))
        tables.state_aliases.update(_parse_aliases(aliases, "states", f"{path}.aliases"))
        tables.city_aliases.update(_parse_aliases(aliases, "cities", f"{path}.aliases"))
        return tables

    def copy(self) -> "JurisdictionTables":
        return JurisdictionTables(
            countries=dict(self.countries),
            states=dict(self.states),
            cities=dict(self.cities),
            living_cost_index=dict(self.living_cost_index),
            country_aliases=dict(self.country_aliases),
            state_aliases=dict(self.state_aliases),
            city_aliases=dict(self.city_aliases),
        )


def load_tables(path: str | Path, base: JurisdictionTables | None = None) -> JurisdictionTables:
    """Load a tables JSON file on top of the built-in tables (or ``base``)."""
    source = Path(path)
    try:
        raw = json.loads(source.read_text(encoding="utf-8"), parse_float=Decimal)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise SchemaError(f"tables: {source} is not valid UTF-8 JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise SchemaError("tables: root must be a JSON object")
    return JurisdictionTables.from_dict(raw, base=base if base is not None else JurisdictionTables.default())
