import copy
import json
from fractions import Fraction
from pathlib import Path

from taxmove.brackets import TaxBrackets


def write_tables(tmp_path: Path, data: dict, filename: str = "tables.json") -> Path:
    path = tmp_path / filename
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def clone_tables(data: dict) -> dict:
    return copy.deepcopy(data)


def schedule(separators, rates) -> TaxBrackets:
    return TaxBrackets.new(separators, rates)


def probe_incomes(brackets: TaxBrackets) -> list[Fraction]:
    """Incomes at, just around, and between every separator, plus zero and a large value."""
    values = {Fraction(0), Fraction(1, 3), Fraction(2_500_000)}
    previous = Fraction(0)
    for separator in brackets.separators:
        values.update({separator - Fraction(1, 100), separator, separator + Fraction(1, 100), (previous + separator) / 2})
        previous = separator
    return sorted(v for v in values if v >= 0)
