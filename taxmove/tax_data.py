"""Tax bracket and living cost reference data for taxmove."""

from __future__ import annotations

from typing import Final

BASE_TAX_YEAR: Final[int] = 2020

FILING_STATUSES: Final[tuple[str, ...]] = ("single", "joint", "separate", "head")

FILING_STATUS_ALIASES: Final[dict[str, str]] = {
    "single": "single",
    "joint": "joint",
    "married_filing_jointly": "joint",
    "separate": "separate",
    "married_filing_separately": "separate",
    "head": "head",
    "head_of_household": "head",
}

# Brackets are (upper_bound, marginal_rate). Upper bound None means infinity.
# Rates are strings so they convert to exact fractions.
Brackets = list[tuple[int | None, str]]

_USA_RATES: Final[tuple[str, ...]] = ("0.10", "0.12", "0.22", "0.24", "0.32", "0.35", "0.37")


def _with_rates(uppers: list[int], rates: tuple[str, ...]) -> Brackets:
    return [*zip(uppers, rates[:-1]), (None, rates[-1])]


COUNTRY_BRACKETS: Final[dict[str, dict[str, Brackets]]] = {
    "USA": {
        "single": _with_rates([9_875, 40_125, 85_525, 163_300, 207_350, 518_400], _USA_RATES),
        "joint": _with_rates([19_750, 80_250, 171_050, 326_600, 414_700, 622_050], _USA_RATES),
        "separate": _with_rates([9_875, 40_125, 85_525, 163_300, 207_350, 311_025], _USA_RATES),
        "head": _with_rates([14_100, 53_700, 85_500, 163_300, 207_350, 518_400], _USA_RATES),
    }
}

_CA_RATES: Final[tuple[str, ...]] = (
    "0.011",
    "0.022",
    "0.044",
    "0.066",
    "0.088",
    "0.1023",
    "0.1133",
    "0.1243",
    "0.1353",
    "0.1463",
)

# None means the state levies no income tax.
STATE_BRACKETS: Final[dict[str, dict[str, Brackets] | None]] = {
    "CA": {
        "single": _with_rates([8_809, 20_883, 32_960, 45_753, 57_824, 295_373, 354_445, 590_742, 1_000_000], _CA_RATES),
        "joint": _with_rates([17_618, 41_766, 65_920, 91_506, 115_648, 590_746, 708_890, 1_000_000, 1_181_484], _CA_RATES),
        "separate": _with_rates([8_809, 20_883, 32_960, 45_753, 57_824, 295_373, 354_445, 590_742, 1_000_000], _CA_RATES),
        "head": _with_rates([17_629, 41_768, 53_843, 66_636, 78_710, 401_705, 482_047, 803_410, 1_000_000], _CA_RATES),
    },
    "TX": None,
    "WA": None,
    "FL": None,
}

# City taxes apply one flat rate to every filing status. None means no city tax.
CITY_FLAT_RATES: Final[dict[str, str | None]] = {
    "San Francisco": "0.015",
    "Los Angeles": None,
    "Austin": None,
    "Seattle": None,
    "Miami": None,
}

# Cost of living by city, national average = 100.
LIVING_COST_INDEX: Final[dict[str, str]] = {
    "San Francisco": "179",
    "Los Angeles": "149",
    "Austin": "119",
    "Seattle": "152",
    "Miami": "123",
}

COUNTRY_ALIASES: Final[dict[str, str]] = {
    "USA": "USA",
    "US": "USA",
    "United States": "USA",
    "America": "USA",
}

STATE_ALIASES: Final[dict[str, str]] = {
    "CA": "CA",
    "California": "CA",
    "TX": "TX",
    "Texas": "TX",
    "WA": "WA",
    "Washington": "WA",
    "FL": "FL",
    "Florida": "FL",
}

CITY_ALIASES: Final[dict[str, str]] = {
    "SF": "San Francisco",
    "LA": "Los Angeles",
    "AUS": "Austin",
    "SEA": "Seattle",
    "MIA": "Miami",
}
