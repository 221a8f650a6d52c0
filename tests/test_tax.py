from fractions import Fraction

import pytest

from taxmove.brackets import BracketError, TaxBrackets
from taxmove.tax import TaxSystem, brackets_from_rows, fold_systems, merge_systems, normalize_filing_status
from taxmove.tax_data import COUNTRY_BRACKETS, FILING_STATUSES, STATE_BRACKETS
from tests.helpers import schedule


def _system(**by_status: TaxBrackets) -> TaxSystem:
    return TaxSystem(by_status)


def test_usa_federal_tax_progressive():
    usa = TaxSystem.from_tables(COUNTRY_BRACKETS["USA"])
    assert usa.calc_taxes(Fraction(100_000), "single") == Fraction("18079.5")
    assert usa.calc_net(Fraction(100_000), "single") == Fraction("81920.5")
    assert usa.calc_gross(Fraction("81920.5"), "single") == 100_000


def test_joint_brackets_are_wider_than_single():
    usa = TaxSystem.from_tables(COUNTRY_BRACKETS["USA"])
    assert usa.calc_taxes(Fraction(150_000), "joint") < usa.calc_taxes(Fraction(150_000), "single")


def test_2020_tax_data_baselines():
    assert COUNTRY_BRACKETS["USA"]["single"][0] == (9_875, "0.10")
    assert COUNTRY_BRACKETS["USA"]["single"][-1] == (None, "0.37")
    assert STATE_BRACKETS["CA"]["head"][-1] == (None, "0.1463")
    assert STATE_BRACKETS["TX"] is None
    for table in (COUNTRY_BRACKETS["USA"], STATE_BRACKETS["CA"]):
        assert set(table) == set(FILING_STATUSES)


def test_california_top_rate_applies_over_a_million():
    ca = TaxSystem.from_tables(STATE_BRACKETS["CA"])
    brackets = ca.brackets_for("single")
    assert brackets.rate_at(Fraction(1_000_000)) == Fraction("0.1353")
    assert brackets.rate_at(Fraction(1_000_001)) == Fraction("0.1463")


def test_missing_status_is_untaxed_identity():
    system = _system(single=schedule([10000], ["0.10", "0.20"]))
    assert system.calc_taxes(Fraction(50_000), "joint") == 0
    assert system.calc_net(Fraction(50_000), "joint") == 50_000
    assert system.calc_gross(Fraction(50_000), "joint") == 50_000


def test_flat_system_covers_every_status():
    system = TaxSystem.flat("0.015")
    assert system.statuses == FILING_STATUSES
    for status in FILING_STATUSES:
        assert system.calc_taxes(Fraction(200_000), status) == 3000


def test_merge_systems_unions_statuses():
    lhs = _system(single=schedule([10000], ["0.10", "0.20"]), joint=schedule([], ["0.05"]))
    rhs = _system(single=schedule([5000], ["0.05", "0.15"]), head=schedule([], ["0.02"]))
    merged = merge_systems(lhs, rhs)

    assert merged.statuses == ("single", "joint", "head")
    assert merged.brackets_for("single").rates == (Fraction(15, 100), Fraction(25, 100), Fraction(35, 100))
    assert merged.brackets_for("joint") == lhs.brackets_for("joint")
    assert merged.brackets_for("head") == rhs.brackets_for("head")
    assert merged.brackets_for("separate") is None


def test_merge_systems_taxes_add_per_status():
    usa = TaxSystem.from_tables(COUNTRY_BRACKETS["USA"])
    ca = TaxSystem.from_tables(STATE_BRACKETS["CA"])
    merged = merge_systems(usa, ca)
    for status in FILING_STATUSES:
        for gross in (Fraction(0), Fraction(45_753), Fraction(123_456), Fraction(2_000_000)):
            assert merged.calc_taxes(gross, status) == usa.calc_taxes(gross, status) + ca.calc_taxes(gross, status)


def test_fold_systems_skips_untaxed_layers():
    usa = TaxSystem.from_tables(COUNTRY_BRACKETS["USA"])
    city = TaxSystem.flat("0.015")
    folded = fold_systems([usa, None, city])
    assert folded == merge_systems(usa, city)
    assert fold_systems([None, None]) is None
    assert fold_systems([usa]) is usa


def test_systems_do_not_share_input_mapping():
    by_status = {"single": schedule([], ["0.1"])}
    system = TaxSystem(by_status)
    by_status["joint"] = schedule([], ["0.2"])
    assert system.statuses == ("single",)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("single", "single"), ("Joint", "joint"), ("married_filing_separately", "separate"), ("head_of_household", "head")],
)
def test_normalize_filing_status_accepts_aliases(raw, expected):
    assert normalize_filing_status(raw) == expected


def test_invalid_filing_status_raises():
    with pytest.raises(ValueError, match="unsupported filing_status"):
        normalize_filing_status("bad_status")


def test_brackets_from_rows_requires_unbounded_last_row():
    assert brackets_from_rows([(100, "0.1"), (None, "0.2")]) == schedule([100], ["0.1", "0.2"])
    with pytest.raises(BracketError, match="last bracket must be unbounded"):
        brackets_from_rows([(100, "0.1"), (200, "0.2")])
    with pytest.raises(BracketError, match="only the last bracket may be unbounded"):
        brackets_from_rows([(None, "0.1"), (None, "0.2")])
    with pytest.raises(BracketError, match="at least one bracket row"):
        brackets_from_rows([])


def test_tax_system_is_slotted_and_frozen():
    system = TaxSystem.flat("0.1")
    assert not hasattr(system, "__dict__")
    with pytest.raises(AttributeError):
        system.by_status = {}
