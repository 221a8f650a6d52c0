import logging

import pytest

from taxmove.location import JurisdictionRegistry
from taxmove.log import PACKAGE_LOGGER
from taxmove.schema import JurisdictionTables


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def registry() -> JurisdictionRegistry:
    return JurisdictionRegistry(JurisdictionTables.default())


@pytest.fixture
def testland_tables_dict() -> dict:
    return {
        "countries": {"Testland": "10%"},
        "states": {
            "North": "5%",
            "South": None,
            "East": {
                "single": [[10000, "0.02"], [None, "0.04"]],
                "joint": [[20000, "0.02"], [None, "0.04"]],
            },
        },
        "cities": {"Alpha": None, "Beta": None, "Gamma": "1/100"},
        "living_cost_index": {"Alpha": 100, "Beta": 150},
        "aliases": {"countries": {"TL": "Testland"}, "cities": {"A": "Alpha"}},
    }


@pytest.fixture
def testland_registry(testland_tables_dict) -> JurisdictionRegistry:
    return JurisdictionRegistry(JurisdictionTables.from_dict(testland_tables_dict))
