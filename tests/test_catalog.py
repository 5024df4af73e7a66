"""Source catalog selection."""

from __future__ import annotations

import pytest

from realprice.core.errors import RealPriceConfigError
from realprice.services.catalog import CITIES, select_cities


def test_select_cities_defaults_to_full_catalog() -> None:
    assert select_cities(None) == CITIES
    assert select_cities([]) == CITIES
    assert len({c.code for c in CITIES}) == len(CITIES) == 22


def test_select_cities_keeps_catalog_order() -> None:
    picked = select_cities(["f", "A", " B "])

    assert [c.code for c in picked] == ["A", "B", "F"]
    assert picked[1].name == "臺中市"


def test_select_cities_rejects_unknown_code() -> None:
    with pytest.raises(RealPriceConfigError):
        select_cities(["B", "L"])
