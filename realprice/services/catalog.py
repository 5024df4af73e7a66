# realprice/services/catalog.py
from __future__ import annotations

from typing import Iterable, List, NamedTuple, Optional

from realprice.core.errors import RealPriceConfigError


class City(NamedTuple):
    code: str
    name: str


# MOI open data file prefixes ({code}_lvr_land_b.csv), fixed crawl order
CITIES: List[City] = [
    City("A", "臺北市"),
    City("B", "臺中市"),
    City("C", "基隆市"),
    City("D", "臺南市"),
    City("E", "高雄市"),
    City("F", "新北市"),
    City("G", "宜蘭縣"),
    City("H", "桃園市"),
    City("I", "嘉義市"),
    City("J", "新竹縣"),
    City("K", "苗栗縣"),
    City("M", "南投縣"),
    City("N", "彰化縣"),
    City("O", "新竹市"),
    City("P", "雲林縣"),
    City("Q", "嘉義縣"),
    City("T", "屏東縣"),
    City("U", "花蓮縣"),
    City("V", "臺東縣"),
    City("W", "金門縣"),
    City("X", "澎湖縣"),
    City("Z", "連江縣"),
]

CITY_BY_CODE = {c.code: c for c in CITIES}


def select_cities(codes: Optional[Iterable[str]] = None) -> List[City]:
    """Subset of the catalog (catalog order kept). Empty/None -> all cities."""
    wanted = [c.strip().upper() for c in (codes or []) if c and c.strip()]
    if not wanted:
        return list(CITIES)

    unknown = sorted(set(wanted) - set(CITY_BY_CODE))
    if unknown:
        raise RealPriceConfigError(f"unknown city code(s): {', '.join(unknown)}")
    return [c for c in CITIES if c.code in set(wanted)]


__all__ = ["City", "CITIES", "CITY_BY_CODE", "select_cities"]
