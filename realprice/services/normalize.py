# realprice/services/normalize.py
"""
MOI CSV row -> TransactionRecord.

Header names differ between releases (older files use parenthesised units such
as '總價(元)', newer ones '總價元'; some exports ship the English header row).
Every field is looked up through FIELD_CANDIDATES in order; a new vintage only
needs one more entry there.
"""
from __future__ import annotations

import json
import re
from collections import Counter
from typing import Dict, Iterable, Mapping, NamedTuple, Optional, Tuple

from realprice.core.errors import ValidationRejected
from realprice.schemas.transaction import TransactionRecord
from realprice.utils.normalize import (
    none_if_blank,
    per_sqm_to_per_ping,
    roc_to_iso_date,
    sqm_to_ping,
    to_int,
    to_int_loose,
)

DEFAULT_TRANSACTION_TYPE = "房地(土地+建物)"

FIELD_CANDIDATES: Dict[str, Tuple[str, ...]] = {
    "district": ("鄉鎮市區", "The villages and towns urban district"),
    # district fallback prefers the sector/house-number column
    "location": ("土地區段位置或建物區門牌", "土地位置建物門牌", "land sector position building sector house number plate"),
    "address": ("土地位置建物門牌", "土地區段位置或建物區門牌", "land sector position building sector house number plate"),
    "transaction_type": ("交易標的", "transaction sign"),
    "project_name": ("建案名稱", "project name"),
    "land_area": ("土地移轉總面積平方公尺", "土地移轉總面積(平方公尺)", "land shifting total area square meter"),
    "building_area": ("建物移轉總面積平方公尺", "建物移轉總面積(平方公尺)", "building shifting total area"),
    "floor": ("移轉層次", "shifting level"),
    "total_floor": ("總樓層數", "total floor number"),
    "building_type": ("建物型態", "building state"),
    "main_use": ("主要用途", "main use"),
    "construction": ("主要建材", "main building materials"),
    "build_year": ("建築完成年月", "construction to complete the years"),
    "transaction_date": ("交易年月日", "transaction year month and day"),
    "total_price": ("總價元", "總價(元)", "total price NTD"),
    "unit_price": ("單價元平方公尺", "單價(元/平方公尺)", "the unit price (NTD / square meter)"),
    "parking_type": ("車位類別", "the berth category"),
    "parking_price": ("車位總價元", "車位總價(元)", "the berth total price NTD"),
    "note": ("備註", "the note"),
}

# "臺中市西屯區..." -> "西屯區"
_CITY_CHILD_RE = re.compile(r"^(.*?[市縣])(.+?(區|市|鎮|鄉))")
_ANY_DISTRICT_RE = re.compile(r"(.+?(區|市|鎮|鄉))")


class NormalizeResult(NamedTuple):
    records: list
    rejected: int
    reasons: Counter


def pick(row: Mapping[str, object], field: str) -> Optional[str]:
    """First present, non-blank value among the field's candidate headers."""
    for key in FIELD_CANDIDATES[field]:
        v = none_if_blank(row.get(key))
        if v is not None:
            return v
    return None


def pick_raw(row: Mapping[str, object], field: str) -> Optional[str]:
    """Like pick(), but the value is returned as published (no stripping)."""
    for key in FIELD_CANDIDATES[field]:
        v = row.get(key)
        if none_if_blank(v) is not None:
            return str(v)
    return None


def extract_district(row: Mapping[str, object]) -> str:
    direct = pick(row, "district")
    if direct:
        return direct

    location = pick(row, "location")
    if not location:
        return ""

    m = _CITY_CHILD_RE.match(location)
    if m and m.group(2):
        return m.group(2)

    m = _ANY_DISTRICT_RE.search(location)
    return m.group(1) if m else ""


def qualify_district(district: str, city_name: str) -> str:
    if not district:
        return city_name
    return district if district.startswith(city_name) else f"{city_name}{district}"


def normalize_row(
    row: Mapping[str, object],
    city_name: str,
    *,
    source: str,
    encoding: Optional[str] = None,
) -> TransactionRecord:
    """Raises ValidationRejected for rows without a usable date or price."""
    transaction_date = roc_to_iso_date(pick(row, "transaction_date"))
    if not transaction_date:
        raise ValidationRejected("invalid_date")

    total_price = to_int(pick(row, "total_price")) or 0
    if total_price <= 0:
        raise ValidationRejected("non_positive_price")

    return TransactionRecord(
        district=qualify_district(extract_district(row), city_name),
        transaction_type=pick(row, "transaction_type") or DEFAULT_TRANSACTION_TYPE,
        address=pick_raw(row, "address") or "",
        project_name=pick(row, "project_name"),
        land_area=sqm_to_ping(pick(row, "land_area")),
        building_area=sqm_to_ping(pick(row, "building_area")),
        floor=pick(row, "floor"),
        total_floor=to_int_loose(pick(row, "total_floor")),
        building_type=pick(row, "building_type"),
        main_use=pick(row, "main_use"),
        construction=pick(row, "construction"),
        build_year=pick(row, "build_year"),
        transaction_date=transaction_date,
        total_price=total_price,
        unit_price=per_sqm_to_per_ping(pick(row, "unit_price")),
        parking_type=pick(row, "parking_type"),
        parking_price=to_int(pick(row, "parking_price")) or None,
        note=pick(row, "note"),
        source=source,
        source_encoding=encoding,
        raw_data=json.dumps(dict(row), ensure_ascii=False),
    )


def normalize_rows(
    rows: Iterable[Mapping[str, object]],
    city_name: str,
    *,
    source: str,
    encoding: Optional[str] = None,
) -> NormalizeResult:
    # rejected rows are counted, not logged
    records = []
    reasons: Counter = Counter()
    for row in rows:
        try:
            records.append(normalize_row(row, city_name, source=source, encoding=encoding))
        except ValidationRejected as exc:
            reasons[exc.reason] += 1
    return NormalizeResult(records, sum(reasons.values()), reasons)


__all__ = [
    "DEFAULT_TRANSACTION_TYPE",
    "FIELD_CANDIDATES",
    "NormalizeResult",
    "pick",
    "pick_raw",
    "extract_district",
    "qualify_district",
    "normalize_row",
    "normalize_rows",
]
