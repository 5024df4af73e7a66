"""Shared fixtures: in-memory SQLite store and MOI-shaped CSV payloads."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

import pytest

from realprice.db.db_connection import ensure_schema, make_engine, make_session_factory
from realprice.services.loader import insert_transactions_batch
from realprice.services.normalize import normalize_row

# current-vintage header of {code}_lvr_land_b.csv
HEADER: List[str] = [
    "鄉鎮市區",
    "交易標的",
    "土地位置建物門牌",
    "土地移轉總面積平方公尺",
    "交易年月日",
    "移轉層次",
    "總樓層數",
    "建物型態",
    "主要用途",
    "主要建材",
    "建築完成年月",
    "建物移轉總面積平方公尺",
    "總價元",
    "單價元平方公尺",
    "車位類別",
    "車位總價元",
    "備註",
]

# MOI files repeat the header in English as the second line
ENGLISH_HEADER: List[str] = [
    "The villages and towns urban district",
    "transaction sign",
    "land sector position building sector house number plate",
    "land shifting total area square meter",
    "transaction year month and day",
    "shifting level",
    "total floor number",
    "building state",
    "main use",
    "main building materials",
    "construction to complete the years",
    "building shifting total area",
    "total price NTD",
    "the unit price (NTD / square meter)",
    "the berth category",
    "the berth total price NTD",
    "the note",
]


def sale_row(**overrides: str) -> Dict[str, str]:
    row = {
        "鄉鎮市區": "西屯區",
        "交易標的": "房地(土地+建物)",
        "土地位置建物門牌": "臺中市西屯區市政北二路100號五樓",
        "土地移轉總面積平方公尺": "10.5",
        "交易年月日": "1140115",
        "移轉層次": "五層",
        "總樓層數": "十五層",
        "建物型態": "住宅大樓(11層含以上有電梯)",
        "主要用途": "住家用",
        "主要建材": "鋼筋混凝土造",
        "建築完成年月": "1050301",
        "建物移轉總面積平方公尺": "33.0579",
        "總價元": "12000000",
        "單價元平方公尺": "100000",
        "車位類別": "",
        "車位總價元": "0",
        "備註": "",
    }
    row.update(overrides)
    return row


def csv_text(rows: Iterable[Dict[str, str]], header: Optional[List[str]] = None, english_row: bool = True) -> str:
    header = header or HEADER
    lines = [",".join(header)]
    if english_row:
        lines.append(",".join(ENGLISH_HEADER[: len(header)]))
    for row in rows:
        lines.append(",".join(row.get(h, "") for h in header))
    return "\r\n".join(lines) + "\r\n"


def csv_bytes(rows: Iterable[Dict[str, str]], encoding: str = "utf-8-sig", **kwargs) -> bytes:
    return csv_text(rows, **kwargs).encode(encoding)


def distinct_rows(n: int, prefix: str = "") -> List[Dict[str, str]]:
    """n valid rows with distinct natural keys."""
    return [
        sale_row(土地位置建物門牌=f"臺中市西屯區{prefix}測試路{i + 1}號", 總價元=str(1_000_000 + i))
        for i in range(n)
    ]


@pytest.fixture
def engine():
    eng = make_engine("sqlite://")
    ensure_schema(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


# (鄉鎮市區, 門牌, 交易年月日, 總價元, 單價元平方公尺, 建案名稱) in 臺中市
SEED = [
    ("西屯區", "西屯一號", "1140115", "12000000", "100000", "惠宇青雲"),   # 330579 元/坪
    ("西屯區", "西屯二號", "1140220", "8000000", "200000", ""),          # 661158 元/坪
    ("北屯區", "北屯一號", "1131105", "5000000", "50000", ""),           # 165290 元/坪
    ("北屯區", "北屯二號", "1140110", "3000000", "", ""),                # no unit price
]


def seed(session_factory, rows=SEED) -> None:
    """Store the SEED rows (or a subset) through the real normalize/load path."""
    records = [
        normalize_row(
            sale_row(鄉鎮市區=d, 土地位置建物門牌=addr, 交易年月日=date, 總價元=total,
                     單價元平方公尺=unit, 建案名稱=project),
            "臺中市",
            source="臺中市_114S1",
        )
        for d, addr, date, total, unit, project in rows
    ]
    insert_transactions_batch(session_factory, records)
