"""Lenient CSV parsing."""

from __future__ import annotations

import csv

from conftest import csv_text, sale_row
from realprice.utils import csv_rows
from realprice.utils.csv_rows import parse_csv_rows


def test_rows_keyed_by_header() -> None:
    rows = parse_csv_rows(csv_text([sale_row()], english_row=False))

    assert len(rows) == 1
    assert rows[0]["鄉鎮市區"] == "西屯區"
    assert rows[0]["總價元"] == "12000000"


def test_ragged_rows_are_tolerated() -> None:
    text = "a,b,c\n1,2\n3,4,5,6\n"
    rows = parse_csv_rows(text)

    assert rows == [{"a": "1", "b": "2", "c": ""}, {"a": "3", "b": "4", "c": "5"}]


def test_quoted_fields_and_blank_lines() -> None:
    text = 'a,b\n"x, y","say ""hi"""\n\n,\n1,2\n'
    rows = parse_csv_rows(text)

    assert rows == [{"a": "x, y", "b": 'say "hi"'}, {"a": "1", "b": "2"}]


def test_header_names_are_stripped() -> None:
    rows = parse_csv_rows(" a , b\n1,2\n")
    assert rows == [{"a": "1", "b": "2"}]


def test_empty_input_yields_no_rows() -> None:
    assert parse_csv_rows("") == []
    assert parse_csv_rows("   \n") == []
    assert parse_csv_rows("a,b\n") == []


def test_parse_error_degrades_to_empty(monkeypatch) -> None:
    class BrokenReader:
        line_num = 3

        def __iter__(self):
            return self

        def __next__(self):
            raise csv.Error("unexpected end of data")

    monkeypatch.setattr(csv_rows.csv, "reader", lambda *a, **k: BrokenReader())

    assert parse_csv_rows("a,b\n1,2\n") == []
