"""Scalar helpers for normalising MOI actual-price CSV values."""
from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

from realprice.services.season import ROC_YEAR_OFFSET

SQM_PER_PING = Decimal("3.30579")  # 1 坪 = 3.30579 m²

_NON_DIGIT_RE = re.compile(r"\D")
_GREGORIAN_8_RE = re.compile(r"^(19|20)\d{6}$")
_TWO_PLACES = Decimal("0.01")

_CN_DIGITS = {
    "零": 0, "〇": 0, "一": 1, "二": 2, "兩": 2, "三": 3, "四": 4,
    "五": 5, "六": 6, "七": 7, "八": 8, "九": 9,
}
_CN_UNITS = {"十": 10, "百": 100}

# |value| < 10**18, so converted ints (x 3.30579 included) fit a signed 64-bit column
_MAX_ADJUSTED_EXPONENT = 17


def none_if_blank(v: object) -> Optional[str]:
    if v is None:
        return None
    s = str(v).strip()
    return s if s != "" else None


def to_decimal(v: object) -> Optional[Decimal]:
    """'1,234.5' -> Decimal('1234.5'); blank, garbage or out-of-range -> None."""
    s = none_if_blank(v)
    if s is None:
        return None
    try:
        d = Decimal(s.replace(",", ""))
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not d.is_finite() or d.adjusted() > _MAX_ADJUSTED_EXPONENT:
        return None
    return d


def to_int(v: object) -> Optional[int]:
    """Integer part of a numeric string ('12,000' -> 12000, '3.9' -> 3)."""
    d = to_decimal(v)
    if d is None:
        return None
    return int(d)


def chinese_numeral_to_int(value: object) -> Optional[int]:
    """
    Floor counts as published: '十五層' -> 15, '二十一' -> 21, '地下一層' -> -1.
    Plain digits are accepted as well. Anything else -> None.
    """
    s = none_if_blank(value)
    if s is None:
        return None
    s = s.rstrip("層樓")
    negative = s.startswith("地下")
    if negative:
        s = s[2:]
    if not s:
        return None

    if s.isdigit():
        n = int(s)
    else:
        total, digit = 0, None
        for ch in s:
            if ch in _CN_DIGITS:
                digit = _CN_DIGITS[ch]
            elif ch in _CN_UNITS:
                total += (1 if digit is None else digit) * _CN_UNITS[ch]
                digit = None
            else:
                return None
        n = total + (digit or 0)
    return -n if negative else n


def to_int_loose(v: object) -> Optional[int]:
    """to_int(), then Chinese numerals; 0 counts as absent."""
    n = to_int(v)
    if n is None:
        n = chinese_numeral_to_int(v)
    return n or None


def roc_to_iso_date(value: object) -> Optional[str]:
    """
    Transaction date -> 'YYYY-MM-DD'.
    - non-digits are stripped first ('114/01/15' -> '1140115')
    - 8 digits starting 19/20: already Gregorian YYYYMMDD
    - otherwise leading (len-4) digits are the ROC year (+1911), then MMDD
    - rejected (None): < 5 digits, month not 1-12, day not 1-31, year outside 1911..2100
    """
    digits = _NON_DIGIT_RE.sub("", str(value or ""))
    if len(digits) < 5:
        return None

    if len(digits) == 8 and _GREGORIAN_8_RE.match(digits):
        year = int(digits[:4])
    else:
        year = int(digits[:-4]) + ROC_YEAR_OFFSET
    month, day = int(digits[-4:-2]), int(digits[-2:])

    if not 1911 <= year <= 2100:
        return None
    if not 1 <= month <= 12:
        return None
    if not 1 <= day <= 31:
        return None
    return f"{year:04d}-{month:02d}-{day:02d}"


def sqm_to_ping(value: object) -> Optional[Decimal]:
    """m² -> 坪, 2 decimals. Non-numeric or <= 0 -> None (absent, not zero)."""
    d = to_decimal(value)
    if d is None or d <= 0:
        return None
    return (d / SQM_PER_PING).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def per_sqm_to_per_ping(value: object) -> Optional[int]:
    """元/m² -> 元/坪, nearest integer. Missing or <= 0 -> None."""
    d = to_decimal(value)
    if d is None or d <= 0:
        return None
    return int((d * SQM_PER_PING).quantize(Decimal(1), rounding=ROUND_HALF_UP))


__all__ = [
    "SQM_PER_PING",
    "none_if_blank",
    "to_decimal",
    "to_int",
    "to_int_loose",
    "chinese_numeral_to_int",
    "roc_to_iso_date",
    "sqm_to_ping",
    "per_sqm_to_per_ping",
]
