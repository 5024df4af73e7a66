# realprice/services/season.py
"""Season (reporting quarter) identifiers: ``{ROC year}S{quarter}`` e.g. ``114S1``."""
from __future__ import annotations

import re
from datetime import date
from typing import Optional

ROC_YEAR_OFFSET = 1911

_SEASON_RE = re.compile(r"^\d{1,3}S[1-4]$")


def current_season(today: Optional[date] = None) -> str:
    """
    Latest quarter whose filing window has plausibly closed.
    Jan-Mar looks back to Q4 of the previous year.
    """
    today = today or date.today()
    roc_year = today.year - ROC_YEAR_OFFSET
    month = today.month

    if month <= 3:
        return f"{roc_year - 1}S4"
    if month <= 6:
        quarter = 1
    elif month <= 9:
        quarter = 2
    else:
        quarter = 3
    return f"{roc_year}S{quarter}"


def build_season(
    roc_year: Optional[int] = None,
    quarter: Optional[int] = None,
    today: Optional[date] = None,
) -> str:
    # out-of-range input falls back to the current season instead of failing
    if not roc_year or not quarter:
        return current_season(today)
    if roc_year < 1 or roc_year > 200:
        return current_season(today)
    if quarter < 1 or quarter > 4:
        return current_season(today)
    return f"{roc_year}S{quarter}"


def resolve_season(
    season: Optional[str] = None,
    roc_year: Optional[int] = None,
    quarter: Optional[int] = None,
    today: Optional[date] = None,
) -> str:
    """Explicit season string wins; otherwise (year, quarter); otherwise current."""
    if season:
        s = season.strip().upper()
        if _SEASON_RE.match(s):
            return s
    return build_season(roc_year, quarter, today)


__all__ = ["ROC_YEAR_OFFSET", "current_season", "build_season", "resolve_season"]
