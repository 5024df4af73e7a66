"""MOI actual-price registration (plvr.land.moi.gov.tw) download client.
- one GET per call, redirects followed by hand (Location, may chain)
- no retries here: the crawler skips a failed city and moves on
- requests exceptions are mapped to NetworkError / FetchTimeout / HttpStatusError
"""
from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlencode, urljoin

import requests

from realprice.core.errors import FetchTimeout, HttpStatusError, NetworkError
from realprice.core.settings import settings

LOGGER = logging.getLogger(__name__)

_REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})
_DEFAULT_MAX_REDIRECTS = 5


def build_season_url(season: str, city_code: str, *, base_url: Optional[str] = None) -> str:
    """
    Sale (買賣, "_b") file for one city and season.
    e.g. .../DownloadSeason?season=114S1&type=zip&fileName=B_lvr_land_b.csv
    """
    base = (base_url or settings.LVR_BASE_URL).rstrip("?")
    qs = urlencode({"season": season, "type": "zip", "fileName": f"{city_code}_lvr_land_b.csv"})
    return f"{base}?{qs}"


def download_csv(
    url: str,
    *,
    timeout: Optional[float] = None,
    session: Optional[requests.Session] = None,
    user_agent: Optional[str] = None,
    max_redirects: int = _DEFAULT_MAX_REDIRECTS,
) -> bytes:
    """Return the full response body of ``url`` as bytes."""
    http = session or requests
    headers = {"User-Agent": user_agent or settings.HTTP_USER_AGENT}
    timeout = settings.HTTP_TIMEOUT_SECONDS if timeout is None else timeout

    current = url
    for _ in range(max_redirects + 1):
        try:
            resp = http.get(current, headers=headers, timeout=timeout, allow_redirects=False)
        except requests.exceptions.Timeout as exc:
            raise FetchTimeout(f"timed out after {timeout}s: {current}") from exc
        except requests.exceptions.RequestException as exc:
            raise NetworkError(f"{type(exc).__name__}: {exc}") from exc

        location = (resp.headers or {}).get("Location")
        if resp.status_code in _REDIRECT_STATUSES and location:
            nxt = urljoin(current, location)
            LOGGER.debug("redirect %s -> %s", resp.status_code, nxt)
            current = nxt
            continue

        if not 200 <= resp.status_code < 300:
            raise HttpStatusError(resp.status_code, current)
        return resp.content

    raise NetworkError(f"too many redirects (>{max_redirects}) starting at {url}")


__all__ = ["build_season_url", "download_csv"]
