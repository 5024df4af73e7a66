# realprice/services/crawler.py
"""
實價登錄 (actual-price registration) season crawler.
- cities are processed one at a time, in catalog order, with a polite pause in between
- a failing city is logged and counts 0; the run always continues
- only schema initialization failure aborts the run
"""
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, Optional, Sequence

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from realprice.core.errors import RealPriceError
from realprice.core.settings import settings as default_settings
from realprice.db.db_connection import ensure_schema, make_session_factory
from realprice.services.catalog import City, select_cities
from realprice.services.loader import insert_transactions_batch
from realprice.services.lvr_client import build_season_url, download_csv
from realprice.services.normalize import normalize_rows
from realprice.services.season import resolve_season
from realprice.utils.csv_rows import parse_csv_rows
from realprice.utils.encoding import decode_payload

LOGGER = logging.getLogger(__name__)

Fetcher = Callable[[str], bytes]


def save_csv_file(raw: bytes, season: str, city_name: str, archive_dir: str | Path) -> Path:
    """Keep the raw payload as published: {archive_dir}/{season}/{city}_{season}.csv"""
    csv_dir = Path(archive_dir) / season
    csv_dir.mkdir(parents=True, exist_ok=True)
    path = csv_dir / f"{city_name}_{season}.csv"
    path.write_bytes(raw)
    LOGGER.info("saved raw CSV: %s", path)
    return path


def crawl_city(
    city: City,
    season: str,
    *,
    session_factory: sessionmaker,
    fetch: Fetcher = download_csv,
    base_url: Optional[str] = None,
    legacy_encoding: Optional[str] = None,
    archive_dir: Optional[str | Path] = None,
) -> int:
    """Download -> decode -> parse -> normalize -> load one city. Returns new rows."""
    url = build_season_url(season, city.code, base_url=base_url)
    LOGGER.info("download %s (%s) %s", city.name, season, url)

    try:
        raw = fetch(url)
        decoded = decode_payload(raw, legacy_encoding or default_settings.LEGACY_ENCODING)
        rows = parse_csv_rows(decoded.text)

        if not rows:
            LOGGER.warning("%s (%s): no rows", city.name, season)
            return 0

        if archive_dir:
            try:
                save_csv_file(raw, season, city.name, archive_dir)
            except OSError as exc:
                LOGGER.warning("%s: raw CSV not archived: %s", city.name, exc)

        result = normalize_rows(
            rows, city.name, source=f"{city.name}_{season}", encoding=decoded.encoding,
        )
        inserted = insert_transactions_batch(session_factory, result.records)
    except RealPriceError as exc:
        LOGGER.error("%s (%s) failed: %s: %s", city.name, season, type(exc).__name__, exc)
        return 0
    except Exception:
        LOGGER.exception("%s (%s) failed with an unexpected error", city.name, season)
        return 0

    LOGGER.info(
        "%s: inserted %s/%s (rejected=%s %s, encoding=%s)",
        city.name, inserted, len(result.records), result.rejected,
        dict(result.reasons), decoded.encoding,
    )
    return inserted


def crawl_all_cities(
    season: Optional[str] = None,
    roc_year: Optional[int] = None,
    quarter: Optional[int] = None,
    *,
    engine: Engine,
    cities: Optional[Sequence[City]] = None,
    fetch: Fetcher = download_csv,
    sleep: Callable[[float], None] = time.sleep,
    delay_seconds: Optional[float] = None,
    base_url: Optional[str] = None,
    legacy_encoding: Optional[str] = None,
    archive_dir: Optional[str | Path] = None,
) -> int:
    """Crawl every catalog city for one season; returns the total of new rows."""
    target_season = resolve_season(season, roc_year, quarter)
    targets = list(cities) if cities is not None else select_cities(default_settings.city_codes)
    delay = default_settings.CRAWL_DELAY_SECONDS if delay_seconds is None else delay_seconds

    LOGGER.info("crawl start season=%s cities=%s", target_season, ",".join(c.code for c in targets))

    ensure_schema(engine)  # fatal on failure
    session_factory = make_session_factory(engine)

    total_inserted = 0
    for i, city in enumerate(targets):
        if i > 0 and delay > 0:
            sleep(delay)
        total_inserted += crawl_city(
            city,
            target_season,
            session_factory=session_factory,
            fetch=fetch,
            base_url=base_url,
            legacy_encoding=legacy_encoding,
            archive_dir=archive_dir,
        )

    LOGGER.info("crawl done season=%s total_inserted=%s", target_season, total_inserted)
    return total_inserted


__all__ = ["crawl_all_cities", "crawl_city", "save_csv_file"]
