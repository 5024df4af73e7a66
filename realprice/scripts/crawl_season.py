# -*- coding: utf-8 -*-
"""
實價登錄 season crawl (manual trigger)
- season string wins:          python -m realprice.scripts.crawl_season 114S1
- or ROC year + quarter:       python -m realprice.scripts.crawl_season "" 113 4
- nothing: latest closed quarter
- --cities B,F limits the crawl to some catalog codes

Prints the number of newly inserted rows; exit code 1 when the run cannot start.
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv
load_dotenv(dotenv_path=os.path.join(os.getcwd(), ".env"), override=False)

from realprice.core.errors import RealPriceError
from realprice.core.settings import settings
from realprice.db.db_connection import make_engine
from realprice.services.catalog import select_cities
from realprice.services.crawler import crawl_all_cities

LOGGER = logging.getLogger("realprice.crawl")


def _optional_int(v: str) -> Optional[int]:
    v = (v or "").strip()
    return int(v) if v.lstrip("-").isdigit() else None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="實價登錄 season crawler")
    parser.add_argument("season", nargs="?", default=None, help="e.g. 114S1")
    parser.add_argument("roc_year", nargs="?", type=_optional_int, default=None, help="ROC year, e.g. 113")
    parser.add_argument("quarter", nargs="?", type=_optional_int, default=None, help="1-4")
    parser.add_argument("--cities", default=None, help="comma separated city codes, e.g. A,B,F")
    parser.add_argument("--database-url", default=None, help="override DATABASE_URL")
    parser.add_argument("--delay", type=float, default=None, help="seconds between cities")
    parser.add_argument("--archive-dir", default=None, help="keep raw CSV payloads here")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    try:
        codes = args.cities.split(",") if args.cities else settings.city_codes
        engine = make_engine(args.database_url or settings.DATABASE_URL)
        try:
            count = crawl_all_cities(
                args.season or None,
                args.roc_year,
                args.quarter,
                engine=engine,
                cities=select_cities(codes),
                delay_seconds=args.delay,
                archive_dir=args.archive_dir or settings.CSV_ARCHIVE_DIR,
            )
        finally:
            engine.dispose()
    except RealPriceError as exc:
        LOGGER.error("crawl aborted: %s", exc)
        print(f"❌ crawl aborted: {exc}", file=sys.stderr)
        return 1

    print(f"✅ inserted {count} rows")
    return 0


if __name__ == "__main__":
    sys.exit(main())
