# realprice/api/transactions.py
from __future__ import annotations

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from realprice.core.errors import RealPriceError
from realprice.db.db_connection import get_db
from realprice.schemas.transaction import CrawlRequest, TransactionOut, TransactionQuery
from realprice.services import queries
from realprice.services.crawler import crawl_all_cities

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["transactions"])


@router.get("/transactions")
def list_transactions(
    district: Optional[str] = Query(None),
    min_price: Optional[int] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[int] = Query(None, alias="maxPrice", ge=0),
    start_date: Optional[str] = Query(None, alias="startDate", pattern=r"^\d{4}-\d{2}-\d{2}$"),
    end_date: Optional[str] = Query(None, alias="endDate", pattern=r"^\d{4}-\d{2}-\d{2}$"),
    project_name: Optional[str] = Query(None, alias="projectName"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
    limit: int = Query(50, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    params = TransactionQuery(
        district=district,
        min_price=min_price,
        max_price=max_price,
        start_date=start_date,
        end_date=end_date,
        project_name=project_name,
        sort_by=sort_by,
        sort_order=sort_order,
        limit=limit,
        offset=offset,
    )
    rows = queries.query_transactions(db, params)
    data = [TransactionOut.model_validate(r).model_dump(mode="json") for r in rows]
    return {"success": True, "data": data, "count": len(data)}


@router.get("/statistics")
def statistics(db: Session = Depends(get_db)):
    return {"success": True, "data": queries.get_statistics(db).model_dump()}


@router.get("/trend")
def trend(district: Optional[str] = Query(None), db: Session = Depends(get_db)):
    data = [p.model_dump() for p in queries.get_price_trend(db, district)]
    return {"success": True, "data": data}


@router.get("/districts")
def districts(db: Session = Depends(get_db)):
    data = [d.model_dump() for d in queries.get_district_analysis(db)]
    return {"success": True, "data": data}


@router.get("/heatmap")
def heatmap(db: Session = Depends(get_db)):
    return {"success": True, "data": queries.get_heatmap_data(db).model_dump()}


@router.post("/crawl")
async def crawl(request: Request, body: Optional[CrawlRequest] = None):
    """Manual trigger. Blocks until every city of the season is processed."""
    body = body or CrawlRequest()
    state = request.app.state
    try:
        count = await run_in_threadpool(
            crawl_all_cities,
            body.season,
            body.roc_year,
            body.quarter,
            engine=state.engine,
            archive_dir=state.settings.CSV_ARCHIVE_DIR,
        )
    except RealPriceError as exc:
        LOGGER.error("manual crawl failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc))
    return {"success": True, "data": {"inserted": count}, "message": f"inserted {count} rows"}
