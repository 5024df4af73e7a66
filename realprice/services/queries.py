# realprice/services/queries.py
"""Read-only queries over ``transactions`` for the reporting API."""
from __future__ import annotations

from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from realprice.models.transaction import Transaction
from realprice.schemas.transaction import (
    DistrictAnalysis,
    Heatmap,
    HeatmapDistrict,
    Statistics,
    TransactionQuery,
    TrendPoint,
)

# sortable columns (anything else falls back to transaction_date)
SORTABLE_FIELDS: Dict[str, object] = {
    "transaction_date": Transaction.transaction_date,
    "total_price": Transaction.total_price,
    "unit_price": Transaction.unit_price,
    "project_name": Transaction.project_name,
    "building_area": Transaction.building_area,
}


def query_transactions(db: Session, params: TransactionQuery) -> List[Transaction]:
    stmt = select(Transaction)

    if params.district:
        stmt = stmt.where(Transaction.district.like(f"%{params.district}%"))
    if params.min_price:
        stmt = stmt.where(Transaction.total_price >= params.min_price)
    if params.max_price:
        stmt = stmt.where(Transaction.total_price <= params.max_price)
    if params.start_date:
        stmt = stmt.where(Transaction.transaction_date >= params.start_date)
    if params.end_date:
        stmt = stmt.where(Transaction.transaction_date <= params.end_date)
    if params.project_name:
        stmt = stmt.where(Transaction.project_name.like(f"%{params.project_name}%"))

    col = SORTABLE_FIELDS.get(params.sort_by or "", Transaction.transaction_date)
    order = col.asc() if params.sort_order == "asc" else col.desc()
    stmt = stmt.order_by(order, Transaction.id.asc())

    if params.limit:
        stmt = stmt.limit(params.limit)
    if params.offset:
        stmt = stmt.offset(params.offset)

    return list(db.execute(stmt).scalars().all())


def get_statistics(db: Session) -> Statistics:
    total = db.execute(select(func.count(Transaction.id))).scalar() or 0
    avg_unit = db.execute(
        select(func.avg(Transaction.unit_price)).where(Transaction.unit_price > 0)
    ).scalar()
    districts = db.execute(
        select(Transaction.district).distinct().order_by(Transaction.district)
    ).scalars().all()
    latest = db.execute(select(func.max(Transaction.transaction_date))).scalar()

    return Statistics(
        total_count=int(total),
        avg_unit_price=round(float(avg_unit or 0)),
        districts=list(districts),
        latest_date=latest,
    )


def get_price_trend(db: Session, district: Optional[str] = None) -> List[TrendPoint]:
    """Monthly average unit price (元/坪), newest month first."""
    month = func.substr(Transaction.transaction_date, 1, 7).label("month")
    stmt = (
        select(
            month,
            func.avg(Transaction.unit_price).label("avg_price"),
            func.count(Transaction.id).label("tx_count"),
        )
        .where(Transaction.unit_price > 0)
    )
    if district:
        stmt = stmt.where(Transaction.district.like(f"%{district}%"))
    stmt = stmt.group_by(month).order_by(month.desc())

    return [
        TrendPoint(month=r.month, avg_price=float(r.avg_price), count=int(r.tx_count))
        for r in db.execute(stmt).all()
    ]


def get_district_analysis(db: Session) -> List[DistrictAnalysis]:
    avg_unit = func.avg(Transaction.unit_price).label("avg_unit_price")
    stmt = (
        select(
            Transaction.district,
            func.count(Transaction.id).label("transaction_count"),
            avg_unit,
            func.min(Transaction.unit_price).label("min_unit_price"),
            func.max(Transaction.unit_price).label("max_unit_price"),
            func.avg(Transaction.total_price).label("avg_total_price"),
            func.avg(Transaction.building_area).label("avg_area"),
            func.min(Transaction.transaction_date).label("earliest_date"),
            func.max(Transaction.transaction_date).label("latest_date"),
        )
        .where(Transaction.unit_price > 0, Transaction.district != "")
        .group_by(Transaction.district)
        .order_by(avg_unit.desc())
    )

    out: List[DistrictAnalysis] = []
    for r in db.execute(stmt).mappings().all():
        out.append(DistrictAnalysis(
            district=r["district"],
            transaction_count=int(r["transaction_count"]),
            avg_unit_price=float(r["avg_unit_price"]),
            min_unit_price=int(r["min_unit_price"]),
            max_unit_price=int(r["max_unit_price"]),
            avg_total_price=float(r["avg_total_price"]),
            avg_area=(float(r["avg_area"]) if r["avg_area"] is not None else None),
            earliest_date=r["earliest_date"],
            latest_date=r["latest_date"],
        ))
    return out


def get_heatmap_data(db: Session) -> Heatmap:
    """Per-district average unit price with a 0..1 heat value (0.5 when flat)."""
    avg_unit = func.avg(Transaction.unit_price).label("avg_unit_price")
    stmt = (
        select(Transaction.district, avg_unit, func.count(Transaction.id).label("tx_count"))
        .where(Transaction.unit_price > 0, Transaction.district != "")
        .group_by(Transaction.district)
        .order_by(avg_unit.desc())
    )
    rows = db.execute(stmt).all()
    if not rows:
        return Heatmap(districts=[], min=0, max=0)

    prices = [float(r.avg_unit_price) for r in rows]
    lo, hi = min(prices), max(prices)

    return Heatmap(
        districts=[
            HeatmapDistrict(
                district=r.district,
                avg_unit_price=round(p),
                count=int(r.tx_count),
                heat=((p - lo) / (hi - lo) if hi > lo else 0.5),
            )
            for r, p in zip(rows, prices)
        ],
        min=round(lo),
        max=round(hi),
    )


__all__ = [
    "SORTABLE_FIELDS",
    "query_transactions",
    "get_statistics",
    "get_price_trend",
    "get_district_analysis",
    "get_heatmap_data",
]
