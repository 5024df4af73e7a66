# realprice/schemas/transaction.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class TransactionRecord(BaseModel):
    """Canonical record produced by the normalizer (one per valid raw row)."""

    model_config = ConfigDict(frozen=True)

    district: str
    transaction_type: str
    address: str
    project_name: Optional[str] = None
    land_area: Optional[Decimal] = None
    building_area: Optional[Decimal] = None
    floor: Optional[str] = None
    total_floor: Optional[int] = None
    building_type: Optional[str] = None
    main_use: Optional[str] = None
    construction: Optional[str] = None
    build_year: Optional[str] = None
    transaction_date: str
    total_price: int = Field(..., gt=0)
    unit_price: Optional[int] = None
    parking_type: Optional[str] = None
    parking_price: Optional[int] = None
    note: Optional[str] = None
    source: str
    source_encoding: Optional[str] = None
    raw_data: str

    @property
    def natural_key(self) -> tuple:
        return (self.district, self.address, self.transaction_date, self.total_price)


# ───── API responses ─────

class TransactionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    district: str
    transaction_type: str
    address: str
    project_name: Optional[str]
    land_area: Optional[float]
    building_area: Optional[float]
    floor: Optional[str]
    total_floor: Optional[int]
    building_type: Optional[str]
    main_use: Optional[str]
    construction: Optional[str]
    build_year: Optional[str]
    transaction_date: str
    total_price: int
    unit_price: Optional[int]
    parking_type: Optional[str]
    parking_price: Optional[int]
    note: Optional[str]
    source: str
    created_at: Optional[datetime] = None


class TransactionQuery(BaseModel):
    district: Optional[str] = None
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    project_name: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: Literal["asc", "desc"] = "desc"
    limit: Optional[int] = 50
    offset: Optional[int] = 0


class Statistics(BaseModel):
    total_count: int
    avg_unit_price: int
    districts: List[str]
    latest_date: Optional[str]


class TrendPoint(BaseModel):
    month: str
    avg_price: float
    count: int


class DistrictAnalysis(BaseModel):
    district: str
    transaction_count: int
    avg_unit_price: float
    min_unit_price: int
    max_unit_price: int
    avg_total_price: float
    avg_area: Optional[float]
    earliest_date: str
    latest_date: str


class HeatmapDistrict(BaseModel):
    district: str
    avg_unit_price: int
    count: int
    heat: float


class Heatmap(BaseModel):
    districts: List[HeatmapDistrict]
    min: int
    max: int


class CrawlRequest(BaseModel):
    season: Optional[str] = None
    roc_year: Optional[int] = None
    quarter: Optional[int] = None

