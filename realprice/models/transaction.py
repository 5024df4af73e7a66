"""SQLAlchemy model for actual-price registration sale transactions."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, Index, Integer, Numeric, Text, UniqueConstraint
from sqlalchemy.sql import func

from realprice.db.orm_registry import Base

# natural key: a re-run of the same season never duplicates a deal
NATURAL_KEY = ("district", "address", "transaction_date", "total_price")


class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        UniqueConstraint(*NATURAL_KEY, name="uq_transactions_natural_key"),
        Index("idx_transactions_unit_price", "unit_price"),
        Index("idx_transactions_total_price", "total_price"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    district = Column(Text, nullable=False, index=True)          # 縣市 + 鄉鎮市區
    transaction_type = Column(Text, nullable=False)              # 交易標的
    address = Column(Text, nullable=False)                       # 土地位置建物門牌
    project_name = Column(Text, nullable=True, index=True)       # 建案名稱 (presale only)
    land_area = Column(Numeric(12, 2), nullable=True)            # 坪
    building_area = Column(Numeric(12, 2), nullable=True)        # 坪
    floor = Column(Text, nullable=True)                          # 移轉層次 (as published)
    total_floor = Column(Integer, nullable=True)                 # 總樓層數
    building_type = Column(Text, nullable=True)                  # 建物型態
    main_use = Column(Text, nullable=True)                       # 主要用途
    construction = Column(Text, nullable=True)                   # 主要建材
    build_year = Column(Text, nullable=True)                     # 建築完成年月 (ROC text)
    transaction_date = Column(Text, nullable=False, index=True)  # YYYY-MM-DD
    total_price = Column(Integer, nullable=False)                # 元
    unit_price = Column(Integer, nullable=True)                  # 元/坪
    parking_type = Column(Text, nullable=True)                   # 車位類別
    parking_price = Column(Integer, nullable=True)               # 車位總價元
    note = Column(Text, nullable=True)                           # 備註

    # provenance
    source = Column(Text, nullable=False)                        # "{city}_{season}"
    source_encoding = Column(Text, nullable=True)                # utf-8 / cp950
    raw_data = Column(Text, nullable=False)                      # original row (JSON)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
