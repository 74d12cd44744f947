from __future__ import annotations

from typing import List

from pydantic import Field

from schemas.general import CamelModel


class DimensionBucket(CamelModel):
    name: str
    long: float = 0.0
    short: float = 0.0   # always <= 0
    nmv: float = 0.0
    gmv: float = 0.0
    pnl: float = 0.0


class PortfolioSummary(CamelModel):
    aum: float
    total_long: float = 0.0
    total_short: float = 0.0
    total_pnl: float = 0.0
    nmv: float = 0.0
    gmv: float = 0.0
    long_count: int = 0
    short_count: int = 0
    watchlist_count: int = 0

    by_sector: List[DimensionBucket] = Field(default_factory=list)
    by_industry: List[DimensionBucket] = Field(default_factory=list)
    by_theme: List[DimensionBucket] = Field(default_factory=list)
    by_risk_country: List[DimensionBucket] = Field(default_factory=list)
    by_gic_industry: List[DimensionBucket] = Field(default_factory=list)
    by_exchange_country: List[DimensionBucket] = Field(default_factory=list)
