from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from schemas.general import CamelModel, ORMCamelModel, PatchModel

Direction = Literal["long", "short", "/"]


class TaxonomyRef(ORMCamelModel):
    id: int
    type: str
    name: str
    parent_id: Optional[int] = None
    sort_order: int = 0


class PositionBase(CamelModel):
    name_en: str = ""
    name_cn: str = ""
    market: str = ""
    sector_id: Optional[int] = None
    theme_id: Optional[int] = None
    topdown_id: Optional[int] = None
    priority: str = ""
    long_short: Direction = "/"
    market_cap_local: float = 0.0
    market_cap_rmb: float = 0.0
    profit_2025: float = 0.0
    pe_2026: float = 0.0
    pe_2027: float = 0.0
    price_tag: str = ""
    position_amount: float = Field(default=0.0, ge=0)
    position_weight: float = 0.0


class PositionCreate(PositionBase):
    ticker_bbg: str

    @field_validator("ticker_bbg")
    @classmethod
    def validate_ticker(cls, value: str) -> str:
        ticker = (value or "").strip()
        if not ticker:
            raise ValueError("tickerBbg is required")
        return ticker


class PositionUpdate(PatchModel):
    """Partial update; only fields present in the request body are applied."""

    ticker_bbg: Optional[str] = None
    name_en: Optional[str] = None
    name_cn: Optional[str] = None
    market: Optional[str] = None
    sector_id: Optional[int] = None
    theme_id: Optional[int] = None
    topdown_id: Optional[int] = None
    priority: Optional[str] = None
    long_short: Optional[Direction] = None
    market_cap_local: Optional[float] = None
    market_cap_rmb: Optional[float] = None
    profit_2025: Optional[float] = None
    pe_2026: Optional[float] = None
    pe_2027: Optional[float] = None
    price_tag: Optional[str] = None
    position_amount: Optional[float] = Field(default=None, ge=0)
    position_weight: Optional[float] = None
    market_cap_date: Optional[datetime] = None


class PositionOut(PositionBase):
    id: int
    ticker_bbg: str
    market_cap_date: Optional[datetime] = None
    gic_industry: str = ""
    exchange_country: str = ""
    pnl: float = 0.0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    sector: Optional[TaxonomyRef] = None
    theme: Optional[TaxonomyRef] = None
    topdown: Optional[TaxonomyRef] = None


class NameMappingRef(ORMCamelModel):
    id: int
    bbg_name: str
    chinese_name: str
    position_id: Optional[int] = None


class PositionDetailOut(PositionOut):
    name_mappings: List[NameMappingRef] = Field(default_factory=list)
