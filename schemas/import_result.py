from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from schemas.general import CamelModel, ORMCamelModel


class UnmatchedName(CamelModel):
    bbg_name: str


class DebugSample(CamelModel):
    ticker: str
    gic: str
    exchange: str
    risk: str


class ZeroNmvTicker(CamelModel):
    ticker: str
    nmv_raw: str
    nmv_parsed: Optional[float] = None   # None when the cell did not parse


class ImportResult(CamelModel):
    total: int = 0
    matched: int = 0
    created: int = 0
    updated: int = 0
    unmatched: List[UnmatchedName] = Field(default_factory=list)
    excel_columns: List[str] = Field(default_factory=list)
    debug_samples: List[DebugSample] = Field(default_factory=list)
    zero_nmv_tickers: List[ZeroNmvTicker] = Field(default_factory=list)


class ImportHistoryOut(ORMCamelModel):
    id: int
    import_type: str
    file_name: str
    record_count: int
    new_count: int
    updated_count: int
    created_at: Optional[datetime] = None
