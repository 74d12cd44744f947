from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from schemas.general import CamelModel, ORMCamelModel, PatchModel

TradeStatus = Literal["pending", "executed"]


class TradeItemIn(CamelModel):
    ticker_bbg: str
    name: str = ""
    transaction_type: Literal["buy", "sell"]
    gmv_usd_k: float = 0.0   # -1 means "all"
    unwind: bool = False
    reason: str = ""
    position_id: Optional[int] = None


class TradeCreate(CamelModel):
    status: TradeStatus = "pending"
    note: str = ""
    items: List[TradeItemIn] = Field(default_factory=list)


class TradeUpdate(PatchModel):
    status: Optional[TradeStatus] = None
    note: Optional[str] = None


class TradeItemOut(ORMCamelModel):
    id: int
    trade_id: int
    ticker_bbg: str
    name: str
    transaction_type: str
    gmv_usd_k: float
    unwind: bool
    reason: str
    position_id: Optional[int] = None
    created_at: Optional[datetime] = None


class SnapshotOut(ORMCamelModel):
    id: int
    trade_id: int
    positions_json: str
    note: str
    created_at: Optional[datetime] = None


class TradeOut(ORMCamelModel):
    id: int
    status: str
    note: str
    created_at: Optional[datetime] = None
    executed_at: Optional[datetime] = None
    items: List[TradeItemOut] = Field(default_factory=list)


class TradeDetailOut(TradeOut):
    snapshot: Optional[SnapshotOut] = None
