from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from schemas.general import CamelModel, ORMCamelModel, PatchModel
from schemas.position import PositionOut


class ResearchSections(CamelModel):
    strategy: str = ""
    tam: str = ""
    competition: str = ""
    value_proposition: str = ""
    long_term_factors: str = ""
    # to_camel would give "outlook3To5Y"
    outlook_3to5y: str = Field(default="", alias="outlook3to5y")
    business_quality: str = ""
    tracking_data: str = ""
    valuation: str = ""
    revenue_downstream: str = ""
    revenue_product: str = ""
    revenue_customer: str = ""
    profit_split: str = ""
    leverage: str = ""
    peer_comparison: str = ""
    cost_structure: str = ""
    equipment: str = ""
    notes: str = ""


class ResearchCreate(ResearchSections):
    pass


class ResearchUpdate(PatchModel):
    strategy: Optional[str] = None
    tam: Optional[str] = None
    competition: Optional[str] = None
    value_proposition: Optional[str] = None
    long_term_factors: Optional[str] = None
    outlook_3to5y: Optional[str] = Field(default=None, alias="outlook3to5y")
    business_quality: Optional[str] = None
    tracking_data: Optional[str] = None
    valuation: Optional[str] = None
    revenue_downstream: Optional[str] = None
    revenue_product: Optional[str] = None
    revenue_customer: Optional[str] = None
    profit_split: Optional[str] = None
    leverage: Optional[str] = None
    peer_comparison: Optional[str] = None
    cost_structure: Optional[str] = None
    equipment: Optional[str] = None
    notes: Optional[str] = None


class ResearchOut(ResearchSections, ORMCamelModel):
    id: int
    position_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    position: Optional[PositionOut] = None
