from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from schemas.general import CamelModel, ORMCamelModel, PatchModel

TaxonomyType = Literal["sector", "theme", "topdown"]


def _clean_name(value: str) -> str:
    name = (value or "").strip()
    if not name or len(name) > 120:
        raise ValueError("name must be 1-120 characters")
    return name


class TaxonomyCreate(CamelModel):
    type: TaxonomyType
    name: str
    parent_id: Optional[int] = None
    sort_order: int = 0

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _clean_name(value)


class TaxonomyUpdate(PatchModel):
    name: Optional[str] = None
    parent_id: Optional[int] = None
    sort_order: Optional[int] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _clean_name(value)


class TaxonomyOut(ORMCamelModel):
    id: int
    type: str
    name: str
    parent_id: Optional[int] = None
    sort_order: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TaxonomyNodeOut(TaxonomyOut):
    children: List[TaxonomyOut] = Field(default_factory=list)
    parent: Optional[TaxonomyOut] = None
