from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import field_validator

from schemas.general import CamelModel, ORMCamelModel, PatchModel


class NameMappingCreate(CamelModel):
    bbg_name: str
    chinese_name: str = ""
    position_id: Optional[int] = None

    @field_validator("bbg_name")
    @classmethod
    def validate_bbg_name(cls, value: str) -> str:
        name = (value or "").strip()
        if not name:
            raise ValueError("bbgName is required")
        return name


class NameMappingUpdate(PatchModel):
    bbg_name: Optional[str] = None
    chinese_name: Optional[str] = None
    position_id: Optional[int] = None


class NameMappingOut(ORMCamelModel):
    id: int
    bbg_name: str
    chinese_name: str
    position_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
