# services/name_mapping_service.py
from __future__ import annotations

from typing import Dict, List

from sqlalchemy.orm import Session

from models.name_mapping import NameMapping
from schemas.name_mapping import NameMappingCreate, NameMappingUpdate
from services.errors import ConflictError, NotFoundError


def list_name_mappings(db: Session) -> List[NameMapping]:
    return db.query(NameMapping).order_by(NameMapping.bbg_name.asc()).all()


def name_lookup(db: Session) -> Dict[str, NameMapping]:
    """Broker name (lower-cased) -> mapping, as used by the position import."""
    return {m.bbg_name.lower(): m for m in list_name_mappings(db)}


def _ensure_unique(db: Session, bbg_name: str, exclude_id: int | None = None) -> None:
    query = db.query(NameMapping.id).filter(NameMapping.bbg_name == bbg_name)
    if exclude_id is not None:
        query = query.filter(NameMapping.id != exclude_id)
    if query.first():
        raise ConflictError("Name mapping for this name already exists")


def create_name_mapping(db: Session, payload: NameMappingCreate) -> NameMapping:
    _ensure_unique(db, payload.bbg_name)
    mapping = NameMapping(
        bbg_name=payload.bbg_name,
        chinese_name=payload.chinese_name,
        position_id=payload.position_id,
    )
    db.add(mapping)
    db.commit()
    db.refresh(mapping)
    return mapping


def update_name_mapping(db: Session, mapping_id: int, payload: NameMappingUpdate) -> NameMapping:
    mapping = db.get(NameMapping, mapping_id)
    if not mapping:
        raise NotFoundError("Name mapping not found")

    changes = payload.changes(clearable=("position_id",))
    if changes.get("bbg_name") and changes["bbg_name"] != mapping.bbg_name:
        _ensure_unique(db, changes["bbg_name"], exclude_id=mapping_id)

    for key, value in changes.items():
        setattr(mapping, key, value)
    db.commit()
    db.refresh(mapping)
    return mapping


def delete_name_mapping(db: Session, mapping_id: int) -> None:
    mapping = db.get(NameMapping, mapping_id)
    if not mapping:
        raise NotFoundError("Name mapping not found")
    db.delete(mapping)
    db.commit()
