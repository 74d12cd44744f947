# services/taxonomy_service.py
from __future__ import annotations

from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.position import Position
from models.taxonomy import Taxonomy
from schemas.taxonomy import TaxonomyCreate, TaxonomyNodeOut, TaxonomyOut, TaxonomyUpdate
from services.errors import ConflictError, NotFoundError, TaxonomyInUseError


def list_taxonomies(db: Session, type_: Optional[str] = None) -> List[TaxonomyNodeOut]:
    query = db.query(Taxonomy)
    if type_:
        query = query.filter(Taxonomy.type == type_)
    rows = query.order_by(Taxonomy.type.asc(), Taxonomy.sort_order.asc(), Taxonomy.name.asc()).all()

    flat = [TaxonomyOut.model_validate(t) for t in rows]
    by_id = {t.id: t for t in flat}
    children: Dict[int, List[TaxonomyOut]] = {}
    for t in flat:
        if t.parent_id is not None:
            children.setdefault(t.parent_id, []).append(t)

    return [
        TaxonomyNodeOut(
            **t.model_dump(),
            children=children.get(t.id, []),
            parent=by_id.get(t.parent_id) if t.parent_id is not None else None,
        )
        for t in flat
    ]


def _ensure_unique(db: Session, type_: str, name: str, exclude_id: int | None = None) -> None:
    query = db.query(Taxonomy.id).filter(Taxonomy.type == type_, Taxonomy.name == name)
    if exclude_id is not None:
        query = query.filter(Taxonomy.id != exclude_id)
    if query.first():
        raise ConflictError("Taxonomy with this name already exists")


def _ensure_parent(db: Session, parent_id: int | None, child_id: int | None = None) -> None:
    if parent_id is None:
        return
    if child_id is not None and parent_id == child_id:
        raise ConflictError("Taxonomy cannot be its own parent")
    if not db.get(Taxonomy, parent_id):
        raise NotFoundError("Parent taxonomy not found")


def create_taxonomy(db: Session, payload: TaxonomyCreate) -> TaxonomyOut:
    _ensure_unique(db, payload.type, payload.name)
    _ensure_parent(db, payload.parent_id)

    taxonomy = Taxonomy(
        type=payload.type,
        name=payload.name,
        parent_id=payload.parent_id,
        sort_order=payload.sort_order,
    )
    db.add(taxonomy)
    db.commit()
    db.refresh(taxonomy)
    return TaxonomyOut.model_validate(taxonomy)


def update_taxonomy(db: Session, taxonomy_id: int, payload: TaxonomyUpdate) -> TaxonomyOut:
    taxonomy = db.get(Taxonomy, taxonomy_id)
    if not taxonomy:
        raise NotFoundError("Taxonomy not found")

    changes = payload.changes(clearable=("parent_id",))
    if "name" in changes and changes["name"] != taxonomy.name:
        _ensure_unique(db, taxonomy.type, changes["name"], exclude_id=taxonomy_id)
    if "parent_id" in changes:
        _ensure_parent(db, changes["parent_id"], child_id=taxonomy_id)

    for key, value in changes.items():
        setattr(taxonomy, key, value)

    db.commit()
    db.refresh(taxonomy)
    return TaxonomyOut.model_validate(taxonomy)


def count_references(db: Session, taxonomy_id: int) -> Dict[str, int]:
    def _count(column) -> int:
        return db.query(func.count(Position.id)).filter(column == taxonomy_id).scalar() or 0

    return {
        "sector": _count(Position.sector_id),
        "theme": _count(Position.theme_id),
        "topdown": _count(Position.topdown_id),
    }


def delete_taxonomy(db: Session, taxonomy_id: int) -> None:
    taxonomy = db.get(Taxonomy, taxonomy_id)
    if not taxonomy:
        raise NotFoundError("Taxonomy not found")

    references = count_references(db, taxonomy_id)
    if sum(references.values()) > 0:
        raise TaxonomyInUseError(references)

    for child in db.query(Taxonomy).filter(Taxonomy.parent_id == taxonomy_id).all():
        child.parent_id = None
    db.delete(taxonomy)
    db.commit()
