# services/research_service.py
from __future__ import annotations

from typing import List

from sqlalchemy.orm import Session, joinedload

from models.position import Position
from models.research import CompanyResearch
from schemas.research import ResearchCreate, ResearchOut, ResearchUpdate
from services.errors import ConflictError, NotFoundError


def _with_position(query):
    return query.options(
        joinedload(CompanyResearch.position).joinedload(Position.sector),
        joinedload(CompanyResearch.position).joinedload(Position.theme),
        joinedload(CompanyResearch.position).joinedload(Position.topdown),
    )


def _to_out(research: CompanyResearch) -> ResearchOut:
    return ResearchOut.model_validate(research, from_attributes=True)


def _load(db: Session, research_id: int) -> CompanyResearch:
    research = (
        _with_position(db.query(CompanyResearch))
        .filter(CompanyResearch.id == research_id)
        .first()
    )
    if not research:
        raise NotFoundError("Research not found")
    return research


def list_research(db: Session) -> List[ResearchOut]:
    rows = (
        _with_position(db.query(CompanyResearch))
        .order_by(CompanyResearch.updated_at.desc(), CompanyResearch.id.desc())
        .all()
    )
    return [_to_out(r) for r in rows]


def get_research(db: Session, research_id: int) -> ResearchOut:
    return _to_out(_load(db, research_id))


def create_research(db: Session, position_id: int, payload: ResearchCreate) -> ResearchOut:
    if not db.get(Position, position_id):
        raise NotFoundError("Position not found")
    exists = db.query(CompanyResearch.id).filter(CompanyResearch.position_id == position_id).first()
    if exists:
        raise ConflictError("Research already exists for this position. Use PUT to update.")

    research = CompanyResearch(position_id=position_id, **payload.model_dump())
    db.add(research)
    db.commit()
    return get_research(db, research.id)


def update_research(db: Session, research_id: int, payload: ResearchUpdate) -> ResearchOut:
    research = db.get(CompanyResearch, research_id)
    if not research:
        raise NotFoundError("Research not found")

    for key, value in payload.changes().items():
        setattr(research, key, value)
    db.commit()
    db.expire_all()
    return get_research(db, research_id)
