# routers/research_routes.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from schemas.research import ResearchCreate, ResearchOut, ResearchUpdate
from services.errors import ConflictError, NotFoundError
from services.research_service import create_research, get_research, list_research, update_research

router = APIRouter(tags=["research"])


@router.get("", response_model=List[ResearchOut])
def get_research_list(db: Session = Depends(get_db)):
    return list_research(db)


@router.get("/{research_id}", response_model=ResearchOut)
def get_one_research(research_id: int, db: Session = Depends(get_db)):
    try:
        return get_research(db, research_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


# the path id is the position the note belongs to
@router.post("/{position_id}", response_model=ResearchOut, status_code=status.HTTP_201_CREATED)
def create_one_research(position_id: int, payload: ResearchCreate, db: Session = Depends(get_db)):
    try:
        return create_research(db, position_id, payload)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc))


@router.put("/{research_id}", response_model=ResearchOut)
def update_one_research(research_id: int, payload: ResearchUpdate, db: Session = Depends(get_db)):
    try:
        return update_research(db, research_id, payload)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
