# routers/positions_routes.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_db
from schemas.general import DeleteResult
from schemas.position import PositionCreate, PositionDetailOut, PositionOut, PositionUpdate
from services.errors import ConflictError, NotFoundError
from services.position_service import (
    create_position,
    delete_position,
    get_position_detail,
    list_positions,
    update_position,
)

router = APIRouter(tags=["positions"])


@router.get("", response_model=List[PositionOut])
def get_positions(
    longShort: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return list_positions(db, long_short=longShort or None, search=search or None)


@router.post("", response_model=PositionOut, status_code=status.HTTP_201_CREATED)
def create_user_position(payload: PositionCreate, db: Session = Depends(get_db)):
    try:
        return create_position(db, payload)
    except ConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc))


@router.get("/{position_id}", response_model=PositionDetailOut)
def get_one_position(position_id: int, db: Session = Depends(get_db)):
    try:
        return get_position_detail(db, position_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.put("/{position_id}", response_model=PositionOut)
def update_one_position(position_id: int, payload: PositionUpdate, db: Session = Depends(get_db)):
    try:
        return update_position(db, position_id, payload)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc))


@router.delete("/{position_id}", response_model=DeleteResult)
def delete_one_position(position_id: int, db: Session = Depends(get_db)):
    try:
        delete_position(db, position_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return DeleteResult()
