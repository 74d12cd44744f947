# routers/name_mapping_routes.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from schemas.general import DeleteResult
from schemas.name_mapping import NameMappingCreate, NameMappingOut, NameMappingUpdate
from services.errors import ConflictError, NotFoundError
from services.name_mapping_service import (
    create_name_mapping,
    delete_name_mapping,
    list_name_mappings,
    update_name_mapping,
)

router = APIRouter(tags=["name-mappings"])


@router.get("", response_model=List[NameMappingOut])
def get_name_mappings(db: Session = Depends(get_db)):
    return list_name_mappings(db)


@router.post("", response_model=NameMappingOut, status_code=status.HTTP_201_CREATED)
def create_one_name_mapping(payload: NameMappingCreate, db: Session = Depends(get_db)):
    try:
        return create_name_mapping(db, payload)
    except ConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc))


@router.put("/{mapping_id}", response_model=NameMappingOut)
def update_one_name_mapping(mapping_id: int, payload: NameMappingUpdate, db: Session = Depends(get_db)):
    try:
        return update_name_mapping(db, mapping_id, payload)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc))


@router.delete("/{mapping_id}", response_model=DeleteResult)
def delete_one_name_mapping(mapping_id: int, db: Session = Depends(get_db)):
    try:
        delete_name_mapping(db, mapping_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return DeleteResult()
