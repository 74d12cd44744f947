# routers/taxonomy_routes.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_db
from schemas.general import DeleteResult
from schemas.taxonomy import TaxonomyCreate, TaxonomyNodeOut, TaxonomyOut, TaxonomyUpdate
from services.errors import ConflictError, NotFoundError, TaxonomyInUseError
from services.taxonomy_service import create_taxonomy, delete_taxonomy, list_taxonomies, update_taxonomy

router = APIRouter(tags=["taxonomy"])


@router.get("", response_model=List[TaxonomyNodeOut])
def get_taxonomies(type: Optional[str] = Query(None), db: Session = Depends(get_db)):
    return list_taxonomies(db, type_=type or None)


@router.post("", response_model=TaxonomyOut, status_code=status.HTTP_201_CREATED)
def create_one_taxonomy(payload: TaxonomyCreate, db: Session = Depends(get_db)):
    try:
        return create_taxonomy(db, payload)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc))


@router.put("/{taxonomy_id}", response_model=TaxonomyOut)
def update_one_taxonomy(taxonomy_id: int, payload: TaxonomyUpdate, db: Session = Depends(get_db)):
    try:
        return update_taxonomy(db, taxonomy_id, payload)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc))


@router.delete("/{taxonomy_id}", response_model=DeleteResult)
def delete_one_taxonomy(taxonomy_id: int, db: Session = Depends(get_db)):
    try:
        delete_taxonomy(db, taxonomy_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except TaxonomyInUseError as exc:
        raise HTTPException(
            status_code=409,
            detail={"error": str(exc), "references": exc.references},
        )
    return DeleteResult()
