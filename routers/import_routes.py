# routers/import_routes.py
import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from sqlalchemy.orm import Session

from database import get_db
from middleware.rate_limit import IMPORT_RATE_LIMIT, limiter
from schemas.import_result import ImportHistoryOut, ImportResult
from services.import_service import UnsupportedFileError, import_file, list_import_history

logger = logging.getLogger(__name__)
router = APIRouter(tags=["import"])


@router.post("/import", response_model=ImportResult)
@limiter.limit(IMPORT_RATE_LIMIT)
async def import_positions(
    request: Request,
    file: UploadFile | None = File(None),
    db: Session = Depends(get_db),
):
    if file is None:
        raise HTTPException(status_code=400, detail="No file provided")

    content = await file.read()
    try:
        # pandas parse + whole-book transaction; keep it off the event loop
        return await asyncio.to_thread(import_file, db, content, file.filename or "")
    except UnsupportedFileError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception:
        raise HTTPException(status_code=500, detail="Failed to import positions")


@router.get("/import-history", response_model=List[ImportHistoryOut])
def get_import_history(db: Session = Depends(get_db)):
    return list_import_history(db)
