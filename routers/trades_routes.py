# routers/trades_routes.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from database import get_db
from schemas.general import DeleteResult
from schemas.trade import TradeCreate, TradeDetailOut, TradeOut, TradeUpdate
from services.errors import ConflictError, NotFoundError
from services.trade_service import (
    create_trade,
    delete_trade,
    export_trade_xlsx,
    get_trade,
    list_trades,
    update_trade,
)

router = APIRouter(tags=["trades"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("", response_model=List[TradeOut])
def get_trades(db: Session = Depends(get_db)):
    return list_trades(db)


@router.post("", response_model=TradeOut, status_code=status.HTTP_201_CREATED)
def create_one_trade(payload: TradeCreate, db: Session = Depends(get_db)):
    return create_trade(db, payload)


@router.get("/{trade_id}", response_model=TradeDetailOut)
def get_one_trade(trade_id: int, db: Session = Depends(get_db)):
    trade = get_trade(db, trade_id)
    if not trade:
        raise HTTPException(status_code=404, detail="Trade not found")
    return trade


@router.put("/{trade_id}", response_model=TradeDetailOut)
def update_one_trade(trade_id: int, payload: TradeUpdate, db: Session = Depends(get_db)):
    try:
        return update_trade(db, trade_id, payload)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ConflictError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.delete("/{trade_id}", response_model=DeleteResult)
def delete_one_trade(trade_id: int, db: Session = Depends(get_db)):
    try:
        delete_trade(db, trade_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return DeleteResult()


@router.get("/{trade_id}/export")
def export_one_trade(trade_id: int, db: Session = Depends(get_db)):
    try:
        content, file_name = export_trade_xlsx(db, trade_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )
