# services/trade_service.py
from __future__ import annotations

import io
import json
import logging
from datetime import datetime, timezone
from typing import List, Tuple

from openpyxl import Workbook
from sqlalchemy.orm import Session, selectinload

from models.position import FLAT, LONG, Position
from models.trade import EXECUTED, Snapshot, Trade, TradeItem
from schemas.trade import TradeCreate, TradeUpdate
from services.errors import ConflictError, NotFoundError
from services.position_service import to_dto
from services.settings_service import get_aum

logger = logging.getLogger(__name__)

USD_K = 1000.0

EXPORT_HEADERS = ("BBG Ticker", "Name", "Transaction Type", "GMV (USD k)", "Unwind", "Reason")
EXPORT_COLUMN_WIDTHS = (20, 25, 18, 15, 10, 40)


def list_trades(db: Session) -> List[Trade]:
    return (
        db.query(Trade)
        .options(selectinload(Trade.items))
        .order_by(Trade.created_at.desc(), Trade.id.desc())
        .all()
    )


def get_trade(db: Session, trade_id: int) -> Trade | None:
    return (
        db.query(Trade)
        .options(selectinload(Trade.items), selectinload(Trade.snapshot))
        .filter(Trade.id == trade_id)
        .first()
    )


def create_trade(db: Session, payload: TradeCreate) -> Trade:
    trade = Trade(status=payload.status, note=payload.note)
    db.add(trade)
    db.flush()

    for item in payload.items:
        db.add(
            TradeItem(
                trade_id=trade.id,
                ticker_bbg=item.ticker_bbg,
                name=item.name,
                transaction_type=item.transaction_type,
                gmv_usd_k=item.gmv_usd_k,
                unwind=item.unwind,
                reason=item.reason,
                position_id=item.position_id,
            )
        )

    db.commit()
    return get_trade(db, trade.id)  # type: ignore[return-value]


def apply_item(current: float, direction: str, item: TradeItem) -> Tuple[float, str]:
    """
    New (amount, direction) for a position after one trade line.
    A sell with a negative size means "sell all". Amounts never go below zero;
    a position brought to zero is flat.
    """
    amount = current
    if item.unwind or (item.transaction_type == "sell" and item.gmv_usd_k < 0):
        amount = 0.0
    elif item.transaction_type == "buy":
        amount += max(item.gmv_usd_k, 0.0) * USD_K
    elif item.transaction_type == "sell":
        amount -= item.gmv_usd_k * USD_K

    amount = max(amount, 0.0)
    if amount == 0:
        return 0.0, FLAT
    if direction == FLAT:
        direction = LONG
    return amount, direction


def execute_trade(db: Session, trade_id: int, note: str | None = None) -> Trade:
    """Apply every item to its position, snapshot the book and mark the trade executed, in one commit."""
    trade = get_trade(db, trade_id)
    if not trade:
        raise NotFoundError("Trade not found")
    if trade.status == EXECUTED:
        raise ConflictError("Trade already executed")

    aum = get_aum(db)
    try:
        for item in trade.items:
            position = db.query(Position).filter(Position.ticker_bbg == item.ticker_bbg).first()
            if not position:
                logger.warning("trade_item_no_position trade_id=%s ticker=%s", trade_id, item.ticker_bbg)
                continue
            amount, direction = apply_item(position.position_amount or 0.0, position.long_short, item)
            position.position_amount = amount
            position.position_weight = amount / aum
            position.long_short = direction

        db.flush()
        positions = db.query(Position).order_by(Position.id.asc()).all()
        dump = [to_dto(p).model_dump(mode="json", by_alias=True) for p in positions]
        db.add(
            Snapshot(
                trade_id=trade_id,
                positions_json=json.dumps(dump, ensure_ascii=False),
                note=f"Snapshot after executing trade #{trade_id}",
            )
        )

        if note is not None:
            trade.note = note
        trade.status = EXECUTED
        trade.executed_at = datetime.now(timezone.utc)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("trade_execute_failed trade_id=%s", trade_id)
        raise

    logger.info("trade_executed trade_id=%s items=%d", trade_id, len(trade.items))
    db.expire_all()
    return get_trade(db, trade_id)  # type: ignore[return-value]


def update_trade(db: Session, trade_id: int, payload: TradeUpdate) -> Trade:
    if payload.status == EXECUTED:
        return execute_trade(db, trade_id, note=payload.note)

    trade = db.get(Trade, trade_id)
    if not trade:
        raise NotFoundError("Trade not found")
    if payload.status is not None and trade.status == EXECUTED and payload.status != EXECUTED:
        raise ConflictError("Executed trades cannot be reopened")

    changes = payload.changes()
    for key, value in changes.items():
        setattr(trade, key, value)
    db.commit()
    return get_trade(db, trade_id)  # type: ignore[return-value]


def delete_trade(db: Session, trade_id: int) -> None:
    trade = db.get(Trade, trade_id)
    if not trade:
        raise NotFoundError("Trade not found")
    db.delete(trade)
    db.commit()


def export_trade_xlsx(db: Session, trade_id: int) -> Tuple[bytes, str]:
    """Trade sheet for the execution desk, plus its download filename."""
    trade = get_trade(db, trade_id)
    if not trade:
        raise NotFoundError("Trade not found")

    wb = Workbook()
    ws = wb.active
    ws.title = "Trade"
    ws.append(list(EXPORT_HEADERS))
    for item in trade.items:
        ws.append([
            item.ticker_bbg,
            item.name,
            item.transaction_type,
            item.gmv_usd_k,
            "Yes" if item.unwind else "No",
            item.reason,
        ])
    for idx, width in enumerate(EXPORT_COLUMN_WIDTHS):
        ws.column_dimensions[chr(ord("A") + idx)].width = width

    out = io.BytesIO()
    wb.save(out)
    file_name = f"trade-{trade.id}-{datetime.now(timezone.utc).date().isoformat()}.xlsx"
    return out.getvalue(), file_name
