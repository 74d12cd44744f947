# services/position_service.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload, selectinload

from models.position import FLAT, LONG, SHORT, Position
from schemas.position import PositionCreate, PositionDetailOut, PositionOut, PositionUpdate
from services.errors import ConflictError, NotFoundError
from services.portfolio_aggregator import PositionSnapshot

# edits to these fields apply to every line item of the same company
COMPANY_WIDE_FIELDS = ("priority", "sector_id", "theme_id", "topdown_id")

# nullable columns a client may reset with an explicit null
CLEARABLE_FIELDS = ("sector_id", "theme_id", "topdown_id", "market_cap_date")


def _with_taxonomy(query):
    return query.options(
        joinedload(Position.sector),
        joinedload(Position.theme),
        joinedload(Position.topdown),
    )


def get_all_positions(
    db: Session,
    long_short: Optional[str] = None,
    search: Optional[str] = None,
) -> List[Position]:
    query = _with_taxonomy(db.query(Position))
    if long_short:
        query = query.filter(Position.long_short == long_short)
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(
                Position.name_cn.like(pattern),
                Position.name_en.like(pattern),
                Position.ticker_bbg.like(pattern),
            )
        )
    return query.order_by(func.abs(Position.position_amount).desc(), Position.id.asc()).all()


def to_dto(p: Position) -> PositionOut:
    return PositionOut.model_validate(p, from_attributes=True)


def _signed(dto: PositionOut) -> float:
    return dto.position_amount if dto.long_short == LONG else -dto.position_amount


def merge_position_rows(items: List[PositionOut]) -> List[PositionOut]:
    """
    Collapse line items of the same company (name, else ticker) into one row
    for the positions page. Tickers are joined with " / " and the amount and
    direction come from the netted signed NMV.
    """
    merged: Dict[str, PositionOut] = {}
    for item in items:
        key = item.name_en or item.ticker_bbg
        existing = merged.get(key)
        if existing is None:
            merged[key] = item.model_copy()
            continue

        net = _signed(existing) + _signed(item)
        existing.ticker_bbg = f"{existing.ticker_bbg} / {item.ticker_bbg}"
        existing.position_amount = abs(net)
        existing.long_short = LONG if net > 0 else SHORT if net < 0 else FLAT
        # the dashboard recomputes the weight from the amount
        existing.position_weight = existing.position_amount
        existing.pnl = existing.pnl + item.pnl

        if not existing.sector_id and item.sector_id:
            existing.sector_id, existing.sector = item.sector_id, item.sector
        if not existing.theme_id and item.theme_id:
            existing.theme_id, existing.theme = item.theme_id, item.theme
        if not existing.topdown_id and item.topdown_id:
            existing.topdown_id, existing.topdown = item.topdown_id, item.topdown
        if not existing.gic_industry and item.gic_industry:
            existing.gic_industry = item.gic_industry
        if not existing.exchange_country and item.exchange_country:
            existing.exchange_country = item.exchange_country
        if not existing.name_cn and item.name_cn:
            existing.name_cn = item.name_cn
    return list(merged.values())


def list_positions(
    db: Session,
    long_short: Optional[str] = None,
    search: Optional[str] = None,
) -> List[PositionOut]:
    rows = get_all_positions(db, long_short=long_short, search=search)
    return merge_position_rows([to_dto(p) for p in rows])


def get_position(db: Session, position_id: int) -> Position | None:
    return (
        _with_taxonomy(db.query(Position))
        .options(selectinload(Position.name_mappings))
        .filter(Position.id == position_id)
        .first()
    )


def get_position_detail(db: Session, position_id: int) -> PositionDetailOut:
    position = get_position(db, position_id)
    if not position:
        raise NotFoundError("Position not found")
    return PositionDetailOut.model_validate(position, from_attributes=True)


def create_position(db: Session, payload: PositionCreate) -> PositionOut:
    exists = db.query(Position.id).filter(Position.ticker_bbg == payload.ticker_bbg).first()
    if exists:
        raise ConflictError("Position with this ticker already exists")

    position = Position(**payload.model_dump())
    db.add(position)
    db.commit()
    return to_dto(get_position(db, position.id))  # type: ignore[arg-type]


def update_position(db: Session, position_id: int, payload: PositionUpdate) -> PositionOut:
    position = db.get(Position, position_id)
    if not position:
        raise NotFoundError("Position not found")

    changes: Dict[str, Any] = payload.changes(clearable=CLEARABLE_FIELDS)
    ticker = changes.get("ticker_bbg")
    if ticker is not None and ticker != position.ticker_bbg:
        clash = (
            db.query(Position.id)
            .filter(Position.ticker_bbg == ticker, Position.id != position_id)
            .first()
        )
        if clash:
            raise ConflictError("Position with this ticker already exists")

    for key, value in changes.items():
        setattr(position, key, value)

    shared = {k: v for k, v in changes.items() if k in COMPANY_WIDE_FIELDS}
    if shared and position.name_en:
        siblings = (
            db.query(Position)
            .filter(Position.name_en == position.name_en, Position.id != position_id)
            .all()
        )
        for sibling in siblings:
            for key, value in shared.items():
                setattr(sibling, key, value)

    db.commit()
    return to_dto(get_position(db, position_id))  # type: ignore[arg-type]


def delete_position(db: Session, position_id: int) -> None:
    position = db.get(Position, position_id)
    if not position:
        raise NotFoundError("Position not found")
    db.delete(position)
    db.commit()


# -----------------------
# Summary inputs
# -----------------------

def load_active_snapshots(db: Session) -> List[PositionSnapshot]:
    rows = (
        _with_taxonomy(db.query(Position))
        .filter(Position.long_short.in_((LONG, SHORT)))
        .order_by(func.abs(Position.position_amount).desc(), Position.id.asc())
        .all()
    )
    return [
        PositionSnapshot(
            ticker_bbg=p.ticker_bbg,
            long_short=p.long_short,
            position_amount=p.position_amount or 0.0,
            name_en=p.name_en or "",
            pnl=p.pnl or 0.0,
            market=p.market or "",
            sector_name=p.sector.name if p.sector else "",
            theme_name=p.theme.name if p.theme else "",
            topdown_name=p.topdown.name if p.topdown else "",
            gic_industry=p.gic_industry or "",
            exchange_country=p.exchange_country or "",
        )
        for p in rows
    ]


def count_watchlist(db: Session) -> int:
    return db.query(func.count(Position.id)).filter(Position.long_short == FLAT).scalar() or 0
