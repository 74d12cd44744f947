# services/import_service.py
"""
Position import from a broker export.

The whole batch runs in one transaction: every live (long/short) position is
first reset to watchlist with zero amount, then each accepted row is upserted
by ticker. Tickers missing from the new file therefore end up flat instead of
lingering with yesterday's exposure.
"""
from __future__ import annotations

import io
import logging
import math
from typing import Any, Dict, List, Mapping, Sequence

import pandas as pd
from sqlalchemy.orm import Session

from models.import_history import ImportHistory
from models.position import FLAT, LONG, SHORT, Position
from schemas.import_result import DebugSample, ImportResult, UnmatchedName, ZeroNmvTicker
from services.name_mapping_service import name_lookup
from services.position_normalizer import ImportBatch, NormalizedPosition
from services.settings_service import get_aum

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".xlsx", ".xlsm", ".csv")
DEBUG_SAMPLE_ROWS = 3


class UnsupportedFileError(ValueError):
    pass


def read_rows(content: bytes, filename: str) -> List[Dict[str, Any]]:
    """First sheet of the upload as header -> cell dicts. Blank cells come back as None."""
    name = (filename or "").lower()
    if not name.endswith(SUPPORTED_SUFFIXES):
        raise UnsupportedFileError("Unsupported file type; upload .xlsx or .csv")
    if not content:
        raise UnsupportedFileError("Uploaded file is empty")

    buf = io.BytesIO(content)
    try:
        if name.endswith(".csv"):
            df = pd.read_csv(buf, dtype=object)
        else:
            df = pd.read_excel(buf, sheet_name=0, dtype=object)
    except Exception as exc:
        raise UnsupportedFileError(f"Could not read spreadsheet: {exc}") from exc

    df = df.dropna(how="all")
    df.columns = [str(c) for c in df.columns]
    df = df.astype(object).where(pd.notna(df), None)
    return df.to_dict(orient="records")


def reset_live_positions(positions: Sequence[Position]) -> int:
    reset = 0
    for p in positions:
        if p.long_short in (LONG, SHORT):
            p.long_short = FLAT
            p.position_amount = 0.0
            p.position_weight = 0.0
            reset += 1
    return reset


def _apply(position: Position, pos: NormalizedPosition, name_cn: str, aum: float) -> None:
    position.name_en = pos.bbg_name
    position.name_cn = name_cn
    position.market = pos.market
    position.long_short = pos.long_short
    position.position_amount = pos.position_amount
    position.position_weight = pos.position_amount / aum
    position.gic_industry = pos.gic_industry
    position.exchange_country = pos.exchange_country
    position.pnl = pos.pnl


def import_positions(
    db: Session,
    rows: Sequence[Mapping[str, Any]],
    file_name: str = "",
) -> ImportResult:
    aum = get_aum(db)
    mappings = name_lookup(db)
    result = ImportResult(excel_columns=[str(k) for k in rows[0].keys()] if rows else [])

    batch = ImportBatch()
    unmatched_seen: set[str] = set()
    created: set[str] = set()
    updated: set[str] = set()

    try:
        by_ticker: Dict[str, Position] = {p.ticker_bbg: p for p in db.query(Position).all()}
        reset = reset_live_positions(list(by_ticker.values()))

        for row in rows:
            pos = batch.accept(row)
            if pos is None:
                continue

            if len(result.debug_samples) < DEBUG_SAMPLE_ROWS:
                result.debug_samples.append(
                    DebugSample(
                        ticker=pos.ticker_bbg,
                        gic=pos.gic_industry,
                        exchange=pos.exchange_country,
                        risk=pos.market,
                    )
                )

            mapping = mappings.get(pos.bbg_name.lower())
            if mapping:
                result.matched += 1
            elif pos.bbg_name not in unmatched_seen:
                unmatched_seen.add(pos.bbg_name)
                result.unmatched.append(UnmatchedName(bbg_name=pos.bbg_name))

            if not pos.has_nmv:
                result.zero_nmv_tickers.append(
                    ZeroNmvTicker(
                        ticker=pos.ticker_bbg,
                        nmv_raw=pos.nmv_raw,
                        nmv_parsed=None if math.isnan(pos.nmv) else pos.nmv,
                    )
                )

            position = by_ticker.get(pos.ticker_bbg)
            if position is None:
                position = Position(ticker_bbg=pos.ticker_bbg)
                db.add(position)
                by_ticker[pos.ticker_bbg] = position
                created.add(pos.ticker_bbg)
            elif pos.ticker_bbg not in created:
                updated.add(pos.ticker_bbg)
            _apply(position, pos, mapping.chinese_name if mapping else "", aum)

        result.total = batch.data_rows
        result.created = len(created)
        result.updated = len(updated)
        db.add(
            ImportHistory(
                import_type="positions",
                file_name=file_name,
                record_count=result.total,
                new_count=result.created,
                updated_count=result.updated,
            )
        )
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("position_import_failed file=%s", file_name)
        raise

    logger.info(
        "position_import_done file=%s rows=%d created=%d updated=%d reset=%d duplicates_dropped=%d zero_nmv=%d",
        file_name, result.total, result.created, result.updated, reset,
        batch.skipped_duplicates, len(result.zero_nmv_tickers),
        extra={
            "file": file_name,
            "rows": result.total,
            "rows_created": result.created,
            "rows_updated": result.updated,
            "rows_reset": reset,
        },
    )
    return result


def import_file(db: Session, content: bytes, filename: str) -> ImportResult:
    rows = read_rows(content, filename)
    return import_positions(db, rows, file_name=filename)


def list_import_history(db: Session, limit: int = 50) -> List[ImportHistory]:
    return (
        db.query(ImportHistory)
        .order_by(ImportHistory.created_at.desc(), ImportHistory.id.desc())
        .limit(limit)
        .all()
    )
