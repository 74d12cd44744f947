# services/portfolio_service.py
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from schemas.summary import PortfolioSummary
from services.portfolio_aggregator import build_portfolio_summary
from services.position_service import count_watchlist, load_active_snapshots
from services.settings_service import get_aum

logger = logging.getLogger(__name__)


def get_portfolio_summary(db: Session) -> PortfolioSummary:
    """
    Exposure summary over the current book.
    AUM is read once here and passed down; the aggregator never touches the store.
    """
    aum = get_aum(db)
    snapshots = load_active_snapshots(db)
    watchlist = count_watchlist(db)

    summary = build_portfolio_summary(snapshots, aum, watchlist)
    logger.debug(
        "portfolio_summary positions=%d long=%d short=%d watchlist=%d",
        len(snapshots), summary.long_count, summary.short_count, watchlist,
    )
    return summary
