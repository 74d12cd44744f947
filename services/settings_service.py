# services/settings_service.py
from __future__ import annotations

import logging
import math
import os

from sqlalchemy.orm import Session

from models.app_setting import AppSetting
from services.portfolio_aggregator import DEFAULT_AUM, resolve_aum

logger = logging.getLogger(__name__)

AUM_KEY = "aum"


def _default_aum() -> float:
    return resolve_aum(os.getenv("DEFAULT_AUM", DEFAULT_AUM))


def get_aum(db: Session) -> float:
    row = db.get(AppSetting, AUM_KEY)
    if row is None:
        return _default_aum()
    try:
        raw = float(row.value)
    except ValueError:
        raw = None
    if raw is None or not raw > 0 or math.isinf(raw):
        logger.warning("aum_setting_invalid value=%r", row.value)
        return _default_aum()
    return resolve_aum(raw)


def set_aum(db: Session, value: float | None) -> float:
    """Persist a new AUM. Missing, non-positive or non-finite values leave the stored one untouched."""
    if value is None or not value > 0 or math.isinf(value):
        return get_aum(db)

    row = db.get(AppSetting, AUM_KEY)
    if row is None:
        db.add(AppSetting(key=AUM_KEY, value=str(value)))
    else:
        row.value = str(value)
    db.commit()
    logger.info("aum_updated value=%s", value)
    return get_aum(db)
