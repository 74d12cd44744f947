import math
from decimal import Decimal
from typing import Any


def to_float(x: Any) -> float:
    if x is None:
        return 0.0
    if isinstance(x, Decimal):
        return float(x)
    try:
        value = float(x)
    except Exception:
        return 0.0
    return value if math.isfinite(value) else 0.0


def parse_amount(x: Any) -> float:
    """
    Parse a spreadsheet cell like "-1,200" or 1200.0.
    Thousands separators are stripped first. Unparseable or non-finite input
    ("inf", "1e999") gives NaN so callers can tell "blank" apart from an
    explicit zero.
    """
    if x is None:
        return math.nan
    if not isinstance(x, (bool, int, float, Decimal)):
        x = str(x).replace(",", "").strip()
        if not x:
            return math.nan
    try:
        value = float(x)
    except (ValueError, OverflowError):
        return math.nan
    return value if math.isfinite(value) else math.nan


def cell_text(x: Any) -> str:
    if x is None or (isinstance(x, float) and math.isnan(x)):
        return ""
    return str(x).strip()
