# services/portfolio_aggregator.py
"""
Exposure summary for the book.

Brokers can report one economic position as several line items (share
classes, legal entities), so active positions are first netted per company
and only then rolled up into portfolio totals and per-dimension buckets.

Everything here is pure: callers pass a snapshot of positions and the AUM,
and get back a PortfolioSummary.
"""
from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

from models.position import LONG, SHORT
from schemas.summary import DimensionBucket, PortfolioSummary
from utils.common_helpers import to_float

DEFAULT_AUM = 10_000_000.0

OTHER_CN = "其他"

# Per-axis placeholder for a missing value, overridable per deployment.
AXIS_FALLBACKS: Dict[str, str] = {
    "by_sector": os.getenv("SUMMARY_FALLBACK_SECTOR", OTHER_CN),
    "by_industry": os.getenv("SUMMARY_FALLBACK_INDUSTRY", OTHER_CN),
    "by_theme": os.getenv("SUMMARY_FALLBACK_THEME", "Others"),
    "by_risk_country": os.getenv("SUMMARY_FALLBACK_RISK_COUNTRY", OTHER_CN),
    "by_gic_industry": os.getenv("SUMMARY_FALLBACK_GIC_INDUSTRY", OTHER_CN),
    "by_exchange_country": os.getenv("SUMMARY_FALLBACK_EXCHANGE_COUNTRY", OTHER_CN),
}

# summary axis -> CompanyExposure attribute
AXIS_SOURCES: Dict[str, str] = {
    "by_sector": "market",
    "by_industry": "sector_name",
    "by_theme": "topdown_name",
    "by_risk_country": "market",
    "by_gic_industry": "gic_industry",
    "by_exchange_country": "exchange_country",
}

# categorical fields where the first non-empty member value wins
_CATEGORY_FIELDS = (
    "market",
    "sector_name",
    "theme_name",
    "topdown_name",
    "gic_industry",
    "exchange_country",
)


def resolve_aum(value: Any) -> float:
    """AUM to divide by; anything missing, non-positive or unparseable falls back to DEFAULT_AUM."""
    if value is None:
        return DEFAULT_AUM
    try:
        aum = float(value)
    except (TypeError, ValueError):
        return DEFAULT_AUM
    if math.isnan(aum) or math.isinf(aum) or aum <= 0:
        return DEFAULT_AUM
    return aum


@dataclass
class PositionSnapshot:
    """The slice of a stored position the aggregator reads."""

    ticker_bbg: str
    long_short: str
    position_amount: float
    name_en: str = ""
    pnl: float = 0.0
    market: str = ""
    sector_name: str = ""
    theme_name: str = ""
    topdown_name: str = ""
    gic_industry: str = ""
    exchange_country: str = ""

    @property
    def company_key(self) -> str:
        return self.name_en or self.ticker_bbg

    @property
    def signed_nmv(self) -> float:
        amount = to_float(self.position_amount)
        return amount if self.long_short == LONG else -amount


@dataclass
class CompanyExposure:
    key: str
    signed_nmv: float = 0.0
    pnl: float = 0.0
    market: str = ""
    sector_name: str = ""
    theme_name: str = ""
    topdown_name: str = ""
    gic_industry: str = ""
    exchange_country: str = ""
    member_count: int = 0

    @property
    def is_long(self) -> bool:
        return self.signed_nmv >= 0

    def absorb(self, p: PositionSnapshot) -> None:
        self.signed_nmv += p.signed_nmv
        self.pnl += to_float(p.pnl)
        self.member_count += 1
        for name in _CATEGORY_FIELDS:
            if not getattr(self, name):
                value = getattr(p, name) or ""
                if value:
                    setattr(self, name, value)


def is_active(p: PositionSnapshot) -> bool:
    return p.long_short in (LONG, SHORT)


def merge_companies(positions: Iterable[PositionSnapshot]) -> List[CompanyExposure]:
    """Net active positions per company (name, else ticker). Order of first appearance is kept."""
    companies: Dict[str, CompanyExposure] = {}
    for p in positions:
        if not is_active(p):
            continue
        key = p.company_key
        company = companies.get(key)
        if company is None:
            company = companies[key] = CompanyExposure(key=key)
        company.absorb(p)
    return list(companies.values())


class _Bucket:
    __slots__ = ("name", "long", "short", "pnl")

    def __init__(self, name: str):
        self.name = name
        self.long = 0.0
        self.short = 0.0
        self.pnl = 0.0

    def to_model(self) -> DimensionBucket:
        return DimensionBucket(
            name=self.name,
            long=self.long,
            short=self.short,
            nmv=self.long + self.short,
            gmv=self.long + abs(self.short),
            pnl=self.pnl,
        )


def build_portfolio_summary(
    positions: Iterable[PositionSnapshot],
    aum: Any = None,
    watchlist_count: int = 0,
    *,
    fallbacks: Optional[Mapping[str, str]] = None,
) -> PortfolioSummary:
    """
    Roll active positions up into portfolio totals and six dimension breakdowns.

    Weights are fractions of AUM (0.2 == 20%). Shorts are carried as negative
    numbers. Flat ("/") positions are ignored here; watchlist_count is counted
    by the caller straight from the store.
    """
    aum_value = resolve_aum(aum)
    labels = dict(AXIS_FALLBACKS)
    if fallbacks:
        labels.update(fallbacks)

    summary = PortfolioSummary(aum=aum_value, watchlist_count=int(watchlist_count or 0))
    axes: Dict[str, Dict[str, _Bucket]] = {axis: {} for axis in AXIS_SOURCES}

    total_long = 0.0
    total_short = 0.0
    total_pnl = 0.0

    for company in merge_companies(positions):
        weight = abs(company.signed_nmv) / aum_value
        total_pnl += company.pnl

        if company.is_long:
            total_long += weight
            summary.long_count += 1
        else:
            total_short -= weight
            summary.short_count += 1

        for axis, attr in AXIS_SOURCES.items():
            name = getattr(company, attr) or labels[axis]
            bucket = axes[axis].get(name)
            if bucket is None:
                bucket = axes[axis][name] = _Bucket(name)
            if company.is_long:
                bucket.long += weight
            else:
                bucket.short -= weight
            bucket.pnl += company.pnl

    summary.total_long = total_long
    summary.total_short = total_short
    summary.total_pnl = total_pnl
    summary.nmv = total_long + total_short
    summary.gmv = total_long + abs(total_short)

    for axis, buckets in axes.items():
        rows = [b.to_model() for b in buckets.values()]
        rows.sort(key=lambda b: b.gmv, reverse=True)
        setattr(summary, axis, rows)

    return summary
