# services/position_normalizer.py
"""
Turn one row of a broker position export into a canonical position.

Broker exports change header spelling between versions ("Latest NMV",
"Latest NMV ", "NMV excl Cash & FX", ...), so every field is located by
case-insensitive substring match against an ordered list of keyword sets
instead of by fixed column name or position.

NMV resolution order is strict: "latest nmv", then "nmv excl cash", then any
header containing "nmv". A header containing "avg" is never used as the NMV
source; the "avg nmv" column only decides the direction of a position whose
NMV is exactly zero.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Set, Tuple

from models.position import FLAT, LONG, SHORT
from utils.common_helpers import cell_text, parse_amount

Row = Mapping[str, Any]
HeaderMatcher = Callable[[str], bool]

SKIP_MARKER = "Total"
FILTER_FOOTER_PREFIX = "Applied filters"


def _contains_all(*keywords: str) -> HeaderMatcher:
    kws = [k.lower() for k in keywords]
    return lambda header: all(k in header for k in kws)


def _exact(name: str) -> HeaderMatcher:
    target = name.lower()
    return lambda header: header == target


def _nmv_matcher(*keywords: str) -> HeaderMatcher:
    inner = _contains_all(*keywords)
    return lambda header: inner(header) and "avg" not in header


# field -> matchers, tried top to bottom; the first non-empty cell wins
TEXT_FIELDS: Dict[str, Sequence[HeaderMatcher]] = {
    "bbg_name": (_contains_all("underlying"), _exact("Underlying_Description")),
    "ticker_bbg": (_contains_all("yellow key"), _contains_all("bb yellow"), _exact("BB Yellow Key")),
    "market": (_contains_all("risk country"),),
    "gic_industry": (_contains_all("gic", "industry"),),
    "exchange_country": (_contains_all("exchange", "country"),),
    "pnl": (_contains_all("pnl"), _contains_all("p&l"), _contains_all("unrealized")),
}

# first filled matching column wins; an explicit "0" still ends the chain
NMV_SOURCES: Sequence[HeaderMatcher] = (
    _nmv_matcher("latest nmv"),
    _nmv_matcher("nmv excl cash"),
    _nmv_matcher("nmv"),
)

AVG_NMV_SOURCE: HeaderMatcher = _contains_all("avg nmv")


def _norm_header(header: Any) -> str:
    return str(header).strip().lower()


def find_column(row: Row, matcher: HeaderMatcher) -> Optional[str]:
    """
    Return the first header in row order accepted by matcher whose cell is
    filled. Blank cells count as absent, so a spreadsheet column left empty on
    this row never shadows a later candidate. An explicit "0" is not blank.
    """
    for key in row.keys():
        if matcher(_norm_header(key)) and cell_text(row.get(key)):
            return key
    return None


def lookup_text(row: Row, matchers: Sequence[HeaderMatcher]) -> str:
    for matcher in matchers:
        key = find_column(row, matcher)
        if key is not None:
            return cell_text(row.get(key))
    return ""


def resolve_nmv(row: Row) -> Tuple[Any, Optional[str]]:
    """Raw NMV cell and the header it came from; ("0", None) when no filled column matches."""
    for matcher in NMV_SOURCES:
        key = find_column(row, matcher)
        if key is not None:
            return row.get(key), key
    return "0", None


def resolve_avg_nmv(row: Row) -> float:
    key = find_column(row, AVG_NMV_SOURCE)
    if key is None:
        return 0.0
    value = parse_amount(row.get(key))
    return 0.0 if math.isnan(value) else value


def direction_for(nmv: float, avg_nmv: float) -> str:
    if nmv > 0:
        return LONG
    if nmv < 0:
        return SHORT
    if avg_nmv > 0:
        return LONG
    if avg_nmv < 0:
        return SHORT
    return FLAT


@dataclass
class NormalizedPosition:
    ticker_bbg: str
    bbg_name: str
    market: str
    gic_industry: str
    exchange_country: str
    pnl: float
    position_amount: float
    long_short: str
    # NMV as parsed (NaN when blank/unparseable), kept for import diagnostics
    nmv: float = 0.0
    nmv_raw: str = "0"
    nmv_column: Optional[str] = None

    @property
    def has_nmv(self) -> bool:
        return not math.isnan(self.nmv) and self.nmv != 0


def is_summary_row(ticker: str, company: str) -> bool:
    if not ticker or ticker == SKIP_MARKER:
        return True
    return company == SKIP_MARKER or company.startswith(FILTER_FOOTER_PREFIX)


def normalize_row(row: Row) -> Optional[NormalizedPosition]:
    """Canonical position for one export row, or None for non-data rows."""
    text = {name: lookup_text(row, matchers) for name, matchers in TEXT_FIELDS.items()}
    ticker = text["ticker_bbg"]
    company = text["bbg_name"]
    if is_summary_row(ticker, company):
        return None

    pnl = parse_amount(text["pnl"])
    nmv_cell, nmv_column = resolve_nmv(row)
    nmv = parse_amount(nmv_cell)
    effective = 0.0 if math.isnan(nmv) else nmv

    return NormalizedPosition(
        ticker_bbg=ticker,
        bbg_name=company,
        market=text["market"],
        gic_industry=text["gic_industry"],
        exchange_country=text["exchange_country"],
        pnl=0.0 if math.isnan(pnl) else pnl,
        position_amount=abs(effective),
        long_short=direction_for(effective, resolve_avg_nmv(row)),
        nmv=nmv,
        nmv_raw=cell_text(nmv_cell) if nmv_cell is not None else "",
        nmv_column=nmv_column,
    )


@dataclass
class ImportBatch:
    """
    Normalizes the rows of one import file.

    Once a ticker has been emitted with a nonzero NMV, later rows for the same
    ticker without a usable NMV are dropped so they cannot zero it out again.
    """

    data_rows: int = 0
    tickers_with_nmv: Set[str] = field(default_factory=set)
    zero_nmv: List[NormalizedPosition] = field(default_factory=list)
    skipped_duplicates: int = 0

    def accept(self, row: Row) -> Optional[NormalizedPosition]:
        pos = normalize_row(row)
        if pos is None:
            return None
        self.data_rows += 1

        if not pos.has_nmv and pos.ticker_bbg in self.tickers_with_nmv:
            self.skipped_duplicates += 1
            return None

        if pos.has_nmv:
            self.tickers_with_nmv.add(pos.ticker_bbg)
        else:
            self.zero_nmv.append(pos)
        return pos
