import os
import unittest

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from services.portfolio_aggregator import (
    DEFAULT_AUM,
    PositionSnapshot,
    build_portfolio_summary,
    merge_companies,
    resolve_aum,
)

AUM = 10_000_000


def _pos(ticker, direction, amount, **kw):
    return PositionSnapshot(ticker_bbg=ticker, long_short=direction, position_amount=amount, **kw)


def _book():
    return [
        _pos("700 HK", "long", 2_000_000, name_en="TENCENT", market="HK", sector_name="Internet",
             topdown_name="China Consumer", gic_industry="Media", exchange_country="Hong Kong", pnl=50_000),
        _pos("TCEHY US", "short", 500_000, name_en="TENCENT", market="US", pnl=-10_000),
        _pos("NVDA US", "long", 1_000_000, name_en="NVIDIA", market="US", sector_name="Semis",
             gic_industry="Semiconductors", exchange_country="United States", pnl=20_000),
        _pos("TSLA US", "short", 750_000, name_en="TESLA", market="US", sector_name="Autos", pnl=5_000),
        _pos("BABA US", "/", 0, name_en="ALIBABA", market="CN"),
    ]


class TestCompanyMerge(unittest.TestCase):
    def test_long_and_short_line_items_net_to_one_company(self):
        rows = [
            _pos("A1", "long", 100, name_en="ACME"),
            _pos("A2", "short", 30, name_en="ACME"),
        ]
        companies = merge_companies(rows)
        self.assertEqual(len(companies), 1)
        self.assertEqual(companies[0].signed_nmv, 70)
        self.assertTrue(companies[0].is_long)

        summary = build_portfolio_summary(rows, AUM)
        self.assertEqual(summary.long_count, 1)
        self.assertEqual(summary.short_count, 0)
        self.assertEqual(summary.total_short, 0)
        for axis in ("by_sector", "by_industry", "by_theme", "by_risk_country",
                     "by_gic_industry", "by_exchange_country"):
            buckets = getattr(summary, axis)
            self.assertEqual(len(buckets), 1)
            self.assertAlmostEqual(buckets[0].long, 70 / AUM)
            self.assertEqual(buckets[0].short, 0)

    def test_first_non_empty_category_wins(self):
        rows = [
            _pos("A1", "long", 10, name_en="ACME", market=""),
            _pos("A2", "long", 10, name_en="ACME", market="JP", sector_name="Retail"),
            _pos("A3", "long", 10, name_en="ACME", market="US", sector_name="Banks"),
        ]
        company = merge_companies(rows)[0]
        self.assertEqual(company.market, "JP")
        self.assertEqual(company.sector_name, "Retail")
        self.assertEqual(company.member_count, 3)

    def test_missing_name_falls_back_to_ticker(self):
        rows = [_pos("X1", "long", 10), _pos("X2", "long", 20)]
        keys = [c.key for c in merge_companies(rows)]
        self.assertEqual(keys, ["X1", "X2"])

    def test_flat_positions_are_not_merged(self):
        rows = [_pos("A1", "/", 100, name_en="ACME")]
        self.assertEqual(merge_companies(rows), [])


class TestPortfolioSummary(unittest.TestCase):
    def test_single_long_weight(self):
        summary = build_portfolio_summary([_pos("AAA", "long", 2_000_000)], AUM)
        self.assertEqual(summary.total_long, 0.2)
        self.assertEqual(summary.nmv, 0.2)
        self.assertEqual(summary.gmv, 0.2)

    def test_totals_and_counts(self):
        summary = build_portfolio_summary(_book(), AUM, watchlist_count=1)

        # TENCENT nets to +1.5m, NVIDIA +1m, TESLA -0.75m
        self.assertAlmostEqual(summary.total_long, 0.25)
        self.assertAlmostEqual(summary.total_short, -0.075)
        self.assertEqual(summary.long_count, 2)
        self.assertEqual(summary.short_count, 1)
        self.assertEqual(summary.watchlist_count, 1)
        self.assertAlmostEqual(summary.total_pnl, 65_000)
        self.assertLessEqual(summary.total_short, 0)

    def test_nmv_gmv_identities_hold_everywhere(self):
        summary = build_portfolio_summary(_book(), AUM)
        self.assertEqual(summary.nmv, summary.total_long + summary.total_short)
        self.assertEqual(summary.gmv, summary.total_long + abs(summary.total_short))

        for axis in ("by_sector", "by_industry", "by_theme", "by_risk_country",
                     "by_gic_industry", "by_exchange_country"):
            for b in getattr(summary, axis):
                self.assertEqual(b.nmv, b.long + b.short)
                self.assertEqual(b.gmv, b.long + abs(b.short))
                self.assertLessEqual(b.short, 0)

    def test_watchlist_positions_never_reach_buckets(self):
        summary = build_portfolio_summary(_book(), AUM, watchlist_count=1)
        names = {b.name for b in summary.by_risk_country}
        self.assertNotIn("CN", names)

    def test_axis_fallback_labels(self):
        summary = build_portfolio_summary([_pos("AAA", "long", 100)], AUM)
        self.assertEqual(summary.by_sector[0].name, "其他")
        self.assertEqual(summary.by_industry[0].name, "其他")
        self.assertEqual(summary.by_theme[0].name, "Others")
        self.assertEqual(summary.by_risk_country[0].name, "其他")
        self.assertEqual(summary.by_gic_industry[0].name, "其他")
        self.assertEqual(summary.by_exchange_country[0].name, "其他")

    def test_fallback_labels_can_be_overridden(self):
        summary = build_portfolio_summary(
            [_pos("AAA", "long", 100)], AUM, fallbacks={"by_theme": "Unassigned"}
        )
        self.assertEqual(summary.by_theme[0].name, "Unassigned")
        self.assertEqual(summary.by_sector[0].name, "其他")

    def test_buckets_sorted_by_gmv_desc(self):
        summary = build_portfolio_summary(_book(), AUM)
        gmvs = [b.gmv for b in summary.by_risk_country]
        self.assertEqual(gmvs, sorted(gmvs, reverse=True))
        # TENCENT is keyed on its first market (HK), so US holds NVIDIA + TESLA
        self.assertEqual(summary.by_risk_country[0].name, "US")
        self.assertAlmostEqual(summary.by_risk_country[0].long, 0.1)
        self.assertAlmostEqual(summary.by_risk_country[0].short, -0.075)

    def test_bucket_pnl_accumulates(self):
        summary = build_portfolio_summary(_book(), AUM)
        us = next(b for b in summary.by_risk_country if b.name == "US")
        self.assertAlmostEqual(us.pnl, 25_000)

    def test_missing_aum_uses_default(self):
        for aum in (None, 0, -5, "abc", float("nan")):
            summary = build_portfolio_summary([_pos("AAA", "long", 1_000_000)], aum)
            self.assertEqual(summary.aum, DEFAULT_AUM)
            self.assertAlmostEqual(summary.total_long, 0.1)

    def test_resolve_aum_keeps_positive_values(self):
        self.assertEqual(resolve_aum("25000000"), 25_000_000)
        self.assertEqual(resolve_aum(5), 5)

    def test_recomputation_is_idempotent(self):
        book = _book()
        first = build_portfolio_summary(book, AUM, watchlist_count=1)
        second = build_portfolio_summary(book, AUM, watchlist_count=1)
        self.assertEqual(first.model_dump(), second.model_dump())

    def test_serializes_with_camel_case_keys(self):
        payload = build_portfolio_summary(_book(), AUM).model_dump(by_alias=True)
        self.assertIn("totalLong", payload)
        self.assertIn("byExchangeCountry", payload)
        self.assertIn("watchlistCount", payload)

    def test_empty_book(self):
        summary = build_portfolio_summary([], AUM, watchlist_count=3)
        self.assertEqual(summary.total_long, 0)
        self.assertEqual(summary.total_short, 0)
        self.assertEqual(summary.by_sector, [])
        self.assertEqual(summary.watchlist_count, 3)


if __name__ == "__main__":
    unittest.main()
