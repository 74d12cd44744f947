import os
import unittest

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from services.import_service import read_rows
from services.position_normalizer import ImportBatch, normalize_row


def _row(**cells):
    base = {"BB Yellow Key": "700 HK Equity", "Underlying_Description": "TENCENT HOLDINGS LTD"}
    base.update(cells)
    return base


class TestNmvResolution(unittest.TestCase):
    def test_latest_nmv_with_trailing_space_and_commas(self):
        pos = normalize_row(_row(**{"Latest NMV ": "-1,200"}))
        self.assertIsNotNone(pos)
        self.assertEqual(pos.position_amount, 1200)
        self.assertEqual(pos.long_short, "short")
        self.assertEqual(pos.nmv_column, "Latest NMV ")

    def test_zero_latest_uses_avg_for_direction_only(self):
        pos = normalize_row(_row(**{"Latest NMV": "0", "Avg NMV": "500"}))
        self.assertEqual(pos.long_short, "long")
        self.assertEqual(pos.position_amount, 0)

    def test_negative_avg_gives_short_for_closed_position(self):
        pos = normalize_row(_row(**{"Latest NMV": 0, "Avg NMV": "-3,000"}))
        self.assertEqual(pos.long_short, "short")
        self.assertEqual(pos.position_amount, 0)

    def test_latest_wins_over_avg_excl_cash(self):
        pos = normalize_row(_row(**{"Avg NMV excl Cash": "9,999", "Latest NMV": "250"}))
        self.assertEqual(pos.nmv_column, "Latest NMV")
        self.assertEqual(pos.position_amount, 250)
        self.assertEqual(pos.long_short, "long")

    def test_latest_zero_never_reads_avg_amount(self):
        pos = normalize_row(_row(**{"Latest NMV": "0", "Avg NMV excl Cash": "-800"}))
        self.assertEqual(pos.nmv_column, "Latest NMV")
        self.assertEqual(pos.position_amount, 0)
        self.assertEqual(pos.long_short, "short")

    def test_latest_sign_beats_avg_sign(self):
        pos = normalize_row(_row(**{"Latest NMV": "100", "Avg NMV": "-900"}))
        self.assertEqual(pos.long_short, "long")
        self.assertEqual(pos.position_amount, 100)

    def test_falls_back_to_nmv_excl_cash(self):
        pos = normalize_row(_row(**{"Avg NMV": "7", "NMV excl Cash & FX": "2,500.5"}))
        self.assertEqual(pos.nmv_column, "NMV excl Cash & FX")
        self.assertAlmostEqual(pos.position_amount, 2500.5)
        self.assertEqual(pos.long_short, "long")

    def test_broad_nmv_fallback_skips_avg_columns(self):
        pos = normalize_row(_row(**{"Avg NMV (30d)": "50", "NMV (USD)": "-75"}))
        self.assertEqual(pos.nmv_column, "NMV (USD)")
        self.assertEqual(pos.position_amount, 75)
        self.assertEqual(pos.long_short, "short")

    def test_only_avg_column_is_not_an_nmv_source(self):
        pos = normalize_row(_row(**{"Avg NMV": "400"}))
        self.assertIsNone(pos.nmv_column)
        self.assertEqual(pos.position_amount, 0)
        self.assertEqual(pos.long_short, "long")

    def test_unparseable_nmv_is_flat(self):
        pos = normalize_row(_row(**{"Latest NMV": "n/a"}))
        self.assertEqual(pos.position_amount, 0)
        self.assertEqual(pos.long_short, "/")
        self.assertFalse(pos.has_nmv)

    def test_blank_latest_nmv_falls_through_to_excl_cash(self):
        pos = normalize_row(_row(**{"Latest NMV": None, "NMV excl Cash": "5,000"}))
        self.assertEqual(pos.nmv_column, "NMV excl Cash")
        self.assertEqual(pos.position_amount, 5000)
        self.assertEqual(pos.long_short, "long")

    def test_whitespace_cells_fall_through_to_broad_nmv(self):
        pos = normalize_row(_row(**{"Latest NMV": "  ", "NMV excl Cash": "", "NMV (USD)": "-20"}))
        self.assertEqual(pos.nmv_column, "NMV (USD)")
        self.assertEqual(pos.long_short, "short")

    def test_explicit_zero_latest_still_ends_the_chain(self):
        pos = normalize_row(_row(**{"Latest NMV": "0", "NMV excl Cash": "5,000"}))
        self.assertEqual(pos.nmv_column, "Latest NMV")
        self.assertEqual(pos.position_amount, 0)

    def test_blank_csv_cell_from_reader(self):
        rows = read_rows(
            b'BB Yellow Key,Underlying,Latest NMV,NMV excl Cash\nAAPL US Equity,APPLE,,"5,000"\n',
            "book.csv",
        )
        pos = normalize_row(rows[0])
        self.assertEqual((pos.position_amount, pos.long_short), (5000, "long"))

    def test_infinite_nmv_is_unparseable(self):
        for cell in ("inf", "-Infinity", "1e999"):
            pos = normalize_row(_row(**{"Latest NMV": cell}))
            self.assertEqual(pos.position_amount, 0, cell)
            self.assertEqual(pos.long_short, "/", cell)
            self.assertFalse(pos.has_nmv)

    def test_no_nmv_columns_at_all(self):
        pos = normalize_row(_row())
        self.assertEqual(pos.position_amount, 0)
        self.assertEqual(pos.long_short, "/")


class TestColumnMatching(unittest.TestCase):
    def test_fields_found_by_keyword_regardless_of_case(self):
        pos = normalize_row({
            " bb yellow KEY": "AAPL US Equity",
            "UNDERLYING": "APPLE INC",
            "Risk Country": "US",
            "GIC Industry": "Technology Hardware",
            "Exchange Country": "United States",
            "PnL (USD)": "1,234.5",
            "Latest NMV": "10",
        })
        self.assertEqual(pos.ticker_bbg, "AAPL US Equity")
        self.assertEqual(pos.bbg_name, "APPLE INC")
        self.assertEqual(pos.market, "US")
        self.assertEqual(pos.gic_industry, "Technology Hardware")
        self.assertEqual(pos.exchange_country, "United States")
        self.assertAlmostEqual(pos.pnl, 1234.5)

    def test_missing_columns_default_to_empty(self):
        pos = normalize_row({"BB Yellow Key": "X LN Equity", "Latest NMV": "5"})
        self.assertEqual(pos.bbg_name, "")
        self.assertEqual(pos.market, "")
        self.assertEqual(pos.gic_industry, "")
        self.assertEqual(pos.exchange_country, "")
        self.assertEqual(pos.pnl, 0)

    def test_blank_cell_does_not_shadow_later_column(self):
        pos = normalize_row({
            "BB Yellow Key": "X LN Equity",
            "Underlying": None,
            "Underlying_Description": "X PLC",
            "PnL": "",
            "Unrealized P/L": "7",
            "Latest NMV": "5",
        })
        self.assertEqual(pos.bbg_name, "X PLC")
        self.assertEqual(pos.pnl, 7)

    def test_pnl_falls_back_to_unrealized(self):
        pos = normalize_row(_row(**{"Unrealized Gain": "-42", "Latest NMV": "1"}))
        self.assertEqual(pos.pnl, -42)


class TestSkipRows(unittest.TestCase):
    def test_total_ticker_is_skipped(self):
        self.assertIsNone(normalize_row({"BB Yellow Key": "Total", "Latest NMV": "100"}))

    def test_empty_ticker_is_skipped(self):
        self.assertIsNone(normalize_row({"BB Yellow Key": None, "Underlying": "ABC"}))

    def test_total_company_is_skipped(self):
        self.assertIsNone(normalize_row({"BB Yellow Key": "ZZZ", "Underlying": "Total"}))

    def test_filter_footer_is_skipped(self):
        row = {"BB Yellow Key": "x", "Underlying": "Applied filters: Book is EQ-LS"}
        self.assertIsNone(normalize_row(row))


class TestImportBatch(unittest.TestCase):
    def test_later_blank_row_does_not_overwrite_valid_one(self):
        batch = ImportBatch()
        first = batch.accept(_row(**{"Latest NMV": "1,000", "Risk Country": "HK"}))
        second = batch.accept(_row(**{"Latest NMV": None}))

        self.assertIsNotNone(first)
        self.assertEqual(first.position_amount, 1000)
        self.assertEqual(first.long_short, "long")
        self.assertIsNone(second)
        self.assertEqual(batch.skipped_duplicates, 1)
        self.assertEqual(batch.data_rows, 2)

    def test_later_row_without_nmv_column_is_dropped(self):
        batch = ImportBatch()
        batch.accept(_row(**{"Latest NMV": "-50"}))
        self.assertIsNone(batch.accept(_row()))

    def test_zero_row_before_valid_row_is_kept(self):
        batch = ImportBatch()
        first = batch.accept(_row(**{"Latest NMV": "0"}))
        second = batch.accept(_row(**{"Latest NMV": "300"}))
        self.assertIsNotNone(first)
        self.assertIsNotNone(second)
        self.assertEqual(len(batch.zero_nmv), 1)

    def test_summary_rows_are_not_counted(self):
        batch = ImportBatch()
        batch.accept({"BB Yellow Key": "Total", "Latest NMV": "1"})
        self.assertEqual(batch.data_rows, 0)


if __name__ == "__main__":
    unittest.main()
