import math
import unittest
from decimal import Decimal

from utils.common_helpers import cell_text, parse_amount, to_float


class TestParseAmount(unittest.TestCase):
    def test_thousands_separators(self):
        self.assertEqual(parse_amount("-1,200"), -1200)
        self.assertEqual(parse_amount(" 2,500.5 "), 2500.5)
        self.assertEqual(parse_amount(Decimal("3.5")), 3.5)
        self.assertEqual(parse_amount(0), 0)

    def test_blank_and_garbage_give_nan(self):
        for value in (None, "", "   ", "n/a", "12abc"):
            self.assertTrue(math.isnan(parse_amount(value)), value)

    def test_non_finite_gives_nan(self):
        for value in ("inf", "-inf", "Infinity", "1e999", float("inf"), 10 ** 400):
            self.assertTrue(math.isnan(parse_amount(value)), value)


class TestToFloat(unittest.TestCase):
    def test_bad_values_become_zero(self):
        for value in (None, "abc", float("nan"), float("inf")):
            self.assertEqual(to_float(value), 0.0)
        self.assertEqual(to_float("12.5"), 12.5)


class TestCellText(unittest.TestCase):
    def test_blank_cells(self):
        self.assertEqual(cell_text(None), "")
        self.assertEqual(cell_text(float("nan")), "")
        self.assertEqual(cell_text("  HK "), "HK")
        self.assertEqual(cell_text(0), "0")


if __name__ == "__main__":
    unittest.main()
