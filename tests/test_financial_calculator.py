#!/usr/bin/env python3
"""
Tests for monetary normalization and savings arithmetic.
"""

import unittest
from decimal import Decimal

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from prices import Money

from windowvisor.financial_calculator import (
    SavingsCalculator, calculate_savings, line_total, to_decimal, unit_price,
)


class TestToDecimal(unittest.TestCase):

    def test_values(self):
        test_cases = [
            ("$1,234.56", Decimal("1234.56")),
            ("1,234.5", Decimal("1234.50")),
            (" 99 ", Decimal("99.00")),
            ("USD 12.345", Decimal("12.35")),
            ("C$1,000", Decimal("1000.00")),
            ("€ 75", Decimal("75.00")),
            ("-20", Decimal("-20.00")),
            ("4.5E2", Decimal("450.00")),
            ("1e3", Decimal("1000.00")),
            (12, Decimal("12.00")),
            (0.1, Decimal("0.10")),
            (Decimal("2.005"), Decimal("2.01")),
        ]

        for value, expected in test_cases:
            with self.subTest(value=value):
                self.assertEqual(to_decimal(value), expected)

    def test_invalid_values_become_zero(self):
        for value in (None, True, "", "abc", "12.3.4", "NaN", "Infinity", "1e40", float("inf")):
            with self.subTest(value=value):
                self.assertEqual(to_decimal(value), Decimal("0.00"))


class TestSavingsArithmetic(unittest.TestCase):

    def test_unit_price_and_line_total(self):
        self.assertEqual(unit_price("100.00", 3), Decimal("33.33"))
        self.assertEqual(unit_price("100.00", 0), Decimal("100.00"))
        self.assertEqual(line_total("33.33", 3), Decimal("99.99"))

    def test_calculate_savings(self):
        test_cases = [
            ("500.00", "400.00", Decimal("100.00"), Decimal("20")),
            ("400.00", "500.00", Decimal("-100.00"), Decimal("-25")),
            ("0", "250.00", Decimal("-250.00"), Decimal("0")),
        ]

        for competitor, equivalent, amount, percentage in test_cases:
            with self.subTest(competitor=competitor, equivalent=equivalent):
                self.assertEqual(calculate_savings(competitor, equivalent), (amount, percentage))

    def test_total_in_one_currency(self):
        calculator = SavingsCalculator("USD")

        self.assertEqual(calculator.total(["10.10", Decimal("0.205"), 5]), Decimal("15.31"))
        self.assertEqual(calculator.total([]), Decimal("0.00"))

    def test_mixed_currencies_rejected(self):
        calculator = SavingsCalculator("USD")

        with self.assertRaises(ValueError):
            calculator.total([Decimal("1.00"), Money(Decimal("2.00"), "EUR")])


if __name__ == "__main__":
    unittest.main()
