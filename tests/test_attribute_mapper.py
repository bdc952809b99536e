#!/usr/bin/env python3
"""
Tests for attribute mapping, option extraction and display formatting.
"""

import unittest
from decimal import Decimal

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from windowvisor.attribute_mapper import (
    GLASS_TYPES, MATERIALS, WINDOW_TYPES, map_glass_type, map_material, map_window_type,
)
from windowvisor.formatting import (
    format_currency, format_glass_type, format_material, format_options, format_percentage,
)
from windowvisor.models import WindowOptions
from windowvisor.option_extractor import extract_options, extract_options_text, format_option_labels


class TestAttributeMapper(unittest.TestCase):
    """Keyword classification into canonical values."""

    def test_window_types(self):
        test_cases = [
            ("Warnke Double-Hung Series 500", "double-hung"),
            ("double hung tilt", "double-hung"),
            ("Premium Casement", "casement"),
            ("AWNING 2-lite", "awning"),
            ("Sliding patio window", "slider"),
            ("Horizontal Slider", "slider"),
            ("Fixed Picture Window", "picture"),
            ("Bay window 30-degree", "bay"),
            ("Bow, 5 lite", "bow"),
            ("Garden window", "garden"),
            ("Series 9000", "double-hung"),
        ]

        for name, expected in test_cases:
            with self.subTest(name=name):
                self.assertEqual(map_window_type(name), expected)

    def test_window_type_priority(self):
        """Earlier keywords win when several are present."""
        self.assertEqual(map_window_type("Casement or awning"), "casement")
        self.assertEqual(map_window_type("Picture bay combo"), "picture")

    def test_materials(self):
        test_cases = [
            ("Vinyl", "vinyl"),
            ("FIBERGLASS frame", "fiberglass"),
            ("Clad wood interior", "wood"),
            ("Thermal aluminum", "aluminum"),
            ("Composite", "composite"),
            ("Steel", "vinyl"),
        ]

        for text, expected in test_cases:
            with self.subTest(text=text):
                self.assertEqual(map_material(text), expected)

    def test_glass_types(self):
        test_cases = [
            ("Triple pane Low-E", "triple-pane"),
            ("3-pane krypton", "triple-pane"),
            ("3 pane", "triple-pane"),
            ("Single glazed", "single-pane"),
            ("1-pane", "single-pane"),
            ("1 pane", "single-pane"),
            ("Insulated glass", "double-pane"),
        ]

        for text, expected in test_cases:
            with self.subTest(text=text):
                self.assertEqual(map_glass_type(text), expected)

    def test_mapping_totality(self):
        """Every input, including junk, maps to an enumerated value."""
        inputs = ["", None, 42, "   ", "§§§", "DOUBLE-HUNG", "x" * 500]

        for value in inputs:
            with self.subTest(value=value):
                self.assertIn(map_window_type(value), WINDOW_TYPES)
                self.assertIn(map_material(value), MATERIALS)
                self.assertIn(map_glass_type(value), GLASS_TYPES)

        self.assertEqual(map_window_type(None), "double-hung")
        self.assertEqual(map_material(""), "vinyl")
        self.assertEqual(map_glass_type(42), "double-pane")


class TestOptionExtractor(unittest.TestCase):
    """Feature keyword detection."""

    def test_fixed_output_order(self):
        """Labels come out in check order regardless of where they appear in the text."""
        text = "Tilt-in sash, screens, grilles, tempered, EnergyStar, gas filled, LowE"
        self.assertEqual(extract_options(text), [
            "Low-E Glass", "Argon Gas", "ENERGY STAR", "Tempered Glass",
            "Grids", "Screens", "Tilt Feature",
        ])

    def test_each_label_once(self):
        self.assertEqual(extract_options("Low-E, low e, LOWE argon argon"), ["Low-E Glass", "Argon Gas"])

    def test_patterns(self):
        test_cases = [
            ("safety glass", ["Tempered Glass"]),
            ("colonial muntins", ["Grids"]),
            ("washable sash", ["Tilt Feature"]),
            ("energy star certified", ["ENERGY STAR"]),
            ("half screen", []),
            ("", []),
            (None, []),
        ]

        for text, expected in test_cases:
            with self.subTest(text=text):
                self.assertEqual(extract_options(text), expected)

    def test_stored_form(self):
        self.assertEqual(extract_options_text("Low-E Argon"), "Low-E Glass, Argon Gas")
        self.assertEqual(format_option_labels([]), "")


class TestFormatting(unittest.TestCase):
    """Display helpers."""

    def test_format_material(self):
        self.assertEqual(format_material("vinyl"), "Vinyl Frame")
        self.assertEqual(format_material("fiberglass"), "Fiberglass Frame")
        self.assertEqual(format_material(""), "")

    def test_format_glass_type(self):
        test_cases = [
            ("single-pane", "Single Pane Glass"),
            ("double-pane", "Double Pane Glass"),
            ("triple-pane", "Triple Pane Glass"),
            ("quad-pane", "Double Pane Glass"),
            (None, "Double Pane Glass"),
        ]

        for glass_type, expected in test_cases:
            with self.subTest(glass_type=glass_type):
                self.assertEqual(format_glass_type(glass_type), expected)

    def test_format_options(self):
        self.assertEqual(format_options(WindowOptions()), "Vinyl Frame, Double Pane Glass")
        self.assertEqual(
            format_options(WindowOptions("casement", "wood", "triple-pane")),
            "Wood Frame, Triple Pane Glass",
        )

    def test_format_currency(self):
        self.assertEqual(format_currency(Decimal("1234.5")), "$1,234.50")
        self.assertEqual(format_currency(Decimal("-20")), "-$20.00")
        self.assertEqual(format_currency(Decimal("0")), "$0.00")
        self.assertEqual(format_currency(Decimal("99.995"), "EUR"), "100.00 €")

    def test_format_percentage(self):
        self.assertEqual(format_percentage(Decimal("12.345")), "12.3%")
        self.assertEqual(format_percentage(Decimal("0")), "0.0%")


if __name__ == "__main__":
    unittest.main()
