#!/usr/bin/env python3
"""
Tests for the pricing engine client and fallback pricing.
"""

import unittest
from decimal import Decimal
from unittest.mock import Mock, patch

import requests

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from windowvisor.exceptions import PriceCalculationError
from windowvisor.models import CatalogProduct, Measurements, WindowOptions
from windowvisor.pricing import (
    OfflinePriceCalculator, RemotePriceCalculator, fallback_price, validate_measurements,
)


def mock_response(status_code=200, payload=None, json_error=False):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    if json_error:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = payload
    return response


SUCCESS_PAYLOAD = {
    "success": True,
    "totalPrice": 1234.5,
    "pricePerWindow": "617.25",
    "basePrice": 550,
    "optionsPrice": 67.25,
    "estimatedInstallation": 300,
}


class TestRemotePriceCalculator(unittest.TestCase):
    """HTTP pricing client behaviour with a mocked session."""

    def setUp(self):
        self.session = Mock()
        self.calculator = RemotePriceCalculator(
            "https://pricing.example.com/api", timeout=2.5, session=self.session
        )
        self.measurements = Measurements(width=36, height=60, quantity=2)
        self.options = WindowOptions("casement", "wood", "triple-pane")

    def test_successful_price(self):
        self.session.post.return_value = mock_response(payload=SUCCESS_PAYLOAD)

        breakdown = self.calculator.calculate_price(self.measurements, self.options)

        self.assertEqual(breakdown.total_price, Decimal("1234.50"))
        self.assertEqual(breakdown.price_per_window, Decimal("617.25"))
        self.assertEqual(breakdown.base_price, Decimal("550.00"))
        self.assertEqual(breakdown.options_price, Decimal("67.25"))
        self.assertEqual(breakdown.estimated_installation, Decimal("300.00"))
        self.assertIsNone(breakdown.total_project)
        self.assertEqual(breakdown.options, self.options)
        self.assertFalse(breakdown.fallback)

    def test_request_shape(self):
        self.session.post.return_value = mock_response(payload=SUCCESS_PAYLOAD)

        self.calculator.calculate_price(self.measurements, self.options)

        args, kwargs = self.session.post.call_args
        self.assertEqual(args[0], "https://pricing.example.com/api")
        self.assertEqual(kwargs["timeout"], 2.5)
        self.assertEqual(kwargs["json"], {
            "action": "calculatePrice",
            "measurements": {"width": 36, "height": 60, "quantity": 2},
            "options": {"windowType": "casement", "material": "wood", "glassType": "triple-pane"},
        })
        self.assertNotIn("Authorization", kwargs["headers"])

    def test_bearer_token(self):
        calculator = RemotePriceCalculator("https://pricing.example.com/api",
                                           auth_token="secret", session=self.session)
        self.session.post.return_value = mock_response(payload=SUCCESS_PAYLOAD)

        calculator.calculate_price(self.measurements, self.options)

        headers = self.session.post.call_args[1]["headers"]
        self.assertEqual(headers["Authorization"], "Bearer secret")

    def test_engine_errors(self):
        test_cases = [
            (mock_response(payload={"success": False, "error": "Unsupported size"}), "Unsupported size"),
            (mock_response(payload={"success": False}), "Failed to calculate price."),
            (mock_response(payload=["unexpected"]), "Failed to calculate price."),
            (mock_response(status_code=401), "Authentication required. Please log in again."),
            (mock_response(status_code=503), "API call failed with status: 503"),
            (mock_response(json_error=True), "Pricing engine returned invalid JSON"),
        ]

        for response, message in test_cases:
            with self.subTest(message=message):
                self.session.post.return_value = response
                with self.assertRaises(PriceCalculationError) as ctx:
                    self.calculator.calculate_price(self.measurements, self.options)
                self.assertEqual(str(ctx.exception), message)

    def test_timeout(self):
        self.session.post.side_effect = requests.exceptions.Timeout("read timed out")

        with self.assertRaises(PriceCalculationError) as ctx:
            self.calculator.calculate_price(self.measurements, self.options)

        self.assertIn("timed out after 2.5s", str(ctx.exception))

    def test_connection_error(self):
        self.session.post.side_effect = requests.exceptions.ConnectionError("refused")

        with self.assertRaises(PriceCalculationError):
            self.calculator.calculate_price(self.measurements, self.options)

    def test_close_keeps_caller_session(self):
        self.calculator.close()
        self.session.close.assert_not_called()

    @patch("windowvisor.pricing.requests.Session")
    def test_context_manager_closes_own_session(self, session_class):
        with RemotePriceCalculator("https://pricing.example.com/api") as calculator:
            self.assertIs(calculator.session, session_class.return_value)

        session_class.return_value.close.assert_called_once_with()

    def test_invalid_measurements_send_nothing(self):
        for width, height in ((11, 60), (36, 121), ("wide", 60), (None, 60)):
            with self.subTest(width=width, height=height):
                with self.assertRaises(PriceCalculationError):
                    self.calculator.calculate_price(Measurements(width, height), self.options)

        self.session.post.assert_not_called()


class TestMeasurementValidation(unittest.TestCase):

    def test_bounds(self):
        test_cases = [
            (12, 12, True),
            (120, 120, True),
            (36.5, 60.25, True),
            ("36", "60", True),
            (11.9, 60, False),
            (36, 120.1, False),
            (0, 0, False),
        ]

        for width, height, expected in test_cases:
            with self.subTest(width=width, height=height):
                self.assertEqual(validate_measurements(Measurements(width, height)), expected)


class TestFallbackPrice(unittest.TestCase):

    def test_base_price_times_quantity(self):
        product = CatalogProduct(id="p1", name="Premier Casement", base_price=Decimal("300.00"))

        breakdown = fallback_price(product, 2)

        self.assertEqual(breakdown.total_price, Decimal("600.00"))
        self.assertEqual(breakdown.price_per_window, Decimal("300.00"))
        self.assertEqual(breakdown.options_price, Decimal("0.00"))
        self.assertEqual(breakdown.options, WindowOptions("double-hung", "vinyl", "double-pane"))
        self.assertTrue(breakdown.fallback)

    def test_never_raises(self):
        """Missing prices and bad quantities still produce a breakdown."""
        product = CatalogProduct(id="p1", name="No price", base_price=None)

        for quantity in (0, -3, None, "2"):
            with self.subTest(quantity=quantity):
                breakdown = fallback_price(product, quantity)
                self.assertEqual(breakdown.total_price, Decimal("0.00"))

        self.assertEqual(fallback_price(None, 1).total_price, Decimal("0.00"))

    def test_offline_calculator_always_fails(self):
        with self.assertRaises(PriceCalculationError):
            OfflinePriceCalculator().calculate_price(Measurements(36, 60), WindowOptions())


if __name__ == "__main__":
    unittest.main()
