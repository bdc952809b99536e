#!/usr/bin/env python3
"""
Pricing engine adapters.

The pricing engine is an external service. ``PriceCalculator`` is the
contract; ``RemotePriceCalculator`` talks to the HTTP pricing endpoint and
``fallback_price`` is the catalog-only estimate used when pricing fails.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import requests

from .exceptions import PriceCalculationError
from .financial_calculator import line_total, to_decimal
from .models import ZERO, CatalogProduct, Measurements, PriceBreakdown, WindowOptions

logger = logging.getLogger(__name__)

# Window measurement constraints (inches)
MIN_WIDTH = 12
MAX_WIDTH = 120
MIN_HEIGHT = 12
MAX_HEIGHT = 120

DEFAULT_TIMEOUT = 10.0


class PriceCalculator(ABC):
    """Prices a window from its measurements and options."""

    @abstractmethod
    def calculate_price(self, measurements: Measurements, options: WindowOptions) -> PriceBreakdown:
        """
        Raises:
            PriceCalculationError: the engine failed or reported an error
        """

    def close(self):
        """Release any connections held by the calculator."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


def validate_measurements(measurements: Measurements) -> bool:
    """Check that width and height are numeric and within the supported range."""
    try:
        width = float(measurements.width)
        height = float(measurements.height)
    except (TypeError, ValueError):
        return False

    if not MIN_WIDTH <= width <= MAX_WIDTH:
        return False
    if not MIN_HEIGHT <= height <= MAX_HEIGHT:
        return False
    return True


class RemotePriceCalculator(PriceCalculator):
    """
    Client for the HTTP pricing endpoint.

    Every request is bounded by ``timeout`` so a slow engine triggers fallback
    pricing instead of stalling a comparison.
    """

    def __init__(self, url: str, timeout: float = DEFAULT_TIMEOUT,
                 auth_token: Optional[str] = None,
                 session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.auth_token = auth_token
        # Only a session created here is closed by close()
        self._owns_session = session is None
        self.session = session or requests.Session()

    def close(self):
        if self._owns_session:
            self.session.close()

    def _build_request(self, measurements: Measurements, options: WindowOptions) -> Dict[str, Any]:
        return {
            "action": "calculatePrice",
            "measurements": {
                "width": measurements.width,
                "height": measurements.height,
                "quantity": measurements.quantity or 1,
            },
            "options": {
                "windowType": options.window_type or "double-hung",
                "material": options.material or "vinyl",
                "glassType": options.glass_type or "double-pane",
            },
        }

    def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        headers = {'Content-Type': 'application/json'}
        if self.auth_token:
            headers['Authorization'] = f"Bearer {self.auth_token}"

        try:
            response = self.session.post(self.url, json=payload, headers=headers, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise PriceCalculationError(f"Pricing engine timed out after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            raise PriceCalculationError(f"Pricing engine request failed: {e}") from e

        if response.status_code == 401:
            raise PriceCalculationError("Authentication required. Please log in again.")
        if not response.ok:
            raise PriceCalculationError(f"API call failed with status: {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise PriceCalculationError("Pricing engine returned invalid JSON") from e

    def calculate_price(self, measurements: Measurements, options: WindowOptions) -> PriceBreakdown:
        if not validate_measurements(measurements):
            raise PriceCalculationError("Invalid measurements. Please check width and height values.")

        data = self._post(self._build_request(measurements, options))
        if not isinstance(data, dict) or not data.get('success'):
            error = data.get('error') if isinstance(data, dict) else None
            raise PriceCalculationError(error or "Failed to calculate price.")

        breakdown = PriceBreakdown(
            total_price=to_decimal(data.get('totalPrice')),
            price_per_window=to_decimal(data.get('pricePerWindow')),
            base_price=to_decimal(data.get('basePrice')),
            options_price=to_decimal(data.get('optionsPrice')),
            options=options,
            estimated_installation=(
                to_decimal(data['estimatedInstallation'])
                if data.get('estimatedInstallation') is not None else None
            ),
            total_project=(
                to_decimal(data['totalProject'])
                if data.get('totalProject') is not None else None
            ),
        )
        logger.debug(f"Priced {measurements} {options}: {breakdown.total_price}")
        return breakdown


class OfflinePriceCalculator(PriceCalculator):
    """Used when no pricing endpoint is configured; every item takes fallback pricing."""

    def calculate_price(self, measurements: Measurements, options: WindowOptions) -> PriceBreakdown:
        raise PriceCalculationError("No pricing engine configured")


def fallback_price(product: CatalogProduct, quantity: int) -> PriceBreakdown:
    """
    Catalog-only price: the product's base price per window, no option
    surcharge, options forced to the defaults.
    """
    base_price = to_decimal(getattr(product, 'base_price', None))
    quantity = quantity if isinstance(quantity, int) and quantity > 0 else 1

    return PriceBreakdown(
        total_price=line_total(base_price, quantity),
        price_per_window=base_price,
        base_price=base_price,
        options_price=ZERO,
        options=WindowOptions(),
        fallback=True,
    )
