#!/usr/bin/env python3
"""
Comparison Assembler
Matches every competitor quote item to a catalog equivalent, prices it and
aggregates the savings for the whole quote.

Per-item failures never abort a comparison: the item is logged, recorded as a
skipped outcome and the remaining items are still processed. Failures while
loading the quote, its items or the catalog are fatal and propagate.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from .attribute_mapper import AttributeMapper
from .exceptions import CatalogUnavailableError, ComparisonNotFoundError, QuoteNotFoundError
from .financial_calculator import SavingsCalculator, calculate_savings, to_decimal
from .formatting import format_options
from .line_items import LineItemBuilder
from .models import (
    CatalogProduct, Comparison, ComparisonItem, ComparisonResult, ItemOutcome,
    Measurements, PriceBreakdown, ProductMatch, Quote, QuoteItem, WindowOptions,
)
from .option_extractor import format_option_labels
from .pricing import OfflinePriceCalculator, PriceCalculator, fallback_price
from .product_matcher import KeywordProductMatcher, ProductMatcher
from .store import (
    COMPARISONS_COLLECTION, COMPARISON_ITEMS_COLLECTION, PRODUCTS_COLLECTION,
    QUOTES_COLLECTION, QUOTE_ITEMS_COLLECTION, DocumentStore,
)

logger = logging.getLogger(__name__)

CANCELLED_REASON = 'cancelled'

# Items whose savings are within this amount count as equivalent
EQUIVALENT_THRESHOLD = 10

FILTER_MODES = ('all', 'savings', 'higher', 'equivalent')
SORT_MODES = ('savings-high', 'savings-low', 'price-high', 'price-low')


@dataclass
class BatchComparisonResult:
    """Comparisons generated for several quotes; failed quotes map to their error."""
    results: Dict[str, ComparisonResult] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)


class ComparisonAssembler:
    """
    Builds a Comparison and its ComparisonItems for a quote.

    Holds no per-comparison state, so one assembler can generate comparisons
    for different quotes concurrently.
    """

    def __init__(self, store: DocumentStore,
                 matcher: Optional[ProductMatcher] = None,
                 price_calculator: Optional[PriceCalculator] = None,
                 mapper: Optional[AttributeMapper] = None,
                 catalog_provider: Optional[Callable[[], List[CatalogProduct]]] = None,
                 currency_code: str = 'USD'):
        self.store = store
        self.mapper = mapper or AttributeMapper()
        self.line_item_builder = LineItemBuilder(mapper=self.mapper)
        self.matcher = matcher or KeywordProductMatcher(self.mapper)
        self.price_calculator = price_calculator or OfflinePriceCalculator()
        self.catalog_provider = catalog_provider or (lambda: self.store.find(PRODUCTS_COLLECTION))
        self.savings_calculator = SavingsCalculator(currency_code)

    def generate_comparison(self, quote_id: str, project_id: str,
                            cancel_event: Optional[threading.Event] = None) -> ComparisonResult:
        """
        Generate a comparison for a quote.

        Args:
            quote_id: Quote to compare
            project_id: Project owning the comparison
            cancel_event: When set, items not yet started are skipped

        Returns:
            ComparisonResult with the successful items in quote order

        Raises:
            QuoteNotFoundError: the quote does not exist
            CatalogUnavailableError: the catalog could not be read
        """
        logger.info(f"Generating comparison for quote {quote_id}")
        quote, quote_items, catalog = self._load_inputs(quote_id)

        comparison = self.store.create(COMPARISONS_COLLECTION, Comparison(
            project_id=project_id,
            quote_id=quote_id,
            competitor_name=quote.competitor_name,
            total_competitor_price=to_decimal(quote.total_amount),
        ))

        outcomes: List[ItemOutcome] = []
        cancelled = False
        for position, quote_item in enumerate(quote_items):
            if cancel_event is not None and cancel_event.is_set():
                cancelled = True
                outcomes.append(ItemOutcome(quote_item.id, position, skipped_reason=CANCELLED_REASON))
                continue
            outcomes.append(self._process_item(comparison, quote_item, catalog, position))

        items = [outcome.comparison_item for outcome in outcomes if outcome.succeeded]
        comparison = self._finalize(comparison, items)

        skipped = len(outcomes) - len(items)
        if skipped:
            logger.warning(f"Comparison {comparison.id}: skipped {skipped} of {len(outcomes)} items")
        logger.info(
            f"Comparison {comparison.id} generated with {len(items)} items, "
            f"savings {comparison.savings_amount}"
        )
        return ComparisonResult(comparison=comparison, items=items, outcomes=outcomes, cancelled=cancelled)

    def _load_inputs(self, quote_id: str) -> Tuple[Quote, List[QuoteItem], List[CatalogProduct]]:
        # The three reads are independent
        with ThreadPoolExecutor(max_workers=3) as executor:
            quote_future = executor.submit(self.store.get, QUOTES_COLLECTION, quote_id)
            items_future = executor.submit(self.store.find, QUOTE_ITEMS_COLLECTION, quote_id=quote_id)
            catalog_future = executor.submit(self._read_catalog)

            quote = quote_future.result()
            if quote is None:
                raise QuoteNotFoundError(quote_id)
            quote_items = items_future.result()
            catalog = catalog_future.result()

        return quote, quote_items, catalog

    def _read_catalog(self) -> List[CatalogProduct]:
        try:
            return list(self.catalog_provider())
        except CatalogUnavailableError:
            raise
        except Exception as e:
            raise CatalogUnavailableError(f"Could not read product catalog: {e}") from e

    def _process_item(self, comparison: Comparison, quote_item: QuoteItem,
                      catalog: List[CatalogProduct], position: int) -> ItemOutcome:
        try:
            match = self.matcher.match(quote_item, catalog)
            pricing = self.calculate_equivalent_price(quote_item, match.product)
            comparison_item = self.build_comparison_item(comparison.id, quote_item, match, pricing)
            created = self.store.create(COMPARISON_ITEMS_COLLECTION, comparison_item)
        except Exception as e:
            reason = str(e) or e.__class__.__name__
            logger.error(f"Failed to generate comparison item for quote item {quote_item.id}: {reason}")
            return ItemOutcome(quote_item.id, position, skipped_reason=reason)

        return ItemOutcome(quote_item.id, position, comparison_item=created)

    def map_options(self, quote_item: QuoteItem, product: CatalogProduct) -> WindowOptions:
        return WindowOptions(
            window_type=self.mapper.map_window_type(product.name),
            material=self.mapper.map_material(product.material_type),
            glass_type=self.line_item_builder.describe(quote_item).glass_type,
        )

    def calculate_equivalent_price(self, quote_item: QuoteItem, product: CatalogProduct) -> PriceBreakdown:
        """Price the matched product, falling back to its base price when the engine fails."""
        options = self.map_options(quote_item, product)
        measurements = Measurements(
            width=quote_item.width_inches,
            height=quote_item.height_inches,
            quantity=quote_item.quantity,
        )

        try:
            return self.price_calculator.calculate_price(measurements, options)
        except Exception as e:
            logger.warning(f"Price calculation failed for {product.id}, using base price: {e}")
            return fallback_price(product, quote_item.quantity)

    def build_comparison_item(self, comparison_id: str, quote_item: QuoteItem,
                              match: ProductMatch, pricing: PriceBreakdown) -> ComparisonItem:
        product = match.product
        profile = self.line_item_builder.describe(quote_item)
        competitor_price = to_decimal(quote_item.total_price)
        equivalent_price = to_decimal(pricing.total_price)
        savings_amount, savings_pct = calculate_savings(competitor_price, equivalent_price)

        return ComparisonItem(
            comparison_id=comparison_id,
            quote_item_id=quote_item.id,
            competitor_product_description=quote_item.description,
            competitor_options=format_option_labels(profile.options),
            competitor_price=competitor_price,
            equivalent_product_id=product.id,
            equivalent_product_name=product.name,
            equivalent_product_description=product.description,
            equivalent_options=format_options(pricing.options),
            equivalent_unit_price=to_decimal(pricing.price_per_window),
            equivalent_price=equivalent_price,
            options_price=to_decimal(pricing.options_price),
            savings_amount=savings_amount,
            savings_percentage=savings_pct,
            width=quote_item.width_inches,
            height=quote_item.height_inches,
            quantity=quote_item.quantity,
            match_confidence=match.confidence,
            pricing_fallback=pricing.fallback,
        )

    def _finalize(self, comparison: Comparison, items: List[ComparisonItem]) -> Comparison:
        total_equivalent = self.savings_calculator.total(item.equivalent_price for item in items)
        savings_amount, savings_pct = self.savings_calculator.savings(
            comparison.total_competitor_price, total_equivalent
        )

        comparison.total_equivalent_price = total_equivalent
        comparison.savings_amount = savings_amount
        comparison.savings_percentage = savings_pct
        return self.store.update(COMPARISONS_COLLECTION, comparison)

    def generate_comparisons(self, quote_ids: List[str], project_id: str,
                             max_workers: int = 4,
                             cancel_event: Optional[threading.Event] = None) -> BatchComparisonResult:
        """Generate comparisons for several quotes in parallel."""
        batch = BatchComparisonResult()
        if not quote_ids:
            return batch

        with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(quote_ids)))) as executor:
            futures = {
                executor.submit(self.generate_comparison, quote_id, project_id, cancel_event): quote_id
                for quote_id in quote_ids
            }
            for future in as_completed(futures):
                quote_id = futures[future]
                try:
                    batch.results[quote_id] = future.result()
                except Exception as e:
                    logger.error(f"Failed to generate comparison for quote {quote_id}: {e}")
                    batch.errors[quote_id] = str(e) or e.__class__.__name__

        return batch

    def get_comparison_details(self, comparison_id: str) -> Comparison:
        comparison = self.store.get(COMPARISONS_COLLECTION, comparison_id)
        if comparison is None:
            raise ComparisonNotFoundError(comparison_id)
        return comparison

    def get_comparison_items(self, comparison_id: str) -> List[ComparisonItem]:
        return self.store.find(COMPARISON_ITEMS_COLLECTION, comparison_id=comparison_id)

    def update_comparison_status(self, comparison_id: str, status: str) -> Comparison:
        comparison = self.get_comparison_details(comparison_id)
        comparison.status = status
        return self.store.update(COMPARISONS_COLLECTION, comparison)


def generate_comparison(store: DocumentStore, quote_id: str, project_id: str,
                        matcher: Optional[ProductMatcher] = None,
                        price_calculator: Optional[PriceCalculator] = None,
                        cancel_event: Optional[threading.Event] = None) -> ComparisonResult:
    """
    Convenience function to generate a comparison with default collaborators.
    """
    assembler = ComparisonAssembler(store, matcher=matcher, price_calculator=price_calculator)
    return assembler.generate_comparison(quote_id, project_id, cancel_event=cancel_event)


def filter_comparison_items(items: List[ComparisonItem], mode: str = 'all') -> List[ComparisonItem]:
    """
    Filter comparison items.

    Modes: 'all', 'savings' (cheaper equivalent), 'higher' (pricier equivalent),
    'equivalent' (savings within EQUIVALENT_THRESHOLD either way).
    """
    if mode not in FILTER_MODES:
        raise ValueError(f"Unknown filter mode: {mode}")

    if mode == 'savings':
        return [item for item in items if item.savings_amount > 0]
    if mode == 'higher':
        return [item for item in items if item.savings_amount < 0]
    if mode == 'equivalent':
        return [item for item in items if abs(item.savings_amount) < EQUIVALENT_THRESHOLD]
    return list(items)


def sort_comparison_items(items: List[ComparisonItem], sort_by: Optional[str] = None) -> List[ComparisonItem]:
    """Sort comparison items by savings or equivalent price; None keeps quote order."""
    if sort_by is None:
        return list(items)
    if sort_by not in SORT_MODES:
        raise ValueError(f"Unknown sort mode: {sort_by}")

    key_name, direction = sort_by.rsplit('-', 1)
    attribute = 'savings_amount' if key_name == 'savings' else 'equivalent_price'
    return sorted(items, key=lambda item: getattr(item, attribute), reverse=(direction == 'high'))
