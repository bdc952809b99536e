#!/usr/bin/env python3
"""
Quote workflow: create a quote record, extract and parse its document, and
apply human edits to its line items.

Extraction status moves pending -> processing -> processed | error, and to
verified after human review.
"""

import logging
from typing import Callable, List, Optional

from .exceptions import QuoteItemNotFoundError, QuoteNotFoundError, QuoteProcessingError
from .financial_calculator import SavingsCalculator, line_total, to_decimal, unit_price
from .models import (
    STATUS_ERROR, STATUS_PROCESSED, STATUS_PROCESSING, STATUS_VERIFIED,
    Quote, QuoteItem,
)
from .parser import ParserRegistry
from .store import QUOTES_COLLECTION, QUOTE_ITEMS_COLLECTION, DocumentStore
from .text_extractor import TextExtractor

logger = logging.getLogger(__name__)

DIMENSION_FIELDS = ('width_inches', 'height_inches')
PRICE_FIELDS = ('unit_price', 'total_price')
EDITABLE_FIELDS = DIMENSION_FIELDS + PRICE_FIELDS + ('quantity', 'description')


class QuoteManager:
    """Quote lifecycle operations over a document store."""

    def __init__(self, store: DocumentStore,
                 extract_text: Optional[Callable[[str], str]] = None,
                 parsers: Optional[ParserRegistry] = None,
                 currency_code: str = 'USD'):
        self.store = store
        self.extract_text = extract_text or TextExtractor().extract_text
        self.parsers = parsers or ParserRegistry()
        self.calculator = SavingsCalculator(currency_code)

    def create_quote(self, project_id: str, competitor_name: str,
                     document_url: str, file_name: str = "") -> Quote:
        """Create a pending quote for an uploaded document."""
        quote = Quote(
            project_id=project_id,
            competitor_name=competitor_name,
            document_url=document_url,
            file_name=file_name,
        )
        return self.store.create(QUOTES_COLLECTION, quote)

    def get_quote_details(self, quote_id: str) -> Quote:
        quote = self.store.get(QUOTES_COLLECTION, quote_id)
        if quote is None:
            raise QuoteNotFoundError(quote_id)
        return quote

    def get_quote_items(self, quote_id: str) -> List[QuoteItem]:
        return self.store.find(QUOTE_ITEMS_COLLECTION, quote_id=quote_id)

    def process_quote(self, quote_id: str) -> Quote:
        """
        Extract the quote document's text, parse it and store its line items.

        Raises:
            QuoteNotFoundError: the quote does not exist
            QuoteProcessingError: extraction or parsing failed; the quote is marked 'error'
        """
        quote = self.get_quote_details(quote_id)

        try:
            quote.extraction_status = STATUS_PROCESSING
            quote = self.store.update(QUOTES_COLLECTION, quote)

            text = self.extract_text(quote.document_url)
            parser = self.parsers.get(quote.competitor_name)
            parsed = parser.parse(text, quote.competitor_name)

            items = self._create_quote_items(quote.id, parsed.items)

            quote.quote_number = parsed.quote_number or ''
            quote.quote_date = parsed.quote_date
            quote.total_amount = to_decimal(parsed.total_amount)
            quote.items_count = len(items)
            quote.extraction_status = STATUS_PROCESSED
            quote = self.store.update(QUOTES_COLLECTION, quote)
        except Exception as e:
            logger.error(f"Failed to process quote {quote_id}: {e}")
            self._mark_error(quote_id)
            raise QuoteProcessingError(f"Failed to process quote {quote_id}: {e}") from e

        logger.info(f"✅ Processed quote {quote_id}: {quote.items_count} items, total {quote.total_amount}")
        return quote

    def _create_quote_items(self, quote_id: str, items: List[QuoteItem]) -> List[QuoteItem]:
        created_items = []
        for item in items:
            item.quote_id = quote_id
            try:
                created_items.append(self.store.create(QUOTE_ITEMS_COLLECTION, item))
            except Exception as e:
                # Continue with other items
                logger.error(f"Failed to create quote item '{item.description}': {e}")
        return created_items

    def _mark_error(self, quote_id: str):
        try:
            quote = self.store.get(QUOTES_COLLECTION, quote_id)
            if quote is not None:
                quote.extraction_status = STATUS_ERROR
                self.store.update(QUOTES_COLLECTION, quote)
        except Exception as e:
            logger.error(f"Failed to update quote status: {e}")

    def update_quote_item(self, item_id: str, field: str, value) -> QuoteItem:
        """
        Apply a human edit to a quote item.

        Editing dimensions, quantity or unit price recomputes the total price;
        editing the total price recomputes the unit price. The quote's total
        amount is then re-derived from all of its items; a failure there is
        logged and the saved edit is still returned.
        """
        if field not in EDITABLE_FIELDS:
            raise ValueError(f"Field cannot be edited: {field}")

        item = self.store.get(QUOTE_ITEMS_COLLECTION, item_id)
        if item is None:
            raise QuoteItemNotFoundError(item_id)

        if field in PRICE_FIELDS:
            value = to_decimal(value)
        elif field == 'quantity':
            value = int(value)
            if value < 1:
                raise ValueError("Quantity must be at least 1")
        elif field in DIMENSION_FIELDS:
            value = float(value)
            if value <= 0:
                raise ValueError(f"{field} must be positive")

        setattr(item, field, value)

        if field == 'total_price':
            item.unit_price = unit_price(item.total_price, item.quantity)
        elif field != 'description':
            item.total_price = line_total(item.unit_price, item.quantity)

        item = self.store.update(QUOTE_ITEMS_COLLECTION, item)
        self._update_quote_total_amount(item.quote_id)
        return item

    def _update_quote_total_amount(self, quote_id: str):
        # The item edit is already saved; a failed total refresh must not undo it
        try:
            quote = self.get_quote_details(quote_id)
            items = self.get_quote_items(quote_id)

            quote.total_amount = self.calculator.total(item.total_price for item in items)
            quote.items_count = len(items)
            self.store.update(QUOTES_COLLECTION, quote)
        except Exception as e:
            logger.error(f"Failed to update quote total amount for {quote_id}: {e}")

    def verify_quote(self, quote_id: str) -> Quote:
        quote = self.get_quote_details(quote_id)
        quote.extraction_status = STATUS_VERIFIED
        return self.store.update(QUOTES_COLLECTION, quote)
