#!/usr/bin/env python3
"""
WindowVisor Quote Text Parser
Extracts quote metadata and window line items from the text of a competitor quote.
"""

import re
import logging
from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from .line_items import LineItemBuilder
from .models import ZERO, LineItemCandidate, ParsedQuote

logger = logging.getLogger(__name__)


class QuoteTextStrategy(ABC):
    """Turns extracted quote text into a ParsedQuote."""

    @abstractmethod
    def parse(self, text: str, competitor_name: str = "") -> ParsedQuote:
        raise NotImplementedError


class HeuristicQuoteTextParser(QuoteTextStrategy):
    """
    Single-pass pattern parser for window quotes.

    Never raises on malformed text: every missing field resolves to its default
    (empty quote number, no date, zero total, no items).
    """

    def __init__(self, line_item_builder: Optional[LineItemBuilder] = None):
        # First match wins
        self.quote_number_patterns = [
            re.compile(r'Quote\s*#?\s*(\w+-?\d+)', re.IGNORECASE),
            re.compile(r'Quote\s*Number\s*:?\s*(\w+-?\d+)', re.IGNORECASE),
            re.compile(r'Estimate\s*#?\s*(\w+-?\d+)', re.IGNORECASE),
        ]

        self.date_patterns = [
            re.compile(r'Date\s*:?\s*(\d{1,2}[/\-.]\d{1,2}[/\-.]\d{2,4})', re.IGNORECASE),
            re.compile(r'(\d{1,2}[/\-.]\d{1,2}[/\-.]\d{2,4})'),
        ]

        self.total_patterns = [
            re.compile(r'\bTotal\s*:?\s*\$?\s*([\d,]+\.\d{2})', re.IGNORECASE),
            re.compile(r'Grand\s*Total\s*:?\s*\$?\s*([\d,]+\.\d{2})', re.IGNORECASE),
            re.compile(r'Amount\s*Due\s*:?\s*\$?\s*([\d,]+\.\d{2})', re.IGNORECASE),
        ]

        self.dimension_pattern = re.compile(r'(\d+(?:\.\d+)?)\s*(?:x|×)\s*(\d+(?:\.\d+)?)', re.IGNORECASE)
        self.price_pattern = re.compile(r'\$\s*([\d,]+\.\d{2})')
        self.quantity_patterns = [
            re.compile(r'qty\s*:?\s*(\d+)', re.IGNORECASE),
            re.compile(r'quantity\s*:?\s*(\d+)', re.IGNORECASE),
        ]

        self.line_item_builder = line_item_builder or LineItemBuilder()

    def parse(self, text: str, competitor_name: str = "") -> ParsedQuote:
        """
        Parse quote text.

        Args:
            text: Text extracted from the quote document (may contain OCR noise)
            competitor_name: Competitor the quote came from

        Returns:
            ParsedQuote with metadata, line item candidates and quote items
        """
        text = text or ""
        logger.info(f"Parsing {len(text)} characters of quote text from '{competitor_name or 'unknown'}'")

        candidates = self.extract_line_item_candidates(text)
        items = self.line_item_builder.build(candidates)
        logger.info(f"Found {len(items)} line items")

        return ParsedQuote(
            quote_number=self.extract_quote_number(text),
            quote_date=self.extract_quote_date(text),
            total_amount=self.extract_total_amount(text),
            items=items,
            candidates=candidates,
        )

    def extract_quote_number(self, text: str) -> str:
        for pattern in self.quote_number_patterns:
            match = pattern.search(text)
            if match:
                return match.group(1)
        return ""

    def extract_quote_date(self, text: str) -> Optional[date]:
        for pattern in self.date_patterns:
            match = pattern.search(text)
            if match:
                return self.parse_date(match.group(1))
        return None

    @staticmethod
    def parse_date(token: str) -> Optional[date]:
        """Parse a month/day/year token; None when it is not a real calendar date."""
        parts = re.split(r'[/\-.]', token)
        if len(parts) != 3:
            return None

        month, day, year_str = parts
        if len(year_str) == 3:
            return None

        year = int(year_str)
        if len(year_str) == 2:
            # Same pivot as strptime's %y
            year += 2000 if year < 69 else 1900

        try:
            return date(year, int(month), int(day))
        except ValueError:
            logger.debug(f"Ignoring unparseable date: {token}")
            return None

    def extract_total_amount(self, text: str) -> Decimal:
        for pattern in self.total_patterns:
            match = pattern.search(text)
            if match:
                return self.normalize_price(match.group(1))
        return ZERO

    @staticmethod
    def normalize_price(price_str: str) -> Decimal:
        """Convert a price token such as '1,234.56' to a Decimal."""
        if not price_str:
            return ZERO
        try:
            return Decimal(price_str.replace(',', ''))
        except InvalidOperation:
            logger.warning(f"Invalid price format: {price_str}")
            return ZERO

    def extract_line_item_candidates(self, text: str) -> List[LineItemCandidate]:
        """Find a line item candidate for every width x height dimension in the text."""
        candidates = []

        for match in self.dimension_pattern.finditer(text):
            width = float(match.group(1))
            height = float(match.group(2))

            line_start = text.rfind('\n', 0, match.start()) + 1
            line_end = text.find('\n', match.end())
            line = text[line_start:line_end if line_end != -1 else len(text)]

            candidate = self._parse_line(line, width, height)
            if width > 0 and height > 0:
                candidates.append(candidate)
                logger.debug(f"Line item candidate: {width} x {height} from {line.strip()!r}")

        return candidates

    def _parse_line(self, line: str, width: float, height: float) -> LineItemCandidate:
        price = ZERO
        price_match = self.price_pattern.search(line)
        if price_match:
            price = self.normalize_price(price_match.group(1))

        quantity = 1
        for pattern in self.quantity_patterns:
            qty_match = pattern.search(line)
            if qty_match:
                quantity = max(int(qty_match.group(1)), 1)
                break

        description = self.price_pattern.sub('', line, count=1)
        for pattern in self.quantity_patterns:
            description = pattern.sub('', description, count=1)
        description = self.dimension_pattern.sub('', description, count=1)
        description = re.sub(r'\s+', ' ', description).strip()

        if not description:
            description = f'{_format_dimension(width)}" × {_format_dimension(height)}" Window'

        return LineItemCandidate(
            width=width,
            height=height,
            price=price,
            quantity=quantity,
            description=description,
            line=line.strip(),
        )


def _format_dimension(value: float) -> str:
    return str(int(value)) if value.is_integer() else str(value)


class ParserRegistry:
    """Competitor-specific parsers, falling back to the heuristic parser."""

    def __init__(self, default: Optional[QuoteTextStrategy] = None):
        self.default = default or HeuristicQuoteTextParser()
        self._parsers: Dict[str, QuoteTextStrategy] = {}

    def register(self, competitor_name: str, parser: QuoteTextStrategy):
        self._parsers[competitor_name.strip().lower()] = parser

    def get(self, competitor_name: str = "") -> QuoteTextStrategy:
        return self._parsers.get((competitor_name or "").strip().lower(), self.default)


def parse_quote_text(text: str, competitor_name: str = "") -> ParsedQuote:
    """
    Convenience function to parse quote text with the heuristic parser.

    Args:
        text: Extracted quote text
        competitor_name: Competitor the quote came from

    Returns:
        ParsedQuote
    """
    parser = HeuristicQuoteTextParser()
    return parser.parse(text, competitor_name)
