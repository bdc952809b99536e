#!/usr/bin/env python3
"""
Line item builder.
Turns raw line item candidates found in quote text into structured quote items.
"""

import logging
from dataclasses import dataclass, field
from typing import List

from .attribute_mapper import AttributeMapper
from .financial_calculator import to_decimal, unit_price
from .models import LineItemCandidate, QuoteItem
from .option_extractor import extract_options

logger = logging.getLogger(__name__)

# The text extractor is heuristic and non-adaptive, so every item gets the same score
DEFAULT_CONFIDENCE_SCORE = 0.8


@dataclass
class LineItemProfile:
    """Attributes read from a quote item's description."""
    glass_type: str
    options: List[str] = field(default_factory=list)


class LineItemBuilder:
    """Builds QuoteItems from LineItemCandidates."""

    def __init__(self, confidence_score: float = DEFAULT_CONFIDENCE_SCORE,
                 mapper: AttributeMapper = None):
        self.confidence_score = min(max(confidence_score, 0.0), 1.0)
        self.mapper = mapper or AttributeMapper()

    def build(self, candidates: List[LineItemCandidate]) -> List[QuoteItem]:
        items = []
        for candidate in candidates:
            if candidate.width <= 0 or candidate.height <= 0:
                logger.debug(f"Dropping candidate without usable dimensions: {candidate.line!r}")
                continue
            items.append(self.build_item(candidate))
        return items

    def build_item(self, candidate: LineItemCandidate) -> QuoteItem:
        quantity = candidate.quantity if candidate.quantity and candidate.quantity > 0 else 1
        total_price = to_decimal(candidate.price)

        return QuoteItem(
            width_inches=candidate.width,
            height_inches=candidate.height,
            description=candidate.description,
            quantity=quantity,
            unit_price=unit_price(total_price, quantity),
            total_price=total_price,
            confidence_score=self.confidence_score,
        )

    def describe(self, item: QuoteItem) -> LineItemProfile:
        """Glass type and feature options mentioned in an item's description."""
        return LineItemProfile(
            glass_type=self.mapper.map_glass_type(item.description),
            options=extract_options(item.description),
        )
