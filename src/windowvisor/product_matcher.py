#!/usr/bin/env python3
"""
Product Matcher - pairs competitor quote items with catalog products.

The matcher contract is ``match(quote_item, catalog) -> ProductMatch``. Callers
treat a returned match as always present; a matcher that cannot produce one
raises ProductMatchError.
"""

import re
import logging
from abc import ABC, abstractmethod
from typing import List, Set

from .attribute_mapper import AttributeMapper
from .exceptions import ProductMatchError
from .models import CatalogProduct, ProductMatch, QuoteItem

logger = logging.getLogger(__name__)

WINDOW_TYPE_WEIGHT = 3.0
MATERIAL_WEIGHT = 2.0
GLASS_WEIGHT = 1.0
TOKEN_WEIGHT = 0.5
MAX_TOKEN_SCORE = 2.0
MAX_SCORE = WINDOW_TYPE_WEIGHT + MATERIAL_WEIGHT + GLASS_WEIGHT + MAX_TOKEN_SCORE

STOP_WORDS = {'the', 'and', 'with', 'for', 'window', 'windows', 'glass'}


class ProductMatcher(ABC):
    """Finds the catalog product equivalent to a quote item."""

    @abstractmethod
    def match(self, quote_item: QuoteItem, catalog: List[CatalogProduct]) -> ProductMatch:
        raise NotImplementedError


def _tokens(text: str) -> Set[str]:
    words = re.findall(r'[a-z]+', (text or '').lower())
    return {word for word in words if len(word) > 2 and word not in STOP_WORDS}


class KeywordProductMatcher(ProductMatcher):
    """
    Scores every catalog product against the item's description:

    - window type agreement (description vs product name)
    - frame material agreement (description vs product material)
    - glass type agreement (description vs product description)
    - shared description words, capped

    Confidence is the best score over the maximum possible score. Ties keep
    catalog order.
    """

    def __init__(self, mapper: AttributeMapper = None):
        self.mapper = mapper or AttributeMapper()

    def score(self, quote_item: QuoteItem, product: CatalogProduct) -> float:
        description = quote_item.description or ''
        score = 0.0

        if self.mapper.map_window_type(description) == self.mapper.map_window_type(product.name):
            score += WINDOW_TYPE_WEIGHT
        if self.mapper.map_material(description) == self.mapper.map_material(product.material_type):
            score += MATERIAL_WEIGHT
        if self.mapper.map_glass_type(description) == self.mapper.map_glass_type(product.description):
            score += GLASS_WEIGHT

        shared = _tokens(description) & _tokens(f"{product.name} {product.description}")
        score += min(len(shared) * TOKEN_WEIGHT, MAX_TOKEN_SCORE)
        return score

    def match(self, quote_item: QuoteItem, catalog: List[CatalogProduct]) -> ProductMatch:
        if not catalog:
            raise ProductMatchError("Catalog is empty")

        scored = [(self.score(quote_item, product), product) for product in catalog]
        best_score, best_product = max(scored, key=lambda pair: pair[0])
        confidence = round(min(max(best_score / MAX_SCORE, 0.0), 1.0), 2)

        logger.debug(
            f"Matched '{quote_item.description}' to {best_product.id} "
            f"({best_product.name}) with confidence {confidence}"
        )
        return ProductMatch(product=best_product, confidence=confidence)
