#!/usr/bin/env python3
"""
Attribute mapping for window products.
Classifies free-text product names and descriptions into the canonical
window type, frame material and glass type values used by the pricing engine.
"""

import logging
from typing import List, Tuple

logger = logging.getLogger(__name__)

WINDOW_TYPES = ('double-hung', 'casement', 'awning', 'slider', 'picture', 'bay', 'bow', 'garden')
MATERIALS = ('vinyl', 'fiberglass', 'wood', 'aluminum', 'composite')
GLASS_TYPES = ('single-pane', 'double-pane', 'triple-pane')

DEFAULT_WINDOW_TYPE = 'double-hung'
DEFAULT_MATERIAL = 'vinyl'
DEFAULT_GLASS_TYPE = 'double-pane'


class AttributeMapper:
    """
    Keyword classifier for window attributes.

    Every table is checked in order and the first keyword found (case-insensitive
    substring) wins. Unmatched input maps to the table's default.
    """

    def __init__(self):
        self.window_type_keywords: List[Tuple[str, Tuple[str, ...]]] = [
            ('double-hung', ('double-hung', 'double hung')),
            ('casement', ('casement',)),
            ('awning', ('awning',)),
            ('slider', ('slider', 'sliding')),
            ('picture', ('picture', 'fixed')),
            ('bay', ('bay',)),
            ('bow', ('bow',)),
            ('garden', ('garden',)),
        ]

        self.material_keywords: List[Tuple[str, Tuple[str, ...]]] = [
            ('vinyl', ('vinyl',)),
            ('fiberglass', ('fiberglass',)),
            ('wood', ('wood',)),
            ('aluminum', ('aluminum',)),
            ('composite', ('composite',)),
        ]

        # Only the non-default panes are listed; everything else is double pane
        self.glass_type_keywords: List[Tuple[str, Tuple[str, ...]]] = [
            ('triple-pane', ('triple', '3-pane', '3 pane')),
            ('single-pane', ('single', '1-pane', '1 pane')),
        ]

    def _classify(self, text, table, default: str) -> str:
        if not isinstance(text, str) or not text:
            return default

        text_lower = text.lower()
        for canonical, keywords in table:
            if any(keyword in text_lower for keyword in keywords):
                return canonical

        logger.debug(f"No keyword matched '{text}', using default '{default}'")
        return default

    def map_window_type(self, product_name) -> str:
        """Map a product name to a window type."""
        return self._classify(product_name, self.window_type_keywords, DEFAULT_WINDOW_TYPE)

    def map_material(self, material_type) -> str:
        """Map a material descriptor to a frame material."""
        return self._classify(material_type, self.material_keywords, DEFAULT_MATERIAL)

    def map_glass_type(self, description) -> str:
        """Map a window description to a glass type."""
        return self._classify(description, self.glass_type_keywords, DEFAULT_GLASS_TYPE)


_default_mapper = AttributeMapper()


def map_window_type(product_name) -> str:
    return _default_mapper.map_window_type(product_name)


def map_material(material_type) -> str:
    return _default_mapper.map_material(material_type)


def map_glass_type(description) -> str:
    return _default_mapper.map_glass_type(description)
