"""
WindowVisor Quote Engine

Parses competitor window quotes, matches each window to a catalog equivalent
and calculates the savings.
"""

__version__ = "1.0.0"

from .attribute_mapper import AttributeMapper, map_glass_type, map_material, map_window_type
from .comparison import ComparisonAssembler, generate_comparison
from .option_extractor import extract_options
from .parser import HeuristicQuoteTextParser, ParserRegistry, QuoteTextStrategy, parse_quote_text
from .quote_manager import QuoteManager

__all__ = [
    "AttributeMapper",
    "ComparisonAssembler",
    "HeuristicQuoteTextParser",
    "ParserRegistry",
    "QuoteManager",
    "QuoteTextStrategy",
    "extract_options",
    "generate_comparison",
    "map_glass_type",
    "map_material",
    "map_window_type",
    "parse_quote_text",
]
