"""
Error types raised by the WindowVisor quote engine.
"""


class WindowVisorError(Exception):
    """Base class for all quote engine errors."""


class NotFoundError(WindowVisorError):
    """A record looked up by id does not exist."""

    def __init__(self, record_id: str, message: str = ""):
        self.record_id = record_id
        super().__init__(message or f"Record not found: {record_id}")


class QuoteNotFoundError(NotFoundError):
    def __init__(self, quote_id: str):
        super().__init__(quote_id, f"Quote not found: {quote_id}")


class QuoteItemNotFoundError(NotFoundError):
    def __init__(self, item_id: str):
        super().__init__(item_id, f"Quote item not found: {item_id}")


class ComparisonNotFoundError(NotFoundError):
    def __init__(self, comparison_id: str):
        super().__init__(comparison_id, f"Comparison not found: {comparison_id}")


class CatalogUnavailableError(WindowVisorError):
    """The product catalog could not be read."""


class ProductMatchError(WindowVisorError):
    """No catalog product could be matched to a quote item."""


class PriceCalculationError(WindowVisorError):
    """The pricing engine failed or reported an error."""


class TextExtractionError(WindowVisorError):
    """No text could be extracted from a quote document."""


class QuoteProcessingError(WindowVisorError):
    """Extracting and parsing a quote document failed."""


class PersistenceError(WindowVisorError):
    """A document store operation failed."""
