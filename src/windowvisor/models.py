"""
Data models for the WindowVisor quote engine.

Monetary values are Decimals quantized to cents. ``to_dict()`` renders the
persisted/JSON shape with camelCase keys.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Dict, Any

ZERO = Decimal('0.00')
CENTS = Decimal('0.01')

# Quote extraction lifecycle
STATUS_PENDING = 'pending'
STATUS_PROCESSING = 'processing'
STATUS_PROCESSED = 'processed'
STATUS_ERROR = 'error'
STATUS_VERIFIED = 'verified'

COMPARISON_GENERATED = 'generated'


def _money(value: Optional[Decimal]) -> Optional[str]:
    if value is None:
        return None
    return str(Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP))


def _iso(value) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()


@dataclass
class WindowOptions:
    """Options sent to the pricing engine."""
    window_type: str = 'double-hung'
    material: str = 'vinyl'
    glass_type: str = 'double-pane'

    def to_dict(self) -> Dict[str, str]:
        return {
            "windowType": self.window_type,
            "material": self.material,
            "glassType": self.glass_type,
        }


@dataclass
class Measurements:
    """Window measurements in inches."""
    width: float
    height: float
    quantity: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {"width": self.width, "height": self.height, "quantity": self.quantity}


@dataclass
class Quote:
    """A competitor's quote document and its extracted metadata."""
    project_id: str
    competitor_name: str
    document_url: str = ""
    file_name: str = ""
    extraction_status: str = STATUS_PENDING
    quote_number: str = ""
    quote_date: Optional[date] = None
    total_amount: Decimal = ZERO
    items_count: int = 0
    id: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "quoteId": self.id,
            "projectId": self.project_id,
            "competitorName": self.competitor_name,
            "documentUrl": self.document_url,
            "fileName": self.file_name,
            "extractionStatus": self.extraction_status,
            "quoteNumber": self.quote_number,
            "quoteDate": _iso(self.quote_date),
            "totalAmount": _money(self.total_amount),
            "itemsCount": self.items_count,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


@dataclass
class QuoteItem:
    """One parsed window line of a competitor quote."""
    width_inches: float
    height_inches: float
    description: str
    quantity: int = 1
    unit_price: Decimal = ZERO
    total_price: Decimal = ZERO
    confidence_score: float = 0.0
    quote_id: str = ""
    id: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "itemId": self.id,
            "quoteId": self.quote_id,
            "widthInches": self.width_inches,
            "heightInches": self.height_inches,
            "description": self.description,
            "quantity": self.quantity,
            "unitPrice": _money(self.unit_price),
            "totalPrice": _money(self.total_price),
            "confidenceScore": self.confidence_score,
        }


@dataclass
class CatalogProduct:
    """A sellable window product used as a match target."""
    id: str
    name: str
    base_price: Decimal = ZERO
    material_type: str = ""
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "productId": self.id,
            "productName": self.name,
            "basePrice": _money(self.base_price),
            "materialType": self.material_type,
            "description": self.description,
        }


@dataclass
class ProductMatch:
    """Best catalog product for a quote item."""
    product: CatalogProduct
    confidence: float


@dataclass
class PriceBreakdown:
    """Price of an equivalent window, from the pricing engine or the fallback."""
    total_price: Decimal
    price_per_window: Decimal
    base_price: Decimal
    options_price: Decimal
    options: WindowOptions
    fallback: bool = False
    estimated_installation: Optional[Decimal] = None
    total_project: Optional[Decimal] = None


@dataclass
class Comparison:
    """Savings comparison between a competitor quote and its catalog equivalents."""
    project_id: str
    quote_id: str
    competitor_name: str
    total_competitor_price: Decimal = ZERO
    total_equivalent_price: Decimal = ZERO
    savings_amount: Decimal = ZERO
    savings_percentage: Decimal = Decimal('0')
    status: str = COMPARISON_GENERATED
    id: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "comparisonId": self.id,
            "projectId": self.project_id,
            "quoteId": self.quote_id,
            "competitorName": self.competitor_name,
            "totalCompetitorPrice": _money(self.total_competitor_price),
            "totalEquivalentPrice": _money(self.total_equivalent_price),
            "savingsAmount": _money(self.savings_amount),
            "savingsPercentage": _money(self.savings_percentage),
            "status": self.status,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


@dataclass
class ComparisonItem:
    """A competitor line item paired with its priced catalog equivalent."""
    comparison_id: str
    quote_item_id: str
    competitor_product_description: str
    competitor_options: str
    competitor_price: Decimal
    equivalent_product_id: str
    equivalent_product_name: str
    equivalent_product_description: str
    equivalent_options: str
    equivalent_unit_price: Decimal
    equivalent_price: Decimal
    options_price: Decimal
    savings_amount: Decimal
    savings_percentage: Decimal
    width: float
    height: float
    quantity: int
    match_confidence: float
    pricing_fallback: bool = False
    id: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "comparisonItemId": self.id,
            "comparisonId": self.comparison_id,
            "quoteItemId": self.quote_item_id,
            "competitorProductDescription": self.competitor_product_description,
            "competitorOptions": self.competitor_options,
            "competitorPrice": _money(self.competitor_price),
            "equivalentProductId": self.equivalent_product_id,
            "equivalentProductName": self.equivalent_product_name,
            "equivalentProductDescription": self.equivalent_product_description,
            "equivalentOptions": self.equivalent_options,
            "equivalentUnitPrice": _money(self.equivalent_unit_price),
            "equivalentPrice": _money(self.equivalent_price),
            "optionsPrice": _money(self.options_price),
            "savingsAmount": _money(self.savings_amount),
            "savingsPercentage": _money(self.savings_percentage),
            "width": self.width,
            "height": self.height,
            "quantity": self.quantity,
            "matchConfidence": self.match_confidence,
            "pricingFallback": self.pricing_fallback,
        }


@dataclass
class ItemOutcome:
    """What happened to one quote item during comparison generation."""
    quote_item_id: str
    position: int
    comparison_item: Optional[ComparisonItem] = None
    skipped_reason: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.comparison_item is not None


@dataclass
class ComparisonResult:
    """A generated comparison, its items in quote order, and per-item outcomes."""
    comparison: Comparison
    items: List[ComparisonItem] = field(default_factory=list)
    outcomes: List[ItemOutcome] = field(default_factory=list)
    cancelled: bool = False

    @property
    def skipped(self) -> List[ItemOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.succeeded]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "comparison": self.comparison.to_dict(),
            "items": [item.to_dict() for item in self.items],
            "skipped": [
                {
                    "quoteItemId": outcome.quote_item_id,
                    "position": outcome.position,
                    "reason": outcome.skipped_reason,
                }
                for outcome in self.skipped
            ],
            "cancelled": self.cancelled,
        }


@dataclass
class LineItemCandidate:
    """Raw line item found around a dimension match in quote text."""
    width: float
    height: float
    price: Decimal
    quantity: int
    description: str
    line: str = ""


@dataclass
class ParsedQuote:
    """Quote-level metadata and line items extracted from document text."""
    quote_number: str = ""
    quote_date: Optional[date] = None
    total_amount: Decimal = ZERO
    items: List[QuoteItem] = field(default_factory=list)
    candidates: List[LineItemCandidate] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "quoteNumber": self.quote_number,
            "quoteDate": _iso(self.quote_date),
            "totalAmount": _money(self.total_amount),
            "items": [
                {
                    "widthInches": item.width_inches,
                    "heightInches": item.height_inches,
                    "description": item.description,
                    "quantity": item.quantity,
                    "unitPrice": _money(item.unit_price),
                    "totalPrice": _money(item.total_price),
                    "confidenceScore": item.confidence_score,
                }
                for item in self.items
            ],
        }
