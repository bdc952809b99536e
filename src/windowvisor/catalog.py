"""
Product catalog loading.

Catalog files are JSON (a list of products or {"products": [...]}) or CSV
with a header row. Keys may use the camelCase record layout (productId,
productName, basePrice, materialType) or snake_case.
"""

import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from .exceptions import CatalogUnavailableError
from .financial_calculator import to_decimal
from .models import CatalogProduct

logger = logging.getLogger(__name__)

FIELD_ALIASES = {
    'id': ('productId', 'product_id', 'id'),
    'name': ('productName', 'product_name', 'name'),
    'base_price': ('basePrice', 'base_price', 'price'),
    'material_type': ('materialType', 'material_type', 'material'),
    'description': ('description',),
}


def _first(record: Dict[str, Any], keys) -> Any:
    for key in keys:
        if key in record and record[key] not in (None, ''):
            return record[key]
    return None


def product_from_dict(record: Dict[str, Any]) -> CatalogProduct:
    product_id = _first(record, FIELD_ALIASES['id'])
    name = _first(record, FIELD_ALIASES['name'])
    if product_id is None or name is None:
        raise ValueError(f"Catalog product needs an id and a name: {record}")

    return CatalogProduct(
        id=str(product_id),
        name=str(name),
        base_price=to_decimal(_first(record, FIELD_ALIASES['base_price'])),
        material_type=str(_first(record, FIELD_ALIASES['material_type']) or ''),
        description=str(_first(record, FIELD_ALIASES['description']) or ''),
    )


def load_catalog(path) -> List[CatalogProduct]:
    """
    Load catalog products from a JSON or CSV file.

    Raises:
        CatalogUnavailableError: the file is missing or malformed
    """
    path = Path(path)
    try:
        if path.suffix.lower() == '.csv':
            with open(path, newline='', encoding='utf-8') as f:
                records = list(csv.DictReader(f))
        else:
            with open(path, encoding='utf-8') as f:
                data = json.load(f)
            records = data.get('products', []) if isinstance(data, dict) else data

        products = [product_from_dict(record) for record in records]
    except (OSError, ValueError, TypeError, AttributeError) as e:
        raise CatalogUnavailableError(f"Could not read catalog {path}: {e}") from e

    logger.info(f"Loaded {len(products)} catalog products from {path}")
    return products
