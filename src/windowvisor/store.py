"""
Document store contract and an in-memory implementation.
"""

import copy
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .exceptions import PersistenceError

logger = logging.getLogger(__name__)

# Collection names
QUOTES_COLLECTION = 'CompetitorQuotes'
QUOTE_ITEMS_COLLECTION = 'QuoteItems'
COMPARISONS_COLLECTION = 'Comparisons'
COMPARISON_ITEMS_COLLECTION = 'ComparisonItems'
PRODUCTS_COLLECTION = 'Products'


def generate_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentStore(ABC):
    """
    Create / read / update by id over named collections of records.

    Records are model dataclasses with an ``id`` attribute.
    """

    @abstractmethod
    def create(self, collection: str, record: Any) -> Any:
        """Store a new record, assigning its id and timestamps."""

    @abstractmethod
    def get(self, collection: str, record_id: str) -> Optional[Any]:
        """Return the record with this id, or None."""

    @abstractmethod
    def update(self, collection: str, record: Any) -> Any:
        """Replace an existing record by id."""

    @abstractmethod
    def find(self, collection: str, **criteria) -> List[Any]:
        """Records whose attributes equal every criterion, in creation order."""


class InMemoryDocumentStore(DocumentStore):
    """Thread-safe dictionary-backed store. Records are copied in and out."""

    def __init__(self):
        self._collections: Dict[str, "OrderedDict[str, Any]"] = {}
        self._lock = threading.Lock()

    def _collection(self, name: str) -> "OrderedDict[str, Any]":
        return self._collections.setdefault(name, OrderedDict())

    def create(self, collection: str, record: Any) -> Any:
        stored = copy.deepcopy(record)
        now = utcnow()
        if not getattr(stored, 'id', None):
            stored.id = generate_id()
        if hasattr(stored, 'created_at') and stored.created_at is None:
            stored.created_at = now
        if hasattr(stored, 'updated_at'):
            stored.updated_at = now

        with self._lock:
            records = self._collection(collection)
            if stored.id in records:
                raise PersistenceError(f"Duplicate id {stored.id} in {collection}")
            records[stored.id] = stored

        logger.debug(f"Created {collection}/{stored.id}")
        return copy.deepcopy(stored)

    def get(self, collection: str, record_id: str) -> Optional[Any]:
        with self._lock:
            record = self._collection(collection).get(record_id)
        return copy.deepcopy(record) if record is not None else None

    def update(self, collection: str, record: Any) -> Any:
        stored = copy.deepcopy(record)
        if hasattr(stored, 'updated_at'):
            stored.updated_at = utcnow()

        with self._lock:
            records = self._collection(collection)
            if stored.id not in records:
                raise PersistenceError(f"Cannot update missing record {collection}/{stored.id}")
            records[stored.id] = stored

        return copy.deepcopy(stored)

    def find(self, collection: str, **criteria) -> List[Any]:
        with self._lock:
            records = list(self._collection(collection).values())

        return [
            copy.deepcopy(record)
            for record in records
            if all(getattr(record, key, None) == value for key, value in criteria.items())
        ]
