from __future__ import annotations
import json
import logging
from typing import Any, List, Optional

from jsonschema import Draft201909Validator as Validator
from pydantic import TypeAdapter, ValidationError

from bulk_lister.errors import MalformedTemplate
from bulk_lister.models.listing import (
    REQUIRED_HEADERS,
    Listing,
    Row,
    default_pre_header_rows,
)
from bulk_lister.sheets.decoder import is_header_row
from bulk_lister.store.kv import KeyValueStore

logger = logging.getLogger(__name__)

LISTINGS_KEY = "listings_v1"
HEADER_ROW_KEY = "header_row_v1"
PRE_HEADER_ROWS_KEY = "pre_header_rows_v1"

_SCALAR = {"type": ["string", "number", "boolean", "null"]}
HEADER_ROW_SCHEMA = {"type": "array", "items": {"type": "string"}, "minItems": 2}
PRE_HEADER_ROWS_SCHEMA = {"type": "array", "items": {"type": "array", "items": _SCALAR}}

_listings_adapter = TypeAdapter(List[Listing])


class ListingRepository:
    """
    Listing set and template layout persisted as JSON documents in a
    key-value store. Read-modify-write, no concurrency checks.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    # ---------- listings ----------
    def load_all(self) -> List[Listing]:
        raw = self.store.get(LISTINGS_KEY)
        if raw is None:
            self.replace_all([])
            return []
        try:
            return _listings_adapter.validate_json(raw)
        except ValidationError as e:
            logger.error(f"Stored listings are corrupt, resetting: {e}")
            self.replace_all([])
            return []

    def replace_all(self, listings: List[Listing]) -> None:
        self.store.set(LISTINGS_KEY, _listings_adapter.dump_json(list(listings)).decode("utf-8"))

    def get(self, listing_id: str) -> Optional[Listing]:
        for listing in self.load_all():
            if listing.id == listing_id:
                return listing
        return None

    def save(self, listing: Listing) -> Listing:
        """Create or update by id."""
        listings = self.load_all()
        for i, existing in enumerate(listings):
            if existing.id == listing.id:
                listings[i] = listing
                break
        else:
            listings.append(listing)
        self.replace_all(listings)
        return listing

    def delete_by_id(self, listing_id: str) -> bool:
        listings = self.load_all()
        kept = [l for l in listings if l.id != listing_id]
        self.replace_all(kept)
        return len(kept) != len(listings)

    # ---------- layout memory ----------
    def _load_doc(self, key: str, schema: dict) -> Optional[Any]:
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            doc = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Stored {key} is not valid JSON, using default: {e}")
            return None
        errors = list(Validator(schema).iter_errors(doc))
        if errors:
            logger.warning(f"Stored {key} does not match its schema, using default: {errors[0].message}")
            return None
        return doc

    def load_header_row(self) -> List[str]:
        doc = self._load_doc(HEADER_ROW_KEY, HEADER_ROW_SCHEMA)
        if doc is None or not is_header_row(doc):
            return list(REQUIRED_HEADERS)
        return doc

    def save_header_row(self, header_row: List[str]) -> None:
        if not is_header_row(header_row):
            raise MalformedTemplate("header row must contain 'title' and 'price' columns")
        self.store.set(HEADER_ROW_KEY, json.dumps(list(header_row), ensure_ascii=False))

    def load_pre_header_rows(self) -> List[Row]:
        doc = self._load_doc(PRE_HEADER_ROWS_KEY, PRE_HEADER_ROWS_SCHEMA)
        return default_pre_header_rows() if doc is None else doc

    def save_pre_header_rows(self, rows: List[Row]) -> None:
        self.store.set(PRE_HEADER_ROWS_KEY, json.dumps([list(r) for r in rows], ensure_ascii=False))
