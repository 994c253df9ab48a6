# Facebook catalog (Graph API) client matching the base.py interface:
#   list_catalogs()                   -> [catalog]
#   items_batch(catalog_id, requests) -> [ItemStatus]
#
# Limits for items_batch (v24.0): 5000 requests and ~30 MB per call,
# 200 calls per hour per catalog.

from __future__ import annotations
import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from bulk_lister.channels.base import ItemStatus
from bulk_lister.channels.facebook_auth import FacebookAuth
from bulk_lister.errors import RemoteCallError
from bulk_lister.models.listing import Listing

logger = logging.getLogger(__name__)

API_BASE = "https://graph.facebook.com"
TITLE_MAX = 150
DESCRIPTION_MAX = 5000


# ---------- shaping helpers ----------
def _snake_case(s: str) -> str:
    return re.sub(r"[^0-9a-z]+", "_", s.lower()).strip("_")


def _format_price(price: Optional[float]) -> str:
    return f"{(price or 0.0):.2f} USD"


def to_catalog_product(listing: Listing) -> Dict[str, Any]:
    product = {
        "retailer_id": listing.id,
        "title": listing.title[:TITLE_MAX],
        "description": listing.description[:DESCRIPTION_MAX],
        "price": _format_price(listing.price),
        "availability": listing.availability or "in stock",
        "condition": _snake_case(listing.condition),
        "url": listing.url or "",
        "image_url": listing.image_url or "",
    }
    brand = listing.other_field("brand")
    if brand not in (None, ""):
        product["brand"] = str(brand)
    return product


def batch_request(listing: Listing) -> Dict[str, Any]:
    return {"method": "CREATE", "retailer_id": listing.id, "data": to_catalog_product(listing)}


def _error_message(r: httpx.Response) -> str:
    try:
        body = r.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        msg = (body.get("error") or {}).get("message")
        if msg:
            return msg
    return f"HTTP {r.status_code}"


class FacebookCatalogClient:
    name = "facebook"

    def __init__(
        self,
        *,
        auth: FacebookAuth,
        api_version: str = "v24.0",
        base_url: str = API_BASE,
        timeout: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.auth = auth
        self.base = f"{base_url.rstrip('/')}/{api_version}"
        self._http = httpx.Client(timeout=timeout, transport=transport)

    def requires_auth(self) -> bool:
        return True

    def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        params = {**kwargs.pop("params", {}), "access_token": self.auth.require_token()}
        try:
            r = self._http.request(method, f"{self.base}/{path}", params=params, **kwargs)
        except httpx.HTTPError as e:
            raise RemoteCallError(str(e) or type(e).__name__) from e
        if not (200 <= r.status_code < 300):
            raise RemoteCallError(_error_message(r), status_code=r.status_code)
        return r

    # ---------- public API ----------
    def list_catalogs(self) -> List[Dict[str, Any]]:
        try:
            r = self._send("GET", "me/owned_product_catalogs", params={"fields": "id,name,product_count"})
        except RemoteCallError as e:
            logger.error(f"Facebook API error: {e}")
            if e.status_code in (401, 403):
                raise RemoteCallError("Authentication failed. Please log in again.", e.status_code) from e
            if e.status_code == 429:
                raise RemoteCallError("Rate limit exceeded. Please try again later.", e.status_code) from e
            if e.status_code == 400:
                raise RemoteCallError(f"Invalid request: {e}", e.status_code) from e
            raise
        try:
            return (r.json() or {}).get("data") or []
        except (ValueError, AttributeError, TypeError) as e:
            raise RemoteCallError("Invalid response from catalog API", r.status_code) from e

    def items_batch(self, catalog_id: str, requests: List[Dict[str, Any]]) -> List[ItemStatus]:
        """
        POST /{catalog_id}/items_batch. Returns the per-item validation
        status; raises RemoteCallError when the call as a whole fails.
        """
        r = self._send("POST", f"{catalog_id}/items_batch", json={"requests": requests})
        statuses = []
        # A gateway page or an unexpected shape fails the whole batch.
        try:
            for s in (r.json() or {}).get("validation_status") or []:
                statuses.append(ItemStatus(
                    retailer_id=str(s.get("retailer_id", "")),
                    errors=[e.get("message", "") for e in s.get("errors") or []],
                    warnings=[w.get("message", "") for w in s.get("warnings") or []],
                ))
        except (ValueError, AttributeError, TypeError) as e:
            logger.error(f"Unreadable items_batch response ({r.status_code}): {e}")
            raise RemoteCallError("Invalid response from catalog API", r.status_code) from e
        return statuses
