import math
from typing import Dict, Iterable, List, Optional, Tuple
from urllib.parse import urlsplit

from bulk_lister.models.listing import Listing

TITLE_MIN_LEN = 5
TITLE_MAX_LEN = 150
DESCRIPTION_MAX_LEN = 5000


# --------- helpers ---------
def _is_blank(v: Optional[str]) -> bool:
    return v is None or not v.strip()


def _is_absolute_url(v: str) -> bool:
    try:
        parts = urlsplit(v.strip())
    except ValueError:
        return False
    if any(ch.isspace() for ch in v.strip()):
        return False
    return bool(parts.scheme) and bool(parts.netloc)


def _validate_title(title: str) -> Optional[str]:
    if _is_blank(title):
        return "Title is required"
    n = len(title.strip())
    if n < TITLE_MIN_LEN:
        return f"Title is too short (min {TITLE_MIN_LEN} chars)"
    if n > TITLE_MAX_LEN:
        return f"Title is too long (max {TITLE_MAX_LEN} chars for Facebook)"
    return None


def _validate_price(price: Optional[float]) -> Optional[str]:
    if price is None or math.isnan(price):
        return "Price is required"
    if price < 0:
        return "Price cannot be negative"
    return None


def _validate_description(description: str) -> Optional[str]:
    if _is_blank(description):
        return "Description is required"
    if len(description) > DESCRIPTION_MAX_LEN:
        return f"Description is too long (max {DESCRIPTION_MAX_LEN} chars for Facebook)"
    return None


# --------- public ---------
def validate_listing(listing: Listing) -> Dict[str, str]:
    """
    Field name -> message for every rule the listing breaks.
    An empty dict means the listing can be exported.
    """
    errors: Dict[str, str] = {}

    msg = _validate_title(listing.title)
    if msg:
        errors["title"] = msg

    msg = _validate_price(listing.price)
    if msg:
        errors["price"] = msg

    if _is_blank(listing.category):
        errors["category"] = "Category is required"

    msg = _validate_description(listing.description)
    if msg:
        errors["description"] = msg

    if not _is_blank(listing.url) and not _is_absolute_url(listing.url):
        errors["url"] = "Invalid URL format"
    if not _is_blank(listing.image_url) and not _is_absolute_url(listing.image_url):
        errors["image_url"] = "Invalid image URL format"

    return errors


def invalid_listings(listings: Iterable[Listing]) -> List[Tuple[Listing, Dict[str, str]]]:
    out = []
    for listing in listings:
        errs = validate_listing(listing)
        if errs:
            out.append((listing, errs))
    return out
