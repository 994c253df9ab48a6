from typing import List, Sequence

from bulk_lister.errors import PreconditionError
from bulk_lister.models.listing import Listing


# --------- helpers ---------
def _missing_fields(listing: Listing, fields: List[str]) -> List[str]:
    miss = []
    for f in fields:
        v = getattr(listing, f)
        if v is None or (isinstance(v, str) and not v.strip()):
            miss.append(f)
    return miss


# Catalog items need a landing page and an image.
REQUIRED_FOR_SYNC = ["url", "image_url"]


def check_sync_preconditions(listings: Sequence[Listing], catalog_id: str) -> None:
    if not (catalog_id or "").strip():
        raise PreconditionError("Please select a catalog")

    offending = [l for l in listings if _missing_fields(l, REQUIRED_FOR_SYNC)]
    if offending:
        raise PreconditionError(
            f"{len(offending)} listing(s) missing required fields (URL and Image URL). "
            "Please add them before syncing.",
            count=len(offending),
        )
