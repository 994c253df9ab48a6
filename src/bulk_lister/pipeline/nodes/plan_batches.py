import json
import logging
from typing import List, Sequence

from bulk_lister.channels.facebook import batch_request
from bulk_lister.models.listing import Listing
from bulk_lister.pipeline.state import Batch, SyncState

logger = logging.getLogger(__name__)


def estimate_size(listing: Listing) -> int:
    """Bytes of the listing's items_batch request entry as compact JSON."""
    payload = json.dumps(batch_request(listing), ensure_ascii=False, separators=(",", ":"))
    return len(payload.encode("utf-8"))


# `{"requests":[...]}` around the entries, plus one comma between entries.
ENVELOPE_BYTES = len(b'{"requests":[]}')


def make_batches(listings: Sequence[Listing], max_count: int, max_size_bytes: int) -> List[Batch]:
    """
    Greedy packing in input order. A batch is closed as soon as the next
    listing would push it over either limit. ``size_bytes`` is the length
    of the whole ``{"requests":[...]}`` body. A listing too large for any
    batch still goes out, alone in its batch.
    """
    if max_count < 1 or max_size_bytes < 1:
        raise ValueError("batch limits must be positive")

    batches: List[Batch] = []
    current = Batch(size_bytes=ENVELOPE_BYTES)
    for listing in listings:
        size = estimate_size(listing)
        too_many = len(current.listings) + 1 > max_count
        too_big = current.size_bytes + 1 + size > max_size_bytes
        if (too_many or too_big) and current.listings:
            batches.append(current)
            current = Batch(size_bytes=ENVELOPE_BYTES)
        if ENVELOPE_BYTES + size > max_size_bytes:
            logger.warning(f"{listing.id}: {size} bytes exceeds the {max_size_bytes} byte batch limit, sending alone")
        current.size_bytes += size + (1 if current.listings else 0)
        current.listings.append(listing)
    if current.listings:
        batches.append(current)
    return batches


def plan_batches_node(state: SyncState) -> dict:
    batches = make_batches(state.listings, state.max_items, state.max_bytes)
    logger.info("Planned %d batch(es) for %d listing(s)", len(batches), len(state.listings))
    return {"batches": batches}
