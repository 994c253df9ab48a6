import logging
from typing import List

from bulk_lister.channels.base import ChannelClient
from bulk_lister.channels.facebook import batch_request
from bulk_lister.errors import AuthError, RemoteCallError
from bulk_lister.pipeline.state import Batch, SyncError, SyncState
from bulk_lister.rate_limit.limiter import BatchPacer

logger = logging.getLogger(__name__)


def _upsert_batch(batch: Batch, catalog_id: str, client: ChannelClient,
                  succeeded: List[str], errors: List[SyncError]) -> None:
    requests = [batch_request(l) for l in batch.listings]
    try:
        statuses = client.items_batch(catalog_id, requests)
    except (RemoteCallError, AuthError) as e:
        # The whole call failed: every item of the batch is failed with its message.
        logger.warning(f"items_batch failed for {len(requests)} item(s): {e}")
        errors.extend(SyncError(listing_id=l.id, message=str(e)) for l in batch.listings)
        return

    rejected = {s.retailer_id: s for s in statuses if s.errors}
    for listing in batch.listings:
        status = rejected.get(listing.id)
        if status:
            errors.append(SyncError(listing_id=listing.id, message=", ".join(status.errors)))
        else:
            succeeded.append(listing.id)


def throttle_and_upsert_node(state: SyncState, client: ChannelClient, pacer: BatchPacer) -> dict:
    succeeded: List[str] = list(state.succeeded_ids)
    errors: List[SyncError] = list(state.errors)
    for i, batch in enumerate(state.batches, 1):
        with pacer():
            logger.info(f"Sending batch {i}/{len(state.batches)} ({len(batch.listings)} item(s), ~{batch.size_bytes} bytes)")
            _upsert_batch(batch, state.catalog_id, client, succeeded, errors)
    return {"succeeded_ids": succeeded, "errors": errors}
