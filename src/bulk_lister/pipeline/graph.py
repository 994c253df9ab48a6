import logging
from typing import Optional, Sequence

from langgraph.graph import StateGraph, END

from bulk_lister.channels.base import ChannelClient
from bulk_lister.models.listing import Listing
from bulk_lister.rate_limit.limiter import BatchPacer, get_pacer
from bulk_lister.settings import Settings, get_settings
from .state import SyncOutcome, SyncState
from .nodes.plan_batches import plan_batches_node
from .nodes.upsert import throttle_and_upsert_node
from .nodes.reconcile import reconcile_node
from .nodes.validate import check_sync_preconditions

logger = logging.getLogger(__name__)


def build_graph(client: ChannelClient, pacer: BatchPacer):
    def throttle_and_upsert(state: SyncState) -> dict:
        return throttle_and_upsert_node(state, client, pacer)

    g = StateGraph(SyncState)
    g.add_node("plan_batches", plan_batches_node)
    g.add_node("throttle_and_upsert", throttle_and_upsert)
    g.add_node("reconcile", reconcile_node)

    g.set_entry_point("plan_batches")
    g.add_edge("plan_batches", "throttle_and_upsert")
    g.add_edge("throttle_and_upsert", "reconcile")
    g.add_edge("reconcile", END)

    return g.compile()


def run_sync(
    listings: Sequence[Listing],
    catalog_id: str,
    *,
    client: ChannelClient,
    pacer: Optional[BatchPacer] = None,
    settings: Optional[Settings] = None,
) -> SyncOutcome:
    """
    Push listings to a catalog, one batch call at a time.

    Raises PreconditionError (no catalog, listings without url/image_url)
    or AuthError (no valid token) before any remote call. Failures of
    single items or whole batches end up in the returned outcome.
    """
    settings = settings or get_settings()
    check_sync_preconditions(listings, catalog_id)
    if client.requires_auth():
        client.auth.require_token()
    if not listings:
        return SyncOutcome(success=True, total_items=0, success_count=0, error_count=0)

    state = SyncState(
        catalog_id=catalog_id,
        listings=list(listings),
        max_items=settings.catalog.max_items_per_batch,
        max_bytes=settings.catalog.max_batch_bytes,
    )
    pacer = pacer or get_pacer(settings)
    pacer.reset()
    app = build_graph(client, pacer)
    result = app.invoke(state)

    # LangGraph may return a dict; coerce to SyncState for attribute access
    final_state = SyncState(**result) if isinstance(result, dict) else result
    outcome = final_state.outcome
    logger.info(
        "Sync to catalog %s finished: %d ok, %d failed of %d",
        catalog_id, outcome.success_count, outcome.error_count, outcome.total_items,
    )
    return outcome
