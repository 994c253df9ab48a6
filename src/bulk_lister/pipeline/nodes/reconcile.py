from bulk_lister.pipeline.state import SyncOutcome, SyncState


def reconcile_node(state: SyncState) -> dict:
    error_count = len(state.errors)
    outcome = SyncOutcome(
        success=error_count == 0,
        total_items=len(state.listings),
        success_count=len(state.succeeded_ids),
        error_count=error_count,
        errors=tuple(state.errors),
    )
    return {"outcome": outcome}
