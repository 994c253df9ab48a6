from fastapi import APIRouter, Depends, Query
from typing import Optional, Dict, Any, List

from bulk_lister.app.deps import get_repository
from bulk_lister.models.validator import invalid_listings
from bulk_lister.store.repository import ListingRepository

router = APIRouter()

def _match_contains(rec: Dict[str, Any], needle: Optional[str]) -> bool:
    if not needle:
        return True
    needle = needle.lower()
    # search in error messages and in the listing's own text
    errors_text = " ".join(rec["errors"].values())
    listing_text = " ".join(str(rec["listing"].get(k) or "") for k in ("title", "category", "description"))
    hay = f"{errors_text} {listing_text}".lower()
    return needle in hay

def _match_id_like(rec: Dict[str, Any], id_like: Optional[str]) -> bool:
    if not id_like:
        return True
    return id_like.lower() in rec["listing"]["id"].lower()

@router.get("/review")
def review(
    limit: int = Query(50, ge=1, le=500, description="Page size (1..500)"),
    offset: int = Query(0, ge=0, description="Zero-based offset"),
    contains: Optional[str] = Query(None, description="Substring to search in errors and listing text"),
    id_like: Optional[str] = Query(None, description="Substring to search in listing id"),
    sort_by: Optional[str] = Query(None, pattern="^(id|title|errors)$", description="Optional sort key"),
    sort_dir: str = Query("asc", pattern="^(asc|desc)$"),
    repo: ListingRepository = Depends(get_repository),
):
    """Listings that would block an export, with the reason for each."""
    listings = repo.load_all()
    rejects: List[Dict[str, Any]] = [
        {"listing": l.model_dump(), "errors": errs} for l, errs in invalid_listings(listings)
    ]

    # filter
    filtered = [
        r for r in rejects
        if _match_contains(r, contains) and _match_id_like(r, id_like)
    ]

    # sort
    if sort_by:
        reverse = sort_dir == "desc"
        if sort_by == "errors":
            # sort by the joined messages so listings with the same problems group together
            filtered.sort(key=lambda r: " ".join(sorted(r["errors"].values())), reverse=reverse)
        else:
            filtered.sort(key=lambda r: (r["listing"].get(sort_by) or ""), reverse=reverse)

    total = len(filtered)
    page = filtered[offset : offset + limit]

    return {
        "total_listings": len(listings),
        "total_invalid": len(rejects),
        "total_filtered": total,
        "limit": limit,
        "offset": offset,
        "items": page,
    }
