import logging

from fastapi import APIRouter, Depends, HTTPException

from bulk_lister.app.deps import get_repository
from bulk_lister.store.repository import ListingRepository

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("/")
def healthcheck(repo: ListingRepository = Depends(get_repository)):
    try:
        repo.load_header_row()
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(status_code=503, detail="Storage unavailable")
    return {"ok": True, "storage": "connected"}
