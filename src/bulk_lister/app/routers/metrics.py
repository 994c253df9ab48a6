from fastapi import APIRouter, Depends

from bulk_lister.app.deps import get_repository
from bulk_lister.models.validator import invalid_listings
from bulk_lister.store.repository import ListingRepository

router = APIRouter()

@router.get("/")
def metrics(repo: ListingRepository = Depends(get_repository)):
    listings = repo.load_all()
    invalid = len(invalid_listings(listings))
    return {"listings": len(listings), "valid": len(listings) - invalid, "invalid": invalid}
