from typing import Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel, Field

from bulk_lister.app.deps import get_repository
from bulk_lister.models.listing import Availability, Listing, Scalar
from bulk_lister.models.validator import validate_listing
from bulk_lister.store.repository import ListingRepository

router = APIRouter()


class ListingIn(BaseModel):
    title: str = ""
    price: Optional[float] = None
    condition: str = "New"
    description: str = ""
    category: str = ""
    offer_shipping: str = "No"
    url: Optional[str] = None
    image_url: Optional[str] = None
    availability: Optional[Availability] = None
    other_fields: Dict[str, Scalar] = Field(default_factory=dict)


class ListingOut(Listing):
    errors: Dict[str, str] = Field(default_factory=dict)


def _out(listing: Listing) -> ListingOut:
    return ListingOut(**listing.model_dump(), errors=validate_listing(listing))


def _get_or_404(repo: ListingRepository, listing_id: str) -> Listing:
    listing = repo.get(listing_id)
    if listing is None:
        raise HTTPException(status_code=404, detail="Listing not found")
    return listing


@router.get("/listings", response_model=List[ListingOut])
def list_listings(repo: ListingRepository = Depends(get_repository)):
    return [_out(l) for l in repo.load_all()]


@router.post("/listings", response_model=ListingOut, status_code=201)
def create_listing(payload: ListingIn, repo: ListingRepository = Depends(get_repository)):
    # id is always assigned here, never taken from the client
    listing = repo.save(Listing(**payload.model_dump()))
    return _out(listing)


@router.post("/listings/validate")
def validate(payload: ListingIn = Body(...)):
    errs = validate_listing(Listing(**payload.model_dump()))
    return {"ok": not errs, "errors": errs}


@router.get("/listings/{listing_id}", response_model=ListingOut)
def get_listing(listing_id: str, repo: ListingRepository = Depends(get_repository)):
    return _out(_get_or_404(repo, listing_id))


@router.put("/listings/{listing_id}", response_model=ListingOut)
def update_listing(listing_id: str, payload: ListingIn, repo: ListingRepository = Depends(get_repository)):
    _get_or_404(repo, listing_id)
    listing = repo.save(Listing(id=listing_id, **payload.model_dump()))
    return _out(listing)


@router.delete("/listings/{listing_id}", status_code=204)
def delete_listing(listing_id: str, repo: ListingRepository = Depends(get_repository)):
    if not repo.delete_by_id(listing_id):
        raise HTTPException(status_code=404, detail="Listing not found")
