import pytest

from bulk_lister.models.listing import Listing
from bulk_lister.store.kv import MemoryStore
from bulk_lister.store.repository import ListingRepository


def _listing(**overrides) -> Listing:
    base = dict(
        title="Mountain Bike",
        price=100.0,
        condition="New",
        description="Barely used, 21 gears.",
        category="Sports > Cycling",
        offer_shipping="Yes",
        url="https://shop.example.com/items/bike",
        image_url="https://shop.example.com/img/bike.jpg",
    )
    base.update(overrides)
    return Listing(**base)


@pytest.fixture
def make_listing():
    return _listing


@pytest.fixture
def repo():
    return ListingRepository(MemoryStore())
