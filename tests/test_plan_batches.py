import json

import pytest

from bulk_lister.channels.facebook import batch_request
from bulk_lister.pipeline.nodes.plan_batches import ENVELOPE_BYTES, estimate_size, make_batches
from bulk_lister.models.listing import Listing


def _many(n):
    return [Listing(id=f"item-{i}", title="Desk Lamp", price=12.5,
                    url="https://x.example/l", image_url="https://x.example/l.jpg")
            for i in range(n)]


def test_count_limit_splits_in_order():
    listings = _many(12000)
    batches = make_batches(listings, max_count=5000, max_size_bytes=30 * 1024 * 1024)

    assert [len(b.listings) for b in batches] == [5000, 5000, 2000]
    flat = [l.id for b in batches for l in b.listings]
    assert flat == [l.id for l in listings]


def test_size_limit_splits_batches():
    listings = _many(10)
    one = estimate_size(listings[0])
    limit = ENVELOPE_BYTES + one * 3 + 2
    batches = make_batches(listings, max_count=5000, max_size_bytes=limit)

    assert [len(b.listings) for b in batches] == [3, 3, 3, 1]
    assert all(b.size_bytes <= limit for b in batches)

    # one byte less and the third entry no longer fits
    batches = make_batches(listings, max_count=5000, max_size_bytes=limit - 1)
    assert [len(b.listings) for b in batches] == [2, 2, 2, 2, 2]


def test_batch_size_matches_the_request_body():
    listings = _many(3) + [Listing(id="x", title="café lamp")]
    batch = make_batches(listings, max_count=10, max_size_bytes=10_000_000)[0]
    body = json.dumps({"requests": [batch_request(l) for l in listings]},
                      ensure_ascii=False, separators=(",", ":"))
    assert batch.size_bytes == len(body.encode("utf-8"))


def test_oversized_listing_goes_alone():
    small = _many(2)
    big = Listing(id="big", title="Huge", description="x" * 4000,
                  url="https://x.example/b", image_url="https://x.example/b.jpg")
    limit = estimate_size(small[0]) * 2
    assert estimate_size(big) > limit

    batches = make_batches([small[0], big, small[1]], max_count=10, max_size_bytes=limit)
    assert [[l.id for l in b.listings] for b in batches] == [["item-0"], ["big"], ["item-1"]]


def test_empty_input_has_no_batches():
    assert make_batches([], 10, 100) == []


@pytest.mark.parametrize("count,size", [(0, 100), (10, 0), (-1, -1)])
def test_limits_must_be_positive(count, size):
    with pytest.raises(ValueError):
        make_batches(_many(1), count, size)


def test_size_counts_utf8_bytes():
    ascii_listing = Listing(id="a", title="cafe")
    accented = Listing(id="a", title="café")
    assert estimate_size(accented) == estimate_size(ascii_listing) + 1
