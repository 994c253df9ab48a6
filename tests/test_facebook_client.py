import json

import httpx
import pytest

from bulk_lister.channels.base import ChannelClient, get_client
from bulk_lister.channels.facebook import FacebookCatalogClient, batch_request, to_catalog_product
from bulk_lister.channels.facebook_auth import TOKEN_EXPIRY_KEY, TOKEN_KEY, FacebookAuth
from bulk_lister.errors import AuthError, RemoteCallError
from bulk_lister.settings import FacebookSettings
from bulk_lister.store.kv import MemoryStore


def _auth(token="tok-1", app_id="4242"):
    store = MemoryStore()
    if token:
        store.set(TOKEN_KEY, token)
        store.set(TOKEN_EXPIRY_KEY, "9999999999")
    return FacebookAuth(store, FacebookSettings(app_id=app_id))


def _client(handler, auth=None):
    return FacebookCatalogClient(auth=auth or _auth(), transport=httpx.MockTransport(handler))


def test_catalog_product_shape(make_listing):
    listing = make_listing(title="T" * 200, description="D" * 6000, price=19.5,
                           condition="Used - Like New", other_fields={"Brand": "Acme"})
    product = to_catalog_product(listing)

    assert product["retailer_id"] == listing.id
    assert len(product["title"]) == 150
    assert len(product["description"]) == 5000
    assert product["price"] == "19.50 USD"
    assert product["condition"] == "used_like_new"
    assert product["availability"] == "in stock"
    assert product["brand"] == "Acme"
    assert batch_request(listing) == {"method": "CREATE", "retailer_id": listing.id, "data": product}


def test_catalog_product_without_brand(make_listing):
    product = to_catalog_product(make_listing(availability="out of stock"))
    assert "brand" not in product
    assert product["availability"] == "out of stock"
    assert product["condition"] == "new"


def test_items_batch_parses_validation_status(make_listing):
    seen = {}

    def handler(request: httpx.Request):
        seen["url"] = str(request.url.copy_with(query=None))
        seen["token"] = request.url.params.get("access_token")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={
            "handles": ["h1"],
            "validation_status": [
                {"retailer_id": "a", "errors": [{"message": "Invalid price"}, {"message": "No image"}]},
                {"retailer_id": "b", "warnings": [{"message": "Short title"}]},
            ],
        })

    listing = make_listing(id="a")
    statuses = _client(handler).items_batch("cat-9", [batch_request(listing)])

    assert seen["url"] == "https://graph.facebook.com/v24.0/cat-9/items_batch"
    assert seen["token"] == "tok-1"
    assert seen["body"]["requests"][0]["retailer_id"] == "a"
    assert statuses[0].errors == ["Invalid price", "No image"]
    assert statuses[1].errors == [] and statuses[1].warnings == ["Short title"]


def test_items_batch_non_2xx_raises_with_graph_message():
    def handler(request):
        return httpx.Response(500, json={"error": {"message": "Service temporarily unavailable"}})

    with pytest.raises(RemoteCallError) as exc:
        _client(handler).items_batch("cat-9", [])
    assert str(exc.value) == "Service temporarily unavailable"
    assert exc.value.status_code == 500


def test_transport_failure_raises_remote_call_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RemoteCallError):
        _client(handler).items_batch("cat-9", [])


@pytest.mark.parametrize("status,message", [
    (401, "Authentication failed. Please log in again."),
    (403, "Authentication failed. Please log in again."),
    (429, "Rate limit exceeded. Please try again later."),
])
def test_list_catalogs_error_messages(status, message):
    def handler(request):
        return httpx.Response(status, json={"error": {"message": "raw"}})

    with pytest.raises(RemoteCallError) as exc:
        _client(handler).list_catalogs()
    assert str(exc.value) == message


def test_list_catalogs_returns_data():
    def handler(request):
        assert request.url.path == "/v24.0/me/owned_product_catalogs"
        return httpx.Response(200, json={"data": [{"id": "1", "name": "Shop", "product_count": 3}]})

    assert _client(handler).list_catalogs() == [{"id": "1", "name": "Shop", "product_count": 3}]


def test_no_token_means_no_request():
    def handler(request):
        raise AssertionError("no request expected")

    with pytest.raises(AuthError):
        _client(handler, auth=_auth(token=None)).list_catalogs()


def test_get_client_picks_by_configuration():
    assert isinstance(get_client(_auth()), FacebookCatalogClient)
    assert type(get_client(_auth(app_id=""))) is ChannelClient
    assert type(get_client(_auth(), dry_run=True)) is ChannelClient


@pytest.mark.parametrize("response", [
    httpx.Response(200, text="<html>gateway</html>"),
    httpx.Response(200, json=[{"retailer_id": "a"}]),
    httpx.Response(200, json={"validation_status": ["a", "b"]}),
    httpx.Response(200, json={"validation_status": [{"retailer_id": "a", "errors": ["plain text"]}]}),
])
def test_unreadable_items_batch_body_is_a_remote_call_error(response):
    with pytest.raises(RemoteCallError) as exc:
        _client(lambda request: response).items_batch("cat-9", [])
    assert str(exc.value) == "Invalid response from catalog API"
    assert exc.value.status_code == 200


def test_unreadable_catalog_list_is_a_remote_call_error():
    with pytest.raises(RemoteCallError):
        _client(lambda request: httpx.Response(200, text="not json")).list_catalogs()
