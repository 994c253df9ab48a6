from functools import lru_cache

from bulk_lister.channels.base import ChannelClient, get_client
from bulk_lister.channels.facebook_auth import FacebookAuth
from bulk_lister.settings import Settings, get_settings
from bulk_lister.store.kv import KeyValueStore, SqliteStore
from bulk_lister.store.repository import ListingRepository


@lru_cache(maxsize=1)
def get_store() -> KeyValueStore:
    return SqliteStore(get_settings().storage.path)


def get_app_settings() -> Settings:
    return get_settings()


def get_repository() -> ListingRepository:
    return ListingRepository(get_store())


def get_auth() -> FacebookAuth:
    return FacebookAuth(get_store(), get_settings().facebook)


def get_catalog_client() -> ChannelClient:
    return get_client(get_auth())
