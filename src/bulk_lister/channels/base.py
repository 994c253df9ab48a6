from typing import Any, Dict, List

from pydantic import BaseModel, Field


class ItemStatus(BaseModel):
    retailer_id: str
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class ChannelClient:
    """Dry-run client: no credentials, no remote calls, every item accepted."""
    name = "base"

    def requires_auth(self) -> bool:
        return False

    def list_catalogs(self) -> List[Dict[str, Any]]:
        return []

    def items_batch(self, catalog_id: str, requests: List[Dict[str, Any]]) -> List[ItemStatus]:
        return [ItemStatus(retailer_id=r["retailer_id"]) for r in requests]


def get_client(auth, dry_run: bool = False, **kwargs) -> ChannelClient:
    # Prefer the Graph API client once an app id is configured
    if not dry_run and auth.is_configured():
        from bulk_lister.channels.facebook import FacebookCatalogClient
        return FacebookCatalogClient(auth=auth, api_version=auth.settings.api_version, **kwargs)
    return ChannelClient()
