from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Tuple

from bulk_lister.models.listing import Listing


class Batch(BaseModel):
    listings: List[Listing] = Field(default_factory=list)
    size_bytes: int = 0


class SyncError(BaseModel):
    model_config = ConfigDict(frozen=True)

    listing_id: str
    message: str


class SyncOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    total_items: int
    success_count: int
    error_count: int
    errors: Tuple[SyncError, ...] = ()


class SyncState(BaseModel):
    catalog_id: str
    listings: List[Listing] = Field(default_factory=list)
    max_items: int = 5000
    max_bytes: int = 30 * 1024 * 1024
    batches: List[Batch] = Field(default_factory=list)
    succeeded_ids: List[str] = Field(default_factory=list)
    errors: List[SyncError] = Field(default_factory=list)
    outcome: Optional[SyncOutcome] = None
