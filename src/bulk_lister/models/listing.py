from __future__ import annotations
import uuid
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from bulk_lister.schema.mapping.loader import is_known_column

Scalar = Union[bool, int, float, str]
Cell = Optional[Scalar]
Row = List[Cell]

Availability = Literal[
    "in stock",
    "out of stock",
    "preorder",
    "available for order",
    "discontinued",
]

CONDITION_OPTIONS = ["New", "Used - Like New", "Used - Good", "Used - Fair"]
SHIPPING_OPTIONS = ["Yes", "No"]
AVAILABILITY_OPTIONS = [
    "in stock",
    "out of stock",
    "preorder",
    "available for order",
    "discontinued",
]

# Column labels of the marketplace template, in this exact casing and order.
REQUIRED_HEADERS = [
    "TITLE",
    "PRICE",
    "CONDITION",
    "DESCRIPTION",
    "CATEGORY",
    "OFFER SHIPPING",
]

TEMPLATE_METADATA = {
    "row1": "Facebook Marketplace Bulk Upload Template",
    "row2": (
        "You can create up to 50 listings at once. When you are finished, "
        "be sure to save or export this as an XLS/XLSX file."
    ),
}


def default_pre_header_rows() -> List[Row]:
    # The third row must stay empty, the marketplace rejects the file otherwise.
    return [[TEMPLATE_METADATA["row1"]], [TEMPLATE_METADATA["row2"]], []]


def new_listing_id() -> str:
    return str(uuid.uuid4())


class Listing(BaseModel):
    id: str = Field(default_factory=new_listing_id)
    title: str = ""
    price: Optional[float] = None
    condition: str = "New"
    description: str = ""
    category: str = ""
    offer_shipping: str = "No"
    url: Optional[str] = None
    image_url: Optional[str] = None
    availability: Optional[Availability] = None
    # Template columns this model has no attribute for.
    other_fields: Dict[str, Scalar] = Field(default_factory=dict)

    @field_validator("other_fields")
    @classmethod
    def _drop_known_columns(cls, v: Dict[str, Scalar]) -> Dict[str, Scalar]:
        return {k: val for k, val in v.items() if not is_known_column(k)}

    def other_field(self, name: str) -> Optional[Scalar]:
        """Exact-case key first, then the first case-insensitive match."""
        if name in self.other_fields:
            return self.other_fields[name]
        wanted = name.strip().lower()
        for key, value in self.other_fields.items():
            if key.strip().lower() == wanted:
                return value
        return None
