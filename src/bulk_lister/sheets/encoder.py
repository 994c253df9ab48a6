from typing import List, NamedTuple, Optional, Sequence

from pydantic import BaseModel, Field

from bulk_lister.models.listing import Cell, Listing, Row
from bulk_lister.schema.mapping.loader import field_for_column

# Character widths for TITLE, PRICE, CONDITION, DESCRIPTION, CATEGORY, OFFER SHIPPING
STANDARD_COLUMN_WIDTHS = [50, 10, 15, 80, 40, 15]


class MergedRange(NamedTuple):
    first_row: int
    first_col: int
    last_row: int
    last_col: int


class EncodedSheet(BaseModel):
    grid: List[Row] = Field(default_factory=list)
    column_widths: Optional[List[int]] = None
    merged_ranges: List[MergedRange] = Field(default_factory=list)


def resolve_cell(listing: Listing, column: str) -> Cell:
    """
    Value for one template column:
    known attribute, then other_fields by exact key, then by
    case-insensitive key, else an empty string.
    """
    field = field_for_column(column)
    if field is not None:
        value = getattr(listing, field)
        return "" if value is None else value
    value = listing.other_field(column)
    return "" if value is None else value


def encode_listings(
    listings: Sequence[Listing],
    header_row: Sequence[str],
    pre_header_rows: Sequence[Sequence[Cell]],
) -> EncodedSheet:
    header = list(header_row)
    data_rows = [[resolve_cell(l, h) for h in header] for l in listings]
    grid = [list(r) for r in pre_header_rows] + [header] + data_rows

    widths = list(STANDARD_COLUMN_WIDTHS) if len(header) == 6 else None

    merges: List[MergedRange] = []
    if len(pre_header_rows) >= 2 and header:
        # Banner and instruction rows span the full template width.
        last_col = len(header) - 1
        merges = [MergedRange(0, 0, 0, last_col), MergedRange(1, 0, 1, last_col)]

    return EncodedSheet(grid=grid, column_widths=widths, merged_ranges=merges)
