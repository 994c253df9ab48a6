"""
Spreadsheet grid -> listings.

The marketplace template is authored outside this tool: banner and
instruction rows sit above the header row, header casing varies and sellers
add their own columns. The decoder finds the header row, remembers everything
above it verbatim and maps each data row onto a Listing, keeping unknown
columns in ``Listing.other_fields``.
"""
import logging
import math
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from bulk_lister.errors import MalformedTemplate
from bulk_lister.models.listing import Listing, Row, Scalar
from bulk_lister.schema.mapping.loader import normalize_column, template_columns

logger = logging.getLogger(__name__)

HEADER_SCAN_ROWS = 20
HEADER_ANCHORS = ("title", "price")


class DecodedSheet(BaseModel):
    listings: List[Listing] = Field(default_factory=list)
    header_row: List[str] = Field(default_factory=list)
    pre_header_rows: List[Row] = Field(default_factory=list)


# --------- cell helpers ---------
def is_blank(cell: Any) -> bool:
    if cell is None:
        return True
    if isinstance(cell, float) and math.isnan(cell):
        return True
    if isinstance(cell, str) and not cell.strip():
        return True
    return False


def is_header_row(row: Optional[Sequence[Any]]) -> bool:
    if not row:
        return False
    tokens = {normalize_column(c) for c in row}
    return all(a in tokens for a in HEADER_ANCHORS)


def to_price(cell: Any) -> float:
    """Numeric coercion; anything non-numeric or non-finite becomes 0."""
    if cell is None:
        return 0.0
    if isinstance(cell, (bool, int, float)):
        value = float(cell)
    else:
        try:
            value = float(str(cell).strip())
        except ValueError:
            return 0.0
    return value if math.isfinite(value) else 0.0


def _text(cell: Any, default: str) -> str:
    if cell is None or (isinstance(cell, float) and math.isnan(cell)):
        return default
    s = str(cell)
    return s if s else default


def _is_scalar(cell: Any) -> bool:
    if isinstance(cell, float) and math.isnan(cell):
        return False
    return isinstance(cell, (bool, int, float, str))


def _cell(row: Sequence[Any], idx: Optional[int]) -> Any:
    if idx is None or idx >= len(row):
        return None
    return row[idx]


# --------- decoding ---------
def find_header_row(grid: Sequence[Optional[Sequence[Any]]]) -> int:
    for i in range(min(HEADER_SCAN_ROWS, len(grid))):
        if is_header_row(grid[i]):
            return i
    return -1


def _column_index(header_row: Sequence[str]) -> Dict[str, int]:
    # First occurrence of a duplicated header wins.
    index: Dict[str, int] = {}
    for i, h in enumerate(header_row):
        index.setdefault(normalize_column(h), i)
    return index


def _decode_row(row: Sequence[Any], header_row: Sequence[str], index: Dict[str, int]) -> Listing:
    values: Dict[str, Any] = {}
    for column, rule in template_columns().items():
        raw = _cell(row, index.get(column))
        if rule.get("type") == "number":
            values[rule["field"]] = to_price(raw)
        else:
            values[rule["field"]] = _text(raw, rule.get("default", ""))

    other_fields: Dict[str, Scalar] = {}
    seen = set()
    for i, header in enumerate(header_row):
        column = normalize_column(header)
        if not column or column in template_columns() or header in seen:
            continue
        seen.add(header)
        value = _cell(row, i)
        if _is_scalar(value):
            other_fields[header] = value

    return Listing(**values, other_fields=other_fields)


def decode_grid(grid: Sequence[Optional[Sequence[Any]]]) -> DecodedSheet:
    """
    Parse a 2-D array of cells into listings plus the layout needed to
    write the file back out.

    Raises MalformedTemplate when none of the first 20 rows carries both a
    'title' and a 'price' header; nothing is imported in that case.
    """
    if not grid:
        raise MalformedTemplate("file is empty")

    header_idx = find_header_row(grid)
    if header_idx < 0:
        raise MalformedTemplate(
            f"no title/price header found in first {HEADER_SCAN_ROWS} rows"
        )

    header_row = ["" if c is None else str(c) for c in grid[header_idx]]
    pre_header_rows = [list(r or []) for r in grid[:header_idx]]
    index = _column_index(header_row)
    title_idx, price_idx = index["title"], index["price"]

    listings: List[Listing] = []
    skipped = 0
    for row in grid[header_idx + 1:]:
        if not row:
            skipped += 1
            continue
        # Trailing formatting rows carry neither title nor price.
        if is_blank(_cell(row, title_idx)) and is_blank(_cell(row, price_idx)):
            skipped += 1
            continue
        listings.append(_decode_row(row, header_row, index))

    logger.info(
        "Decoded %d listing(s); header at row %d, %d pre-header row(s), %d row(s) skipped",
        len(listings), header_idx, len(pre_header_rows), skipped,
    )
    return DecodedSheet(listings=listings, header_row=header_row, pre_header_rows=pre_header_rows)
