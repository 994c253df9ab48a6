import logging
from typing import List, Literal, Optional

from pydantic import BaseModel

from bulk_lister.errors import ExportBlocked
from bulk_lister.models.listing import Row
from bulk_lister.models.validator import invalid_listings
from bulk_lister.sheets.decoder import decode_grid
from bulk_lister.sheets.encoder import encode_listings
from bulk_lister.sheets.workbook import Source, read_grid, write_workbook
from bulk_lister.store.repository import ListingRepository

logger = logging.getLogger(__name__)

ImportMode = Literal["replace", "append"]


class ImportResult(BaseModel):
    imported: int
    total: int
    mode: ImportMode
    header_row: List[str]
    pre_header_rows: List[Row]


def import_workbook(
    repo: ListingRepository,
    source: Source,
    filename: Optional[str] = None,
    mode: ImportMode = "replace",
) -> ImportResult:
    """
    Decode a template file and store its listings and layout.
    A malformed file raises before anything is written.
    """
    decoded = decode_grid(read_grid(source, filename=filename))

    listings = decoded.listings
    if mode == "append":
        listings = repo.load_all() + listings
    repo.replace_all(listings)
    repo.save_header_row(decoded.header_row)
    repo.save_pre_header_rows(decoded.pre_header_rows)

    logger.info("Imported %d listing(s) (%s), %d stored", len(decoded.listings), mode, len(listings))
    return ImportResult(
        imported=len(decoded.listings),
        total=len(listings),
        mode=mode,
        header_row=decoded.header_row,
        pre_header_rows=decoded.pre_header_rows,
    )


def export_workbook(repo: ListingRepository) -> bytes:
    listings = repo.load_all()
    bad = invalid_listings(listings)
    if bad:
        logger.warning("Export blocked: %d invalid listing(s)", len(bad))
        raise ExportBlocked([l.id for l, _ in bad])

    sheet = encode_listings(listings, repo.load_header_row(), repo.load_pre_header_rows())
    return write_workbook(sheet)
