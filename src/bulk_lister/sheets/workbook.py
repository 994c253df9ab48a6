"""
File bytes <-> cell grid.

Reading goes through pandas with ``header=None`` (openpyxl for xlsx, xlrd
for legacy xls; csv files go through the csv module) so the grid keeps the
banner rows, the header row and blank rows exactly where the file has them.
Writing uses pandas' xlsxwriter engine, then applies the column widths and
merged banner rows from the encoder.
"""
import csv
import datetime as dt
import io
import logging
import math
from pathlib import Path
from typing import Any, BinaryIO, List, Optional, Union

import pandas as pd

from bulk_lister.errors import MalformedTemplate
from bulk_lister.models.listing import Cell, Row
from bulk_lister.sheets.encoder import EncodedSheet

logger = logging.getLogger(__name__)

SHEET_NAME = "Bulk Upload Template"
EXPORT_FILENAME = "Facebook_Marketplace_Bulk_Upload.xlsx"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

Source = Union[bytes, str, Path, BinaryIO]


def _to_cell(v: Any) -> Cell:
    if v is None:
        return None
    if hasattr(v, "item") and not isinstance(v, (str, bytes)):
        v = v.item()  # numpy scalar
    if isinstance(v, float) and math.isnan(v):
        return None
    if isinstance(v, (dt.datetime, dt.date, dt.time)):
        return v.isoformat()
    if isinstance(v, (bool, int, float, str)):
        return v
    try:
        if pd.isna(v):
            return None
    except (TypeError, ValueError):
        pass
    return str(v)


def _trim_row(row: List[Cell]) -> Row:
    end = len(row)
    while end and row[end - 1] is None:
        end -= 1
    return row[:end]


def _frame_to_grid(df: pd.DataFrame) -> List[Row]:
    return [_trim_row([_to_cell(v) for v in values]) for values in df.itertuples(index=False, name=None)]


def _read_csv(source: Source) -> List[Row]:
    # Rows can differ in width (a one-cell banner above a wide header), which
    # pandas.read_csv rejects, so the csv module splits the lines.
    if isinstance(source, (str, Path)):
        with open(source, newline="", encoding="utf-8-sig") as f:
            rows = list(csv.reader(f))
    else:
        rows = list(csv.reader(io.TextIOWrapper(source, encoding="utf-8-sig", newline="")))
    return [_trim_row([c if c != "" else None for c in r]) for r in rows]


def read_grid(source: Source, filename: Optional[str] = None) -> List[Row]:
    """First sheet of an xlsx (or a csv) file as a list of rows."""
    name = filename or (str(source) if isinstance(source, (str, Path)) else "")
    if isinstance(source, bytes):
        source = io.BytesIO(source)

    try:
        if name.lower().endswith(".csv"):
            grid = _read_csv(source)
        else:
            xl = pd.ExcelFile(source)
            grid = _frame_to_grid(xl.parse(xl.sheet_names[0], header=None, dtype=object))
    except Exception as e:
        # Any parser failure (pandas, openpyxl, xlrd, csv) means the upload is unusable.
        raise MalformedTemplate(f"could not read spreadsheet: {e}") from e

    logger.debug("Read %d row(s) from %s", len(grid), name or "<bytes>")
    return grid


def write_workbook(sheet: EncodedSheet) -> bytes:
    buf = io.BytesIO()
    df = pd.DataFrame(sheet.grid)
    with pd.ExcelWriter(buf, engine="xlsxwriter") as writer:
        df.to_excel(writer, sheet_name=SHEET_NAME, header=False, index=False)
        ws = writer.sheets[SHEET_NAME]

        for col, width in enumerate(sheet.column_widths or []):
            ws.set_column(col, col, width)

        for rng in sheet.merged_ranges:
            if (rng.first_row, rng.first_col) == (rng.last_row, rng.last_col):
                continue  # xlsxwriter refuses single-cell merges
            row = sheet.grid[rng.first_row] if rng.first_row < len(sheet.grid) else []
            value = row[rng.first_col] if rng.first_col < len(row) else None
            ws.merge_range(rng.first_row, rng.first_col, rng.last_row, rng.last_col,
                           "" if value is None else value)
    buf.seek(0)
    return buf.getvalue()
