from typing import Literal

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import Response

from bulk_lister.app.deps import get_repository
from bulk_lister.sheets.service import ImportResult, export_workbook, import_workbook
from bulk_lister.sheets.workbook import EXPORT_FILENAME, XLSX_MEDIA_TYPE
from bulk_lister.store.repository import ListingRepository

router = APIRouter()


@router.post("/import", response_model=ImportResult)
async def import_template(
    file: UploadFile = File(...),
    mode: Literal["replace", "append"] = Query("replace"),
    repo: ListingRepository = Depends(get_repository),
):
    data = await file.read()
    return import_workbook(repo, data, filename=file.filename, mode=mode)


@router.get("/export")
def export_template(repo: ListingRepository = Depends(get_repository)):
    content = export_workbook(repo)
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.get("/layout")
def layout(repo: ListingRepository = Depends(get_repository)):
    return {"header_row": repo.load_header_row(), "pre_header_rows": repo.load_pre_header_rows()}
