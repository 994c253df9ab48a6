import logging
import sys

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bulk_lister.errors import AuthError, ExportBlocked, MalformedTemplate, PreconditionError, RemoteCallError
from bulk_lister.settings import get_settings
from .routers import facebook, health, listings, metrics, review, spreadsheet

logging.basicConfig(
    level=getattr(logging, get_settings().log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)

app = FastAPI(title="Marketplace Bulk Lister")

app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(metrics.router, prefix="/metrics", tags=["metrics"])
app.include_router(listings.router, tags=["listings"])
app.include_router(review.router, tags=["review"])
app.include_router(spreadsheet.router, tags=["spreadsheet"])
app.include_router(facebook.router, tags=["facebook"])


@app.exception_handler(MalformedTemplate)
async def malformed_template_handler(request: Request, exc: MalformedTemplate):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(PreconditionError)
async def precondition_handler(request: Request, exc: PreconditionError):
    return JSONResponse(status_code=422, content={"detail": str(exc), "count": exc.count})


@app.exception_handler(AuthError)
async def auth_handler(request: Request, exc: AuthError):
    return JSONResponse(status_code=401, content={"detail": str(exc)})


@app.exception_handler(RemoteCallError)
async def remote_call_handler(request: Request, exc: RemoteCallError):
    logger.error(f"Catalog API call failed: {exc}")
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.exception_handler(ExportBlocked)
async def export_blocked_handler(request: Request, exc: ExportBlocked):
    return JSONResponse(status_code=409, content={"detail": str(exc), "invalid_ids": exc.invalid_ids})


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("bulk_lister.app.main:app", host="0.0.0.0", port=8000, reload=True,
                log_level=get_settings().log_level.lower())
