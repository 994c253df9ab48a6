from fastapi import APIRouter, Depends, HTTPException, Query

from bulk_lister.app.deps import get_app_settings, get_auth, get_catalog_client, get_repository
from bulk_lister.channels.base import ChannelClient
from bulk_lister.channels.facebook_auth import AuthCallback, AuthStatus, FacebookAuth
from bulk_lister.pipeline.graph import run_sync
from bulk_lister.pipeline.state import SyncOutcome
from bulk_lister.rate_limit.limiter import BatchPacer
from bulk_lister.settings import Settings
from bulk_lister.store.repository import ListingRepository

router = APIRouter(prefix="/facebook", tags=["facebook"])


@router.get("/status", response_model=AuthStatus)
def status(auth: FacebookAuth = Depends(get_auth)):
    return auth.status()


@router.get("/login")
def login(auth: FacebookAuth = Depends(get_auth)):
    if not auth.is_configured():
        raise HTTPException(status_code=501, detail=auth.config_message())
    return {"auth_url": auth.login_url()}


@router.post("/callback")
def callback(payload: AuthCallback, auth: FacebookAuth = Depends(get_auth)):
    if not auth.handle_callback(payload):
        raise HTTPException(status_code=400, detail="OAuth state mismatch or missing token")
    return {"ok": True}


@router.post("/logout")
def logout(auth: FacebookAuth = Depends(get_auth)):
    auth.logout()
    return {"ok": True}


@router.get("/catalogs")
def catalogs(client: ChannelClient = Depends(get_catalog_client)):
    return {"catalogs": client.list_catalogs()}


@router.post("/sync/{catalog_id}", response_model=SyncOutcome)
def sync(
    catalog_id: str,
    dry_run: bool = Query(False),
    repo: ListingRepository = Depends(get_repository),
    client: ChannelClient = Depends(get_catalog_client),
    settings: Settings = Depends(get_app_settings),
):
    pacer = None
    # dry runs go through the base client: batches are planned, nothing is sent
    if dry_run:
        client, pacer = ChannelClient(), BatchPacer(0)
    return run_sync(repo.load_all(), catalog_id, client=client, pacer=pacer, settings=settings)
