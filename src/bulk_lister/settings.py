from __future__ import annotations
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field

CONFIG_PATH = Path(os.getenv("BULK_LISTER_CONFIG", "configs/bulk_lister.yaml"))


class CatalogLimits(BaseModel):
    max_items_per_batch: int = 5000
    max_batch_bytes: int = 30 * 1024 * 1024
    batch_interval_sec: float = 18.0


class StorageSettings(BaseModel):
    path: str = "data/bulk_lister.db"


class FacebookSettings(BaseModel):
    app_id: str = ""
    api_version: str = "v24.0"
    redirect_uri: str = "http://localhost:8000/auth/callback"


class Settings(BaseModel):
    catalog: CatalogLimits = Field(default_factory=CatalogLimits)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    facebook: FacebookSettings = Field(default_factory=FacebookSettings)
    log_level: str = "INFO"


def _load_config(path: Path = CONFIG_PATH) -> Dict[str, Any]:
    if not path.exists():
        return {}
    return yaml.safe_load(path.read_text()) or {}


def _apply_env(raw: Dict[str, Any]) -> Dict[str, Any]:
    fb = dict(raw.get("facebook") or {})
    for key, env in (
        ("app_id", "FACEBOOK_APP_ID"),
        ("api_version", "FACEBOOK_API_VERSION"),
        ("redirect_uri", "FACEBOOK_REDIRECT_URI"),
    ):
        v = os.getenv(env)
        if v:
            fb[key] = v
    out = {**raw, "facebook": fb}

    db = os.getenv("BULK_LISTER_DB")
    if db:
        out["storage"] = {**(raw.get("storage") or {}), "path": db}
    level = os.getenv("LOG_LEVEL")
    if level:
        out["log_level"] = level
    return out


def load_settings(path: Optional[Path] = None) -> Settings:
    return Settings(**_apply_env(_load_config(path or CONFIG_PATH)))


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings
