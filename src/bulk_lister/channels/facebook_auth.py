"""
Facebook Login state: CSRF nonce, access token and its expiry.

The OAuth dialog redirects back with ``access_token``, ``expires_in`` and
``state`` in the URL fragment. Whatever receives the redirect hands those
values over as an ``AuthCallback``; the token is accepted only when the
state matches the nonce issued by ``login_url``.
"""
from __future__ import annotations
import logging
import secrets
import time
from typing import Callable, Optional
from urllib.parse import parse_qs, urlencode

from pydantic import BaseModel

from bulk_lister.errors import AuthError
from bulk_lister.settings import FacebookSettings
from bulk_lister.store.kv import KeyValueStore

logger = logging.getLogger(__name__)

TOKEN_KEY = "fb_access_token"
TOKEN_EXPIRY_KEY = "fb_token_expiry"
STATE_KEY = "fb_oauth_state"
SCOPE = "catalog_management,business_management"


class AuthCallback(BaseModel):
    token: str
    expires_at: float  # epoch seconds
    csrf_state: str

    @classmethod
    def from_fragment(cls, fragment: str, now: Optional[float] = None) -> "AuthCallback":
        params = {k: v[0] for k, v in parse_qs(fragment.lstrip("#")).items()}
        try:
            expires_in = int(params.get("expires_in", ""))
        except ValueError:
            raise AuthError("callback is missing expires_in")
        if not params.get("access_token"):
            raise AuthError("callback is missing access_token")
        now = time.time() if now is None else now
        return cls(
            token=params["access_token"],
            expires_at=now + expires_in,
            csrf_state=params.get("state", ""),
        )


class AuthStatus(BaseModel):
    configured: bool
    authenticated: bool
    expires_at: Optional[float] = None
    message: str


class FacebookAuth:
    def __init__(
        self,
        store: KeyValueStore,
        settings: FacebookSettings,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.settings = settings
        self.clock = clock

    def is_configured(self) -> bool:
        return bool(self.settings.app_id)

    def config_message(self) -> str:
        if not self.is_configured():
            return "Facebook App ID not configured. Set FACEBOOK_APP_ID."
        return "Facebook integration configured"

    def login_url(self) -> str:
        state = secrets.token_urlsafe(16)
        self.store.set(STATE_KEY, state)
        query = urlencode({
            "client_id": self.settings.app_id,
            "redirect_uri": self.settings.redirect_uri,
            "scope": SCOPE,
            "state": state,
            "response_type": "token",
        })
        return f"https://www.facebook.com/{self.settings.api_version}/dialog/oauth?{query}"

    def handle_callback(self, callback: AuthCallback) -> bool:
        expected = self.store.get(STATE_KEY)
        if not expected or callback.csrf_state != expected:
            logger.warning("OAuth state mismatch, callback rejected")
            return False
        if not callback.token:
            return False
        self.store.set(TOKEN_KEY, callback.token)
        self.store.set(TOKEN_EXPIRY_KEY, str(callback.expires_at))
        self.store.delete(STATE_KEY)
        logger.info("Facebook access token stored")
        return True

    def _expiry(self) -> Optional[float]:
        raw = self.store.get(TOKEN_EXPIRY_KEY)
        try:
            return float(raw) if raw else None
        except ValueError:
            return None

    def access_token(self) -> Optional[str]:
        token = self.store.get(TOKEN_KEY)
        exp = self._expiry()
        if not token or exp is None:
            return None
        if self.clock() >= exp:
            logger.info("Facebook access token expired")
            self.logout()
            return None
        return token

    def require_token(self) -> str:
        token = self.access_token()
        if not token:
            raise AuthError("Not authenticated")
        return token

    def status(self) -> AuthStatus:
        token = self.access_token()
        return AuthStatus(
            configured=self.is_configured(),
            authenticated=token is not None,
            expires_at=self._expiry() if token else None,
            message=self.config_message(),
        )

    def logout(self) -> None:
        self.store.delete(TOKEN_KEY)
        self.store.delete(TOKEN_EXPIRY_KEY)
