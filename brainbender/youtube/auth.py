"""
brainbender/youtube/auth.py – OAuth2 credential holder
=======================================================
One instance per process, built at startup and handed to the publisher and
the HTTP layer. The authorization-code exchange and the refresh both go
through Google's SDK; refreshing only happens when ``refresh()`` or
``current()`` is called.
"""

from __future__ import annotations

import os
import threading
from typing import Any

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from loguru import logger

from brainbender.errors import PublishError

AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
TOKEN_URI = "https://oauth2.googleapis.com/token"
YT_UPLOAD_SCOPE = "https://www.googleapis.com/auth/youtube.upload"
SCOPES = [YT_UPLOAD_SCOPE]


class YouTubeCredentials:

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        refresh_token: str = "",
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._lock = threading.Lock()
        self._creds: Credentials | None = None
        if refresh_token:
            # Do NOT pass scopes on refresh: a scope outside the original grant
            # fails with invalid_scope.
            self._creds = Credentials(
                token=None,
                refresh_token=refresh_token,
                token_uri=TOKEN_URI,
                client_id=client_id,
                client_secret=client_secret,
                scopes=None,
            )

    @property
    def authorized(self) -> bool:
        return self._creds is not None

    def _flow(self) -> Flow:
        if not (self._client_id and self._client_secret):
            raise PublishError("YOUTUBE_CLIENT_ID / YOUTUBE_CLIENT_SECRET are not configured")
        client_config = {
            "web": {
                "client_id": self._client_id,
                "client_secret": self._client_secret,
                "auth_uri": AUTH_URI,
                "token_uri": TOKEN_URI,
                "redirect_uris": [self._redirect_uri],
            }
        }
        # The consent redirect and the callback are separate requests, so no
        # PKCE verifier could survive between them.
        return Flow.from_client_config(
            client_config,
            scopes=SCOPES,
            redirect_uri=self._redirect_uri,
            autogenerate_code_verifier=False,
        )

    def authorization_url(self) -> str:
        url, _state = self._flow().authorization_url(
            access_type="offline",
            prompt="consent",
        )
        return url

    def exchange_code(self, code: str) -> dict[str, Any]:
        # Google may answer with every scope previously granted to this client;
        # oauthlib rejects any difference from the requested scopes unless relaxed.
        os.environ["OAUTHLIB_RELAX_TOKEN_SCOPE"] = "1"
        flow = self._flow()
        token = flow.fetch_token(code=code)
        with self._lock:
            self._creds = flow.credentials
        logger.info("[Auth] Authorization code exchanged for tokens")
        return dict(token)

    def refresh(self) -> Credentials:
        with self._lock:
            if self._creds is None:
                raise PublishError("No YouTube credentials: visit /auth to authorize the app")
            try:
                self._creds.refresh(Request())
            except GoogleAuthError as e:
                raise PublishError(f"OAuth token refresh failed: {e}") from e
            logger.debug("[Auth] Access token refreshed")
            return self._creds

    def current(self) -> Credentials:
        creds = self._creds
        if creds is None:
            raise PublishError("No YouTube credentials: visit /auth to authorize the app")
        if creds.valid:
            return creds
        return self.refresh()
