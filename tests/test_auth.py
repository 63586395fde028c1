from __future__ import annotations

import json
from types import SimpleNamespace
from urllib.parse import parse_qs, urlparse

import pytest
from google.auth.exceptions import RefreshError
from google.oauth2.credentials import Credentials
from requests_oauthlib import OAuth2Session

from brainbender.errors import PublishError
from brainbender.youtube.auth import YT_UPLOAD_SCOPE, YouTubeCredentials

REDIRECT = "http://localhost:3000/oauth2callback"


def test_consent_url_requests_offline_upload_scope() -> None:
    creds = YouTubeCredentials("client-123", "secret", REDIRECT)

    query = parse_qs(urlparse(creds.authorization_url()).query)

    assert query["client_id"] == ["client-123"]
    assert query["access_type"] == ["offline"]
    assert query["prompt"] == ["consent"]
    assert query["redirect_uri"] == [REDIRECT]
    assert query["scope"] == [YT_UPLOAD_SCOPE]
    assert "code_challenge" not in query


def test_unconfigured_client_cannot_build_url() -> None:
    with pytest.raises(PublishError):
        YouTubeCredentials("", "", REDIRECT).authorization_url()


def test_no_refresh_token_means_unauthorized() -> None:
    creds = YouTubeCredentials("id", "secret", REDIRECT)

    assert creds.authorized is False
    with pytest.raises(PublishError, match="/auth"):
        creds.current()


def test_failed_refresh_is_publish_error(monkeypatch) -> None:
    def revoked(self, request):
        raise RefreshError("invalid_grant: Token has been expired or revoked.")

    monkeypatch.setattr(Credentials, "refresh", revoked)
    creds = YouTubeCredentials("id", "secret", REDIRECT, refresh_token="1//stale")

    assert creds.authorized is True
    with pytest.raises(PublishError, match="invalid_grant"):
        creds.current()


def test_refresh_installs_new_access_token(monkeypatch) -> None:
    def refreshed(self, request):
        self.token = "ya29.fresh"

    monkeypatch.setattr(Credentials, "refresh", refreshed)
    creds = YouTubeCredentials("id", "secret", REDIRECT, refresh_token="1//good")

    assert creds.current().token == "ya29.fresh"


def _token_endpoint(scope: str):
    payload = {
        "access_token": "ya29.new",
        "refresh_token": "1//fresh",
        "expires_in": 3599,
        "token_type": "Bearer",
        "scope": scope,
    }

    def fake_request(self, method, url, **kwargs):
        return SimpleNamespace(
            status_code=200,
            text=json.dumps(payload),
            headers={"Content-Type": "application/json"},
            request=SimpleNamespace(url=url, headers={}, body=kwargs.get("data")),
        )

    return fake_request


def test_consent_url_does_not_ask_for_incremental_scopes() -> None:
    query = parse_qs(urlparse(YouTubeCredentials("id", "secret", REDIRECT).authorization_url()).query)

    assert "include_granted_scopes" not in query


def test_exchange_accepts_previously_granted_scopes(monkeypatch) -> None:
    monkeypatch.setenv("OAUTHLIB_RELAX_TOKEN_SCOPE", "")
    wider = f"https://www.googleapis.com/auth/youtube.readonly {YT_UPLOAD_SCOPE}"
    monkeypatch.setattr(OAuth2Session, "request", _token_endpoint(wider))
    creds = YouTubeCredentials("id", "secret", REDIRECT)

    tokens = creds.exchange_code("4/0Aabc")

    assert tokens["refresh_token"] == "1//fresh"
    assert creds.authorized is True
    assert creds.current().token == "ya29.new"


def test_exchange_with_requested_scope(monkeypatch) -> None:
    monkeypatch.setenv("OAUTHLIB_RELAX_TOKEN_SCOPE", "")
    monkeypatch.setattr(OAuth2Session, "request", _token_endpoint(YT_UPLOAD_SCOPE))

    tokens = YouTubeCredentials("id", "secret", REDIRECT).exchange_code("4/0Aabc")

    assert tokens["access_token"] == "ya29.new"
