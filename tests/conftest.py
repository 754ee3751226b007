"""Shared pytest fixtures for mcp-gmail tests.

This module provides reusable fixtures for OAuth tokens, token storage,
configured settings and a fake Google REST backend served through
httpx.MockTransport.
"""

import json
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest

from mcp_gmail.auth.models import OAuthToken, StoredToken, TokenMetadata
from mcp_gmail.config import Settings

# =============================================================================
# Token Fixtures
# =============================================================================


@pytest.fixture
def valid_token() -> OAuthToken:
    """Create a valid, non-expired OAuth token."""
    return OAuthToken(
        access_token="test_access_token_abc123",
        refresh_token="test_refresh_token_xyz789",
        expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
        scopes=[
            "https://www.googleapis.com/auth/gmail.readonly",
            "https://www.googleapis.com/auth/gmail.send",
            "https://www.googleapis.com/auth/gmail.modify",
            "https://www.googleapis.com/auth/calendar.readonly",
            "https://www.googleapis.com/auth/tasks",
        ],
        token_type="Bearer",
    )


@pytest.fixture
def expired_token() -> OAuthToken:
    """Create an expired OAuth token."""
    return OAuthToken(
        access_token="expired_access_token",
        refresh_token="test_refresh_token",
        expires_at=datetime.now(timezone.utc) - timedelta(hours=1),
        scopes=["https://www.googleapis.com/auth/gmail.readonly"],
        token_type="Bearer",
    )


@pytest.fixture
def token_metadata() -> TokenMetadata:
    """Create token metadata for testing."""
    return TokenMetadata(
        service_name="mcp-gmail",
        provider="google",
        created_at=datetime.now(timezone.utc) - timedelta(days=1),
    )


@pytest.fixture
def stored_token(valid_token: OAuthToken, token_metadata: TokenMetadata) -> StoredToken:
    """Create a complete stored token for testing."""
    return StoredToken(version=1, metadata=token_metadata, token=valid_token)


# =============================================================================
# Storage, Credentials and Settings Fixtures
# =============================================================================


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Temporary configuration directory."""
    path = tmp_path / ".mcp-gmail"
    path.mkdir(parents=True, mode=0o700)
    return path


@pytest.fixture
def temp_token_path(config_dir: Path) -> Path:
    """Path for a temporary token.json file."""
    return config_dir / "token.json"


@pytest.fixture
def credentials_path(config_dir: Path) -> Path:
    """A desktop-app OAuth client file as downloaded from Google Cloud Console."""
    path = config_dir / "credentials.json"
    path.write_text(
        json.dumps(
            {
                "installed": {
                    "client_id": "test-client-id.apps.googleusercontent.com",
                    "client_secret": "test-client-secret",  # pragma: allowlist secret
                    "redirect_uris": ["http://localhost"],
                    "auth_uri": "https://accounts.google.com/o/oauth2/auth",
                    "token_uri": "https://oauth2.googleapis.com/token",
                }
            }
        )
    )
    return path


@pytest.fixture
def token_storage(temp_token_path: Path):
    """Create a TokenStorage instance with temporary storage."""
    from mcp_gmail.auth.token_storage import TokenStorage

    return TokenStorage(token_path=temp_token_path)


@pytest.fixture
def client_secrets(credentials_path: Path):
    from mcp_gmail.auth.credentials import load_client_secrets

    return load_client_secrets(credentials_path)


@pytest.fixture
def oauth_manager(token_storage, client_secrets):
    """Create an OAuthManager with temporary storage."""
    from mcp_gmail.auth.oauth_manager import OAuthManager

    return OAuthManager(storage=token_storage, client_secrets=client_secrets)


@pytest.fixture
def settings(config_dir: Path, credentials_path: Path, temp_token_path: Path) -> Settings:
    """Settings pointing at the temporary configuration directory."""
    return Settings(
        config_dir=config_dir,
        credentials_path=credentials_path,
        token_path=temp_token_path,
    )


@pytest.fixture
def authenticated_settings(
    settings: Settings, token_storage, valid_token: OAuthToken, token_metadata: TokenMetadata
) -> Settings:
    """Settings whose token file holds a valid token."""
    token_storage.store(valid_token, token_metadata)
    return settings


# =============================================================================
# Mock Google Credentials
# =============================================================================


@pytest.fixture
def mock_google_credentials() -> MagicMock:
    """Create a mock Google OAuth2 Credentials object."""
    mock_creds = MagicMock()
    mock_creds.token = "mock_access_token"
    mock_creds.refresh_token = "mock_refresh_token"
    mock_creds.expiry = datetime.now(timezone.utc) + timedelta(hours=1)
    mock_creds.expired = False
    mock_creds.valid = True
    mock_creds.scopes = ["https://www.googleapis.com/auth/gmail.readonly"]
    return mock_creds


# =============================================================================
# Fake Google REST backend
# =============================================================================

Route = dict[str, Any] | tuple[int, dict[str, Any]] | Callable[[httpx.Request], httpx.Response]


class FakeGoogle:
    """Route table standing in for the Gmail, Calendar and Tasks APIs.

    Routes are keyed by (method, decoded URL path). A route is a JSON dict
    (served with 200), a (status, JSON) tuple, or a callable taking the
    request. Unrouted requests get a Google-style 404.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Route] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, response: Route) -> None:
        self.routes[(method, path)] = response

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))

        if route is None:
            return httpx.Response(
                404, json={"error": {"code": 404, "message": "Requested entity was not found."}}
            )
        if callable(route):
            return route(request)
        if isinstance(route, tuple):
            status, payload = route
            return httpx.Response(status, json=payload)
        return httpx.Response(200, json=route)

    def requests_to(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fake_google() -> FakeGoogle:
    return FakeGoogle()


@pytest.fixture
def provider(authenticated_settings: Settings, fake_google: FakeGoogle):
    """ClientProvider wired to the fake backend with a valid stored token."""
    from mcp_gmail.client import ClientProvider

    return ClientProvider(authenticated_settings, http_client=fake_google.client())


# =============================================================================
# CLI Test Fixtures
# =============================================================================


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
