"""Pydantic models for stored OAuth tokens and client credentials."""

from datetime import datetime, timedelta, timezone
from enum import Enum

from pydantic import BaseModel, Field


class TokenStatus(str, Enum):
    """State of the stored token."""

    VALID = "valid"
    EXPIRED = "expired"
    MISSING = "missing"
    INVALID = "invalid"


class OAuthToken(BaseModel):
    """OAuth2 token data.

    Attributes:
        access_token: Bearer token sent with each API request.
        refresh_token: Long-lived token used to obtain new access tokens.
        expires_at: Access token expiry (timezone-aware).
        scopes: Granted scopes.
        token_type: Token type, always "Bearer" for Google.
    """

    access_token: str
    refresh_token: str | None = None
    expires_at: datetime
    scopes: list[str] = Field(default_factory=list)
    token_type: str = "Bearer"

    def is_expired(self, buffer_seconds: int = 60) -> bool:
        """Check whether the access token is expired or about to expire.

        Args:
            buffer_seconds: Treat tokens expiring within this window as expired.
        """
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return datetime.now(timezone.utc) + timedelta(seconds=buffer_seconds) >= expires_at


class TokenMetadata(BaseModel):
    """Bookkeeping stored alongside a token."""

    service_name: str
    provider: str = "google"
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    last_refreshed: datetime | None = None


class StoredToken(BaseModel):
    """On-disk token file layout."""

    version: int = 1
    metadata: TokenMetadata
    token: OAuthToken


class ClientSecrets(BaseModel):
    """OAuth client configuration from the Google Cloud Console download.

    Attributes:
        client_id: OAuth client ID.
        client_secret: OAuth client secret.
        redirect_uris: Registered redirect URIs.
        auth_uri: Authorization endpoint.
        token_uri: Token endpoint, also used for refresh.
        client_type: "installed" (desktop) or "web".
    """

    client_id: str
    client_secret: str
    redirect_uris: list[str] = Field(default_factory=list)
    auth_uri: str = "https://accounts.google.com/o/oauth2/auth"
    token_uri: str = "https://oauth2.googleapis.com/token"
    client_type: str = "installed"

    def to_client_config(self, redirect_uri: str) -> dict[str, dict[str, object]]:
        """Build the client config dict expected by google-auth-oauthlib."""
        return {
            self.client_type: {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "auth_uri": self.auth_uri,
                "token_uri": self.token_uri,
                "redirect_uris": [redirect_uri],
            }
        }
