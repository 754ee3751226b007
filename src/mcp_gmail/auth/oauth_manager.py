"""OAuth manager for Gmail, Calendar and Tasks authentication.

This module runs the one-time browser consent flow with google-auth-oauthlib
and keeps the stored token fresh with google-auth while the server runs.
"""

import asyncio
import logging
import secrets
import webbrowser
from datetime import datetime, timedelta, timezone
from http.server import BaseHTTPRequestHandler, HTTPServer
from pathlib import Path
from urllib.parse import parse_qs, urlparse

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow

from mcp_gmail.auth.models import (
    ClientSecrets,
    OAuthToken,
    StoredToken,
    TokenMetadata,
    TokenStatus,
)
from mcp_gmail.auth.token_storage import TokenStorage
from mcp_gmail.errors import AuthorizationError, TokenMissingError

logger = logging.getLogger(__name__)

# Union of the scopes needed by every exposed tool
GMAIL_SCOPES = [
    "https://www.googleapis.com/auth/gmail.readonly",
    "https://www.googleapis.com/auth/gmail.send",
    "https://www.googleapis.com/auth/gmail.modify",
    "https://www.googleapis.com/auth/calendar.readonly",
    "https://www.googleapis.com/auth/tasks",
]

SERVICE_NAME = "mcp-gmail"
CALLBACK_TIMEOUT_SECONDS = 300


class OAuthManager:
    """OAuth authentication manager.

    Handles the consent flow, token storage and refresh. One manager is
    shared by every service client in the process.

    Attributes:
        storage: Token storage instance for persisting credentials.
        client_secrets: OAuth client used for consent and refresh.
    """

    def __init__(self, storage: TokenStorage, client_secrets: ClientSecrets | None = None) -> None:
        self.storage = storage
        self.client_secrets = client_secrets
        self._service_name = SERVICE_NAME

    def has_valid_tokens(self) -> bool:
        """Check if a non-expired token is stored."""
        return self.storage.get_status() == TokenStatus.VALID

    @property
    def token_path(self) -> Path:
        """Path to the token file."""
        return self.storage.token_path

    def _credentials_to_token(self, credentials: Credentials, scopes: list[str]) -> OAuthToken:
        """Convert google-auth Credentials to OAuthToken.

        Args:
            credentials: Google OAuth2 credentials.
            scopes: List of granted scopes.

        Returns:
            OAuthToken with all credential data.
        """
        if credentials.expiry:
            expires_at = credentials.expiry
            # google-auth reports naive UTC
            if expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=timezone.utc)
        else:
            expires_at = datetime.now(timezone.utc) + timedelta(hours=1)

        return OAuthToken(  # nosec B106 - "Bearer" is OAuth token type, not a password
            access_token=credentials.token,
            refresh_token=credentials.refresh_token,
            expires_at=expires_at,
            scopes=scopes,
            token_type="Bearer",
        )

    def _token_to_credentials(self, token: OAuthToken) -> Credentials:
        """Convert OAuthToken to google-auth Credentials.

        The client id and secret are required by Google to refresh.
        """
        secrets_ = self.client_secrets
        return Credentials(  # nosec B106 - token_uri is public Google OAuth endpoint
            token=token.access_token,
            refresh_token=token.refresh_token,
            token_uri=secrets_.token_uri if secrets_ else "https://oauth2.googleapis.com/token",
            client_id=secrets_.client_id if secrets_ else None,
            client_secret=secrets_.client_secret if secrets_ else None,
            scopes=token.scopes,
        )

    async def authenticate(
        self,
        redirect_uri: str,
        scopes: list[str] | None = None,
    ) -> OAuthToken:
        """Perform the complete OAuth2 consent flow and store the token.

        Args:
            redirect_uri: Local callback URI, e.g. http://localhost:3333/oauth2callback.
            scopes: OAuth scopes to request. Uses GMAIL_SCOPES if not specified.

        Returns:
            OAuthToken containing access and refresh tokens.

        Raises:
            ValueError: If no client secrets are configured.
            AuthorizationError: If the consent flow fails.
        """
        if scopes is None:
            scopes = GMAIL_SCOPES

        if self.client_secrets is None:
            raise ValueError("Client ID and secret required to authenticate.")

        client_config = self.client_secrets.to_client_config(redirect_uri)

        # Flow is blocking (local HTTP server + token exchange)
        loop = asyncio.get_running_loop()
        credentials = await loop.run_in_executor(
            None, self._run_oauth_flow, client_config, scopes, redirect_uri
        )

        token = self._credentials_to_token(credentials, scopes)
        metadata = TokenMetadata(service_name=self._service_name, provider="google")
        self.storage.store(token, metadata)

        return token

    def _run_oauth_flow(
        self, client_config: dict, scopes: list[str], redirect_uri: str
    ) -> Credentials:
        """Run the OAuth flow (blocking operation).

        Opens the browser for consent and serves a single callback request on
        the redirect URI's host and port.
        """
        flow = Flow.from_client_config(
            client_config,
            scopes=scopes,
            redirect_uri=redirect_uri,
        )

        state = secrets.token_urlsafe(32)
        auth_url, _ = flow.authorization_url(
            access_type="offline",
            prompt="consent",
            state=state,
        )

        parsed = urlparse(redirect_uri)
        host = parsed.hostname or "localhost"
        port = parsed.port or 3333
        callback_path = parsed.path or "/oauth2callback"

        auth_code: list[str | None] = [None]
        error_message: list[str | None] = [None]

        class OAuthCallbackHandler(BaseHTTPRequestHandler):
            """HTTP handler for the OAuth redirect."""

            def log_message(self, format: str, *args) -> None:
                pass

            def _reply(self, status: int, html: bytes) -> None:
                self.send_response(status)
                self.send_header("Content-type", "text/html")
                self.end_headers()
                self.wfile.write(html)

            def do_GET(self) -> None:
                request_parsed = urlparse(self.path)
                if request_parsed.path != callback_path:
                    self.send_response(404)
                    self.end_headers()
                    self.wfile.write(b"Not Found")
                    return

                query_params = parse_qs(request_parsed.query)

                if "error" in query_params:
                    error_message[0] = query_params["error"][0]
                    self._reply(
                        400,
                        b"<html><body><h1>Authentication Failed</h1>"
                        b"<p>Please close this window and try again.</p></body></html>",
                    )
                    return

                if query_params.get("state", [None])[0] != state:
                    error_message[0] = "state mismatch"
                    self._reply(
                        400,
                        b"<html><body><h1>Authentication Failed</h1>"
                        b"<p>Invalid state parameter.</p></body></html>",
                    )
                    return

                if "code" in query_params:
                    auth_code[0] = query_params["code"][0]
                    self._reply(
                        200,
                        b"<html><body><h1>Authentication Successful!</h1>"
                        b"<p>You can close this window and return to the terminal.</p>"
                        b"</body></html>",
                    )
                else:
                    self._reply(
                        400,
                        b"<html><body><h1>Authentication Failed</h1>"
                        b"<p>No authorization code received.</p></body></html>",
                    )

        server = HTTPServer((host, port), OAuthCallbackHandler)
        server.timeout = CALLBACK_TIMEOUT_SECONDS

        print("Opening browser for Google authorization...")
        print(f"If browser doesn't open, visit: {auth_url}")
        webbrowser.open(auth_url)

        server.handle_request()
        server.server_close()

        if error_message[0]:
            raise AuthorizationError(f"OAuth authentication failed: {error_message[0]}")

        if not auth_code[0]:
            raise AuthorizationError("No authorization code received from Google")

        flow.fetch_token(code=auth_code[0])

        return flow.credentials

    async def refresh_if_needed(self) -> OAuthToken | None:
        """Refresh the token if expired or about to expire.

        Returns:
            New OAuthToken if refreshed, existing token if still valid,
            None if no token exists or it carries no refresh token.

        Raises:
            AuthorizationError: If Google rejects the refresh.
        """
        stored = self.storage.retrieve()
        if stored is None:
            return None

        if not stored.token.is_expired():
            return stored.token

        if stored.token.refresh_token is None:
            return None

        credentials = self._token_to_credentials(stored.token)

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, credentials.refresh, Request())
        except RefreshError as e:
            raise AuthorizationError(
                f"Token refresh failed: {e}. Run 'mcp-gmail setup' to re-authenticate."
            ) from e

        new_token = self._credentials_to_token(credentials, stored.token.scopes)

        stored.metadata.last_refreshed = datetime.now(timezone.utc)
        self.storage.store(new_token, stored.metadata)
        logger.info("Refreshed OAuth access token")

        return new_token

    async def get_access_token(self) -> str:
        """Get a valid access token, refreshing if necessary.

        Raises:
            TokenMissingError: If no usable token is stored.
            AuthorizationError: If the token is expired and cannot be refreshed.
        """
        status = self.storage.get_status()

        if status == TokenStatus.MISSING:
            raise TokenMissingError(self.token_path)

        if status == TokenStatus.INVALID:
            raise TokenMissingError(self.token_path, "Token file is invalid or corrupted")

        if status == TokenStatus.EXPIRED:
            logger.info("Token expired, attempting refresh...")
            token = await self.refresh_if_needed()
            if token is None:
                raise AuthorizationError(
                    "Token expired and no refresh token is stored. "
                    "Run 'mcp-gmail setup' to re-authenticate."
                )
            return token.access_token

        stored = self.storage.retrieve()
        if stored is None:
            raise TokenMissingError(self.token_path, "Token retrieval failed")

        return stored.token.access_token

    def get_status(self) -> tuple[TokenStatus, StoredToken | None]:
        """Get the status of the stored token.

        Returns:
            Tuple of (TokenStatus, StoredToken or None).
        """
        status = self.storage.get_status()
        stored = self.storage.retrieve() if status != TokenStatus.MISSING else None
        return (status, stored)
