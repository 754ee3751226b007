"""OAuth authentication for the Gmail MCP server.

Quick Start:
    ```python
    from mcp_gmail.auth import OAuthManager, TokenStorage, load_client_secrets

    manager = OAuthManager(
        storage=TokenStorage(settings.token_path),
        client_secrets=load_client_secrets(settings.credentials_path),
    )

    # One-time consent flow
    await manager.authenticate(redirect_uri=settings.redirect_uri)

    # Bearer token for API calls, refreshed when expired
    access_token = await manager.get_access_token()
    ```
"""

from mcp_gmail.auth.credentials import load_client_secrets
from mcp_gmail.auth.models import (
    ClientSecrets,
    OAuthToken,
    StoredToken,
    TokenMetadata,
    TokenStatus,
)
from mcp_gmail.auth.oauth_manager import GMAIL_SCOPES, SERVICE_NAME, OAuthManager
from mcp_gmail.auth.token_storage import TokenStorage

__all__ = [
    "OAuthManager",
    "TokenStorage",
    "ClientSecrets",
    "OAuthToken",
    "StoredToken",
    "TokenMetadata",
    "TokenStatus",
    "GMAIL_SCOPES",
    "SERVICE_NAME",
    "load_client_secrets",
]
