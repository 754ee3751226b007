"""Authenticated access to the Gmail, Calendar and Tasks REST APIs.

ClientProvider parses the credential files once and hands out ApiClient
handles bound to one service's base URL. All handles share the OAuth manager
and a pooled httpx.AsyncClient.
"""

import asyncio
import logging
from enum import Enum
from typing import Any

import httpx

from mcp_gmail.auth import OAuthManager, TokenStatus, TokenStorage, load_client_secrets
from mcp_gmail.config import Settings
from mcp_gmail.errors import AuthorizationError, TokenMissingError, UpstreamError

logger = logging.getLogger(__name__)


class ServiceKind(str, Enum):
    """Google services reachable through the provider."""

    MAIL = "mail"
    CALENDAR = "calendar"
    TASKS = "tasks"


API_BASES = {
    ServiceKind.MAIL: "https://gmail.googleapis.com/gmail/v1",
    ServiceKind.CALENDAR: "https://www.googleapis.com/calendar/v3",
    ServiceKind.TASKS: "https://tasks.googleapis.com/tasks/v1",
}


def _error_message(response: httpx.Response) -> str:
    """Pull Google's error text out of a failed response."""
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return payload.get("error_description") or error

    return response.text.strip() or response.reason_phrase


class ApiClient:
    """Authenticated handle for one Google service.

    Attributes:
        kind: Service this handle talks to.
        base_url: REST base URL for the service.
    """

    def __init__(self, kind: ServiceKind, http: httpx.AsyncClient, manager: OAuthManager) -> None:
        self.kind = kind
        self.base_url = API_BASES[kind]
        self._http = http
        self._manager = manager

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated request and return the decoded JSON body.

        Args:
            method: HTTP method (GET, POST, etc.).
            path: Path below the service base URL, starting with "/".
            params: Optional query parameters.
            json_data: Optional JSON body.

        Returns:
            JSON response as a dictionary; empty for 204 responses.

        Raises:
            AuthorizationError: On HTTP 401/403.
            UpstreamError: On any other failure.
        """
        access_token = await self._manager.get_access_token()
        url = f"{self.base_url}{path}"

        try:
            response = await self._http.request(
                method=method,
                url=url,
                params=params,
                json=json_data,
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Accept": "application/json",
                },
            )
        except httpx.HTTPError as e:
            raise UpstreamError(f"{self.kind.value} API request failed: {e}") from e

        if response.status_code in (401, 403):
            raise AuthorizationError(
                f"{self.kind.value} API rejected the request "
                f"({response.status_code}): {_error_message(response)}"
            )
        if response.is_error:
            raise UpstreamError(
                f"{self.kind.value} API error ({response.status_code}): {_error_message(response)}",
                status_code=response.status_code,
            )

        if response.status_code == 204 or not response.content:
            return {}
        result: dict[str, Any] = response.json()
        return result

    async def get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        return await self.request("GET", path, params=params)

    async def post(
        self,
        path: str,
        json_data: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return await self.request("POST", path, params=params, json_data=json_data)

    async def put(self, path: str, json_data: dict[str, Any]) -> dict[str, Any]:
        return await self.request("PUT", path, json_data=json_data)

    async def delete(self, path: str) -> None:
        await self.request("DELETE", path)


class ClientProvider:
    """Lazily builds the shared authorization and hands out service clients.

    Example:
        ```python
        provider = ClientProvider(Settings.from_env())
        gmail = await provider.get_client(ServiceKind.MAIL)
        labels = await gmail.get("/users/me/labels")
        ```
    """

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self._http_client = http_client
        self._manager: OAuthManager | None = None
        self._lock = asyncio.Lock()

    async def ensure_ready(self) -> OAuthManager:
        """Load credentials and token once; later calls return the same manager.

        Raises:
            CredentialsMissingError: If the credentials file is absent or malformed.
            TokenMissingError: If no usable token file exists.
        """
        if self._manager is not None:
            return self._manager

        async with self._lock:
            if self._manager is None:
                client_secrets = load_client_secrets(self.settings.credentials_path)
                storage = TokenStorage(self.settings.token_path)

                status = storage.get_status()
                if status == TokenStatus.MISSING:
                    raise TokenMissingError(storage.token_path)
                if status == TokenStatus.INVALID:
                    raise TokenMissingError(
                        storage.token_path, "Token file is invalid or corrupted"
                    )

                self._manager = OAuthManager(storage=storage, client_secrets=client_secrets)
                logger.info(f"Loaded OAuth credentials from {self.settings.config_dir}")

        return self._manager

    def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create the shared HTTP client with connection pooling."""
        if self._http_client is None:
            timeout = self.settings.http_timeout
            self._http_client = httpx.AsyncClient(
                http2=True,
                limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
                timeout=httpx.Timeout(timeout),
            )
        return self._http_client

    async def get_client(self, kind: ServiceKind) -> ApiClient:
        """Return an authenticated handle for a service."""
        manager = await self.ensure_ready()
        return ApiClient(kind, self._get_http_client(), manager)

    async def close(self) -> None:
        """Close the shared HTTP client and release resources."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
