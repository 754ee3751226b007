"""Runtime configuration for the Gmail MCP server.

All settings come from environment variables so the server can be configured
from the MCP host's launch entry without extra files.

Environment Variables:
    GMAIL_CONFIG_DIR: Directory holding credentials.json and token.json
        (default: ~/.mcp-gmail).
    GMAIL_CREDENTIALS_PATH: OAuth client file downloaded from Google Cloud
        Console (default: <config dir>/credentials.json).
    GMAIL_TOKEN_PATH: Token file written by `mcp-gmail setup`
        (default: <config dir>/token.json).
    GMAIL_OAUTH_REDIRECT_URI: Redirect URI for the setup flow
        (default: http://localhost:3333/oauth2callback).
    GMAIL_MCP_LOG_LEVEL: Logging level name (default: INFO).
    GMAIL_MCP_DEEP_BODY_SEARCH: Search nested multipart parts for a message
        body (default: false).
    GMAIL_MCP_HTTP_TIMEOUT: Per-request timeout in seconds (default: none).
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_DIR = Path.home() / ".mcp-gmail"
DEFAULT_REDIRECT_URI = "http://localhost:3333/oauth2callback"

_TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Resolved server settings.

    Attributes:
        config_dir: Directory holding the credential files.
        credentials_path: OAuth client secrets file.
        token_path: Stored OAuth token file.
        redirect_uri: Redirect URI used by the interactive setup flow.
        log_level: Root logging level name.
        deep_body_search: Whether body extraction descends into nested parts.
        http_timeout: Per-request timeout in seconds, or None for no timeout.
    """

    config_dir: Path = Field(default=DEFAULT_CONFIG_DIR)
    credentials_path: Path = Field(default=DEFAULT_CONFIG_DIR / "credentials.json")
    token_path: Path = Field(default=DEFAULT_CONFIG_DIR / "token.json")
    redirect_uri: str = Field(default=DEFAULT_REDIRECT_URI)
    log_level: str = Field(default="INFO")
    deep_body_search: bool = Field(default=False)
    http_timeout: float | None = Field(default=None, gt=0)

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            Settings with every unset variable at its default.
        """
        env = os.environ if environ is None else environ

        config_dir = Path(env.get("GMAIL_CONFIG_DIR") or DEFAULT_CONFIG_DIR).expanduser()
        credentials_path = env.get("GMAIL_CREDENTIALS_PATH")
        token_path = env.get("GMAIL_TOKEN_PATH")
        timeout = env.get("GMAIL_MCP_HTTP_TIMEOUT")

        return cls(
            config_dir=config_dir,
            credentials_path=(
                Path(credentials_path).expanduser()
                if credentials_path
                else config_dir / "credentials.json"
            ),
            token_path=Path(token_path).expanduser() if token_path else config_dir / "token.json",
            redirect_uri=env.get("GMAIL_OAUTH_REDIRECT_URI", DEFAULT_REDIRECT_URI),
            log_level=env.get("GMAIL_MCP_LOG_LEVEL", "INFO"),
            deep_body_search=env.get("GMAIL_MCP_DEEP_BODY_SEARCH", "").lower() in _TRUTHY,
            http_timeout=float(timeout) if timeout else None,
        )


def configure_logging(settings: Settings) -> None:
    """Configure root logging for the server process.

    Logs go to stderr; stdout carries the MCP stdio protocol.
    """
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
