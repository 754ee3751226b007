"""Error taxonomy for the Gmail MCP server.

Every failure raised below the dispatcher derives from GmailMcpError so the
registry can present it uniformly. The message text is what the agent sees.
"""


class GmailMcpError(Exception):
    """Base class for all server errors."""


class ConfigurationError(GmailMcpError):
    """Setup files are missing or unreadable."""


class CredentialsMissingError(ConfigurationError):
    """The OAuth client credentials file is absent or malformed."""

    def __init__(self, path: object, reason: str | None = None) -> None:
        detail = f" ({reason})" if reason else ""
        super().__init__(
            f"Credentials file not found at {path}{detail}. "
            "Download OAuth credentials from Google Cloud Console and save them there."
        )
        self.path = path


class TokenMissingError(ConfigurationError):
    """No usable OAuth token is stored."""

    def __init__(self, path: object, reason: str | None = None) -> None:
        detail = reason or "No token found"
        super().__init__(f"{detail} at {path}. Run 'mcp-gmail setup' to authenticate first.")
        self.path = path


class AuthorizationError(GmailMcpError):
    """Google rejected the token or it could not be refreshed."""


class UnknownOperationError(GmailMcpError):
    """A tool name that is not in the registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class ArgumentValidationError(GmailMcpError):
    """Tool arguments failed schema validation before any upstream call."""


class UpstreamError(GmailMcpError):
    """A Google API call failed.

    Attributes:
        status_code: HTTP status, or None for transport failures.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
