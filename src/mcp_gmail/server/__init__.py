"""MCP server implementation for Gmail, Calendar and Tasks.

Provides 24 tools:

Gmail (14):
- List, search and read messages and threads
- Send HTML mail with the account signature, threaded replies
- Add/remove labels, list labels
- Draft create/read/update/delete and send
- Reload the cached sender identity

Calendar (3):
- List calendars, list events in a window, get one event

Tasks (7):
- List task lists and tasks
- Create, update, complete and delete tasks

Transport: Stdio
Authentication: OAuth 2.0 with automatic token refresh
"""

from mcp_gmail.server.gmail_server import GmailMcpServer, main


def create_server() -> GmailMcpServer:
    """Create a Gmail MCP server configured from the environment.

    Example:
        >>> server = create_server()
        >>> asyncio.run(server.run())
    """
    return GmailMcpServer()


__all__ = ["create_server", "GmailMcpServer", "main"]
