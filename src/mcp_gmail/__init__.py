"""Gmail MCP Server.

Connect AI agents to Gmail, Google Calendar and Google Tasks.
"""

from mcp_gmail.__version__ import __version__

__all__ = ["__version__"]
