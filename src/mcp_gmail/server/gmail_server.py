"""Gmail MCP server for AI-agent hosts.

This MCP server exposes Gmail, Google Calendar and Google Tasks as tools over
stdio, using the OAuth token written by `mcp-gmail setup`. Expired access
tokens are refreshed automatically before each Google API call.
"""

import asyncio
import logging
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, TextContent, Tool

from mcp_gmail.client import ClientProvider
from mcp_gmail.config import Settings, configure_logging
from mcp_gmail.identity import SenderIdentityCache
from mcp_gmail.operations import CalendarOperations, MailOperations, TaskOperations
from mcp_gmail.tools import ToolRegistry, build_registry

logger = logging.getLogger(__name__)

SERVER_NAME = "gmail"


class GmailMcpServer:
    """MCP server wiring the tool registry to the stdio transport.

    Attributes:
        settings: Resolved configuration.
        clients: Shared authenticated client provider.
        identity: Sender identity cache used by send and draft tools.
        registry: The published tool catalog.
        server: MCP Server instance.
    """

    def __init__(
        self, settings: Settings | None = None, clients: ClientProvider | None = None
    ) -> None:
        self.settings = settings or Settings.from_env()
        self.clients = clients or ClientProvider(self.settings)

        self.mail = MailOperations(self.clients, deep_body_search=self.settings.deep_body_search)
        self.identity: SenderIdentityCache = self.mail.identity
        self.calendar = CalendarOperations(self.clients)
        self.tasks = TaskOperations(self.clients)
        self.registry: ToolRegistry = build_registry(self.mail, self.calendar, self.tasks)

        self.server = Server(SERVER_NAME)
        self._setup_handlers()

    def list_tools(self) -> list[Tool]:
        """Tool descriptors in catalog order."""
        return [
            Tool(
                name=operation.name,
                description=operation.description,
                inputSchema=operation.input_schema(),
            )
            for operation in self.registry.descriptors()
        ]

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> CallToolResult:
        """Dispatch a tool call and wrap the result in the MCP envelope."""
        result = await self.registry.call(name, arguments)
        return CallToolResult(
            content=[TextContent(type="text", text=result.text)],
            isError=result.is_error,
        )

    def _setup_handlers(self) -> None:
        """Register MCP tool handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            return self.list_tools()

        # ToolRegistry.call validates arguments.
        @self.server.call_tool(validate_input=False)
        async def call_tool(name: str, arguments: dict[str, Any]) -> CallToolResult:
            return await self.call_tool(name, arguments)

    async def close(self) -> None:
        await self.clients.close()

    async def run(self) -> None:
        """Run the MCP server using stdio transport."""
        logger.info(f"Gmail MCP server running with {len(self.registry)} tools")
        try:
            async with stdio_server() as (read_stream, write_stream):
                await self.server.run(
                    read_stream,
                    write_stream,
                    self.server.create_initialization_options(),
                )
        finally:
            await self.close()


def main() -> None:
    """Entry point for the Gmail MCP server."""
    settings = Settings.from_env()
    configure_logging(settings)
    settings.config_dir.mkdir(parents=True, exist_ok=True, mode=0o700)
    server = GmailMcpServer(settings)
    asyncio.run(server.run())


if __name__ == "__main__":
    main()
