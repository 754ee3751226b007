"""Tool registry, argument contracts and the published catalog."""

from mcp_gmail.tools.catalog import build_registry
from mcp_gmail.tools.registry import Operation, ToolRegistry, ToolResult

__all__ = ["Operation", "ToolRegistry", "ToolResult", "build_registry"]
