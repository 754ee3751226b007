"""Command-line interface for mcp-gmail."""
