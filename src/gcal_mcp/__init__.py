"""Multi-account Google Calendar MCP server."""

__version__ = "0.1.0"
