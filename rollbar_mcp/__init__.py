"""MCP server exposing read-only Rollbar tools."""

__version__ = "0.1.0"
