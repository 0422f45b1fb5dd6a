from __future__ import annotations

from mcp.server.fastmcp.exceptions import ToolError

from .results import Failure


class RollbarMCPError(Exception):
    """Base exception for all Rollbar MCP server errors."""
    pass


class ConfigError(RollbarMCPError):
    """Startup configuration is missing or invalid."""
    pass


class RollbarToolError(ToolError):
    """A tool invocation ended in a Failure; raised at the MCP boundary."""

    def __init__(self, failure: Failure) -> None:
        self.failure = failure
        super().__init__(failure.describe())
