"""
Main entry point for the Rollbar MCP server.

stdio is the default transport (MCP clients spawn the process). With
ROLLBAR_MCP_TRANSPORT=streamable-http the FastAPI app from http_app is served
by uvicorn instead.
"""
from __future__ import annotations

import sys

import uvicorn

from .config import load_settings
from .errors import ConfigError
from .http_app import create_app
from .server import create_server


def main() -> None:
    try:
        settings = load_settings()
    except (ConfigError, FileNotFoundError) as exc:
        print(f"Failed to start Rollbar MCP server: {exc}", file=sys.stderr)
        sys.exit(1)

    mcp = create_server(settings)
    try:
        if settings.transport == "streamable-http":
            app = create_app(mcp, settings)
            print(f"Starting Rollbar MCP server on http://{settings.host}:{settings.port}", file=sys.stderr)
            print(f"MCP endpoint: http://{settings.host}:{settings.port}/mcp", file=sys.stderr)
            print(f"Healthcheck: http://{settings.host}:{settings.port}/health", file=sys.stderr)
            uvicorn.run(
                app,
                host=settings.host,
                port=settings.port,
                log_level=settings.log_level.lower(),
                server_header=False,
            )
        else:
            mcp.run(transport="stdio")
    except KeyboardInterrupt:
        print("\nServer shutdown requested...", file=sys.stderr)
        sys.exit(0)


if __name__ == "__main__":
    main()
