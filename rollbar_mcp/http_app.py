"""
FastAPI/ASGI wrapper for the streamable-HTTP transport.

- MCP endpoint under /mcp (FastMCP's streamable HTTP app)
- Healthcheck under /health
- Tool discovery under /mcp/discovery
"""
from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from mcp.server.fastmcp import FastMCP

from . import __version__
from .config import Settings

logger = logging.getLogger("rollbar_mcp.http_app")


def create_app(mcp: FastMCP, settings: Settings) -> FastAPI:
    mcp_asgi = mcp.streamable_http_app()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # A mounted sub-app does not get lifespan events; run the MCP session manager here.
        async with mcp.session_manager.run():
            logger.info("MCP session manager started")
            yield

    app = FastAPI(
        title="Rollbar MCP Server",
        description="Read-only MCP tools over the Rollbar REST API",
        version=__version__,
        lifespan=lifespan,
    )

    @app.get("/health")
    async def health() -> dict[str, Any]:
        """Healthcheck endpoint. Never calls Rollbar."""
        return {"ok": True, "status": "healthy"}

    @app.get("/mcp/discovery")
    async def discovery() -> dict[str, Any]:
        tools = await mcp.list_tools()
        names = sorted(tool.name for tool in tools)
        return {
            "server": settings.server_name,
            "version": __version__,
            "transport": "streamable-http",
            "endpoint": "/mcp",
            "tools": [{"name": name} for name in names],
            "tool_count": len(names),
        }

    app.mount("/", mcp_asgi)
    return app
