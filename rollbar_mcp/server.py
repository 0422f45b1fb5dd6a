from __future__ import annotations

import json
import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping

import httpx
from mcp.server.fastmcp import Context, FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from mcp.server.session import ServerSession
from mcp.types import Tool as MCPTool

from .client import RollbarClient, build_http_client
from .config import Settings
from .errors import RollbarToolError
from .results import Failure
from .tools import ALL_TOOLS, ToolHandler

HttpClientFactory = Callable[[Settings], httpx.AsyncClient]

LOG_FORMAT = (
    '{"ts":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","tool":"%(tool)s",'
    '"kind":"%(kind)s","http_status":"%(http_status)s","duration_ms":"%(duration_ms)s","msg":"%(json_message)s"}'
)


class StructuredFormatter(logging.Formatter):
    """One JSON object per line; fills structured fields a log call did not pass via extra."""

    def __init__(self) -> None:
        super().__init__(LOG_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        for name in ("tool", "kind", "http_status", "duration_ms"):
            if not hasattr(record, name):
                setattr(record, name, "")
        # Rollbar error messages may carry quotes or newlines.
        record.json_message = json.dumps(record.getMessage())[1:-1]
        return super().format(record)


def setup_logger(settings: Settings) -> logging.Logger:
    logger = logging.getLogger("rollbar_mcp")
    if logger.handlers:
        return logger
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logger.setLevel(level)
    # StreamHandler writes to stderr; stdout belongs to the stdio transport.
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    return logger


@dataclass
class AppContext:
    settings: Settings
    client: RollbarClient
    logger: logging.Logger


TypedContext = Context[ServerSession, AppContext]


def _require_context(ctx: TypedContext | None) -> TypedContext:
    """Ensure context is provided, raise if None."""
    if ctx is None:
        raise RuntimeError("Context is required")
    return ctx


async def _call_tool(
    ctx: TypedContext | None,
    handler: ToolHandler,
    arguments: Mapping[str, Any],
) -> Dict[str, Any]:
    app = _require_context(ctx).request_context.lifespan_context
    start = time.perf_counter()
    result = await handler.run(app.client, arguments)
    duration_ms = round((time.perf_counter() - start) * 1000.0, 2)

    if isinstance(result, Failure):
        app.logger.warning(
            f"Tool call failed: {result.message}",
            extra={
                "tool": handler.name,
                "kind": result.kind.value,
                "http_status": result.http_status or "",
                "duration_ms": duration_ms,
            },
        )
        raise RollbarToolError(result)

    app.logger.info(
        "Tool call succeeded",
        extra={"tool": handler.name, "duration_ms": duration_ms},
    )
    return result.payload


class RollbarMCP(FastMCP):
    """
    FastMCP server that hands client arguments to the tool handlers unaltered.

    FastMCP's function tools coerce, filter and require arguments through a
    model derived from the wrapper signature. Here the handler's own params
    model is both the advertised input schema and the only validator, so
    camelCase names, unknown names and type mismatches all reach it.
    """

    def __init__(self, name: str, handlers: Iterable[ToolHandler], **kwargs: Any) -> None:
        self._handlers: Dict[str, ToolHandler] = {handler.name: handler for handler in handlers}
        super().__init__(name, **kwargs)

    async def list_tools(self) -> List[MCPTool]:
        return [
            MCPTool(
                name=handler.name,
                description=handler.description,
                inputSchema=handler.input_schema(),
            )
            for handler in self._handlers.values()
        ]

    async def call_tool(self, name: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
        handler = self._handlers.get(name)
        if handler is None:
            raise ToolError(f"Unknown tool: {name}")
        return await _call_tool(self.get_context(), handler, arguments)


def create_server(
    settings: Settings,
    http_client_factory: HttpClientFactory = build_http_client,
) -> RollbarMCP:
    logger = setup_logger(settings)

    @asynccontextmanager
    async def lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
        http_client = http_client_factory(settings)
        try:
            yield AppContext(
                settings=settings,
                client=RollbarClient(http_client=http_client, settings=settings),
                logger=logger,
            )
        finally:
            await http_client.aclose()

    return RollbarMCP(
        settings.server_name,
        ALL_TOOLS,
        lifespan=lifespan,
        host=settings.host,
        port=settings.port,
    )
