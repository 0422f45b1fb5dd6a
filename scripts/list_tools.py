from __future__ import annotations

import asyncio
import os
from typing import Any, Dict

from mcp import ClientSession
from mcp.client.streamable_http import streamablehttp_client


MCP_URL = os.getenv("ROLLBAR_MCP_URL", "http://127.0.0.1:9000/mcp")


def describe_parameters(schema: Dict[str, Any]) -> str:
    required = set(schema.get("required", []))
    parts = []
    for name, prop in schema.get("properties", {}).items():
        if name in required:
            parts.append(f"{name} (required)")
        elif "default" in prop:
            parts.append(f"{name}={prop['default']!r}")
        else:
            parts.append(name)
    return ", ".join(parts) or "no parameters"


async def main() -> None:
    async with streamablehttp_client(MCP_URL) as (read_stream, write_stream, _):
        async with ClientSession(read_stream, write_stream) as session:
            info = await session.initialize()
            tools_result = await session.list_tools()
            print(f"{info.serverInfo.name} {info.serverInfo.version}: {len(tools_result.tools)} Rollbar tools")
            for tool in tools_result.tools:
                print(f"- {tool.name}: {tool.description}")
                print(f"    params: {describe_parameters(tool.inputSchema)}")


if __name__ == "__main__":
    asyncio.run(main())
