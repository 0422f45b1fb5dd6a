from __future__ import annotations

import asyncio
import json
import os
import sys
from typing import Any, Dict

from mcp import ClientSession
from mcp.client.streamable_http import streamablehttp_client


MCP_URL = os.getenv("ROLLBAR_MCP_URL", "http://127.0.0.1:9000/mcp")


async def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python scripts/call_tool.py <tool_name> ['<json-args>']")
        print("Example: python scripts/call_tool.py list-items '{\"status\": \"active\", \"page\": 1}'")
        raise SystemExit(1)

    tool_name = sys.argv[1]
    raw_args = sys.argv[2] if len(sys.argv) > 2 else "{}"

    try:
        params: Dict[str, Any] = json.loads(raw_args)
    except json.JSONDecodeError as exc:
        print("Failed to parse JSON arguments")
        print(repr(exc))
        raise SystemExit(1)

    async with streamablehttp_client(MCP_URL) as (read_stream, write_stream, _):
        async with ClientSession(read_stream, write_stream) as session:
            await session.initialize()
            result = await session.call_tool(tool_name, params)
            if result.isError:
                print("Tool call failed:")
            else:
                print("Tool call result:")
            for block in result.content:
                print(getattr(block, "text", block))


if __name__ == "__main__":
    asyncio.run(main())
