"""
Rollbar tool handlers. Each module owns one tool: its parameter model,
default constants, request template and response shaper.
"""
from __future__ import annotations

from typing import Dict, Tuple

from .base import ToolHandler
from .deployments import GetDeployments
from .item_details import GetItemDetails
from .list_items import ListItems
from .top_items import GetTopItems
from .version import GetVersion

ALL_TOOLS: Tuple[ToolHandler, ...] = (
    GetDeployments(),
    GetItemDetails(),
    GetTopItems(),
    GetVersion(),
    ListItems(),
)

TOOLS_BY_NAME: Dict[str, ToolHandler] = {tool.name: tool for tool in ALL_TOOLS}

__all__ = ["ALL_TOOLS", "TOOLS_BY_NAME", "ToolHandler"]
