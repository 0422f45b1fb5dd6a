from __future__ import annotations

from typing import Any, Dict
from urllib.parse import quote

from pydantic import Field

from ..results import ApiRequestSpec
from ..validation import ToolParams
from .base import ToolHandler, as_mapping

DEFAULT_ENVIRONMENT = "production"
ITEM_STAT_GROUPS = ("new", "reactivated", "repeated", "resolved")


class GetVersionParams(ToolParams):
    version: str = Field(min_length=1)
    environment: str = Field(default=DEFAULT_ENVIRONMENT, min_length=1)


class GetVersion(ToolHandler[GetVersionParams]):
    name = "get-version"
    description = "Get item statistics for a deployed code version (e.g. a git SHA) in an environment."
    params_model = GetVersionParams

    def build_request(self, params: GetVersionParams) -> ApiRequestSpec:
        return ApiRequestSpec(
            path=f"/versions/{quote(params.version, safe='')}",
            query={"environment": params.environment},
        )

    def shape(self, payload: Any, params: GetVersionParams) -> Dict[str, Any]:
        data = as_mapping(payload)
        stats = as_mapping(data.get("item_stats"))
        return {
            "version": data.get("version", params.version),
            "environment": data.get("environment", params.environment),
            "first_occurrence_timestamp": data.get("first_occurrence_timestamp"),
            "last_occurrence_timestamp": data.get("last_occurrence_timestamp"),
            "item_stats": {group: dict(as_mapping(stats.get(group))) for group in ITEM_STAT_GROUPS},
        }
