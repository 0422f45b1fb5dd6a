from __future__ import annotations

from typing import Any, Dict

from pydantic import Field

from ..results import ApiRequestSpec
from ..validation import ToolParams
from .base import ToolHandler, as_list, as_mapping, project

DEFAULT_ENVIRONMENT = "production"
DEFAULT_HOURS = 24
MAX_HOURS = 168
SORT_ORDER = "occurrences"

TOP_ITEM_FIELDS = (
    "id",
    "counter",
    "title",
    "level",
    "environment",
    "status",
    "occurrences",
    "last_occurrence_timestamp",
)


class GetTopItemsParams(ToolParams):
    environment: str = Field(default=DEFAULT_ENVIRONMENT, min_length=1)
    hours: int = Field(default=DEFAULT_HOURS, ge=1, le=MAX_HOURS)


class GetTopItems(ToolHandler[GetTopItemsParams]):
    name = "get-top-items"
    description = "Report the most active Rollbar items in an environment over the last N hours."
    params_model = GetTopItemsParams

    def build_request(self, params: GetTopItemsParams) -> ApiRequestSpec:
        return ApiRequestSpec(
            path="/reports/top_active_items",
            query={
                "environments": params.environment,
                "hours": params.hours,
                "sort": SORT_ORDER,
            },
        )

    def shape(self, payload: Any, params: GetTopItemsParams) -> Dict[str, Any]:
        items = []
        for entry in as_list(payload):
            entry = as_mapping(entry)
            record = project(entry.get("item"), TOP_ITEM_FIELDS)
            record["counts"] = as_list(entry.get("counts"))
            items.append(record)
        return {
            "environment": params.environment,
            "hours": params.hours,
            "count": len(items),
            "items": items,
        }
