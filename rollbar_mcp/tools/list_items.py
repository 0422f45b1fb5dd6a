from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from pydantic import Field

from ..results import ApiRequestSpec
from ..validation import ToolParams
from .base import ToolHandler, as_list, as_mapping, project

DEFAULT_STATUS = "active"
DEFAULT_PAGE = 1

ItemStatus = Literal["active", "resolved", "muted", "archived"]
ItemLevel = Literal["critical", "error", "warning", "info", "debug"]

LIST_ITEM_FIELDS = (
    "id",
    "counter",
    "title",
    "level",
    "status",
    "environment",
    "total_occurrences",
    "last_occurrence_timestamp",
)


class ListItemsParams(ToolParams):
    status: ItemStatus = DEFAULT_STATUS
    level: Optional[ItemLevel] = None
    environment: Optional[str] = Field(default=None, min_length=1)
    page: int = Field(default=DEFAULT_PAGE, ge=1)
    query: Optional[str] = Field(default=None, min_length=1)


class ListItems(ToolHandler[ListItemsParams]):
    name = "list-items"
    description = "List Rollbar items filtered by status, level, environment or search query (paginated)."
    params_model = ListItemsParams

    def build_request(self, params: ListItemsParams) -> ApiRequestSpec:
        return ApiRequestSpec(
            path="/items",
            query={
                "status": params.status,
                "level": params.level,
                "environment": params.environment,
                "page": params.page,
                "q": params.query,
            },
        )

    def shape(self, payload: Any, params: ListItemsParams) -> Dict[str, Any]:
        data = as_mapping(payload)
        page = data.get("page")
        return {
            "page": page if page is not None else params.page,
            "total_count": data.get("total_count"),
            "items": [project(item, LIST_ITEM_FIELDS) for item in as_list(data.get("items"))],
        }
