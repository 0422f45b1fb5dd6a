from __future__ import annotations

from typing import Any, Dict

from pydantic import Field

from ..results import ApiRequestSpec
from ..validation import ToolParams
from .base import ToolHandler, project

ITEM_FIELDS = (
    "id",
    "counter",
    "title",
    "level",
    "status",
    "environment",
    "framework",
    "platform",
    "total_occurrences",
    "unique_occurrences",
    "first_occurrence_timestamp",
    "last_occurrence_timestamp",
    "last_occurrence_id",
    "project_id",
    "assigned_user_id",
)


class GetItemDetailsParams(ToolParams):
    item_id: int = Field(ge=1)


class GetItemDetails(ToolHandler[GetItemDetailsParams]):
    name = "get-item-details"
    description = "Get a single Rollbar item (error group) by its item id."
    params_model = GetItemDetailsParams

    def build_request(self, params: GetItemDetailsParams) -> ApiRequestSpec:
        return ApiRequestSpec(path=f"/item/{params.item_id}")

    def shape(self, payload: Any, params: GetItemDetailsParams) -> Dict[str, Any]:
        return project(payload, ITEM_FIELDS)
