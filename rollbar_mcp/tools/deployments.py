from __future__ import annotations

from typing import Any, Dict

from pydantic import Field

from ..results import ApiRequestSpec
from ..validation import ToolParams
from .base import ToolHandler, as_list, as_mapping, project

DEFAULT_LIMIT = 20
MAX_LIMIT = 100
DEFAULT_PAGE = 1

DEPLOYMENT_FIELDS = (
    "id",
    "environment",
    "revision",
    "status",
    "comment",
    "local_username",
    "user_id",
    "start_time",
    "finish_time",
)


class GetDeploymentsParams(ToolParams):
    limit: int = Field(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)
    page: int = Field(default=DEFAULT_PAGE, ge=1)


class GetDeployments(ToolHandler[GetDeploymentsParams]):
    name = "get-deployments"
    description = "List recent Rollbar deployments for the project, newest first."
    params_model = GetDeploymentsParams

    def build_request(self, params: GetDeploymentsParams) -> ApiRequestSpec:
        return ApiRequestSpec(path="/deploys", query={"page": params.page})

    def shape(self, payload: Any, params: GetDeploymentsParams) -> Dict[str, Any]:
        data = as_mapping(payload)
        deploys = as_list(data.get("deploys"))[: params.limit]
        page = data.get("page")
        return {
            "page": page if page is not None else params.page,
            "count": len(deploys),
            "deployments": [project(deploy, DEPLOYMENT_FIELDS) for deploy in deploys],
        }
