from __future__ import annotations

from typing import Any, Dict, Generic, Iterable, List, Mapping, Optional, Protocol, Type, TypeVar

from ..results import ApiRequestSpec, ApiResult, Failure, Success
from ..validation import ToolParams, validate_params

P = TypeVar("P", bound=ToolParams)


class RequestAdapter(Protocol):
    async def perform_request(self, spec: ApiRequestSpec) -> ApiResult: ...


def as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def as_list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


def project(record: Any, fields: Iterable[str]) -> Dict[str, Any]:
    """Copy the named fields out of record; fields the API omitted are None."""
    source = as_mapping(record)
    return {name: source.get(name) for name in fields}


class ToolHandler(Generic[P]):
    """
    Validate -> build request -> call adapter -> shape.

    Subclasses declare name, description and params_model, and implement
    build_request and shape. A Failure from validation or from the adapter is
    returned unchanged; the adapter is never called with invalid parameters.
    """

    name: str = ""
    description: str = ""
    params_model: Type[P]

    def input_schema(self) -> Dict[str, Any]:
        """JSON schema advertised to MCP clients (snake_case property names)."""
        return self.params_model.model_json_schema(by_alias=False)

    def build_request(self, params: P) -> ApiRequestSpec:
        raise NotImplementedError

    def shape(self, payload: Any, params: P) -> Dict[str, Any]:
        raise NotImplementedError

    async def run(
        self,
        adapter: RequestAdapter,
        raw: Optional[Mapping[str, Any]] = None,
    ) -> ApiResult:
        params = validate_params(self.params_model, raw)
        if isinstance(params, Failure):
            return params
        result = await adapter.perform_request(self.build_request(params))
        if isinstance(result, Failure):
            return result
        return Success(payload=self.shape(result.payload, params))
