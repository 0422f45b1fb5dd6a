"""
Declarative parameter validation for tool inputs.

Each tool describes its inputs as a pydantic model; validate_params turns raw
client arguments into a typed model or a Failure(InvalidParameters).
"""
from __future__ import annotations

from typing import Any, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from .results import Failure, FailureKind

P = TypeVar("P", bound="ToolParams")


class ToolParams(BaseModel):
    """Base for tool parameter models: frozen, strict about types and unknown names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        strict=True,
        frozen=True,
        str_strip_whitespace=True,
    )


def _format_errors(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "parameters"
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)


def validate_params(
    model: Type[P],
    raw: Optional[Mapping[str, Any]],
) -> Union[P, Failure]:
    # Clients that send null for an optional argument mean "not supplied".
    data = {key: value for key, value in (raw or {}).items() if value is not None}
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        return Failure(FailureKind.INVALID_PARAMETERS, _format_errors(exc))
