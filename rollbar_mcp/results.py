from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union


class FailureKind(str, Enum):
    MISSING_CREDENTIAL = "MissingCredential"
    NETWORK_ERROR = "NetworkError"
    HTTP_ERROR = "HttpError"
    MALFORMED_RESPONSE = "MalformedResponse"
    APPLICATION_ERROR = "ApplicationError"
    INVALID_PARAMETERS = "InvalidParameters"


@dataclass(frozen=True)
class ApiRequestSpec:
    """One outbound Rollbar call. Built per invocation, never reused."""

    path: str
    method: str = "GET"
    query: Optional[Dict[str, Any]] = None
    body: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class Success:
    payload: Any


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    message: str
    http_status: Optional[int] = None

    def describe(self) -> str:
        if self.http_status is not None:
            return f"{self.kind.value} (HTTP {self.http_status}): {self.message}"
        return f"{self.kind.value}: {self.message}"


ApiResult = Union[Success, Failure]
