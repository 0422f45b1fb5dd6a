from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from .config import Settings
from .results import ApiRequestSpec, ApiResult, Failure, FailureKind, Success

logger = logging.getLogger("rollbar_mcp.client")

ACCESS_TOKEN_HEADER = "X-Rollbar-Access-Token"
SUCCESS_SENTINEL = 0


def build_http_client(settings: Settings) -> httpx.AsyncClient:
    limits = settings.http_limits
    # Rollbar answers on a single origin; redirects are not expected.
    return httpx.AsyncClient(
        limits=httpx.Limits(
            max_connections=limits.max_connections,
            max_keepalive_connections=limits.max_keepalive_connections,
        ),
        timeout=httpx.Timeout(
            connect=limits.connect_timeout,
            read=limits.read_timeout,
            write=limits.write_timeout,
            pool=limits.pool_timeout,
        ),
        follow_redirects=False,
    )


def _body_message(body: Any) -> Optional[str]:
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return None


def _clean_query(query: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not query:
        return {}
    return {key: value for key, value in query.items() if value is not None}


class RollbarClient:
    """
    Single chokepoint for outbound Rollbar traffic.

    perform_request never raises for transport or API problems: every outcome
    is returned as a Success or a Failure. Exactly one HTTP call is made per
    invocation and nothing is retried.
    """

    def __init__(self, http_client: httpx.AsyncClient, settings: Settings) -> None:
        self.http_client = http_client
        self.settings = settings

    def _url(self, path: str) -> str:
        return f"{self.settings.base_url.rstrip('/')}/{path.lstrip('/')}"

    def _headers(self) -> Dict[str, str]:
        return {
            ACCESS_TOKEN_HEADER: self.settings.access_token,
            "User-Agent": self.settings.user_agent,
            "Accept": "application/json",
        }

    async def perform_request(self, spec: ApiRequestSpec) -> ApiResult:
        if not self.settings.access_token:
            return Failure(
                FailureKind.MISSING_CREDENTIAL,
                "Rollbar access token is not configured (ROLLBAR_ACCESS_TOKEN)",
            )

        url = self._url(spec.path)
        method = spec.method.upper()
        logger.debug("Rollbar request %s %s", method, url)
        try:
            response = await self.http_client.request(
                method=method,
                url=url,
                params=_clean_query(spec.query) or None,
                json=spec.body,
                headers=self._headers(),
            )
        except httpx.HTTPError as exc:
            detail = str(exc) or type(exc).__name__
            return Failure(FailureKind.NETWORK_ERROR, f"Request to Rollbar failed: {detail}")

        status = response.status_code
        if not response.is_success:
            try:
                body: Any = response.json()
            except ValueError:
                body = None
            message = _body_message(body)
            if message is None:
                reason = response.reason_phrase or ""
                message = f"Rollbar API returned HTTP {status} {reason}".rstrip()
            return Failure(FailureKind.HTTP_ERROR, message, http_status=status)

        try:
            body = response.json()
        except ValueError:
            return Failure(FailureKind.MALFORMED_RESPONSE, f"Rollbar returned a non-JSON body (HTTP {status})")
        if not isinstance(body, dict):
            return Failure(FailureKind.MALFORMED_RESPONSE, "Rollbar response is not a JSON object")
        if "err" not in body:
            return Failure(FailureKind.MALFORMED_RESPONSE, "Rollbar response has no 'err' field")

        err = body["err"]
        if err != SUCCESS_SENTINEL:
            message = _body_message(body) or f"Rollbar API reported err={err}"
            return Failure(FailureKind.APPLICATION_ERROR, message)

        return Success(payload=body.get("result"))
