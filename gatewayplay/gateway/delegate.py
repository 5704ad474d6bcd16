"""Delegate a described request to the upstream service and wrap the outcome."""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import quote_plus

import httpx
import pydantic
from loguru import logger

from gatewayplay.invoker.models import GatewayRequest, GatewayResponse
from gatewayplay.utils.exceptions import UpstreamError, ValidationError, sanitize_error_message

ALLOWED_METHODS = frozenset({"GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "TRACE", "CONNECT"})
INVOCATION_FAILED = "invocation failed"


def parse_gateway_request(raw: Any) -> GatewayRequest:
    """Validate the POST /gateway body; method and path fall back to GET and /."""
    if not isinstance(raw, dict):
        raise ValidationError("gateway request must be a JSON object")
    method = str(raw.get("method") or "GET").upper()
    if method not in ALLOWED_METHODS:
        raise ValidationError(f"unsupported method: {method}", field="method")
    path = str(raw.get("path") or "/")
    if not path.startswith("/"):
        path = f"/{path}"
    try:
        return GatewayRequest(method=method, path=path, query=raw.get("query"), body=raw.get("body"))
    except pydantic.ValidationError as exc:
        field = str(exc.errors()[0]["loc"][0]) if exc.errors() else None
        raise ValidationError(f"invalid gateway request: {field} must be a JSON object", field=field) from exc


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def build_query_string(query: dict[str, Any] | None) -> str | None:
    """Encode query entries as k=v pairs joined by &; values are form-encoded, keys kept as-is."""
    if query is None:
        return None
    return "&".join(f"{key}={quote_plus(_query_value(value))}" for key, value in query.items())


def build_target(request: GatewayRequest) -> str:
    query_string = build_query_string(request.query)
    return request.path if query_string is None else f"{request.path}?{query_string}"


def build_upstream_url(base_url: httpx.URL, request: GatewayRequest) -> httpx.URL:
    """Place the path and query on the upstream origin.

    The path is set as a URL component so a leading "//" stays part of the path.
    """
    components: dict[str, Any] = {"path": request.path}
    query_string = build_query_string(request.query)
    if query_string is not None:
        components["query"] = query_string.encode("ascii")
    return base_url.copy_with(**components)


def _body_text(response: httpx.Response) -> str:
    content_type = response.headers.get("Content-Type")
    if content_type and "application/json" in content_type:
        try:
            return json.dumps(response.json(), indent=2)
        except ValueError:
            logger.debug("Upstream declared JSON but sent something else; passing text through")
    return response.text


def envelope_from_response(response: httpx.Response) -> GatewayResponse:
    return GatewayResponse(
        success=True,
        body=_body_text(response),
        status_code=response.status_code,
        status_message=response.reason_phrase,
        http_version=response.http_version,
        headers={name: value for name, value in response.headers.items()},
    )


def envelope_from_failure(exc: UpstreamError) -> GatewayResponse:
    return GatewayResponse(success=False, error=INVOCATION_FAILED, reason=exc.reason)


class GatewayDelegate:
    """Calls the upstream service on behalf of POST /gateway."""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def call_upstream(self, request: GatewayRequest) -> httpx.Response:
        target = build_target(request)
        kwargs: dict[str, Any] = {}
        if request.body is not None:
            kwargs["json"] = request.body
        try:
            url = build_upstream_url(self.client.base_url, request)
            return await self.client.request(request.method, url, **kwargs)
        except httpx.InvalidURL as exc:
            raise UpstreamError(request.method, target, str(exc)) from exc
        except httpx.TimeoutException as exc:
            raise UpstreamError(request.method, target, str(exc) or "upstream timed out", is_timeout=True) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(request.method, target, str(exc) or exc.__class__.__name__) from exc

    async def delegate(self, request: GatewayRequest) -> tuple[int, GatewayResponse]:
        """Return the HTTP status for the gateway reply and the envelope to send."""
        try:
            response = await self.call_upstream(request)
        except UpstreamError as exc:
            logger.warning(
                "Upstream {} {} failed [{}]: {}",
                request.method,
                exc.details.get("path"),
                exc.code,
                sanitize_error_message(exc.reason),
            )
            return 400, envelope_from_failure(exc)
        logger.info("Upstream {} {} -> {}", request.method, request.path, response.status_code)
        return 200, envelope_from_response(response)
