"""Gateway invoker: one click, one POST to /gateway, one write to the result element."""

from __future__ import annotations

import asyncio
import json

import httpx
from loguru import logger

from gatewayplay.config.schema import Config
from gatewayplay.invoker.models import GatewayRequest, GatewayResponse, RenderedResult
from gatewayplay.invoker.render import render_response, render_transport_failure
from gatewayplay.invoker.sinks import OutputSink
from gatewayplay.utils.exceptions import TransportError, sanitize_error_message

CONTENT_TYPE = "application/json; charset=UTF-8"
INVOKE_ELEMENT_ID = "invoke"
RESULT_ELEMENT_ID = "result"


class ClickEvent:
    """Minimal stand-in for a UI click; records whether the default action was suppressed."""

    def __init__(self, target_id: str = INVOKE_ELEMENT_ID) -> None:
        self.target_id = target_id
        self.default_prevented = False

    def prevent_default(self) -> None:
        self.default_prevented = True


class GatewayInvoker:
    """
    Issues the fixed ``{"path": "/", "method": "GET"}`` request to ``<scheme>://<host>/gateway``
    and renders whatever comes back into ``sink`` under the result element id.

    Overlapping invocations are not coordinated: each one writes the sink when it
    completes, so the last response to resolve wins.
    """

    def __init__(
        self,
        *,
        host: str,
        sink: OutputSink,
        scheme: str = "https",
        gateway_path: str = "/gateway",
        result_element_id: str = RESULT_ELEMENT_ID,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
        verify: bool = True,
        escape_html: bool = True,
    ):
        self.host = host
        self.scheme = scheme
        self.gateway_path = gateway_path if gateway_path.startswith("/") else f"/{gateway_path}"
        self.sink = sink
        self.result_element_id = result_element_id
        self.escape_html = escape_html
        self._client = client
        self._timeout = timeout
        self._verify = verify

    @classmethod
    def from_config(
        cls,
        config: Config,
        sink: OutputSink,
        *,
        client: httpx.AsyncClient | None = None,
        host: str | None = None,
    ) -> "GatewayInvoker":
        inv = config.invoker
        return cls(
            host=host or inv.host,
            sink=sink,
            scheme=inv.scheme,
            gateway_path=inv.gateway_path,
            client=client,
            timeout=inv.timeout_seconds,
            verify=inv.verify_tls,
            escape_html=inv.escape_html,
        )

    @property
    def gateway_url(self) -> str:
        return f"{self.scheme}://{self.host}{self.gateway_path}"

    @staticmethod
    def build_request() -> GatewayRequest:
        return GatewayRequest(path="/", method="GET")

    def encode_request(self) -> bytes:
        payload = self.build_request().wire_payload()
        return json.dumps(payload, separators=(",", ":")).encode("utf-8")

    async def _post(self, content: bytes) -> httpx.Response:
        headers = {"Content-Type": CONTENT_TYPE}
        if self._client is not None:
            return await self._client.post(self.gateway_url, content=content, headers=headers)
        kwargs = {"verify": self._verify}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout
        async with httpx.AsyncClient(**kwargs) as client:
            return await client.post(self.gateway_url, content=content, headers=headers)

    async def _fetch_envelope(self) -> GatewayResponse:
        """POST the request and parse the envelope; failures surface as TransportError."""
        try:
            response = await self._post(self.encode_request())
        except httpx.TimeoutException as exc:
            raise TransportError("timeout", f"gateway timed out: {exc}") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError("error", f"gateway unreachable: {exc}") from exc
        try:
            return GatewayResponse.model_validate(response.json())
        except ValueError as exc:
            raise TransportError(
                "parsererror",
                f"gateway answered {response.status_code} with a body that is not a gateway envelope",
            ) from exc

    async def invoke(self) -> RenderedResult:
        """Run one invocation to completion and write the outcome; never raises for gateway failures."""
        logger.debug("Invoking gateway {}", self.gateway_url)
        try:
            envelope = await self._fetch_envelope()
        except TransportError as exc:
            logger.warning("Gateway invocation failed [{}]: {}", exc.status_text, sanitize_error_message(exc.message))
            result = render_transport_failure(exc.status_text, escape=self.escape_html)
        else:
            result = render_response(envelope, escape=self.escape_html)
            logger.debug("Gateway invocation finished: {} ({})", result.outcome.value, result.style.value)
        self.sink.write(self.result_element_id, result)
        return result

    def on_click(self, event: ClickEvent) -> asyncio.Task:
        """Click handler: schedule the invocation, suppress the default action, return at once."""
        task = asyncio.get_running_loop().create_task(self.invoke())
        event.prevent_default()
        return task
