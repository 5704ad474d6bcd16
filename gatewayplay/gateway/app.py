"""FastAPI gateway server: POST /gateway delegation, readiness probe and the browser page."""

from __future__ import annotations

import json
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from loguru import logger

from gatewayplay.config.schema import Config
from gatewayplay.gateway.delegate import GatewayDelegate, parse_gateway_request
from gatewayplay.utils.exceptions import (
    GatewayPlayError,
    ValidationError,
    classify_exception,
    classify_http_status,
    sanitize_error_message,
)


def _pretty_json(status_code: int, payload: dict) -> Response:
    return Response(
        content=json.dumps(payload, indent=2),
        status_code=status_code,
        media_type="application/json",
    )


def create_gateway_app(
    config: Config | None = None,
    *,
    upstream_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """
    Build the gateway ASGI app.

    When ``upstream_client`` is omitted the app creates one against
    ``gateway.upstream_base_url`` and closes it on shutdown; an injected
    client stays owned by the caller.
    """
    config = config or Config()
    owns_client = upstream_client is None
    client = upstream_client or httpx.AsyncClient(
        base_url=config.gateway.upstream_base_url,
        timeout=config.gateway.upstream_timeout_seconds,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Gateway delegating to {}", config.gateway.upstream_base_url)
        try:
            yield
        finally:
            if owns_client:
                await client.aclose()
            logger.info("Gateway stopped")

    app = FastAPI(title="gatewayplay", description="Same-origin gateway to an upstream HTTP service", lifespan=lifespan)
    app.state.config = config
    app.state.delegate = GatewayDelegate(client)

    @app.exception_handler(GatewayPlayError)
    async def gatewayplay_exception_handler(request: Request, exc: GatewayPlayError):
        return JSONResponse(status_code=classify_http_status(exc), content=exc.to_dict())

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        code, _, _ = classify_exception(exc)
        logger.exception("Unhandled exception [{}]: {}", code, sanitize_error_message(str(exc)))
        return JSONResponse(
            status_code=500,
            content={"error": "INTERNAL_ERROR", "message": "An unexpected error occurred", "code": code},
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.gateway.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.post("/gateway")
    async def gateway(request: Request) -> Response:
        try:
            raw = await request.json()
        except ValueError as exc:
            raise ValidationError("gateway request body must be JSON") from exc
        gateway_request = parse_gateway_request(raw)
        status_code, envelope = await app.state.delegate.delegate(gateway_request)
        return _pretty_json(status_code, envelope.wire_payload())

    @app.get("/ready")
    async def ready() -> PlainTextResponse:
        return PlainTextResponse("OK")

    @app.get("/")
    async def index() -> RedirectResponse:
        return RedirectResponse(url="/assets/index.html")

    app.mount(
        "/assets",
        StaticFiles(directory=str(config.assets_path), html=True, check_dir=False),
        name="assets",
    )
    return app
