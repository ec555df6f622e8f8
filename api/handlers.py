"""FastAPI route handlers."""

import json
import time
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from core.config import Config
from core.exceptions import (
    DestinationNotAllowed,
    InvalidJSON,
    InvalidProxyRequest,
    RequestTooLarge,
    UpstreamError,
)
from core.protocols import RequestLogger

DESTINATION_REJECTED = "Only C6 Bank URLs allowed"


def error_response(status_code: int, message: str) -> JSONResponse:
    """Uniform `{"error": ...}` envelope."""
    return JSONResponse({"error": message}, status_code=status_code)


async def _read_body(request: Request, limit: int) -> bytes:
    """Buffer the inbound body, stopping early once it exceeds `limit` (0 = no limit)."""
    if not limit:
        return await request.body()

    chunks: list[bytes] = []
    size = 0
    async for chunk in request.stream():
        size += len(chunk)
        if size > limit:
            raise RequestTooLarge(f"Request body exceeds {limit} bytes")
        chunks.append(chunk)
    return b"".join(chunks)


async def _parse_json_body(request: Request, limit: int) -> Any:
    raw_body = await _read_body(request, limit)
    try:
        return json.loads(raw_body)
    except ValueError as e:
        raise InvalidJSON(f"Invalid JSON: {e}") from e


def _is_authorized(request: Request) -> bool:
    authenticator = request.app.state.authenticator
    return authenticator.is_authorized(request.headers.get("authorization"))


async def handle_health(request: Request, config: Config) -> JSONResponse:
    """Liveness probe; never authenticated."""
    return JSONResponse({"ok": True, "service": config.proxy.service_name})


async def handle_proxy(
    request: Request,
    config: Config,
    logger: RequestLogger,
) -> JSONResponse:
    """Handle POST /proxy: authenticate, validate, relay over mTLS."""
    if not _is_authorized(request):
        logger.log_rejected(request.url.path, 401, "unauthorized")
        return error_response(401, "Unauthorized")

    routing_service = request.app.state.routing_service
    try:
        payload = await _parse_json_body(request, config.proxy.max_body_bytes)
        prepared = routing_service.prepare(payload)
    except RequestTooLarge as e:
        logger.log_rejected(request.url.path, 413, str(e))
        return error_response(413, "Request body too large")
    except DestinationNotAllowed as e:
        logger.log_rejected(request.url.path, 400, f"destination refused ({e})")
        return error_response(400, DESTINATION_REJECTED)
    except (InvalidJSON, InvalidProxyRequest) as e:
        logger.log_error(request.url.path, 502, str(e))
        return error_response(502, str(e))

    upstream = request.app.state.upstream_client
    started = time.perf_counter()
    try:
        result = await upstream.relay(prepared)
    except UpstreamError as e:
        logger.log_error(request.url.path, 502, f"Proxy error: {e.message}")
        return error_response(502, e.message)

    logger.log_proxy(
        prepared.method,
        prepared.url,
        prepared.headers,
        status=result.status,
        elapsed_ms=(time.perf_counter() - started) * 1000,
    )
    return JSONResponse(result.to_envelope())


async def handle_fallback(request: Request, logger: RequestLogger) -> JSONResponse:
    """Any other method/path: 401 unless authorized, then 404."""
    if not _is_authorized(request):
        logger.log_rejected(request.url.path, 401, "unauthorized")
        return error_response(401, "Unauthorized")
    return error_response(404, "Not found")
