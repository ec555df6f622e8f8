"""FastAPI application factory."""

import ssl
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.handlers import error_response, handle_fallback, handle_health, handle_proxy
from core.auth import BearerAuthenticator
from core.config import Config
from core.exceptions import ConfigurationError
from core.headers import HeaderSanitizer
from core.protocols import RequestLogger
from core.router import DestinationPolicy
from services.routing_service import RoutingService
from services.upstream import UpstreamClient, create_mtls_client

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(
    config: Config,
    logger: RequestLogger,
    ssl_context: ssl.SSLContext | None = None,
    upstream_client: UpstreamClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    The mTLS client is built in the lifespan from `ssl_context` (see
    `core.credentials.build_ssl_context`) unless an `upstream_client` is supplied.
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.upstream_client is not None:
            yield
            return

        if ssl_context is None:
            raise ConfigurationError("Client certificate material is required")
        mtls_client = create_mtls_client(ssl_context, timeout=config.upstream.timeout)
        app.state.upstream_client = UpstreamClient(
            mtls_client,
            timeout=config.upstream.timeout,
            port=config.upstream.port,
        )
        try:
            yield
        finally:
            await mtls_client.aclose()
            app.state.upstream_client = None

    app = FastAPI(
        title="C6 mTLS Proxy",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.authenticator = BearerAuthenticator(config.proxy.secret)
    app.state.routing_service = RoutingService(
        policy=DestinationPolicy(config.upstream.allowed_prefix),
        sanitizer=HeaderSanitizer(),
    )
    app.state.upstream_client = upstream_client

    @app.get("/health")
    async def health(request: Request):
        return await handle_health(request, config)

    @app.post("/proxy")
    async def proxy(request: Request):
        return await handle_proxy(request, config, logger)

    @app.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
    async def fallback(request: Request, path: str):
        return await handle_fallback(request, logger)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception(request: Request, exc: StarletteHTTPException):
        # Methods outside ALL_METHODS surface as 405; they get the same 401/404 as unknown routes
        if exc.status_code in (404, 405):
            return await handle_fallback(request, logger)
        return error_response(exc.status_code, str(exc.detail))

    return app
