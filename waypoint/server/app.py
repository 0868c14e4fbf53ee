"""FastAPI application exposing the redirect service."""

import logging
import random
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response

from waypoint.config import RandomSource, ServiceConfig
from waypoint.engine import Waypoint
from waypoint.registry.loader import load_file
from waypoint.registry.pool import PoolRegistry
from waypoint.routing.base import split_redirect_path
from waypoint.routing.errors import (
    InvalidWeight,
    MalformedPath,
    NoDomainsAvailable,
    PoolNotFound,
    ResolutionError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[ResolutionError], int] = {
    MalformedPath: 400,
    PoolNotFound: 404,
    NoDomainsAvailable: 404,
    InvalidWeight: 500,
}


def error_status(error: ResolutionError) -> int:
    """HTTP status for a resolution error (500 for unknown subclasses)."""
    for error_type, status in ERROR_STATUS.items():
        if isinstance(error, error_type):
            return status
    return 500


def client_address(request: Request, trust_forwarded_for: bool = False) -> str:
    """Best-effort client IP for event records."""
    if trust_forwarded_for:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def create_app(
    config: Optional[ServiceConfig] = None,
    registry: Optional[PoolRegistry] = None,
    rng: Optional[RandomSource] = None,
) -> FastAPI:
    """Build the application.

    The registry is loaded here, before any request is served; a
    ConfigError from loading propagates to the caller.

    Args:
        config: Service settings (resolved from the environment if None)
        registry: Preloaded registry; loaded from config.config_path if None
        rng: Random source for domain selection
    """
    config = config or ServiceConfig()
    if registry is None:
        registry = load_file(config.config_path)
    if rng is None and config.random_seed is not None:
        rng = random.Random(config.random_seed)

    service = Waypoint(registry, rng=rng)
    app = FastAPI(title="Waypoint Redirect Service")
    app.state.service = service
    app.state.config = config

    @app.exception_handler(ResolutionError)
    async def resolution_error_handler(request: Request, exc: ResolutionError) -> PlainTextResponse:
        return PlainTextResponse(exc.message, status_code=error_status(exc))

    @app.get("/redirect/{target:path}")
    async def redirect(target: str, request: Request) -> Response:
        client_ip = client_address(request, config.trust_forwarded_for)
        try:
            pool_id, path = split_redirect_path(target)
        except MalformedPath as e:
            service.record_error("", target, client_ip, e)
            raise

        # Raw bytes from the ASGI scope: the query is forwarded untouched
        query = request.scope.get("query_string", b"").decode("latin-1")
        result = service.redirect(pool_id, path, query=query, client_ip=client_ip)
        # The URL is sent exactly as logged, without a second round of quoting;
        # a custom Location header never replaces it
        headers = {name: value for name, value in result.headers.items() if name.lower() != "location"}
        headers["location"] = result.url
        return Response(status_code=302, headers=headers)

    @app.get("/health/")
    async def health() -> PlainTextResponse:
        return PlainTextResponse("healthy")

    if config.load_test_token:
        token = config.load_test_token

        async def load_test_verification() -> PlainTextResponse:
            return PlainTextResponse(token)

        app.add_api_route(f"/{token}/", load_test_verification, methods=["GET"])

    logger.info(f"Serving {len(registry)} redirect pool(s)")
    return app
