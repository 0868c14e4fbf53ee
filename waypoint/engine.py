"""Waypoint public adapter."""

from typing import Optional

from waypoint.config import EventType, RandomSource
from waypoint.events import EventSink, LoggingEventSink, RedirectEvent
from waypoint.registry.pool import PoolRegistry
from waypoint.routing.base import format_headers
from waypoint.routing.errors import ResolutionError
from waypoint.routing.resolver import RedirectResolver
from waypoint.schemas import RedirectResult


class Waypoint:
    """Public interface to the redirect service.

    Wraps the resolver and records one structured event per request.

    Usage:
        from waypoint import Waypoint, load_file

        service = Waypoint(load_file("redirect-config.json"))
        result = service.redirect("web", "docs/index.html", query="lang=en")
        print(result.url, result.headers)
    """

    def __init__(
        self,
        registry: PoolRegistry,
        rng: Optional[RandomSource] = None,
        sink: Optional[EventSink] = None,
        seed: Optional[int] = None,
    ):
        """Initialize the service.

        Args:
            registry: Loaded pool registry
            rng: Random source for weighted selection
            sink: Destination for redirect events (defaults to logging)
            seed: Seed for the private random source when rng is not given
        """
        self.registry = registry
        self.resolver = RedirectResolver(registry, rng=rng, seed=seed)
        self.sink: EventSink = sink if sink is not None else LoggingEventSink()

    def redirect(
        self,
        pool_id: str,
        request_path: str,
        query: str = "",
        client_ip: str = "unknown",
    ) -> RedirectResult:
        """Resolve a request and record the outcome.

        Args:
            pool_id: Pool identifier from the URL
            request_path: Path after the pool id
            query: Raw query string, appended verbatim to the target
            client_ip: Requesting client, for the event record

        Returns:
            RedirectResult with target URL and headers

        Raises:
            ResolutionError: After logging an error event for the request
        """
        try:
            result = self.resolver.resolve(pool_id, request_path, query)
        except ResolutionError as e:
            self.record_error(pool_id, request_path, client_ip, e)
            raise

        self.sink.emit(
            RedirectEvent(
                pool_id=pool_id,
                requested_path=request_path,
                client_ip=client_ip,
                event=EventType.REDIRECT,
                redirected_to=result.url,
                custom_headers=format_headers(result.headers),
            )
        )
        return result

    def record_error(
        self,
        pool_id: str,
        request_path: str,
        client_ip: str,
        error: ResolutionError,
    ) -> None:
        """Emit an error event for a request that could not be served."""
        self.sink.emit(
            RedirectEvent(
                pool_id=pool_id,
                requested_path=request_path,
                client_ip=client_ip,
                event=EventType.ERROR,
                error_message=error.message,
            )
        )
