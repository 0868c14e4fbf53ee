"""RedirectResolver: pool id + request path -> redirect target."""

import logging
from typing import Optional

from waypoint.config import RandomSource
from waypoint.registry.pool import PoolRegistry
from waypoint.routing.base import build_redirect_url, select_domain_set
from waypoint.routing.errors import NoDomainsAvailable, PoolNotFound
from waypoint.routing.weighted import WeightedSelector
from waypoint.schemas import RedirectResult

logger = logging.getLogger(__name__)


class RedirectResolver:
    """Resolve requests against a PoolRegistry.

    Strategy:
    1. Look up the pool by id
    2. Override the default domains with the longest matching path prefix
    3. Pick one domain by weight
    4. Build https://{domain}/{path}, re-appending the raw query string

    Holds no mutable state besides the random source; safe to share
    between concurrent requests when the random source is.
    """

    def __init__(
        self,
        registry: PoolRegistry,
        rng: Optional[RandomSource] = None,
        seed: Optional[int] = None,
    ):
        """Initialize the resolver.

        Args:
            registry: Loaded pool registry.
            rng: Random source for weighted selection (injectable for tests).
            seed: Seed for a private random source when rng is not given.
        """
        self.registry = registry
        self.selector = WeightedSelector(rng=rng, seed=seed)

    def resolve(self, pool_id: str, request_path: str, query: str = "") -> RedirectResult:
        """Resolve one request.

        Args:
            pool_id: Pool identifier from the URL
            request_path: Path after the pool id, with or without leading '/'
            query: Raw query string (without '?'), appended verbatim

        Returns:
            RedirectResult with the target URL and the pool's custom headers

        Raises:
            PoolNotFound: If pool_id is not registered
            NoDomainsAvailable: If the selected domain set is empty or all zero-weight
            InvalidWeight: If the selected domain set contains a bad weight
        """
        pool = self.registry.get(pool_id)
        if pool is None:
            raise PoolNotFound()

        domains = select_domain_set(pool, request_path)
        if not domains:
            raise NoDomainsAvailable()

        domain = self.selector.choose(domains)
        url = build_redirect_url(domain, request_path, query)
        logger.debug(f"Resolved pool={pool_id} path={request_path!r} -> {url}")

        return RedirectResult(url=url, domain=domain, headers=dict(pool.custom_headers))
