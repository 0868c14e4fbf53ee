"""WeightedSelector: pick a domain with probability proportional to its weight."""

import random
from typing import Optional, Sequence

from waypoint.config import RandomSource, WeightedDomain
from waypoint.routing.errors import InvalidWeight, NoDomainsAvailable


def _checked_weight(entry: WeightedDomain) -> int:
    weight = entry.weight
    if isinstance(weight, bool) or not isinstance(weight, int) or weight < 0:
        raise InvalidWeight(f"Invalid weight for domain {entry.domain!r}: {weight!r}")
    return weight


class WeightedSelector:
    """Cumulative-weight selection over an ordered list of domains.

    For a draw r in [0, total), walks the list keeping a running sum and
    returns the first entry whose upper bound exceeds r. Each domain is
    chosen with probability weight / total; zero-weight entries occupy an
    empty interval and are never chosen. The outcome depends only on the
    draw and the list order, so a fixed random source gives a fixed pick.
    """

    def __init__(self, rng: Optional[RandomSource] = None, seed: Optional[int] = None):
        """Initialize the selector.

        Args:
            rng: Random source to draw from. Must be safe for concurrent
                use if the selector is shared between requests.
            seed: Seed for a private random.Random when no rng is given.
        """
        self.rng: RandomSource = rng if rng is not None else random.Random(seed)

    def choose(self, domains: Sequence[WeightedDomain]) -> str:
        """Select one domain, consuming exactly one random draw.

        Raises:
            NoDomainsAvailable: If the list is empty or all weights are zero
            InvalidWeight: If an entry's weight is not a non-negative int
        """
        weights = [_checked_weight(entry) for entry in domains]
        total = sum(weights)
        if total <= 0:
            raise NoDomainsAvailable()

        r = self.rng.randrange(total)
        upper = 0
        for entry, weight in zip(domains, weights):
            upper += weight
            if r < upper:
                return entry.domain

        # Only reachable if the random source breaks its [0, total) contract
        raise ValueError(f"random draw {r} outside [0, {total})")
