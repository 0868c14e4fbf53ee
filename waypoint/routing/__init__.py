"""Domain resolution and weighted selection."""

from waypoint.routing.base import (
    build_redirect_url,
    format_headers,
    match_prefix,
    select_domain_set,
    split_redirect_path,
)
from waypoint.routing.errors import (
    InvalidWeight,
    MalformedPath,
    NoDomainsAvailable,
    PoolNotFound,
    ResolutionError,
)
from waypoint.routing.resolver import RedirectResolver
from waypoint.routing.weighted import WeightedSelector

__all__ = [
    "RedirectResolver",
    "WeightedSelector",
    "ResolutionError",
    "PoolNotFound",
    "NoDomainsAvailable",
    "InvalidWeight",
    "MalformedPath",
    "build_redirect_url",
    "format_headers",
    "match_prefix",
    "select_domain_set",
    "split_redirect_path",
]
