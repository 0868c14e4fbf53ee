"""Waypoint: weighted HTTP redirection across domain pools.

Public exports:
- Waypoint: Resolve requests and record redirect events
- load / load_file: Build a PoolRegistry from JSON configuration
- PoolRegistry, PoolConfig, WeightedDomain: Configuration model
- RedirectResult: Result type returned by Waypoint.redirect()
"""

from waypoint.config import PoolConfig, ServiceConfig, WeightedDomain
from waypoint.engine import Waypoint
from waypoint.registry import ConfigError, PoolRegistry, load, load_file
from waypoint.routing.errors import (
    InvalidWeight,
    MalformedPath,
    NoDomainsAvailable,
    PoolNotFound,
    ResolutionError,
)
from waypoint.schemas import RedirectResult

__all__ = [
    "Waypoint",
    "ServiceConfig",
    "PoolConfig",
    "WeightedDomain",
    "PoolRegistry",
    "RedirectResult",
    "ConfigError",
    "ResolutionError",
    "PoolNotFound",
    "NoDomainsAvailable",
    "InvalidWeight",
    "MalformedPath",
    "load",
    "load_file",
]
