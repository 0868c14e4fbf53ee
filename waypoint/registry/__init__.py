"""Pool registry: immutable pool configuration loaded at startup."""

from waypoint.registry.loader import ConfigError, load, load_file
from waypoint.registry.pool import PoolRegistry

__all__ = ["PoolRegistry", "ConfigError", "load", "load_file"]
