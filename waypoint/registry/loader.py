"""Load the pool registry from a JSON document."""

import json
import logging
from pathlib import Path
from typing import Any, Union

from pydantic import TypeAdapter, ValidationError

from waypoint.config import PoolConfig
from waypoint.registry.pool import PoolRegistry

logger = logging.getLogger(__name__)

_POOLS_ADAPTER = TypeAdapter(dict[str, PoolConfig])


class ConfigError(Exception):
    """Pool configuration is missing or malformed.

    Fatal at startup: the service must not serve traffic with a registry
    that failed to load.
    """

    pass


def _parse_json(source: Union[bytes, str]) -> Any:
    try:
        return json.loads(source)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to parse pool configuration as JSON: {e}") from e


def _check_pool_ids(data: dict[str, Any]) -> None:
    for pool_id in data:
        if not pool_id or "/" in pool_id:
            raise ConfigError(
                f"Invalid pool id {pool_id!r}: must be non-empty and contain no '/'"
            )


def load(source: Union[bytes, str]) -> PoolRegistry:
    """Build a PoolRegistry from a JSON document.

    The document maps pool ids to objects with ``domains``,
    ``path_based_domains`` and ``custom_headers``. Every pool is validated
    before the registry is built; a single bad entry fails the whole load.

    Args:
        source: Raw JSON (bytes or text)

    Returns:
        The loaded registry

    Raises:
        ConfigError: If the document is not valid JSON or does not match
            the pool schema
    """
    data = _parse_json(source)
    if not isinstance(data, dict):
        raise ConfigError(
            f"Pool configuration must be a JSON object, got {type(data).__name__}"
        )
    _check_pool_ids(data)

    try:
        pools = _POOLS_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid pool configuration: {e}") from e

    return PoolRegistry(pools)


def load_file(path: Union[str, Path]) -> PoolRegistry:
    """Read a pool configuration file once and load it.

    Raises:
        ConfigError: If the file cannot be read or its content is invalid
    """
    path = Path(path)
    try:
        source = path.read_bytes()
    except OSError as e:
        raise ConfigError(f"Failed to read pool configuration {path}: {e}") from e

    registry = load(source)
    logger.info(f"Loaded {len(registry)} redirect pool(s) from {path}")
    return registry
