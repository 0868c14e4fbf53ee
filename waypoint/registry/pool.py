"""PoolRegistry: read-only lookup of pool configurations."""

from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from waypoint.config import PoolConfig


class PoolRegistry:
    """Immutable mapping from pool id to PoolConfig.

    Built once at startup and shared by reference between all in-flight
    requests. Neither the mapping nor the frozen configs it holds can be
    changed after construction, so concurrent reads need no locking.
    """

    __slots__ = ("_pools",)

    def __init__(self, pools: Mapping[str, PoolConfig]):
        """Initialize the registry.

        Args:
            pools: Pool id -> configuration. Copied; later changes to the
                argument do not affect the registry.
        """
        object.__setattr__(self, "_pools", MappingProxyType(dict(pools)))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("PoolRegistry is read-only")

    def get(self, pool_id: str) -> Optional[PoolConfig]:
        """Return the pool's configuration, or None if it is not registered."""
        return self._pools.get(pool_id)

    def pool_ids(self) -> list[str]:
        """Registered pool ids, sorted."""
        return sorted(self._pools)

    def __getitem__(self, pool_id: str) -> PoolConfig:
        return self._pools[pool_id]

    def __contains__(self, pool_id: object) -> bool:
        return pool_id in self._pools

    def __iter__(self) -> Iterator[str]:
        return iter(self._pools)

    def __len__(self) -> int:
        return len(self._pools)

    def __repr__(self) -> str:
        return f"PoolRegistry(pools={self.pool_ids()!r})"
