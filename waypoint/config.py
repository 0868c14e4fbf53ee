"""Service configuration and pool data model."""

import os
import re
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, Protocol

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_CONFIG_PATH = "redirect-config.json"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

# RFC 9110 token characters
HEADER_NAME = re.compile(r"[!#$%&'*+.^_`|~0-9A-Za-z-]+")
TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off")


class EventType(str, Enum):
    """Outcome recorded for each redirect request."""

    REDIRECT = "redirect"
    ERROR = "error"


class RandomSource(Protocol):
    """Protocol for the random draw used by weighted selection.

    ``random.Random`` and ``random.SystemRandom`` both satisfy it.
    Implementations shared between requests must be safe for concurrent use.
    """

    def randrange(self, stop: int) -> int:
        """Return a uniformly distributed integer in [0, stop)."""
        ...


def normalize_path(path: str) -> str:
    """Drop a single leading slash so '/foo' and 'foo' compare equal."""
    return path[1:] if path.startswith("/") else path


class WeightedDomain(BaseModel):
    """A candidate redirect target and its relative weight.

    Accepts the compact ``["example.com", 3]`` form used in config files
    as well as ``{"domain": "example.com", "weight": 3}``.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    domain: str = Field(min_length=1, description="Host (optionally host:port), no scheme")
    weight: int = Field(ge=0, description="Relative selection weight")

    @model_validator(mode="before")
    @classmethod
    def from_pair(cls, data: Any) -> Any:
        """Convert a [domain, weight] pair into field values."""
        if isinstance(data, (list, tuple)):
            if len(data) != 2:
                raise ValueError(
                    f"domain entry must be a [domain, weight] pair, got {len(data)} items"
                )
            return {"domain": data[0], "weight": data[1]}
        return data

    @field_validator("domain")
    @classmethod
    def check_domain(cls, value: str) -> str:
        if "://" in value or "/" in value or any(c.isspace() for c in value):
            raise ValueError(f"domain must be a bare host name, got {value!r}")
        return value

    @field_validator("weight", mode="before")
    @classmethod
    def check_weight(cls, value: Any) -> Any:
        """Only JSON numbers with an integral value are weights."""
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"weight must be a number, got {value!r}")
        if isinstance(value, float):
            if not value.is_integer():
                raise ValueError(f"weight must be a whole number, got {value!r}")
            return int(value)
        return value


class PoolConfig(BaseModel):
    """Redirect configuration for a single pool.

    Mapping fields are exposed as read-only views, so a loaded pool cannot
    be changed through the objects it hands out.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    domains: tuple[WeightedDomain, ...] = Field(
        description="Default candidate set, used when no path prefix matches",
    )
    path_based_domains: Mapping[str, tuple[WeightedDomain, ...]] = Field(
        default_factory=dict,
        validate_default=True,
        description="Path prefix -> candidate set overriding the defaults",
    )
    custom_headers: Mapping[str, str] = Field(
        default_factory=dict,
        validate_default=True,
        description="Headers attached to every redirect served from this pool",
    )

    @field_validator("path_based_domains")
    @classmethod
    def freeze_prefixes(
        cls, value: Mapping[str, tuple[WeightedDomain, ...]]
    ) -> Mapping[str, tuple[WeightedDomain, ...]]:
        return MappingProxyType(dict(value))

    @field_validator("custom_headers")
    @classmethod
    def check_headers(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        """Header names must be HTTP tokens; values must be sendable as-is."""
        for name, header_value in value.items():
            if not HEADER_NAME.fullmatch(name):
                raise ValueError(f"invalid header name {name!r}")
            if any(c in header_value for c in "\r\n\x00"):
                raise ValueError(f"header {name!r} value contains a line break or NUL")
            try:
                header_value.encode("latin-1")
            except UnicodeEncodeError as e:
                raise ValueError(f"header {name!r} value is not latin-1 encodable") from e
        return MappingProxyType(dict(value))

    @model_validator(mode="after")
    def check_unique_prefixes(self) -> "PoolConfig":
        """Reject prefixes that collide once the leading slash is dropped."""
        seen: dict[str, str] = {}
        for prefix in self.path_based_domains:
            key = normalize_path(prefix)
            if key in seen:
                raise ValueError(
                    f"path prefixes {seen[key]!r} and {prefix!r} are the same prefix"
                )
            seen[key] = prefix
        return self


def _env_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ValueError(f"expected one of {', '.join(TRUE_VALUES + FALSE_VALUES)}")


class ServiceConfig(BaseModel):
    """Runtime settings for the redirect service."""

    config_path: Path = Field(
        default=Path(DEFAULT_CONFIG_PATH),
        description="JSON file describing the redirect pools",
    )
    host: str = "0.0.0.0"
    port: int = Field(default=80, ge=1, le=65535)
    log_level: str = "INFO"
    load_test_token: Optional[str] = Field(
        default=None,
        description="Verification token served at /{token}/ for load-testing services",
    )
    trust_forwarded_for: bool = Field(
        default=False,
        description="Take the client address from X-Forwarded-For when behind a proxy",
    )
    random_seed: Optional[int] = Field(
        default=None,
        description="Seed for domain selection; leave unset in production",
    )

    @model_validator(mode="after")
    def resolve_environment(self) -> "ServiceConfig":
        """Fill fields that were not passed explicitly from WAYPOINT_* variables."""
        env_fields = {
            "config_path": ("WAYPOINT_CONFIG", Path),
            "host": ("WAYPOINT_HOST", str),
            "port": ("WAYPOINT_PORT", int),
            "log_level": ("LOG_LEVEL", str),
            "load_test_token": ("WAYPOINT_LOAD_TEST_TOKEN", str),
            "trust_forwarded_for": ("WAYPOINT_TRUST_FORWARDED_FOR", _env_bool),
            "random_seed": ("WAYPOINT_RANDOM_SEED", int),
        }
        for field, (env_name, convert) in env_fields.items():
            if field in self.model_fields_set:
                continue
            raw = os.environ.get(env_name)
            if raw is None or not raw.strip():
                continue
            try:
                value = convert(raw.strip())
            except ValueError as e:
                raise ValueError(f"{env_name} has an invalid value {raw!r}: {e}") from e
            object.__setattr__(self, field, value)

        if not 1 <= self.port <= 65535:
            raise ValueError(f"port must be between 1 and 65535, got {self.port}")
        level = self.log_level.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}")
        object.__setattr__(self, "log_level", level)
        return self
