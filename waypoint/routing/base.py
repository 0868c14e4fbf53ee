"""Path and URL utilities shared by the resolver and the HTTP layer."""

from typing import Optional
from urllib.parse import quote

from waypoint.config import PoolConfig, WeightedDomain, normalize_path
from waypoint.routing.errors import MalformedPath


def split_redirect_path(target: str) -> tuple[str, str]:
    """Split the part of the URL after /redirect/ into pool id and path.

    Examples:
        "web/a/b.html" -> ("web", "a/b.html")
        "web/"         -> ("web", "")
        "web"          -> MalformedPath

    Raises:
        MalformedPath: If no pool id or no path separator is present
    """
    pool_id, sep, path = target.partition("/")
    if not pool_id or not sep:
        raise MalformedPath()
    return pool_id, path


def match_prefix(pool: PoolConfig, request_path: str) -> Optional[str]:
    """Return the longest path_based_domains key prefixing request_path.

    Keys and the request path are compared without their leading slash.
    Two different keys of the same length can never both prefix the same
    path, and duplicates are rejected when the pool is loaded, so the
    match is unique.
    """
    path = normalize_path(request_path)
    best: Optional[str] = None
    best_len = -1
    for prefix in pool.path_based_domains:
        key = normalize_path(prefix)
        if len(key) > best_len and path.startswith(key):
            best, best_len = prefix, len(key)
    return best


def select_domain_set(pool: PoolConfig, request_path: str) -> tuple[WeightedDomain, ...]:
    """Pick the candidate set for a request: longest matching prefix, else defaults."""
    prefix = match_prefix(pool, request_path)
    if prefix is None:
        return pool.domains
    return pool.path_based_domains[prefix]


def _escape_path(path: str) -> str:
    """Percent-encode (as UTF-8) only characters a Location header cannot carry raw."""
    return "".join(
        quote(c, safe="") if ord(c) <= 0x20 or ord(c) >= 0x7F else c for c in path
    )


def build_redirect_url(domain: str, request_path: str, query: str = "") -> str:
    """Build https://{domain}/{path}[?{query}].

    The path is kept as received, including any extra leading slash;
    only control, space and non-ASCII characters are escaped. The query
    string is appended exactly as received.
    """
    url = f"https://{domain}/{_escape_path(request_path)}"
    if query:
        url += f"?{query}"
    return url


def format_headers(headers: dict[str, str]) -> str:
    """Render headers as "Name: value, Name2: value2", sorted by name."""
    return ", ".join(f"{name}: {value}" for name, value in sorted(headers.items()))
