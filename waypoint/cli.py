"""Command-line entry point for Waypoint.

Subcommands:
- serve:   run the redirect service
- check:   validate a pool configuration file
- resolve: dry-run a resolution against a configuration file
- probe:   send a request to a running instance and show the redirect
"""

import argparse
import sys
from typing import Optional

import httpx
from pydantic import ValidationError

from waypoint.config import ServiceConfig
from waypoint.registry.loader import ConfigError, load_file
from waypoint.registry.pool import PoolRegistry
from waypoint.routing.base import format_headers
from waypoint.routing.errors import ResolutionError
from waypoint.routing.resolver import RedirectResolver

PROBE_TIMEOUT = 10.0  # seconds


def _service_config(args: argparse.Namespace) -> ServiceConfig:
    """Build ServiceConfig from the options actually given on the command line."""
    overrides = {}
    for field in ("config_path", "host", "port", "log_level"):
        value = getattr(args, field, None)
        if value is not None:
            overrides[field] = value
    return ServiceConfig(**overrides)


def _summarize_pool(pool_id: str, registry: PoolRegistry) -> str:
    """One-line description of a pool for `check` output."""
    pool = registry[pool_id]
    total = sum(d.weight for d in pool.domains)
    parts = [f"{pool_id}: {len(pool.domains)} domain(s), total weight {total}"]
    if pool.path_based_domains:
        prefixes = ", ".join(sorted(pool.path_based_domains))
        parts.append(f"prefixes [{prefixes}]")
    if pool.custom_headers:
        parts.append(f"{len(pool.custom_headers)} header(s)")
    return "; ".join(parts)


def cmd_serve(args: argparse.Namespace) -> int:
    """Load configuration and run the HTTP server until interrupted."""
    import uvicorn

    from waypoint.logging_config import setup_logging
    from waypoint.server.app import create_app

    config = _service_config(args)
    setup_logging(config.log_level)
    try:
        app = create_app(config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    uvicorn.run(app, host=config.host, port=config.port, log_config=None)
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Validate a configuration file and print a per-pool summary."""
    config = _service_config(args)
    try:
        registry = load_file(config.config_path)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"{config.config_path}: OK ({len(registry)} pool(s))")
    for pool_id in registry.pool_ids():
        print(f"  {_summarize_pool(pool_id, registry)}")
    return 0


def cmd_resolve(args: argparse.Namespace) -> int:
    """Resolve one request without starting the server."""
    config = _service_config(args)
    try:
        registry = load_file(config.config_path)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    resolver = RedirectResolver(registry, seed=args.seed)
    try:
        result = resolver.resolve(args.pool, args.path, query=args.query or "")
    except ResolutionError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    print(result.url)
    if result.headers:
        print(f"Headers: {format_headers(result.headers)}")
    return 0


def probe(
    base_url: str,
    pool_id: str,
    path: str,
    query: Optional[str] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Response:
    """GET /redirect/{pool}/{path} on a running instance without following redirects."""
    url = f"{base_url.rstrip('/')}/redirect/{pool_id}/{path.lstrip('/')}"
    if query:
        url += f"?{query}"
    with httpx.Client(timeout=PROBE_TIMEOUT, transport=transport) as client:
        return client.get(url, follow_redirects=False)


def cmd_probe(args: argparse.Namespace) -> int:
    """Print the status, Location and headers returned by a running instance."""
    try:
        response = probe(args.base_url, args.pool, args.path, args.query)
    except httpx.HTTPError as e:
        print(f"Error: request failed: {e}", file=sys.stderr)
        return 1

    print(f"HTTP {response.status_code}")
    location = response.headers.get("location")
    if location:
        print(f"Location: {location}")
    for name, value in response.headers.items():
        if name.lower() != "location":
            print(f"{name}: {value}")
    if not response.is_redirect:
        print(response.text)
        return 1
    return 0


def _add_config_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        dest="config_path",
        metavar="PATH",
        help="Pool configuration file (default: $WAYPOINT_CONFIG or redirect-config.json)",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="waypoint",
        description="Waypoint - weighted HTTP redirect service",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the redirect service")
    _add_config_options(serve)
    serve.add_argument("--host", help="Bind address (default: $WAYPOINT_HOST or 0.0.0.0)")
    serve.add_argument("--port", type=int, help="Listen port (default: $WAYPOINT_PORT or 80)")
    serve.add_argument("--log-level", dest="log_level", help="Log level (default: $LOG_LEVEL or INFO)")
    serve.set_defaults(handler=cmd_serve)

    check = subparsers.add_parser("check", help="Validate a pool configuration file")
    _add_config_options(check)
    check.set_defaults(handler=cmd_check)

    resolve = subparsers.add_parser("resolve", help="Dry-run a resolution")
    _add_config_options(resolve)
    resolve.add_argument("pool", help="Pool id")
    resolve.add_argument("path", help="Request path after the pool id")
    resolve.add_argument("--query", help="Raw query string to append")
    resolve.add_argument("--seed", type=int, help="Seed for reproducible selection")
    resolve.set_defaults(handler=cmd_resolve)

    probe_parser = subparsers.add_parser("probe", help="Query a running instance")
    probe_parser.add_argument("base_url", help="Service base URL, e.g. http://localhost:8080")
    probe_parser.add_argument("pool", help="Pool id")
    probe_parser.add_argument("path", help="Request path after the pool id")
    probe_parser.add_argument("--query", help="Raw query string to append")
    probe_parser.set_defaults(handler=cmd_probe)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Run the Waypoint CLI."""
    args = _build_parser().parse_args(argv)
    try:
        return args.handler(args)
    except ValidationError as e:
        print(f"Error: invalid settings: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
