"""Logging setup for the redirect service."""

import logging
import sys

from waypoint.events import EVENT_LOGGER_NAME

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure application logging.

    Service logs go through the root logger with timestamps. Redirect
    events get their own handler that prints the bare JSON line, so the
    event stream can be parsed line by line.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )

    event_logger = logging.getLogger(EVENT_LOGGER_NAME)
    if not event_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        event_logger.addHandler(handler)
    event_logger.setLevel(logging.INFO)
    event_logger.propagate = False

    # Keep per-request access logs from drowning out redirect events
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
