"""Structured redirect events."""

import datetime as dt
import logging
from typing import Optional, Protocol

from pydantic import BaseModel, Field

from waypoint.config import EventType

EVENT_LOGGER_NAME = "waypoint.events"

event_logger = logging.getLogger(EVENT_LOGGER_NAME)


def utc_timestamp(now: Optional[dt.datetime] = None) -> str:
    """Format a UTC timestamp as RFC 3339, e.g. 2024-05-01T12:00:00Z."""
    now = now or dt.datetime.now(dt.timezone.utc)
    return now.astimezone(dt.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class RedirectEvent(BaseModel):
    """One log record per redirect request, success or failure."""

    pool_id: str
    requested_path: str
    client_ip: str
    datetime: str = Field(default_factory=utc_timestamp)
    event: EventType
    redirected_to: Optional[str] = None
    custom_headers: Optional[str] = Field(
        default=None,
        description='Attached headers rendered as "Name: value, ..."',
    )
    error_message: Optional[str] = None

    def to_json(self) -> str:
        """Serialize as a single JSON line, omitting unset fields."""
        return self.model_dump_json(exclude_none=True)


class EventSink(Protocol):
    """Receives redirect events for logging or shipping elsewhere."""

    def emit(self, event: RedirectEvent) -> None:
        ...


class LoggingEventSink:
    """Write events as JSON lines to the waypoint.events logger."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or event_logger

    def emit(self, event: RedirectEvent) -> None:
        level = logging.WARNING if event.event == EventType.ERROR else logging.INFO
        self.logger.log(level, event.to_json())
