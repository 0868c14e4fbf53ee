"""Tests for the Waypoint facade and redirect events."""

import json
import logging
import re
from datetime import datetime, timezone

import pytest

from conftest import FixedRandom, RecordingSink
from waypoint import NoDomainsAvailable, PoolNotFound, Waypoint
from waypoint.config import EventType
from waypoint.events import EVENT_LOGGER_NAME, LoggingEventSink, RedirectEvent, utc_timestamp

TIMESTAMP = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z$")


class TestRedirectEvent:
    """Tests for RedirectEvent records."""

    def test_utc_timestamp_format(self):
        moment = datetime(2024, 5, 1, 12, 30, 5, tzinfo=timezone.utc)
        assert utc_timestamp(moment) == "2024-05-01T12:30:05Z"
        assert TIMESTAMP.match(utc_timestamp())

    def test_json_omits_unset_fields(self):
        event = RedirectEvent(
            pool_id="web",
            requested_path="p",
            client_ip="10.0.0.1",
            event=EventType.ERROR,
            error_message="Pool not found",
            datetime="2024-05-01T12:00:00Z",
        )
        assert json.loads(event.to_json()) == {
            "pool_id": "web",
            "requested_path": "p",
            "client_ip": "10.0.0.1",
            "datetime": "2024-05-01T12:00:00Z",
            "event": "error",
            "error_message": "Pool not found",
        }

    def test_logging_sink_levels(self, caplog):
        """Redirects log at INFO, errors at WARNING, one JSON line each."""
        sink = LoggingEventSink()
        ok = RedirectEvent(pool_id="a", requested_path="p", client_ip="c", event=EventType.REDIRECT)
        bad = RedirectEvent(pool_id="a", requested_path="p", client_ip="c", event=EventType.ERROR)

        with caplog.at_level(logging.INFO, logger=EVENT_LOGGER_NAME):
            sink.emit(ok)
            sink.emit(bad)

        records = [r for r in caplog.records if r.name == EVENT_LOGGER_NAME]
        assert [r.levelno for r in records] == [logging.INFO, logging.WARNING]
        assert json.loads(records[0].getMessage())["event"] == "redirect"


class TestWaypoint:
    """Tests for Waypoint.redirect()."""

    def test_redirect_emits_event(self, sample_registry):
        sink = RecordingSink()
        service = Waypoint(sample_registry, rng=FixedRandom(0), sink=sink)

        result = service.redirect("web", "docs/a", query="x=1", client_ip="10.1.2.3")

        assert result.url == "https://docs.example.com/docs/a?x=1"
        [event] = sink.events
        assert event.event == EventType.REDIRECT
        assert event.pool_id == "web"
        assert event.requested_path == "docs/a"
        assert event.client_ip == "10.1.2.3"
        assert event.redirected_to == result.url
        assert event.custom_headers == "Cache-Control: no-store, X-Pool: web"
        assert event.error_message is None
        assert TIMESTAMP.match(event.datetime)

    def test_unknown_pool_emits_error_and_raises(self, sample_registry):
        sink = RecordingSink()
        service = Waypoint(sample_registry, sink=sink)

        with pytest.raises(PoolNotFound):
            service.redirect("missing", "p", client_ip="10.0.0.9")

        [event] = sink.events
        assert event.event == EventType.ERROR
        assert event.error_message == "Pool not found"
        assert event.redirected_to is None

    def test_empty_pool_emits_error(self, sample_registry):
        sink = RecordingSink()
        service = Waypoint(sample_registry, sink=sink)

        with pytest.raises(NoDomainsAvailable):
            service.redirect("empty", "p")

        assert sink.events[0].error_message == "No domains available for redirection"
        assert sink.events[0].client_ip == "unknown"

    def test_default_sink_logs_json(self, sample_registry, caplog):
        service = Waypoint(sample_registry, rng=FixedRandom(0))

        with caplog.at_level(logging.INFO, logger=EVENT_LOGGER_NAME):
            service.redirect("web", "p")

        record = next(r for r in caplog.records if r.name == EVENT_LOGGER_NAME)
        payload = json.loads(record.getMessage())
        assert payload["event"] == "redirect"
        assert payload["redirected_to"] == "https://a.example.com/p"
        assert "error_message" not in payload

    def test_seed_gives_reproducible_picks(self, sample_registry):
        first = Waypoint(sample_registry, sink=RecordingSink(), seed=99)
        second = Waypoint(sample_registry, sink=RecordingSink(), seed=99)
        assert [first.redirect("web", "p").url for _ in range(20)] == [
            second.redirect("web", "p").url for _ in range(20)
        ]
