"""Shared fixtures for Waypoint tests."""

import json

import pytest

from waypoint.registry import load

SAMPLE_POOLS = {
    "web": {
        "domains": [["a.example.com", 3], ["b.example.com", 1]],
        "path_based_domains": {
            "/docs": [["docs.example.com", 1]],
            "/docs/v2": [["v2.docs.example.com", 1]],
        },
        "custom_headers": {"X-Pool": "web", "Cache-Control": "no-store"},
    },
    "empty": {
        "domains": [],
    },
    "zero": {
        "domains": [["dead.example.com", 0], ["gone.example.com", 0]],
    },
}


class FixedRandom:
    """Random source that replays a fixed sequence of draws.

    Each value is reduced modulo the requested stop so one sequence
    works for any total weight.
    """

    def __init__(self, *values: int):
        self.values = list(values) or [0]
        self.index = 0
        self.stops: list[int] = []

    def randrange(self, stop: int) -> int:
        self.stops.append(stop)
        value = self.values[self.index % len(self.values)]
        self.index += 1
        return value % stop


class RecordingSink:
    """Event sink that keeps emitted events in memory."""

    def __init__(self):
        self.events = []

    def emit(self, event) -> None:
        self.events.append(event)


@pytest.fixture
def sample_registry():
    return load(json.dumps(SAMPLE_POOLS))


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "redirect-config.json"
    path.write_text(json.dumps(SAMPLE_POOLS))
    return path
