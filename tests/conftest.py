from __future__ import annotations

import sys
from pathlib import Path
from typing import List

import pytest


# Ensure src/ is importable for all tests (CI and local)
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
for p in (ROOT, SRC):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from slash_events.commands import EventCommands  # noqa: E402
from slash_events.events import EventBus, EventCatalog  # noqa: E402


class RecordingNotifier:
    """Collects notifications instead of showing them."""

    def __init__(self) -> None:
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def error(self, message: str) -> None:
        self.errors.append(message)

    def warning(self, message: str) -> None:
        self.warnings.append(message)


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def catalog() -> EventCatalog:
    return EventCatalog()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def commands(bus: EventBus, catalog: EventCatalog, notifier: RecordingNotifier) -> EventCommands:
    return EventCommands(bus=bus, catalog=catalog, notifier=notifier)


def pytest_collection_modifyitems(config, items):
    """Default all tests to 'unit' unless explicitly marked otherwise."""
    for item in items:
        marks = {m.name for m in item.iter_markers()}
        if not ("integ" in marks or "unit" in marks):
            item.add_marker(pytest.mark.unit)
