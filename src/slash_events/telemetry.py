"""Telemetry helpers used for collecting listener metrics."""

from __future__ import annotations

from collections import Counter
from contextlib import contextmanager
from dataclasses import dataclass
from time import perf_counter
from typing import Dict, Generator

from .logging import get_logger

LOGGER = get_logger("telemetry")


@dataclass(slots=True)
class TimingStats:
    """Aggregate durations recorded under one name."""

    count: int = 0
    total: float = 0.0
    last: float = 0.0

    def record(self, elapsed: float) -> None:
        self.count += 1
        self.total += elapsed
        self.last = elapsed

    @property
    def mean(self) -> float:
        return self.total / self.count if self.count else 0.0


class MetricsCollector:
    """Collects counters and per-event firing durations in-memory.

    Timings are keyed by event id, never by listener id, so the map is
    bounded by the event catalog however many listeners come and go.
    """

    def __init__(self) -> None:
        self.counters: Counter[str] = Counter()
        self.timings: Dict[str, TimingStats] = {}

    def increment(self, name: str, value: int = 1) -> None:
        self.counters[name] += value
        LOGGER.debug("counter=%s value=%s", name, self.counters[name])

    @contextmanager
    def time(self, name: str) -> Generator[None, None, None]:
        start = perf_counter()
        try:
            yield
        finally:
            elapsed = perf_counter() - start
            self.timings.setdefault(name, TimingStats()).record(elapsed)
            LOGGER.debug("timing=%s duration=%.6f", name, elapsed)
