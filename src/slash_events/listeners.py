"""Listener bookkeeping for closures subscribed to host events."""

from __future__ import annotations

import secrets
import string
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Tuple

from .events import EventBus
from .exceptions import ListenerError
from .logging import get_logger
from .projection import project_arguments
from .scope import Closure
from .telemetry import MetricsCollector

LOGGER = get_logger("listeners")

_ID_ALPHABET = string.digits + string.ascii_lowercase
_MAX_ID_ATTEMPTS = 32


@dataclass(slots=True, frozen=True)
class ListenerEntry:
    """A closure callback registered on the bus under ``event_id``."""

    id: str
    event_id: str
    callback: Callable[..., Any]
    once: bool = False


class ListenerRegistry:
    """Listener entries keyed by their id."""

    def __init__(self) -> None:
        self._entries: Dict[str, ListenerEntry] = {}

    def add(self, entry: ListenerEntry) -> None:
        if entry.id in self._entries:
            raise ListenerError(f"Duplicate listener id: {entry.id}")
        self._entries[entry.id] = entry

    def get(self, listener_id: str) -> ListenerEntry | None:
        return self._entries.get(listener_id)

    def pop(self, listener_id: str) -> ListenerEntry | None:
        return self._entries.pop(listener_id, None)

    def ids(self) -> Tuple[str, ...]:
        return tuple(self._entries)

    def entries(self) -> Iterable[ListenerEntry]:
        return tuple(self._entries.values())

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, listener_id: object) -> bool:
        return listener_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def find_event(bus: EventBus, callback: Callable[..., Any]) -> str | None:
        """Scan the bus for the event ``callback`` is attached to."""

        for event, callbacks in bus.events().items():
            if any(existing is callback for existing in callbacks):
                return event
        return None


def generate_listener_id(registry: ListenerRegistry, length: int = 11) -> str:
    """Return a random base36 token not yet used in ``registry``."""

    for _ in range(_MAX_ID_ATTEMPTS):
        candidate = "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))
        if candidate not in registry:
            return candidate
    raise ListenerError("Unable to generate a unique listener id")


def make_listener(
    registry: ListenerRegistry,
    closure: Closure,
    event_id: str,
    *,
    once: bool = False,
    stringify: bool = False,
    id_length: int = 11,
    telemetry: MetricsCollector | None = None,
) -> ListenerEntry:
    """Wrap ``closure`` in a bus callback and record it in ``registry``.

    The closure's scope is copied now; every firing runs on a fresh copy of
    that snapshot with the event arguments bound as ``arg0``, ``arg1``, ...
    """

    listener_id = generate_listener_id(registry, id_length)
    snapshot = closure.scope.copy()

    def listener(*args: Any) -> Any:
        scope = snapshot.copy()
        project_arguments(scope, args, stringify=stringify)
        LOGGER.debug(
            "Firing listener %s for %s",
            listener_id,
            event_id,
            extra={"listener_id": listener_id, "event_id": event_id},
        )
        if telemetry is not None:
            telemetry.increment("listeners_fired")
            with telemetry.time(f"event.{event_id}"):
                return closure.execute_with(scope)
        return closure.execute_with(scope)

    entry = ListenerEntry(id=listener_id, event_id=event_id, callback=listener, once=once)
    registry.add(entry)
    return entry
