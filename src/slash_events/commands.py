"""Handlers behind the ``event-on``, ``event-once`` and ``event-off`` commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol

from .config import ExtensionSettings
from .events import EventBus, EventCatalog
from .listeners import ListenerRegistry, make_listener
from .logging import get_logger, log_event
from .scope import Closure
from .telemetry import MetricsCollector

LOGGER = get_logger("commands")


class Notifier(Protocol):
    """User-facing notification sink."""

    def error(self, message: str) -> None:  # pragma: no cover - Protocol
        ...

    def warning(self, message: str) -> None:  # pragma: no cover - Protocol
        ...


class LoggingNotifier:
    """Deliver notifications through the structured logger."""

    def __init__(self) -> None:
        self._logger = get_logger("notify")

    def error(self, message: str) -> None:
        self._logger.error(message)

    def warning(self, message: str) -> None:
        self._logger.warning(message)


def _find_closure(value: Any) -> Closure | None:
    if isinstance(value, Closure):
        return value
    if isinstance(value, (list, tuple)):
        for item in value:
            if isinstance(item, Closure):
                return item
    return None


@dataclass
class EventCommands:
    """Listener lifecycle operations bound to one bus and one registry."""

    bus: EventBus
    catalog: EventCatalog = field(default_factory=EventCatalog)
    notifier: Notifier = field(default_factory=LoggingNotifier)
    settings: ExtensionSettings = field(default_factory=ExtensionSettings)
    registry: ListenerRegistry = field(default_factory=ListenerRegistry)
    telemetry: MetricsCollector = field(default_factory=MetricsCollector)

    def event_on(self, named_args: Mapping[str, Any], unnamed: Any) -> str:
        return self._register(named_args, unnamed, once=False)

    def event_once(self, named_args: Mapping[str, Any], unnamed: Any) -> str:
        return self._register(named_args, unnamed, once=True)

    def event_off(self, named_args: Mapping[str, Any] | None, value: Any) -> str:
        listener_id = "" if value is None else str(value).strip()
        entry = self.registry.get(listener_id)
        if entry is None:
            self.notifier.warning(f"Listener with ID {listener_id} not found.")
            LOGGER.info("Listener not found", extra={"command": "event-off", "listener_id": listener_id})
            return ""

        removed = self.bus.remove_listener(entry.event_id, entry.callback)
        if not removed:
            # Bus may hold the callback elsewhere if it was re-attached by hand
            event = self.registry.find_event(self.bus, entry.callback)
            if event is not None:
                removed = self.bus.remove_listener(event, entry.callback)
        self.registry.pop(listener_id)
        self.telemetry.increment("listeners_removed")
        log_event(
            LOGGER,
            "listener_removed",
            {"listener_id": listener_id, "event_id": entry.event_id, "detached": removed},
        )
        return ""

    def teardown(self) -> int:
        """Detach every registered listener and empty the registry."""

        count = 0
        for entry in self.registry.entries():
            self.bus.remove_listener(entry.event_id, entry.callback)
            count += 1
        self.registry.clear()
        log_event(LOGGER, "listeners_cleared", {"count": count})
        return count

    def _register(self, named_args: Mapping[str, Any], unnamed: Any, *, once: bool) -> str:
        command = "event-once" if once else "event-on"
        closure = _find_closure(unnamed)
        if closure is None:
            self.notifier.error("Callback is not a closure.")
            LOGGER.info("Rejected non-closure callback", extra={"command": command})
            return ""

        raw_event = (named_args or {}).get("event")
        event = "" if raw_event is None else str(raw_event).strip().lower()
        if not event:
            self.notifier.warning("Event name is required.")
            LOGGER.info("Missing event name", extra={"command": command})
            return ""

        event_id = self.catalog.resolve(event)
        if event_id is None:
            self.notifier.warning(f"Event {event} not found.")
            LOGGER.info("Unknown event %s", event, extra={"command": command})
            return ""

        entry = make_listener(
            self.registry,
            closure,
            event_id,
            once=once,
            stringify=self.settings.stringify_arguments,
            id_length=self.settings.listener_id_length,
            telemetry=self.telemetry,
        )
        if once:
            self.bus.once(event_id, entry.callback)
        else:
            self.bus.on(event_id, entry.callback)
        self.telemetry.increment("listeners_registered")
        log_event(
            LOGGER,
            "listener_registered",
            {"listener_id": entry.id, "event_id": event_id, "once": once},
        )
        return entry.id
