"""Extension lifecycle wiring the event commands into a host."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .commands import EventCommands, LoggingNotifier, Notifier
from .config import ExtensionSettings
from .events import EventBus, EventCatalog
from .exceptions import SlashEventsError
from .logging import get_logger, log_event
from .registration import CommandParser, register_event_commands
from .telemetry import MetricsCollector

LOGGER = get_logger("extension")

COMMAND_NAMES = ("event-on", "event-once", "event-off")


@dataclass
class EventsExtension:
    """Owns the listener registry for the lifetime of one host session."""

    settings: ExtensionSettings = field(default_factory=ExtensionSettings)
    bus: EventBus = field(default_factory=EventBus)
    catalog: EventCatalog | None = None
    parser: CommandParser = field(default_factory=CommandParser)
    notifier: Notifier = field(default_factory=LoggingNotifier)
    telemetry: MetricsCollector = field(default_factory=MetricsCollector)
    commands: EventCommands | None = None

    def initialize(self) -> EventCommands:
        if self.commands is not None:
            return self.commands
        if self.catalog is None:
            if self.settings.catalog_path is not None:
                self.catalog = EventCatalog.from_yaml(self.settings.catalog_path)
            else:
                self.catalog = EventCatalog()
        self.commands = EventCommands(
            bus=self.bus,
            catalog=self.catalog,
            notifier=self.notifier,
            settings=self.settings,
            telemetry=self.telemetry,
        )
        register_event_commands(self.parser, self.commands)
        log_event(LOGGER, "extension_initialized", {"events": len(self.catalog)})
        return self.commands

    def run(self, name: str, named_args: dict[str, Any] | None = None, unnamed: Any = None) -> Any:
        if self.commands is None:
            raise SlashEventsError("Extension must be initialized before running commands")
        return self.parser.execute(name, named_args, unnamed)

    def shutdown(self) -> None:
        if self.commands is None:
            return
        removed = self.commands.teardown()
        for name in COMMAND_NAMES:
            self.parser.remove_command(name)
        self.commands = None
        log_event(LOGGER, "extension_shutdown", {"listeners_removed": removed})

    def __enter__(self) -> "EventsExtension":
        self.initialize()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()
