"""Script commands for subscribing closures to host events."""

from .commands import EventCommands, LoggingNotifier
from .config import ExtensionSettings, load_settings
from .events import EventBus, EventCatalog
from .extension import EventsExtension
from .listeners import ListenerEntry, ListenerRegistry
from .scope import Closure, Scope

__all__ = [
    "Closure",
    "EventBus",
    "EventCatalog",
    "EventCommands",
    "EventsExtension",
    "ExtensionSettings",
    "ListenerEntry",
    "ListenerRegistry",
    "LoggingNotifier",
    "Scope",
    "load_settings",
]
