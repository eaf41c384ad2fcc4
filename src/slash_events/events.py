"""Event catalog and in-process event bus for the host application."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, DefaultDict, Dict, Iterable, List, Mapping, Tuple

from .exceptions import ConfigurationError
from .logging import get_logger

LOGGER = get_logger("events")

EventCallback = Callable[..., Any]

DEFAULT_EVENT_TYPES: Dict[str, str] = {
    "APP_READY": "app_ready",
    "EXTRAS_CONNECTED": "extras_connected",
    "MESSAGE_SWIPED": "message_swiped",
    "MESSAGE_SENT": "message_sent",
    "MESSAGE_RECEIVED": "message_received",
    "MESSAGE_EDITED": "message_edited",
    "MESSAGE_DELETED": "message_deleted",
    "MESSAGE_UPDATED": "message_updated",
    "IMPERSONATE_READY": "impersonate_ready",
    "CHAT_CHANGED": "chat_id_changed",
    "GENERATION_AFTER_COMMANDS": "GENERATION_AFTER_COMMANDS",
    "GENERATION_STARTED": "generation_started",
    "GENERATION_STOPPED": "generation_stopped",
    "GENERATION_ENDED": "generation_ended",
    "EXTENSIONS_FIRST_LOAD": "extensions_first_load",
    "SETTINGS_LOADED": "settings_loaded",
    "SETTINGS_UPDATED": "settings_updated",
    "GROUP_UPDATED": "group_updated",
    "MOVABLE_PANELS_RESET": "movable_panels_reset",
    "SETTINGS_LOADED_BEFORE": "settings_loaded_before",
    "SETTINGS_LOADED_AFTER": "settings_loaded_after",
    "CHATCOMPLETION_SOURCE_CHANGED": "chatcompletion_source_changed",
    "CHATCOMPLETION_MODEL_CHANGED": "chatcompletion_model_changed",
    "OAI_PRESET_CHANGED_BEFORE": "oai_preset_changed_before",
    "OAI_PRESET_CHANGED_AFTER": "oai_preset_changed_after",
    "WORLDINFO_SETTINGS_UPDATED": "worldinfo_settings_updated",
    "WORLDINFO_UPDATED": "worldinfo_updated",
    "CHARACTER_EDITED": "character_edited",
    "CHARACTER_PAGE_LOADED": "character_page_loaded",
    "CHARACTER_GROUP_OVERLAY_STATE_CHANGE_BEFORE": "character_group_overlay_state_change_before",
    "CHARACTER_GROUP_OVERLAY_STATE_CHANGE_AFTER": "character_group_overlay_state_change_after",
    "USER_MESSAGE_RENDERED": "user_message_rendered",
    "CHARACTER_MESSAGE_RENDERED": "character_message_rendered",
    "FORCE_SET_BACKGROUND": "force_set_background",
    "CHAT_DELETED": "chat_deleted",
    "GROUP_CHAT_DELETED": "group_chat_deleted",
    "GENERATE_BEFORE_COMBINE_PROMPTS": "generate_before_combine_prompts",
    "GROUP_MEMBER_DRAFTED": "group_member_drafted",
    "WORLD_INFO_ACTIVATED": "world_info_activated",
    "TEXT_COMPLETION_SETTINGS_READY": "text_completion_settings_ready",
    "CHARACTER_FIRST_MESSAGE_SELECTED": "character_first_message_selected",
    "CHARACTER_DELETED": "characterDeleted",
    "CHARACTER_DUPLICATED": "character_duplicated",
    "SMOOTH_STREAM_TOKEN_RECEIVED": "smooth_stream_token_received",
    "FILE_ATTACHMENT_DELETED": "file_attachment_deleted",
}


class EventCatalog:
    """Known host events keyed by their symbolic name."""

    def __init__(self, event_types: Mapping[str, str] | None = None) -> None:
        source = DEFAULT_EVENT_TYPES if event_types is None else event_types
        self._event_types: Dict[str, str] = {str(k): str(v) for k, v in source.items()}

    def resolve(self, name: str) -> str | None:
        """Return the event identifier matching ``name`` by key or by value.

        The comparison is case-insensitive. ``None`` signals an unknown event.
        """

        needle = str(name).strip().lower()
        if not needle:
            return None
        for key, value in self._event_types.items():
            if value.lower() == needle or key.lower() == needle:
                return value
        return None

    def names(self) -> Tuple[str, ...]:
        return tuple(self._event_types)

    def items(self) -> Iterable[Tuple[str, str]]:
        return tuple(self._event_types.items())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.resolve(name) is not None

    def __len__(self) -> int:
        return len(self._event_types)

    @classmethod
    def from_yaml(cls, path: Path) -> "EventCatalog":
        """Load a catalog from a YAML mapping of ``KEY: value`` pairs."""

        import yaml

        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"Unable to read event catalog {path}") from exc
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML in event catalog {path}") from exc
        if isinstance(data, Mapping) and "events" in data:
            data = data["events"]
        if not isinstance(data, Mapping):
            raise ConfigurationError("Event catalog must contain a mapping of event names")
        bad = [key for key, value in data.items() if not isinstance(value, str) or not value]
        if bad:
            raise ConfigurationError(f"Event catalog values must be non-empty strings: {bad}")
        LOGGER.debug("Loaded %d events from %s", len(data), path)
        return cls(data)


@dataclass(eq=False)
class _Subscription:
    callback: EventCallback
    once: bool = False


class EventBus:
    """A lightweight in-process event dispatcher."""

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, List[_Subscription]] = defaultdict(list)

    def on(self, event: str, listener: EventCallback) -> None:
        self._listeners[event].append(_Subscription(listener))

    def once(self, event: str, listener: EventCallback) -> None:
        self._listeners[event].append(_Subscription(listener, once=True))

    subscribe = on
    subscribe_once = once

    def remove_listener(self, event: str, listener: EventCallback) -> bool:
        """Detach the first subscription of ``listener`` from ``event``."""

        subscriptions = self._listeners.get(event)
        if not subscriptions:
            return False
        for subscription in subscriptions:
            if subscription.callback is listener:
                subscriptions.remove(subscription)
                if not subscriptions:
                    del self._listeners[event]
                return True
        return False

    unsubscribe = remove_listener

    def emit(self, event: str, *args: Any) -> None:
        snapshot = tuple(self._listeners.get(event, ()))
        for subscription in snapshot:
            # Skip handlers removed by an earlier handler of this emission
            current = self._listeners.get(event, ())
            if subscription not in current:
                continue
            if subscription.once:
                self._drop(event, subscription)
            subscription.callback(*args)

    def listeners(self, event: str) -> Tuple[EventCallback, ...]:
        return tuple(s.callback for s in self._listeners.get(event, ()))

    def events(self) -> Dict[str, Tuple[EventCallback, ...]]:
        """Snapshot of event name to attached callbacks."""

        return {event: self.listeners(event) for event in self._listeners if self._listeners[event]}

    def _drop(self, event: str, subscription: _Subscription) -> None:
        subscriptions = self._listeners.get(event)
        if subscriptions and subscription in subscriptions:
            subscriptions.remove(subscription)
            if not subscriptions:
                del self._listeners[event]
