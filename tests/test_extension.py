from __future__ import annotations

from pathlib import Path

import pytest

from slash_events.config import ExtensionSettings
from slash_events.events import EventBus
from slash_events.exceptions import SlashEventsError
from slash_events.extension import EventsExtension
from slash_events.scope import Closure

pytestmark = pytest.mark.integ


def test_extension_lifecycle(notifier) -> None:
    bus = EventBus()
    calls = []

    with EventsExtension(bus=bus, notifier=notifier) as extension:
        listener_id = extension.run(
            "event-on", {"event": "app_ready"}, Closure(lambda scope: calls.append(scope.get_variable("arg0")))
        )
        bus.emit("app_ready", "ready")
        assert len(listener_id) == 11

    assert calls == ["ready"]
    assert bus.events() == {}
    assert extension.commands is None
    assert extension.parser.names() == ()


def test_extensions_do_not_share_registries() -> None:
    first = EventsExtension()
    second = EventsExtension()
    first.initialize()
    second.initialize()

    listener_id = first.run("event-on", {"event": "app_ready"}, Closure(lambda scope: None))

    assert listener_id in first.commands.registry
    assert listener_id not in second.commands.registry


def test_extension_uses_catalog_from_settings(tmp_path: Path, notifier) -> None:
    path = tmp_path / "events.yaml"
    path.write_text("CUSTOM_EVENT: custom\n", encoding="utf-8")
    extension = EventsExtension(settings=ExtensionSettings(catalog_path=path), notifier=notifier)
    extension.initialize()

    assert extension.run("event-on", {"event": "app_ready"}, Closure(lambda scope: None)) == ""
    assert notifier.warnings == ["Event app_ready not found."]
    assert extension.run("event-on", {"event": "custom_event"}, Closure(lambda scope: None))


def test_run_before_initialize_fails() -> None:
    with pytest.raises(SlashEventsError):
        EventsExtension().run("event-off", None, "x")


def test_run_without_closure_returns_empty_id(notifier) -> None:
    bus = EventBus()
    with EventsExtension(bus=bus, notifier=notifier) as extension:
        assert extension.run("event-on", {"event": "app_ready"}) == ""

    assert notifier.errors == ["Callback is not a closure."]
    assert bus.events() == {}
