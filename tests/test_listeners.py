from __future__ import annotations

import pytest

from slash_events.events import EventBus
from slash_events.exceptions import ListenerError
from slash_events.listeners import ListenerEntry, ListenerRegistry, generate_listener_id, make_listener
from slash_events.scope import Closure, Scope


def test_generated_ids_are_base36_and_unique():
    registry = ListenerRegistry()
    ids = set()
    for _ in range(200):
        listener_id = generate_listener_id(registry, 11)
        assert len(listener_id) == 11
        assert listener_id.isalnum() and listener_id == listener_id.lower()
        ids.add(listener_id)
    assert len(ids) == 200


def test_registry_rejects_duplicate_ids():
    registry = ListenerRegistry()
    entry = ListenerEntry(id="abc", event_id="tick", callback=lambda: None)
    registry.add(entry)
    with pytest.raises(ListenerError):
        registry.add(entry)


def test_make_listener_registers_before_returning():
    registry = ListenerRegistry()
    closure = Closure(lambda scope: scope.get_variable("arg0"))

    entry = make_listener(registry, closure, "tick")

    assert registry.get(entry.id) is entry
    assert entry.event_id == "tick"
    assert entry.once is False


def test_listener_runs_on_fresh_copy_of_snapshot():
    seen = []

    def body(scope: Scope):
        seen.append((scope.get_variable("counter"), scope.get_variable("arg0")))
        scope.let_variable("counter", scope.get_variable("counter") + 1)
        return scope.get_variable("arg0")

    closure = Closure(body, Scope({"counter": 0}))
    entry = make_listener(ListenerRegistry(), closure, "tick")
    closure.scope.let_variable("counter", 100)

    assert entry.callback("first") == "first"
    assert entry.callback("second") == "second"
    assert seen == [(0, "first"), (0, "second")]
    assert closure.scope.get_variable("counter") == 100


def test_find_event_scans_bus():
    bus = EventBus()
    registry = ListenerRegistry()
    entry = make_listener(registry, Closure(lambda scope: None), "tick")
    bus.on("tock", entry.callback)

    assert registry.find_event(bus, entry.callback) == "tock"
    assert registry.find_event(bus, lambda: None) is None
