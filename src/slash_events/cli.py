"""Command line interface for inspecting the event commands."""

from __future__ import annotations

import argparse
from pathlib import Path

from .config import load_settings
from .events import EventCatalog
from .exceptions import SlashEventsError
from .extension import EventsExtension


def load_catalog(path: Path | None) -> EventCatalog:
    """Load an :class:`EventCatalog` from ``path`` or return the built-in one."""

    if path is None:
        return EventCatalog()
    if not path.exists():
        raise FileNotFoundError(f"Event catalog not found: {path}")
    return EventCatalog.from_yaml(path)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect slash-events commands and host events")
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to an extension settings YAML file",
    )

    subparsers = parser.add_subparsers(dest="command")

    events_parser = subparsers.add_parser("events", help="List known host events")
    events_parser.add_argument("--catalog", type=Path, default=None, help="YAML event catalog")
    events_parser.set_defaults(handler=_events_command)

    resolve_parser = subparsers.add_parser("resolve", help="Resolve an event name to its id")
    resolve_parser.add_argument("name", help="Event key or value, case-insensitive")
    resolve_parser.add_argument("--catalog", type=Path, default=None, help="YAML event catalog")
    resolve_parser.set_defaults(handler=_resolve_command)

    help_parser = subparsers.add_parser("help", help="Show help for a script command")
    help_parser.add_argument("name", help="event-on, event-once or event-off")
    help_parser.set_defaults(handler=_help_command)

    return parser


def _resolve_catalog(arguments: argparse.Namespace) -> EventCatalog:
    path = arguments.catalog
    if path is None:
        path = load_settings(arguments.config).catalog_path
    return load_catalog(path)


def _events_command(arguments: argparse.Namespace) -> int:
    try:
        catalog = _resolve_catalog(arguments)
    except (SlashEventsError, OSError) as exc:
        print(exc)
        return 1
    for key, value in catalog.items():
        print(f"{key} = {value}")
    return 0


def _resolve_command(arguments: argparse.Namespace) -> int:
    try:
        catalog = _resolve_catalog(arguments)
    except (SlashEventsError, OSError) as exc:
        print(exc)
        return 1
    event_id = catalog.resolve(arguments.name)
    if event_id is None:
        print(f"Event {arguments.name} not found.")
        return 1
    print(event_id)
    return 0


def _help_command(arguments: argparse.Namespace) -> int:
    try:
        settings = load_settings(arguments.config)
    except SlashEventsError as exc:
        print(exc)
        return 1
    extension = EventsExtension(settings=settings)
    extension.initialize()
    try:
        print(extension.parser.help(arguments.name.lstrip("/")))
    except SlashEventsError as exc:
        print(exc)
        return 1
    finally:
        extension.shutdown()
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point used by ``python -m slash_events.cli``."""

    parser = _build_parser()
    arguments = parser.parse_args(argv)
    handler = getattr(arguments, "handler", None)
    if handler is None:
        parser.error("No command given")
    return handler(arguments)


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    raise SystemExit(main())
