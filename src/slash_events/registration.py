"""Script command declarations and the parser they are registered with."""

from __future__ import annotations

import textwrap
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple

from .commands import EventCommands
from .exceptions import CommandError
from .logging import get_logger, log_event

LOGGER = get_logger("registration")

CommandCallback = Callable[[Mapping[str, Any], Any], Any]


class ArgumentType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "bool"
    LIST = "list"
    DICTIONARY = "dictionary"
    CLOSURE = "closure"


@dataclass(slots=True)
class SlashCommandArgument:
    """Positional argument accepted by a command."""

    description: str
    type_list: Tuple[ArgumentType, ...] = (ArgumentType.STRING,)
    is_required: bool = False
    accepts_multiple: bool = False


@dataclass(slots=True)
class SlashCommandNamedArgument:
    """``name=value`` argument accepted by a command."""

    name: str
    description: str
    type_list: Tuple[ArgumentType, ...] = (ArgumentType.STRING,)
    is_required: bool = False
    accepts_multiple: bool = False
    enum_list: Tuple[str, ...] = ()


@dataclass(slots=True)
class SlashCommand:
    """A named script command and its declared arguments."""

    name: str
    callback: CommandCallback
    help_string: str = ""
    unnamed_argument_list: List[SlashCommandArgument] = field(default_factory=list)
    named_argument_list: List[SlashCommandNamedArgument] = field(default_factory=list)
    returns: str | None = None

    def render_help(self) -> str:
        lines = [f"/{self.name}"]
        if self.help_string:
            lines.append(textwrap.indent(textwrap.dedent(self.help_string).strip(), "  "))
        if self.named_argument_list or self.unnamed_argument_list:
            lines.append("Arguments:")
        for named in self.named_argument_list:
            flag = "required" if named.is_required else "optional"
            types = "|".join(t.value for t in named.type_list)
            lines.append(f"  {named.name}=({types}, {flag}) {named.description}")
            if named.enum_list:
                lines.append(f"    one of: {', '.join(named.enum_list)}")
        for unnamed in self.unnamed_argument_list:
            flag = "required" if unnamed.is_required else "optional"
            types = "|".join(t.value for t in unnamed.type_list)
            lines.append(f"  ({types}, {flag}) {unnamed.description}")
        if self.returns:
            lines.append(f"Returns: {self.returns}")
        return "\n".join(lines)


class CommandParser:
    """Registry of script commands addressable by name."""

    def __init__(self) -> None:
        self._commands: Dict[str, SlashCommand] = {}

    def add_command(self, command: SlashCommand) -> None:
        if command.name in self._commands:
            LOGGER.warning("Replacing existing command /%s", command.name)
        self._commands[command.name] = command

    def remove_command(self, name: str) -> None:
        self._commands.pop(name, None)

    def get(self, name: str) -> SlashCommand:
        try:
            return self._commands[name]
        except KeyError as exc:
            raise CommandError(f"Unknown command: /{name}") from exc

    def names(self) -> Sequence[str]:
        return tuple(self._commands)

    def execute(
        self, name: str, named_args: Mapping[str, Any] | None = None, unnamed: Any = None
    ) -> Any:
        """Invoke ``/name`` with the given arguments and return its result."""

        command = self.get(name)
        named_args = dict(named_args or {})
        if unnamed is None and any(arg.is_required for arg in command.unnamed_argument_list):
            # Handlers report a missing positional value to the user themselves
            LOGGER.debug("/%s called without a positional argument", name, extra={"command": name})
        for named in command.named_argument_list:
            value = named_args.get(named.name)
            if named.is_required and value is None:
                LOGGER.debug("/%s called without %s", name, named.name, extra={"command": name})
            elif named.enum_list and value is not None and str(value) not in named.enum_list:
                LOGGER.debug(
                    "/%s %s=%s is not a declared value", name, named.name, value, extra={"command": name}
                )
        return command.callback(named_args, unnamed)

    def help(self, name: str) -> str:
        return self.get(name).render_help()


_EVENT_ARGS_HELP = """
    Use /var arg# in the closure code to access the event arguments, where # is
    an index of the argument (usually 0). For objects, use /var arg#.key.
"""


def _event_arguments(enum_list: Tuple[str, ...]) -> Tuple[List[SlashCommandArgument], List[SlashCommandNamedArgument]]:
    unnamed = [
        SlashCommandArgument(
            description="Event callback closure",
            type_list=(ArgumentType.CLOSURE,),
            is_required=True,
        )
    ]
    named = [
        SlashCommandNamedArgument(
            name="event",
            description="Event name",
            is_required=True,
            enum_list=enum_list,
        )
    ]
    return unnamed, named


def register_event_commands(parser: CommandParser, commands: EventCommands) -> None:
    """Declare ``/event-on``, ``/event-once`` and ``/event-off`` on ``parser``."""

    enum_list = commands.catalog.names()

    unnamed, named = _event_arguments(enum_list)
    parser.add_command(
        SlashCommand(
            name="event-on",
            callback=commands.event_on,
            help_string=(
                "Sets up an event listener for a known event. Returns an event listener ID "
                "to use with /event-off.\n"
                + textwrap.dedent(_EVENT_ARGS_HELP)
                + "Example:\n  Output a chat name: /event-on event=CHAT_CHANGED {: /var arg0 | /echo :}"
            ),
            unnamed_argument_list=unnamed,
            named_argument_list=named,
            returns="listener ID",
        )
    )

    unnamed, named = _event_arguments(enum_list)
    parser.add_command(
        SlashCommand(
            name="event-once",
            callback=commands.event_once,
            help_string=(
                "Sets up an event listener for a known event that will be removed after the "
                "first call. Returns an event listener ID to use with /event-off.\n"
                + textwrap.dedent(_EVENT_ARGS_HELP)
                + "Example:\n  Output a chat name: /event-once event=CHAT_CHANGED {: /var arg0 | /echo :}"
            ),
            unnamed_argument_list=unnamed,
            named_argument_list=named,
            returns="listener ID",
        )
    )

    parser.add_command(
        SlashCommand(
            name="event-off",
            callback=commands.event_off,
            help_string="Removes an event listener by ID.",
            unnamed_argument_list=[
                SlashCommandArgument(description="listener ID", is_required=True),
            ],
        )
    )
    log_event(LOGGER, "commands_registered", {"commands": ["event-on", "event-once", "event-off"]})
