"""Custom exceptions raised by slash-events."""


class SlashEventsError(RuntimeError):
    """Base error for all slash-events related exceptions."""


class ConfigurationError(SlashEventsError):
    """Raised when configuration values or catalog files are invalid."""


class CommandError(SlashEventsError):
    """Raised when a script command is misdeclared or invoked incorrectly."""


class ListenerError(SlashEventsError):
    """Raised when listener bookkeeping cannot be completed."""
