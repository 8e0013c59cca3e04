"""Error taxonomy for the composer core.

Registration and lookup failures are raised to the caller. Failures inside an
extension body are wrapped in :class:`ExtensionError`, which the matcher and
the suggestion engine catch, log and publish instead of raising.
"""

from __future__ import annotations


class MentionKitError(Exception):
    """Base class for every error raised by mentionkit."""


class DuplicateExtensionError(MentionKitError):
    """An extension with the same name is already registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Extension '{name}' is already registered")


class UnknownCommandError(MentionKitError, KeyError):
    """No registered extension exposes a command with this name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown command '{name}'")

    def __str__(self) -> str:
        # KeyError.__str__ would wrap the message in quotes
        return str(self.args[0])


class ExtensionError(MentionKitError):
    """A pattern or command supplied by an extension raised.

    Attributes:
        extension_name: Name of the extension whose code failed
        cause: The exception raised by the extension
        operation: What was running, e.g. ``"pattern"`` or ``"command:insertMentionLink"``
    """

    def __init__(self, extension_name: str, cause: BaseException, operation: str = "pattern") -> None:
        self.extension_name = extension_name
        self.cause = cause
        self.operation = operation
        super().__init__(f"Extension '{extension_name}' failed during {operation}: {cause!r}")
