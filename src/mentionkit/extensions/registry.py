"""Registry of active extensions.

The registry is the single source of truth for which patterns and commands
exist. It never touches the document; the pattern matcher and the suggestion
engine ask it for patterns and commands and apply the results themselves.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from mentionkit.domain.errors import DuplicateExtensionError, UnknownCommandError
from mentionkit.logger import get_logger

from .base import CommandFn, Extension, Pattern

logger = get_logger("extensions.registry")


class PatternView:
    """Restartable view over every registered pattern.

    Each iteration walks the registry afresh, in registration order and then
    declaration order, yielding ``(extension, pattern)`` pairs. Extensions
    registered after the view was created are included on the next pass.
    """

    def __init__(self, registry: "ExtensionRegistry") -> None:
        self._registry = registry

    def __iter__(self) -> Iterator[tuple[Extension, Pattern]]:
        for extension in self._registry.extensions:
            for pattern in extension.patterns:
                yield extension, pattern


class ExtensionRegistry:
    """Ordered collection of extensions with unique names.

    Example:
        >>> registry = ExtensionRegistry()
        >>> registry.register(emoji_extension())
        >>> registry.register(mention_extension())
        >>> command = registry.get_command("insertMentionLink")
    """

    def __init__(self, extensions: Iterable[Extension] = ()) -> None:
        self._extensions: list[Extension] = []
        self._by_name: dict[str, Extension] = {}
        # command name -> owning extension; first registration wins
        self._command_owner: dict[str, Extension] = {}
        for extension in extensions:
            self.register(extension)

    def register(self, extension: Extension) -> None:
        """Append an extension.

        Raises:
            DuplicateExtensionError: If an extension with the same name is
                already registered. The registry is left unchanged.
        """
        if extension.name in self._by_name:
            raise DuplicateExtensionError(extension.name)

        self._extensions.append(extension)
        self._by_name[extension.name] = extension

        for command_name in extension.commands:
            owner = self._command_owner.get(command_name)
            if owner is not None:
                logger.warning(
                    f"Command '{command_name}' from '{extension.name}' is shadowed by '{owner.name}'"
                )
                continue
            self._command_owner[command_name] = extension

        logger.info(
            f"Registered extension '{extension.name}' "
            f"({len(extension.patterns)} pattern(s), {len(extension.commands)} command(s))"
        )

    @property
    def extensions(self) -> tuple[Extension, ...]:
        return tuple(self._extensions)

    def get(self, name: str) -> Extension | None:
        return self._by_name.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._extensions)

    def get_command(self, name: str) -> CommandFn:
        """Return the command function registered under ``name``.

        Raises:
            UnknownCommandError: If no extension exposes the command.
        """
        owner = self._command_owner.get(name)
        if owner is None:
            raise UnknownCommandError(name)
        return owner.commands[name]

    def command_owner(self, name: str) -> Extension:
        """Return the extension that owns command ``name``."""
        owner = self._command_owner.get(name)
        if owner is None:
            raise UnknownCommandError(name)
        return owner

    def command_names(self) -> list[str]:
        return list(self._command_owner)

    def all_patterns(self) -> PatternView:
        """All patterns as ``(extension, pattern)`` pairs, in precedence order."""
        return PatternView(self)
