"""The extension contract.

An extension is a named bundle of capabilities: zero or more patterns that
rewrite text in front of the caret, and zero or more named commands that
produce document edits. There is no base class to inherit from; anything
built from :class:`Extension` can be registered.

Example:
    ```python
    shout = Extension(
        name="shout",
        patterns=[Pattern.compile(r"!!(\\w+)!!$", lambda full, groups: groups[0].upper())],
    )
    registry.register(shout)
    ```
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Sequence

from mentionkit.domain.types import CommandContext, DocumentMutation

MatchHandler = Callable[[str, tuple[str, ...]], Optional[str]]
"""``(matched_text, captured_groups) -> replacement``; None leaves the text as typed."""

CommandFn = Callable[..., Optional[DocumentMutation]]
"""``(context, **kwargs) -> mutation``; None means there is nothing to change."""


@dataclass(frozen=True)
class Pattern:
    """A trailing-text rule and its transform."""

    regexp: re.Pattern[str]
    on_match: MatchHandler
    _anchored: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # a trailing comment in a verbose pattern would swallow the group close
        newline = "\n" if self.regexp.flags & re.VERBOSE else ""
        anchored = re.compile(rf"(?:{self.regexp.pattern}{newline})\Z", self.regexp.flags)
        object.__setattr__(self, "_anchored", anchored)

    @classmethod
    def compile(cls, pattern: str, on_match: MatchHandler, flags: int = 0) -> "Pattern":
        return cls(regexp=re.compile(pattern, flags), on_match=on_match)

    def match_trailing(self, text: str) -> Optional[re.Match[str]]:
        """Leftmost non-empty match of the pattern that ends at the end of ``text``."""
        match = self._anchored.search(text)
        if match is None or match.end() == match.start():
            return None
        return match


@dataclass(frozen=True)
class Extension:
    """A named unit exposing patterns and commands."""

    name: str
    patterns: Sequence[Pattern] = ()
    commands: Mapping[str, CommandFn] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Extension name must be a non-empty string")
        # Freeze the containers so identity stays stable once registered
        object.__setattr__(self, "patterns", tuple(self.patterns))
        object.__setattr__(self, "commands", MappingProxyType(dict(self.commands)))

    @property
    def provides_patterns(self) -> bool:
        return bool(self.patterns)

    @property
    def provides_commands(self) -> bool:
        return bool(self.commands)


__all__ = ["CommandContext", "CommandFn", "Extension", "MatchHandler", "Pattern"]
