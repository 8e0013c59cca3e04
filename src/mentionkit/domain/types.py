"""Core value types shared by the registry, matcher and suggestion engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Union

if TYPE_CHECKING:
    from mentionkit.domain.candidates import SuggestionItem
    from mentionkit.domain.protocols import DocumentModel
    from mentionkit.extensions.registry import ExtensionRegistry


class TriggerKind(str, Enum):
    """Kind of suggestion a trigger character opens."""

    MENTION = "mention"
    TAG = "tag"
    NONE = "none"


class ExitReason(str, Enum):
    """Why a composing query ended."""

    SELECTED = "selected"
    DELIMITER = "delimiter"
    ESCAPE = "escape"
    CARET_LEFT = "caret-left"
    TRIGGER_DELETED = "trigger-deleted"
    REPLACED = "replaced"
    COMMAND_FAILED = "command-failed"


@dataclass(frozen=True)
class ActiveQuery:
    """An in-progress suggestion composition.

    ``anchor_position`` is the document position of the trigger character;
    ``query_text`` is everything between the trigger and the caret.
    """

    trigger_kind: TriggerKind
    query_text: str
    anchor_position: int
    trigger_char: str = "@"

    @property
    def full_text(self) -> str:
        """Trigger character plus query, as typed."""
        return f"{self.trigger_char}{self.query_text}"

    @property
    def end_position(self) -> int:
        """Position right after the last query character."""
        return self.anchor_position + 1 + len(self.query_text)


@dataclass(frozen=True)
class AnnotationNode:
    """Structured inline element embedded in the document, such as a mention link."""

    kind: TriggerKind
    label: str
    href: str
    id: Optional[str] = None
    attrs: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def text(self) -> str:
        """Display text of the node."""
        return self.label


Content = Union[str, AnnotationNode]


def content_length(content: "str | list[Content] | tuple[Content, ...]") -> int:
    """Number of document positions ``content`` occupies (one per character, one per node)."""
    if isinstance(content, str):
        return len(content)
    return sum(len(part) if isinstance(part, str) else 1 for part in content)


@dataclass(frozen=True)
class DocumentMutation:
    """A single atomic edit: replace ``[from_pos, to_pos)`` with ``content``."""

    from_pos: int
    to_pos: int
    content: tuple[Content, ...] = ()

    @property
    def inserted_length(self) -> int:
        return content_length(self.content)

    @property
    def caret_after(self) -> int:
        """Caret position right after the inserted content."""
        return self.from_pos + self.inserted_length

    def apply(self, document: "DocumentModel") -> None:
        document.replace_range(self.from_pos, self.to_pos, list(self.content))

    def map_position(self, position: int) -> int:
        """Where ``position`` ends up once this mutation is applied."""
        if position <= self.from_pos:
            return position
        if position < self.to_pos:
            return self.caret_after
        return position + self.inserted_length - (self.to_pos - self.from_pos)


@dataclass
class CommandContext:
    """Arguments every command receives besides its keyword arguments."""

    document: "DocumentModel"
    caret: int
    active_query: Optional[ActiveQuery] = None
    registry: Optional["ExtensionRegistry"] = None


@dataclass(frozen=True)
class ExitContext:
    """Handed to the ``on_exit`` callback when a query commits."""

    query: ActiveQuery
    reason: ExitReason
    command_name: str
    selected: Optional["SuggestionItem"] = None
    append_text: str = ""
