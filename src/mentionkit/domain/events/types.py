"""Event types published by the composer core.

Hosts subscribe to these to observe the composer without being wired into
it: a popup renderer listens to :class:`MentionChanged`, telemetry or a
debugging overlay might listen to :class:`ExtensionFailed`.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from mentionkit.domain.types import ActiveQuery, DocumentMutation, ExitReason

if TYPE_CHECKING:
    from mentionkit.domain.errors import ExtensionError


@dataclass
class Event:
    """Base class for all events.

    The timestamp field is automatically set when the event is created.
    """

    timestamp: float = field(default_factory=time.time, init=False)
    """Timestamp when the event was created (Unix timestamp)."""


@dataclass
class MentionChanged(Event):
    """Published on every suggestion state change.

    Attributes:
        query: The active query, or None when the engine returned to idle
    """

    query: Optional[ActiveQuery]


@dataclass
class SuggestionCommitted(Event):
    """Published after a commit inserted an annotation into the document."""

    query: ActiveQuery
    reason: ExitReason
    mutation: DocumentMutation


@dataclass
class SuggestionCancelled(Event):
    """Published when a composing query is discarded without touching the document."""

    query: ActiveQuery
    reason: ExitReason


@dataclass
class PatternApplied(Event):
    """Published when a pattern replaced the text in front of the caret."""

    extension_name: str
    matched_text: str
    replacement: str
    start: int
    end: int


@dataclass
class ExtensionFailed(Event):
    """Published when a pattern or command body raised."""

    error: "ExtensionError"
