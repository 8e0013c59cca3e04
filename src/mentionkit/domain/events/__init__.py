"""Event system for decoupled component communication.

Example:
    ```python
    from mentionkit.domain.events import EventBus, MentionChanged

    event_bus = EventBus()

    def handle_change(event: MentionChanged):
        print("popup open" if event.query else "popup closed")

    event_bus.subscribe(MentionChanged, handle_change)
    ```
"""

from .bus import EventBus
from .types import (
    Event,
    ExtensionFailed,
    MentionChanged,
    PatternApplied,
    SuggestionCancelled,
    SuggestionCommitted,
)

__all__ = [
    "EventBus",
    "Event",
    "ExtensionFailed",
    "MentionChanged",
    "PatternApplied",
    "SuggestionCancelled",
    "SuggestionCommitted",
]
