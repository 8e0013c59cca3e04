"""Pattern matcher run after every text insertion."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from mentionkit.domain.errors import ExtensionError
from mentionkit.domain.events import EventBus, PatternApplied
from mentionkit.domain.protocols import DocumentModel
from mentionkit.logger import get_logger

from .registry import ExtensionRegistry
from .reporting import ExtensionErrorReporter

logger = get_logger("extensions.matcher")


@dataclass(slots=True)
class MatchResult:
    """The replacement applied for one keystroke."""

    extension_name: str
    start: int
    end: int
    matched_text: str
    replacement: str

    @property
    def caret_after(self) -> int:
        return self.start + len(self.replacement)


class PatternMatcher:
    """Tests the text before the caret against registered patterns.

    Patterns are tried in registry order. The first one whose handler returns
    a replacement wins: the matched span is replaced in a single edit and no
    further pattern is tried for that keystroke. A handler returning None, or
    raising, does not stop the scan.
    """

    def __init__(
        self,
        registry: ExtensionRegistry,
        event_bus: Optional[EventBus] = None,
        trailing_text_limit: int = 500,
        reporter: Optional[ExtensionErrorReporter] = None,
    ) -> None:
        self._registry = registry
        self._event_bus = event_bus or EventBus()
        self._trailing_text_limit = trailing_text_limit
        self._reporter = reporter or ExtensionErrorReporter(self._event_bus)

    def scan(self, document: DocumentModel, caret: int) -> Optional[MatchResult]:
        """Apply at most one pattern to the text ending at ``caret``.

        Returns:
            The applied replacement, or None if the document was left untouched.
        """
        trailing = document.get_trailing_text(caret, self._trailing_text_limit)
        if not trailing:
            return None

        for extension, pattern in self._registry.all_patterns():
            match = pattern.match_trailing(trailing)
            if match is None:
                continue

            matched_text = match.group(0)
            try:
                replacement = pattern.on_match(matched_text, match.groups())
            except Exception as exc:
                self._reporter.report(ExtensionError(extension.name, exc, "pattern"))
                continue

            if replacement is None:
                logger.debug(f"Pattern from '{extension.name}' matched {matched_text!r} but declined")
                continue

            if not isinstance(replacement, str):
                error = TypeError(f"on_match returned {type(replacement).__name__}, expected str or None")
                self._reporter.report(ExtensionError(extension.name, error, "pattern"))
                continue

            start = caret - (len(trailing) - match.start())
            document.replace_range(start, caret, replacement)
            result = MatchResult(
                extension_name=extension.name,
                start=start,
                end=caret,
                matched_text=matched_text,
                replacement=replacement,
            )
            logger.debug(f"Pattern from '{extension.name}' replaced {matched_text!r} with {replacement!r}")
            self._event_bus.publish(
                PatternApplied(
                    extension_name=extension.name,
                    matched_text=matched_text,
                    replacement=replacement,
                    start=start,
                    end=caret,
                )
            )
            return result

        return None

    @property
    def errors(self):
        return self._reporter.errors
