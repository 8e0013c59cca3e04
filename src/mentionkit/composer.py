"""Host-facing composer wiring the document, extensions and suggestions.

Example:
    ```python
    composer = SocialComposer(
        users=[{"id": "1", "username": "ada", "displayName": "Ada", "href": "/u/ada"}],
        tags=[{"id": "t1", "tag": "python", "href": "/t/python"}],
        on_mention_change=lambda query: popup.show(query) if query else popup.hide(),
    )
    composer.type_text("Hi @ad")
    composer.candidates      # [SuggestionItem(id='1', label='Ada', href='/u/ada', ...)]
    composer.select(0)       # replaces "@ad" with a mention node
    ```
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Optional

from mentionkit.config import ComposerConfig
from mentionkit.document import TextDocument
from mentionkit.domain.candidates import SuggestionItem, TagData, UserData
from mentionkit.domain.errors import ExtensionError
from mentionkit.domain.events import EventBus
from mentionkit.domain.types import ActiveQuery, CommandContext, Content, DocumentMutation, ExitReason
from mentionkit.extensions import (
    Extension,
    ExtensionErrorReporter,
    ExtensionRegistry,
    PatternMatcher,
    emoji_extension,
    mention_extension,
)
from mentionkit.logger import get_logger
from mentionkit.suggestion import (
    ExitHandler,
    MentionChangeHandler,
    SuggestionEngine,
    TagCandidateSource,
    UserCandidateSource,
)

logger = get_logger("composer")


def default_extensions() -> list[Extension]:
    return [emoji_extension(), mention_extension()]


class SocialComposer:
    """Free text plus ``@mention`` and ``#tag`` autocompletion.

    Every method is one editor event. Events are processed in call order and
    each runs to completion before returning.
    """

    def __init__(
        self,
        users: Iterable[UserData | Mapping[str, Any]] = (),
        tags: Iterable[TagData | Mapping[str, Any]] = (),
        config: Optional[ComposerConfig] = None,
        extensions: Optional[Iterable[Extension]] = None,
        on_mention_change: Optional[MentionChangeHandler] = None,
        on_exit: Optional[ExitHandler] = None,
        event_bus: Optional[EventBus] = None,
        document: Optional[TextDocument] = None,
    ) -> None:
        self.config = config or ComposerConfig()
        self.event_bus = event_bus or EventBus()
        self.document = document if document is not None else TextDocument()
        self.registry = ExtensionRegistry(default_extensions() if extensions is None else extensions)
        self.reporter = ExtensionErrorReporter(self.event_bus, self.config.error_history_limit)
        self.matcher = PatternMatcher(
            self.registry,
            event_bus=self.event_bus,
            trailing_text_limit=self.config.trailing_text_limit,
            reporter=self.reporter,
        )
        self.engine = SuggestionEngine(
            self.registry,
            [UserCandidateSource(users), TagCandidateSource(tags)],
            config=self.config,
            on_mention_change=on_mention_change,
            on_exit=on_exit,
            event_bus=self.event_bus,
            reporter=self.reporter,
        )
        self._caret = len(self.document)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def caret(self) -> int:
        return self._caret

    @property
    def text(self) -> str:
        return self.document.text

    @property
    def active_query(self) -> Optional[ActiveQuery]:
        return self.engine.active_query

    @property
    def candidates(self) -> list[SuggestionItem]:
        return self.engine.candidates

    @property
    def errors(self) -> list[ExtensionError]:
        return list(self.reporter.errors)

    @property
    def remaining_characters(self) -> Optional[int]:
        """Characters left before the soft limit; negative when over it."""
        if self.config.character_limit is None:
            return None
        return self.config.character_limit - self.document.character_count

    @property
    def is_over_limit(self) -> bool:
        remaining = self.remaining_characters
        return remaining is not None and remaining < 0

    # ------------------------------------------------------------------
    # Editor events
    # ------------------------------------------------------------------

    def type_text(self, text: str) -> None:
        """Type ``text`` one keystroke per character."""
        for char in text:
            self._insert(char)

    def _insert(self, char: str) -> None:
        self.document.replace_range(self._caret, self._caret, char)
        self._caret += 1

        inserted = char
        match = self.matcher.scan(self.document, self._caret)
        if match is not None:
            self._caret = match.caret_after
            inserted = ""

        mutation = self.engine.handle_text_input(self.document, self._caret, inserted)
        if mutation is not None:
            self._follow(mutation)

    def delete_backward(self, count: int = 1) -> None:
        """Delete ``count`` positions before the caret (a node counts as one)."""
        if count <= 0 or self._caret == 0:
            return
        start = max(0, self._caret - count)
        self.document.replace_range(start, self._caret, "")
        self._caret = start
        self.engine.handle_deletion(self.document, self._caret)

    def move_caret(self, position: int) -> None:
        if not 0 <= position <= len(self.document):
            raise ValueError(f"Caret position {position} outside document of length {len(self.document)}")
        self._caret = position
        self.engine.handle_caret_move(self.document, self._caret)

    def escape(self) -> bool:
        return self.engine.escape()

    def select(self, item: SuggestionItem | int) -> Optional[DocumentMutation]:
        """Commit the active query with a candidate or its index in :attr:`candidates`."""
        mutation = self.engine.select(self.document, item)
        if mutation is not None:
            self._follow(mutation)
            self.engine.sync(self.document, self._caret)
        return mutation

    def run_command(self, name: str, **kwargs: Any) -> Optional[DocumentMutation]:
        """Run a registered command by name at the caret.

        While a query is active, an edit covering its span commits the query,
        and a failing command cancels it.

        Raises:
            UnknownCommandError: If no extension exposes ``name``.
        """
        command = self.registry.get_command(name)
        owner = self.registry.command_owner(name)
        context = CommandContext(
            document=self.document,
            caret=self._caret,
            active_query=self.engine.active_query,
            registry=self.registry,
        )
        try:
            mutation = command(context, **kwargs)
            if mutation is not None:
                mutation.apply(self.document)
        except Exception as exc:
            self.reporter.report(ExtensionError(owner.name, exc, f"command:{name}"))
            self.engine.cancel(ExitReason.COMMAND_FAILED)
            return None

        if mutation is None:
            logger.debug(f"Command '{name}' made no change")
            return None

        logger.info(f"Ran command '{name}' from '{owner.name}'")
        self._follow(mutation)
        self.engine.commit_external(mutation)
        self.engine.sync(self.document, self._caret)
        return mutation

    def set_content(self, content: str | Iterable[Content]) -> None:
        """Replace the whole document and put the caret at the end."""
        self.document.replace_range(0, len(self.document), content if isinstance(content, str) else list(content))
        self._caret = len(self.document)
        self.engine.reset()
        self.engine.sync(self.document, self._caret)

    def _follow(self, mutation: DocumentMutation) -> None:
        if mutation.from_pos <= self._caret <= mutation.to_pos:
            self._caret = mutation.caret_after
        else:
            self._caret = mutation.map_position(self._caret)
