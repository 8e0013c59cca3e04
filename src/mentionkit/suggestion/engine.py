"""Mention and tag autocomplete as a small state machine.

States::

    Idle -> Composing(kind) -> Committed | Cancelled -> Idle

The engine owns a single ``ActiveQuery`` (or None when idle). Every editor
event is fed in arrival order; each call runs to completion and leaves the
engine in a consistent state. The engine reads the document to detect the
triggered span and writes to it only when a commit runs a command.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from typing import Any, Optional

from mentionkit.config import ComposerConfig
from mentionkit.domain.candidates import SuggestionItem
from mentionkit.domain.errors import ExtensionError, UnknownCommandError
from mentionkit.domain.events import (
    EventBus,
    MentionChanged,
    SuggestionCancelled,
    SuggestionCommitted,
)
from mentionkit.domain.protocols import CandidateSource, DocumentModel
from mentionkit.domain.types import (
    ActiveQuery,
    CommandContext,
    DocumentMutation,
    ExitContext,
    ExitReason,
)
from mentionkit.extensions.registry import ExtensionRegistry
from mentionkit.extensions.reporting import ExtensionErrorReporter
from mentionkit.logger import get_logger

from .sources import CandidateOrchestrator

logger = get_logger("suggestion.engine")

CommandInvoker = Callable[..., Optional[DocumentMutation]]
MentionChangeHandler = Callable[[Optional[ActiveQuery]], None]
ExitHandler = Callable[[ExitContext, CommandInvoker], None]


def default_exit_handler(context: ExitContext, command: CommandInvoker) -> None:
    """Insert the selected candidate, or link the typed text when nothing was selected."""
    if context.selected is not None:
        command(
            href=context.selected.href,
            label=context.selected.label,
            id=context.selected.id,
            append_text=context.append_text,
        )
    else:
        command(href=context.query.query_text)


def build_trigger_regex(config: ComposerConfig) -> re.Pattern[str]:
    """Regex matching a trigger and its query at the end of the trailing text.

    The trigger must not directly follow a word character, so ``mail@host``
    does not open a mention.
    """
    chars = "".join(re.escape(trigger.char) for trigger in config.triggers)
    return re.compile(rf"(?<!\w)(?P<trigger>[{chars}])(?P<query>(?:{config.supported_characters})*)$")


class SuggestionEngine:
    """Tracks the active query, filters candidates and commits selections.

    Args:
        registry: Where commit commands are looked up.
        sources: Candidate sources, or a ready-made orchestrator.
        config: Trigger characters, delimiters and escape behaviour.
        on_mention_change: Called with the new query (or None) on every state change.
        on_exit: Decides the command arguments on commit; defaults to
            :func:`default_exit_handler`.
        event_bus: Receives ``MentionChanged``, ``SuggestionCommitted``,
            ``SuggestionCancelled`` and ``ExtensionFailed`` events.
        reporter: Shared sink for extension failures.
    """

    def __init__(
        self,
        registry: ExtensionRegistry,
        sources: CandidateOrchestrator | Sequence[CandidateSource],
        config: Optional[ComposerConfig] = None,
        on_mention_change: Optional[MentionChangeHandler] = None,
        on_exit: Optional[ExitHandler] = None,
        event_bus: Optional[EventBus] = None,
        reporter: Optional[ExtensionErrorReporter] = None,
    ) -> None:
        self._registry = registry
        self._orchestrator = (
            sources if isinstance(sources, CandidateOrchestrator) else CandidateOrchestrator(sources)
        )
        self._config = config or ComposerConfig()
        self._on_mention_change = on_mention_change
        self._on_exit = on_exit or default_exit_handler
        self._event_bus = event_bus or EventBus()
        self._trigger_regex = build_trigger_regex(self._config)

        self._query: Optional[ActiveQuery] = None
        self._candidates: list[SuggestionItem] = []
        # anchor of a query dismissed with escape; not reopened while the span lives
        self._dismissed_anchor: Optional[int] = None
        self._reporter = reporter or ExtensionErrorReporter(
            self._event_bus, self._config.error_history_limit
        )

    @property
    def active_query(self) -> Optional[ActiveQuery]:
        return self._query

    @property
    def is_composing(self) -> bool:
        return self._query is not None

    @property
    def errors(self):
        return self._reporter.errors

    @property
    def candidates(self) -> list[SuggestionItem]:
        return list(self._candidates)

    def detect(self, document: DocumentModel, caret: int) -> Optional[ActiveQuery]:
        """Return the query the caret is in, without changing any state."""
        trailing = document.get_trailing_text(caret, self._config.trailing_text_limit)
        match = self._trigger_regex.search(trailing)
        if match is None:
            return None

        trigger = self._config.trigger_for(match.group("trigger"))
        if trigger is None:
            return None
        return ActiveQuery(
            trigger_kind=trigger.kind,
            query_text=match.group("query"),
            anchor_position=caret - (len(trailing) - match.start()),
            trigger_char=trigger.char,
        )

    # ------------------------------------------------------------------
    # Editor events
    # ------------------------------------------------------------------

    def handle_text_input(self, document: DocumentModel, caret: int, inserted: str) -> Optional[DocumentMutation]:
        """Process ``inserted`` text that now ends at ``caret``.

        Typing an exit delimiter right after a non-empty query commits it
        through ``on_exit``; the returned mutation is what the commit applied.
        """
        query = self._query
        if (
            query is not None
            and inserted
            and all(char in self._config.exit_delimiters for char in inserted)
            and caret - len(inserted) == query.end_position
        ):
            if query.query_text:
                return self._commit(document, query, ExitReason.DELIMITER)
            self._cancel(ExitReason.DELIMITER)

        self.sync(document, caret)
        return None

    def handle_deletion(self, document: DocumentModel, caret: int) -> None:
        """Process a deletion that left the caret at ``caret``."""
        query = self._query
        hint = ExitReason.TRIGGER_DELETED if query is not None and caret <= query.anchor_position else None
        self.sync(document, caret, hint)

    def handle_caret_move(self, document: DocumentModel, caret: int) -> None:
        self.sync(document, caret, ExitReason.CARET_LEFT)

    def sync(self, document: DocumentModel, caret: int, reason_hint: Optional[ExitReason] = None) -> None:
        """Recompute the state from the document and caret."""
        detected = self.detect(document, caret)

        if self._dismissed_anchor is not None:
            if detected is not None and detected.anchor_position == self._dismissed_anchor:
                detected = None
            else:
                self._dismissed_anchor = None

        current = self._query
        if current is not None and (
            detected is None
            or detected.anchor_position != current.anchor_position
            or detected.trigger_kind != current.trigger_kind
        ):
            if detected is not None:
                reason = ExitReason.REPLACED
            else:
                reason = reason_hint or ExitReason.CARET_LEFT
            self._cancel(reason)

        if detected != self._query:
            self._set_query(detected)

    def escape(self) -> bool:
        """Handle an escape signal. Returns True if a query was cancelled."""
        query = self._query
        if query is None:
            return False
        if self._config.ignore_escape:
            logger.debug("Escape ignored, popup stays open")
            return False

        self._dismissed_anchor = query.anchor_position
        self._cancel(ExitReason.ESCAPE)
        return True

    def select(
        self,
        document: DocumentModel,
        item: SuggestionItem | int,
    ) -> Optional[DocumentMutation]:
        """Commit the active query with ``item`` (or the candidate at that index).

        Raises:
            RuntimeError: If no query is active.
            IndexError: If an index is out of range of the current candidates.
        """
        query = self._query
        if query is None:
            raise RuntimeError("No active query to select a candidate for")
        if isinstance(item, int):
            item = self._candidates[item]

        return self._commit(document, query, ExitReason.SELECTED, selected=item)

    def commit_external(
        self, mutation: DocumentMutation, reason: ExitReason = ExitReason.SELECTED
    ) -> bool:
        """Record an already applied edit that consumed the active query's span.

        Used when the host runs a command by name while composing, e.g. after
        picking a contact from its own picker. Returns False, changing
        nothing, if no query is active or the edit does not cover the span.
        """
        query = self._query
        if query is None:
            return False
        if not (mutation.from_pos <= query.anchor_position and mutation.to_pos >= query.end_position):
            return False

        logger.info(f"Committed {query.trigger_kind.value} {query.full_text!r} from outside ({reason.value})")
        self._dismissed_anchor = None
        self._event_bus.publish(SuggestionCommitted(query=query, reason=reason, mutation=mutation))
        self._set_query(None)
        return True

    def cancel(self, reason: ExitReason) -> None:
        """Discard the active query, if any, without touching the document."""
        self._cancel(reason)

    def reset(self) -> None:
        """Cancel any active query and forget dismissals, e.g. when the document is replaced."""
        self._cancel(ExitReason.REPLACED)
        self._dismissed_anchor = None

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _set_query(self, query: Optional[ActiveQuery]) -> None:
        previous = self._query
        self._query = query
        self._candidates = self._orchestrator.get_candidates(query)

        if query is not None and previous is None:
            logger.debug(f"Composing {query.trigger_kind.value} at {query.anchor_position}")
        logger.debug(
            f"Active query {query.full_text if query else None!r}, {len(self._candidates)} candidate(s)"
        )

        if self._on_mention_change is not None:
            try:
                self._on_mention_change(query)
            except Exception:
                logger.exception("on_mention_change callback failed")
        self._event_bus.publish(MentionChanged(query=query))

    def _cancel(self, reason: ExitReason) -> None:
        query = self._query
        if query is None:
            return
        logger.debug(f"Cancelled {query.full_text!r} ({reason.value})")
        self._event_bus.publish(SuggestionCancelled(query=query, reason=reason))
        self._set_query(None)

    def _commit(
        self,
        document: DocumentModel,
        query: ActiveQuery,
        reason: ExitReason,
        selected: Optional[SuggestionItem] = None,
    ) -> Optional[DocumentMutation]:
        trigger = self._config.trigger_for(query.trigger_char)
        command_name = trigger.command if trigger is not None else ""
        try:
            command = self._registry.get_command(command_name)
            extension_name = self._registry.command_owner(command_name).name
        except UnknownCommandError:
            self._cancel(ExitReason.COMMAND_FAILED)
            raise

        applied: list[DocumentMutation] = []

        def invoke(**kwargs: Any) -> Optional[DocumentMutation]:
            if applied:
                logger.warning(f"Command '{command_name}' already applied for this commit, ignoring")
                return None
            context = CommandContext(
                document=document,
                caret=query.end_position,
                active_query=query,
                registry=self._registry,
            )
            try:
                mutation = command(context, **kwargs)
                if mutation is not None:
                    mutation.apply(document)
            except Exception as exc:
                raise ExtensionError(extension_name, exc, f"command:{command_name}") from exc
            if mutation is not None:
                applied.append(mutation)
            return mutation

        exit_context = ExitContext(
            query=query,
            reason=reason,
            command_name=command_name,
            selected=selected,
            append_text=self._config.append_text if reason == ExitReason.SELECTED else "",
        )
        try:
            self._on_exit(exit_context, invoke)
        except ExtensionError as error:
            self._reporter.report(error)
            self._cancel(ExitReason.COMMAND_FAILED)
            return None
        except Exception:
            logger.exception("on_exit handler failed")
            if not applied:
                self._cancel(ExitReason.COMMAND_FAILED)
                return None

        if not applied:
            logger.debug(f"Exit handler made no change for {query.full_text!r}")
            self._cancel(reason)
            return None

        mutation = applied[0]
        logger.info(f"Committed {query.trigger_kind.value} {query.full_text!r} via '{command_name}' ({reason.value})")
        self._dismissed_anchor = None
        self._event_bus.publish(SuggestionCommitted(query=query, reason=reason, mutation=mutation))
        self._set_query(None)
        return mutation
