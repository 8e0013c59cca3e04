"""
Candidate sources for ``@`` mentions and ``#`` tags.

Filtering is a pure function of the active query and the host data: a
case-insensitive substring test, keeping the host's order. Lower-cased keys
are computed once when a source is built since host lists are read-only.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Optional

from mentionkit.domain.candidates import SuggestionItem, TagData, UserData
from mentionkit.domain.protocols import CandidateSource
from mentionkit.domain.types import ActiveQuery, TriggerKind
from mentionkit.logger import get_logger

logger = get_logger("suggestion.sources")


def _coerce(model: type, entries: Iterable[Any]) -> tuple[Any, ...]:
    return tuple(entry if isinstance(entry, model) else model.model_validate(entry) for entry in entries)


class UserCandidateSource(CandidateSource):
    """Users whose ``username`` contains the query."""

    def __init__(self, users: Iterable[UserData | Mapping[str, Any]]) -> None:
        self._users: tuple[UserData, ...] = _coerce(UserData, users)
        self._keys = [user.username.lower() for user in self._users]

    @property
    def users(self) -> tuple[UserData, ...]:
        return self._users

    def can_handle(self, query: ActiveQuery) -> bool:
        return query.trigger_kind == TriggerKind.MENTION

    def get_candidates(self, query: ActiveQuery) -> list[SuggestionItem]:
        needle = query.query_text.lower()
        matches = [user for user, key in zip(self._users, self._keys) if needle in key]
        logger.debug(f"UserCandidateSource query={query.query_text!r} matches={len(matches)}/{len(self._users)}")
        return [user.to_suggestion() for user in matches]


class TagCandidateSource(CandidateSource):
    """Tags whose ``tag`` field contains the query."""

    def __init__(self, tags: Iterable[TagData | Mapping[str, Any]]) -> None:
        self._tags: tuple[TagData, ...] = _coerce(TagData, tags)
        self._keys = [tag.tag.lower() for tag in self._tags]

    @property
    def tags(self) -> tuple[TagData, ...]:
        return self._tags

    def can_handle(self, query: ActiveQuery) -> bool:
        return query.trigger_kind == TriggerKind.TAG

    def get_candidates(self, query: ActiveQuery) -> list[SuggestionItem]:
        needle = query.query_text.lower()
        matches = [tag for tag, key in zip(self._tags, self._keys) if needle in key]
        logger.debug(f"TagCandidateSource query={query.query_text!r} matches={len(matches)}/{len(self._tags)}")
        return [tag.to_suggestion() for tag in matches]


class CandidateOrchestrator:
    """Selects the first source able to serve the current query."""

    def __init__(self, sources: Sequence[CandidateSource]) -> None:
        self._sources = list(sources)

    def get_candidates(self, query: Optional[ActiveQuery]) -> list[SuggestionItem]:
        if query is None or query.trigger_kind == TriggerKind.NONE:
            return []

        for source in self._sources:
            try:
                if source.can_handle(query):
                    return source.get_candidates(query)
            except Exception:
                logger.exception(f"Candidate source {source.__class__.__name__} failed")
        logger.debug(f"No candidate source for trigger kind {query.trigger_kind.value!r}")
        return []


def filter_candidates(
    query: Optional[ActiveQuery],
    users: Iterable[UserData | Mapping[str, Any]] = (),
    tags: Iterable[TagData | Mapping[str, Any]] = (),
) -> list[SuggestionItem]:
    """Filter host data for ``query`` without building long-lived sources."""
    orchestrator = CandidateOrchestrator([UserCandidateSource(users), TagCandidateSource(tags)])
    return orchestrator.get_candidates(query)
