"""Mention and tag suggestion engine."""

from .engine import (
    CommandInvoker,
    ExitHandler,
    MentionChangeHandler,
    SuggestionEngine,
    build_trigger_regex,
    default_exit_handler,
)
from .sources import (
    CandidateOrchestrator,
    TagCandidateSource,
    UserCandidateSource,
    filter_candidates,
)

__all__ = [
    "CandidateOrchestrator",
    "CommandInvoker",
    "ExitHandler",
    "MentionChangeHandler",
    "SuggestionEngine",
    "TagCandidateSource",
    "UserCandidateSource",
    "build_trigger_regex",
    "default_exit_handler",
    "filter_candidates",
]
