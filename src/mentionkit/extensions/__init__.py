"""Extension contract, registry and pattern matcher."""

from .base import CommandFn, Extension, MatchHandler, Pattern
from .emoji import emoji_extension
from .matcher import MatchResult, PatternMatcher
from .mention import mention_extension
from .registry import ExtensionRegistry, PatternView
from .reporting import ExtensionErrorReporter

__all__ = [
    "CommandFn",
    "Extension",
    "ExtensionErrorReporter",
    "ExtensionRegistry",
    "MatchHandler",
    "MatchResult",
    "Pattern",
    "PatternMatcher",
    "PatternView",
    "emoji_extension",
    "mention_extension",
]
