"""mentionkit - extension contract and mention/tag suggestion engine for social composers."""

from mentionkit.composer import SocialComposer, default_extensions
from mentionkit.config import ComposerConfig, TriggerConfig, load_composer_config
from mentionkit.document import TextDocument
from mentionkit.domain import (
    ActiveQuery,
    AnnotationNode,
    CommandContext,
    DocumentMutation,
    DuplicateExtensionError,
    ExitContext,
    ExitReason,
    ExtensionError,
    MentionKitError,
    SuggestionItem,
    TagData,
    TriggerKind,
    UnknownCommandError,
    UserData,
)
from mentionkit.domain.events import EventBus
from mentionkit.extensions import (
    Extension,
    ExtensionRegistry,
    Pattern,
    PatternMatcher,
    emoji_extension,
    mention_extension,
)
from mentionkit.suggestion import SuggestionEngine, default_exit_handler, filter_candidates

__version__ = "0.1.0"

__all__ = [
    "ActiveQuery",
    "AnnotationNode",
    "CommandContext",
    "ComposerConfig",
    "DocumentMutation",
    "DuplicateExtensionError",
    "EventBus",
    "ExitContext",
    "ExitReason",
    "Extension",
    "ExtensionError",
    "ExtensionRegistry",
    "MentionKitError",
    "Pattern",
    "PatternMatcher",
    "SocialComposer",
    "SuggestionEngine",
    "SuggestionItem",
    "TagData",
    "TextDocument",
    "TriggerConfig",
    "TriggerKind",
    "UnknownCommandError",
    "UserData",
    "default_exit_handler",
    "default_extensions",
    "emoji_extension",
    "filter_candidates",
    "load_composer_config",
    "mention_extension",
]
