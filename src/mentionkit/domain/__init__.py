"""Domain layer - value types, host data models, protocols, errors and events.

The domain layer has no dependencies on the extension or suggestion layers;
both depend on it.
"""

from .candidates import SuggestionItem, TagData, UserData
from .errors import (
    DuplicateExtensionError,
    ExtensionError,
    MentionKitError,
    UnknownCommandError,
)
from .protocols import CandidateSource, DocumentModel
from .types import (
    ActiveQuery,
    AnnotationNode,
    CommandContext,
    DocumentMutation,
    ExitContext,
    ExitReason,
    TriggerKind,
)

__all__ = [
    "ActiveQuery",
    "AnnotationNode",
    "CandidateSource",
    "CommandContext",
    "DocumentModel",
    "DocumentMutation",
    "DuplicateExtensionError",
    "ExitContext",
    "ExitReason",
    "ExtensionError",
    "MentionKitError",
    "SuggestionItem",
    "TagData",
    "TriggerKind",
    "UnknownCommandError",
    "UserData",
]
