"""Protocols describing the collaborators the core talks to.

The core never depends on a concrete document representation. Anything that
satisfies :class:`DocumentModel` can be driven by the pattern matcher and the
suggestion engine; :class:`mentionkit.document.TextDocument` is the in-memory
reference implementation.
"""

from typing import Protocol, Sequence

from mentionkit.domain.candidates import SuggestionItem
from mentionkit.domain.types import ActiveQuery, AnnotationNode, Content

__all__ = ["DocumentModel", "CandidateSource"]


class DocumentModel(Protocol):
    """Position-addressable text with inline annotation nodes."""

    def get_trailing_text(self, caret: int, max_len: int) -> str:
        """Return up to ``max_len`` characters ending at ``caret``.

        Annotation nodes are rendered as a single placeholder character so
        that offsets in the returned text map one-to-one onto positions.
        """
        ...

    def replace_range(self, from_pos: int, to_pos: int, content: str | Sequence[Content]) -> None:
        """Atomically replace ``[from_pos, to_pos)`` with ``content``.

        Raises:
            ValueError: If the range is invalid. The document is left untouched.
        """
        ...

    def insert_node(self, pos: int, node: AnnotationNode) -> None:
        """Insert a single annotation node at ``pos``."""
        ...


class CandidateSource(Protocol):
    """Contract implemented by each candidate data source."""

    def can_handle(self, query: ActiveQuery) -> bool:
        """Return ``True`` when this source serves the query's trigger kind."""

        ...

    def get_candidates(self, query: ActiveQuery) -> list[SuggestionItem]:
        """Return display items for the query, in host order."""

        ...
