"""In-memory document implementing the :class:`DocumentModel` adapter.

Positions are flat: every character takes one position and every annotation
node takes exactly one position, the way an atom node does in a rich-text
editor. Trailing text renders nodes as U+FFFC so offsets stay aligned.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Sequence

from mentionkit.domain.types import AnnotationNode, Content
from mentionkit.logger import get_logger

logger = get_logger("document")

NODE_PLACEHOLDER = "\ufffc"


class TextDocument:
    """Mutable buffer of characters and inline annotation nodes."""

    def __init__(self, content: str | Iterable[Content] = "") -> None:
        self._items: list[str | AnnotationNode] = self._explode(content)

    @staticmethod
    def _explode(content: str | Iterable[Content]) -> list[str | AnnotationNode]:
        if isinstance(content, str):
            return list(content)
        items: list[str | AnnotationNode] = []
        for part in content:
            if isinstance(part, AnnotationNode):
                items.append(part)
            elif isinstance(part, str):
                items.extend(part)
            else:
                raise TypeError(f"Unsupported document content: {part!r}")
        return items

    def __len__(self) -> int:
        return len(self._items)

    def _check_range(self, from_pos: int, to_pos: int) -> None:
        if not 0 <= from_pos <= to_pos <= len(self._items):
            raise ValueError(f"Invalid range [{from_pos}, {to_pos}) for document of length {len(self._items)}")

    def get_trailing_text(self, caret: int, max_len: int) -> str:
        self._check_range(caret, caret)
        start = max(0, caret - max_len)
        return "".join(
            item if isinstance(item, str) else NODE_PLACEHOLDER for item in self._items[start:caret]
        )

    def replace_range(self, from_pos: int, to_pos: int, content: str | Sequence[Content]) -> None:
        self._check_range(from_pos, to_pos)
        replacement = self._explode(content)
        self._items[from_pos:to_pos] = replacement
        logger.debug(f"Replaced [{from_pos}, {to_pos}) with {len(replacement)} position(s)")

    def insert_node(self, pos: int, node: AnnotationNode) -> None:
        self.replace_range(pos, pos, [node])

    def node_at(self, pos: int) -> AnnotationNode | None:
        """Return the annotation node occupying ``pos``, if any."""
        if 0 <= pos < len(self._items):
            item = self._items[pos]
            if isinstance(item, AnnotationNode):
                return item
        return None

    def nodes(self) -> Iterator[tuple[int, AnnotationNode]]:
        """Yield ``(position, node)`` for every annotation node, in document order."""
        for pos, item in enumerate(self._items):
            if isinstance(item, AnnotationNode):
                yield pos, item

    def char_at(self, pos: int) -> str:
        """Character at ``pos``; nodes read as the placeholder character."""
        item = self._items[pos]
        return item if isinstance(item, str) else NODE_PLACEHOLDER

    @property
    def text(self) -> str:
        """Document text with nodes rendered as their display label."""
        return "".join(item if isinstance(item, str) else item.text for item in self._items)

    @property
    def plain_text(self) -> str:
        """Document text with nodes rendered as the placeholder character."""
        return self.get_trailing_text(len(self._items), len(self._items))

    @property
    def character_count(self) -> int:
        """Length of :attr:`text`, which is what a character limit counts."""
        return len(self.text)

    def __repr__(self) -> str:
        return f"TextDocument({self.text!r})"
