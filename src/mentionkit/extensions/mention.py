"""Mention and tag links.

The suggestion engine commits a query by calling one of these commands; they
can also be run by name from the host, e.g. to insert a mention from a
contact picker.
"""

from __future__ import annotations

from typing import Any, Optional

from mentionkit.domain.types import AnnotationNode, CommandContext, DocumentMutation, TriggerKind
from mentionkit.logger import get_logger

from .base import CommandFn, Extension

logger = get_logger("extensions.mention")


def _link_command(kind: TriggerKind) -> CommandFn:
    def insert_link(
        context: CommandContext,
        href: str,
        label: Optional[str] = None,
        id: Optional[str] = None,
        span: Optional[tuple[int, int]] = None,
        append_text: str = "",
        **attrs: Any,
    ) -> DocumentMutation:
        query = context.active_query
        if span is None:
            if query is None:
                raise ValueError(f"No active query to replace and no span given for {kind.value} link")
            span = (query.anchor_position, context.caret)
        if label is None:
            if query is None:
                raise ValueError(f"A label is required to insert a {kind.value} link outside a query")
            label = query.full_text

        node = AnnotationNode(kind=kind, label=label, href=href, id=id, attrs=attrs)
        content: tuple[Any, ...] = (node, append_text) if append_text else (node,)
        logger.debug(f"Inserting {kind.value} link {label!r} -> {href!r} over {span}")
        return DocumentMutation(span[0], span[1], content)

    return insert_link


def remove_mention(context: CommandContext, position: Optional[int] = None) -> Optional[DocumentMutation]:
    """Turn the annotation node at ``position`` (default: before the caret) back into plain text."""
    node_at = getattr(context.document, "node_at", None)
    if node_at is None:
        raise TypeError(f"{type(context.document).__name__} does not expose node_at()")

    if position is None:
        position = context.caret - 1
    node = node_at(position)
    if node is None:
        return None
    return DocumentMutation(position, position + 1, (node.label,))


def mention_extension(name: str = "mention") -> Extension:
    """Build the extension exposing ``insertMentionLink``, ``insertTagLink`` and ``removeMention``."""
    return Extension(
        name=name,
        commands={
            "insertMentionLink": _link_command(TriggerKind.MENTION),
            "insertTagLink": _link_command(TriggerKind.TAG),
            "removeMention": remove_mention,
        },
    )
