"""Emoji shortcodes: typing ``:smile:`` turns into 🙂."""

from __future__ import annotations

from typing import Mapping, Optional

from mentionkit.domain.types import CommandContext, DocumentMutation
from mentionkit.logger import get_logger

from .base import Extension, Pattern

logger = get_logger("extensions.emoji")

SHORTCODE_PATTERN = r":([\w-]+):$"

EMOJI_MAP: dict[str, str] = {
    "smile": "🙂",
    "grin": "😁",
    "joy": "😂",
    "wink": "😉",
    "sad": "😢",
    "heart": "❤️",
    "thumbsup": "👍",
    "+1": "👍",
    "thumbsdown": "👎",
    "-1": "👎",
    "fire": "🔥",
    "rocket": "🚀",
    "tada": "🎉",
    "eyes": "👀",
    "ok": "👌",
    "wave": "👋",
    "thinking": "🤔",
    "100": "💯",
}


def emoji_extension(
    shortcodes: Optional[Mapping[str, str]] = None,
    name: str = "emoji",
) -> Extension:
    """Build the emoji extension.

    Args:
        shortcodes: Extra or overriding shortcode -> emoji entries, merged
            over :data:`EMOJI_MAP`. Lookups are case-insensitive.
        name: Registry name of the extension.
    """
    table = {key.lower(): value for key, value in EMOJI_MAP.items()}
    if shortcodes:
        table.update({key.lower(): value for key, value in shortcodes.items()})

    def lookup(shortcode: str) -> Optional[str]:
        return table.get(shortcode.lower())

    def replace_shortcode(full: str, groups: tuple[str, ...]) -> Optional[str]:
        return lookup(groups[0])

    def insert_emoji_by_name(context: CommandContext, name: str) -> Optional[DocumentMutation]:
        emoji = lookup(name)
        if emoji is None:
            logger.debug(f"No emoji for shortcode {name!r}")
            return None
        return DocumentMutation(context.caret, context.caret, (emoji,))

    return Extension(
        name=name,
        patterns=[Pattern.compile(SHORTCODE_PATTERN, replace_shortcode)],
        commands={"insertEmojiByName": insert_emoji_by_name},
    )
